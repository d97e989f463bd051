"""Unit tests for app.services.authorization: role, ownership and update/delete rules."""

import unittest
from types import SimpleNamespace

from app.core.errors import ForbiddenError, UnauthenticatedError
from app.schemas.users import UserUpdate
from app.services.authorization import (
    ensure_can_change_role_or_status,
    ensure_can_delete_user,
    ensure_can_grant_admin,
    require_role,
    require_self_or_admin,
)

ADMIN = SimpleNamespace(id=1, role="admin")
U1 = SimpleNamespace(id=2, role="user")
U2 = SimpleNamespace(id=3, role="user")


class TestRequireRole(unittest.TestCase):

    def test_no_principal_is_unauthenticated(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            require_role(None, "admin")

    def test_non_admin_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            require_role(U1, "admin")

    def test_admin_passes(self) -> None:
        self.assertIs(require_role(ADMIN, "admin"), ADMIN)


class TestRequireSelfOrAdmin(unittest.TestCase):

    def test_other_users_record_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            require_self_or_admin(U1, U2.id)

    def test_own_record_passes(self) -> None:
        self.assertIs(require_self_or_admin(U1, U1.id), U1)

    def test_admin_passes_for_any_record(self) -> None:
        self.assertIs(require_self_or_admin(ADMIN, U2.id), ADMIN)

    def test_no_principal_is_unauthenticated(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            require_self_or_admin(None, 1)


class TestRoleAndStatusChanges(unittest.TestCase):

    def test_non_admin_cannot_set_role_on_own_record(self) -> None:
        with self.assertRaises(ForbiddenError):
            ensure_can_change_role_or_status(U1, UserUpdate(role="admin"))

    def test_non_admin_cannot_set_status_on_own_record(self) -> None:
        with self.assertRaises(ForbiddenError):
            ensure_can_change_role_or_status(U1, UserUpdate(status="active"))

    def test_non_admin_can_change_plain_fields(self) -> None:
        ensure_can_change_role_or_status(U1, UserUpdate(name="New name"))

    def test_admin_can_set_role_and_status(self) -> None:
        ensure_can_change_role_or_status(ADMIN, UserUpdate(role="user", status="locked"))


class TestDeleteAndGrant(unittest.TestCase):

    def test_admin_cannot_delete_self(self) -> None:
        with self.assertRaises(ForbiddenError):
            ensure_can_delete_user(ADMIN, ADMIN.id)

    def test_admin_can_delete_other(self) -> None:
        ensure_can_delete_user(ADMIN, U1.id)

    def test_non_admin_cannot_delete(self) -> None:
        with self.assertRaises(ForbiddenError):
            ensure_can_delete_user(U1, U2.id)

    def test_granting_admin_requires_admin_caller(self) -> None:
        for actor in (None, U1):
            with self.subTest(actor=actor):
                with self.assertRaises(ForbiddenError):
                    ensure_can_grant_admin(actor)
        ensure_can_grant_admin(ADMIN)


if __name__ == "__main__":
    unittest.main()
