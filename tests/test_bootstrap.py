"""Tests for app.services.bootstrap: first-admin creation against an in-memory database."""

import unittest
from unittest.mock import patch

from app.core.errors import (
    AdminAlreadyExistsError,
    ConflictError,
    InvalidArgumentError,
    MissingArgumentError,
)
from app.core.security import is_valid_token_syntax, verify_password
from app.models import User
from app.services.bootstrap import create_first_admin
from app.services.principals import user_store

from support import add_user, make_session_factory


class TestCreateFirstAdmin(unittest.TestCase):

    def setUp(self) -> None:
        self.db = make_session_factory()()

    def tearDown(self) -> None:
        self.db.close()

    def test_creates_admin_and_issues_token(self) -> None:
        user, token = create_first_admin(self.db, "root", "s3cret", "root@example.com", "Root")
        self.assertEqual(user.role, "admin")
        self.assertEqual(user.status, "active")
        self.assertTrue(user.bootstrap_admin)
        self.assertEqual(user.token, token)
        self.assertTrue(is_valid_token_syntax(token))
        self.assertTrue(verify_password("s3cret", user.password_hash))

    def test_second_call_refused(self) -> None:
        create_first_admin(self.db, "root", "s3cret", "root@example.com")
        with self.assertRaises(AdminAlreadyExistsError) as ctx:
            create_first_admin(self.db, "root2", "s3cret", "root2@example.com")
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(self.db.query(User).filter(User.role == "admin").count(), 1)

    def test_refused_before_validation_once_admin_exists(self) -> None:
        add_user(self.db, "existing-admin", role="admin")
        with self.assertRaises(AdminAlreadyExistsError):
            create_first_admin(self.db, None, None, None)

    def test_missing_fields(self) -> None:
        with self.assertRaises(MissingArgumentError):
            create_first_admin(self.db, "root", "s3cret", None)

    def test_invalid_email(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            create_first_admin(self.db, "root", "s3cret", "not-an-email")

    def test_taken_username_is_conflict(self) -> None:
        add_user(self.db, "root")
        with self.assertRaises(ConflictError) as ctx:
            create_first_admin(self.db, "root", "s3cret", "other@example.com")
        self.assertNotIsInstance(ctx.exception, AdminAlreadyExistsError)
        self.assertEqual(ctx.exception.status_code, 409)

    def test_concurrent_attempt_loses_on_bootstrap_slot(self) -> None:
        # First request has committed; the second passed its existence check before that.
        create_first_admin(self.db, "root", "s3cret", "root@example.com")
        with patch.object(user_store, "has_admin", side_effect=[False, True]):
            with self.assertRaises(AdminAlreadyExistsError):
                create_first_admin(self.db, "root2", "s3cret", "root2@example.com")
        admins = self.db.query(User).filter(User.role == "admin").all()
        self.assertEqual([a.username for a in admins], ["root"])


if __name__ == "__main__":
    unittest.main()
