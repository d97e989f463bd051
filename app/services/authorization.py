"""Role and ownership checks evaluated after authentication."""

from app.core.errors import ForbiddenError, UnauthenticatedError
from app.models import User
from app.schemas.users import UserUpdate

ADMIN_ROLE = "admin"


def is_admin(user: User | None) -> bool:
    return user is not None and user.role == ADMIN_ROLE


def require_role(user: User | None, role: str) -> User:
    if user is None:
        raise UnauthenticatedError("You are not logged in")
    if user.role != role:
        raise ForbiddenError("You do not have permission to access this resource")
    return user


def require_self_or_admin(user: User | None, owner_id: int) -> User:
    if user is None:
        raise UnauthenticatedError("You are not logged in")
    if user.role != ADMIN_ROLE and user.id != owner_id:
        raise ForbiddenError("You do not have permission to access this user")
    return user


def ensure_can_change_role_or_status(user: User, update: UserUpdate) -> None:
    """Only admins may set role or status, including on their own record."""
    if (update.role is not None or update.status is not None) and not is_admin(user):
        raise ForbiddenError("You do not have permission to change role or status")


def ensure_can_delete_user(user: User | None, target_id: int) -> None:
    require_role(user, ADMIN_ROLE)
    if user.id == target_id:
        raise ForbiddenError("You cannot delete your own account")


def ensure_can_grant_admin(user: User | None) -> None:
    """Creating an admin after bootstrap needs an authenticated admin caller."""
    if not is_admin(user):
        raise ForbiddenError("Only an admin can create admin accounts")
