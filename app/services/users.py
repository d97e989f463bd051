"""User signup, login, update and delete with the authorization rules applied."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.core.errors import (
    ConflictError,
    InvalidArgumentError,
    MissingArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from app.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    USERNAME_MAX_LEN,
    generate_token,
    hash_password,
    is_valid_email,
    verify_password,
)
from app.models import User
from app.schemas.users import UserCreate, UserUpdate
from app.services.authentication import status_message
from app.services.authorization import (
    ADMIN_ROLE,
    ensure_can_change_role_or_status,
    ensure_can_delete_user,
    ensure_can_grant_admin,
    require_role,
    require_self_or_admin,
)
from app.services.principals import user_store

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid username or password"


def _validate_email(email: str) -> None:
    if not is_valid_email(email):
        raise InvalidArgumentError("Invalid email address")


def validate_new_user(
    db: Session,
    username: str | None,
    password: str | None,
    email: str | None,
    name: str | None = None,
) -> None:
    """Presence, shape and uniqueness checks shared by signup and first-admin setup."""
    if not username or not password or not email:
        raise MissingArgumentError("Username, password and email are required")
    _validate_email(email)
    if len(username) > USERNAME_MAX_LEN:
        raise InvalidArgumentError(f"Username must be at most {USERNAME_MAX_LEN} characters")
    if len(password) > PASSWORD_MAX_LEN:
        raise InvalidArgumentError(f"Password must be at most {PASSWORD_MAX_LEN} characters")
    if name and len(name) > NAME_MAX_LEN:
        raise InvalidArgumentError(f"Name must be at most {NAME_MAX_LEN} characters")

    if user_store.get_by_username(db, username) is not None:
        raise ConflictError("Username already exists")
    if user_store.get_by_email(db, email) is not None:
        raise ConflictError("Email is already in use")


def create_user(db: Session, body: UserCreate, actor: User | None) -> tuple[User, str]:
    """Self-service signup (role user) or admin-created user. Returns (user, token)."""
    validate_new_user(db, body.username, body.password, body.email, body.name)
    role = body.role or "user"
    if role == ADMIN_ROLE:
        ensure_can_grant_admin(actor)

    token = generate_token(body.username)
    user = User(
        username=body.username,
        password_hash=hash_password(body.password),
        name=body.name or None,
        email=body.email,
        role=role,
        status="active",
        token=token,
    )
    user_store.insert(db, user)
    logger.info("User created", extra={"user_id": user.id, "role": role})
    return user, token


def login(db: Session, username: str | None, password: str | None) -> tuple[User, str]:
    """Check credentials and issue a new token; the previous token stops working."""
    if not username or not password:
        raise MissingArgumentError("Username and password are required")

    user = user_store.get_by_username(db, username)
    if user is None:
        raise UnauthenticatedError(INVALID_LOGIN_MESSAGE)
    if user.status != "active":
        raise UnauthenticatedError(status_message("User", user.status))
    if not verify_password(password, user.password_hash):
        raise UnauthenticatedError(INVALID_LOGIN_MESSAGE)

    token = generate_token(username, user.id)
    user_store.update_token(db, user, token)
    return user, token


def list_users(db: Session, actor: User | None) -> list[User]:
    require_role(actor, ADMIN_ROLE)
    return user_store.list_all(db)


def get_user(db: Session, user_id: int, actor: User | None) -> User:
    require_self_or_admin(actor, user_id)
    user = user_store.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_user(db: Session, user_id: int, update: UserUpdate, actor: User | None) -> User:
    """
    Apply a partial update. Self or admin may edit; only admins may set role
    or status. Email is re-validated and must stay unique; password is re-hashed.
    """
    actor = require_self_or_admin(actor, user_id)
    ensure_can_change_role_or_status(actor, update)

    user = user_store.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    values: dict[str, Any] = {}
    if update.name is not None:
        values["name"] = update.name
    if update.email is not None and update.email != user.email:
        _validate_email(update.email)
        if user_store.get_by_email(db, update.email) is not None:
            raise ConflictError("Email is already in use")
        values["email"] = update.email
    if update.password is not None:
        values["password_hash"] = hash_password(update.password)
    if update.role is not None:
        values["role"] = update.role
        if update.role != ADMIN_ROLE:
            # A demoted bootstrap admin frees the first-admin slot.
            values["bootstrap_admin"] = None
    if update.status is not None:
        values["status"] = update.status

    return user_store.update(db, user, values)


def delete_user(db: Session, user_id: int, actor: User | None) -> None:
    ensure_can_delete_user(actor, user_id)
    user = user_store.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    user_store.delete(db, user)
    logger.info("User deleted", extra={"user_id": user_id, "deleted_by": actor.id})
