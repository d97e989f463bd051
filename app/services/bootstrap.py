"""One-time creation of the first admin user."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import AdminAlreadyExistsError, ConflictError
from app.core.security import generate_token, hash_password
from app.models import User
from app.services.principals import user_store
from app.services.users import validate_new_user

logger = logging.getLogger(__name__)

ADMIN_EXISTS_MESSAGE = "An admin account already exists"


def create_first_admin(
    db: Session,
    username: str | None,
    password: str | None,
    email: str | None,
    name: str | None = None,
) -> tuple[User, str]:
    """
    Create the first admin and return (user, issued token).

    The existence check gives the usual fast answer; the unique bootstrap_admin
    column decides concurrent attempts, so at most one first admin is ever
    inserted and the loser gets AdminAlreadyExistsError.
    """
    if user_store.has_admin(db):
        raise AdminAlreadyExistsError(ADMIN_EXISTS_MESSAGE)

    validate_new_user(db, username, password, email, name)

    token = generate_token(username)
    user = User(
        username=username,
        password_hash=hash_password(password),
        name=name or None,
        email=email,
        role="admin",
        status="active",
        token=token,
        bootstrap_admin=True,
    )
    try:
        user_store.insert(db, user)
    except ConflictError:
        if user_store.has_admin(db):
            raise AdminAlreadyExistsError(ADMIN_EXISTS_MESSAGE) from None
        raise
    logger.info("First admin created", extra={"user_id": user.id, "username": user.username})
    return user, token
