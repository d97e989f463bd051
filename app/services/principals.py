"""Lookup and CRUD over the two principal tables (accounts, users)."""

import logging
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.models import Account, User

logger = logging.getLogger(__name__)

P = TypeVar("P", Account, User)


class PrincipalStore(Generic[P]):
    """
    Key-value style access to one principal table: by id, username, email, token.

    Updates only accept the field names listed in updatable_fields; id,
    username and timestamps can never be written through update().
    """

    def __init__(self, model: type[P], updatable_fields: frozenset[str]) -> None:
        self.model = model
        self.updatable_fields = updatable_fields

    def list_all(self, db: Session) -> list[P]:
        return db.query(self.model).order_by(self.model.id).all()

    def get_by_id(self, db: Session, principal_id: int) -> P | None:
        return db.query(self.model).filter(self.model.id == principal_id).first()

    def get_by_username(self, db: Session, username: str) -> P | None:
        return db.query(self.model).filter(self.model.username == username).first()

    def get_by_token(self, db: Session, token: str) -> P | None:
        return db.query(self.model).filter(self.model.token == token).first()

    def insert(self, db: Session, principal: P) -> P:
        """Persist a new row. Raises ConflictError on a uniqueness violation."""
        db.add(principal)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.info(
                "Insert rejected by constraint",
                extra={"table": self.model.__tablename__, "username": principal.username},
            )
            raise ConflictError(f"{self._label} with this username or email already exists") from e
        db.refresh(principal)
        return principal

    def update(self, db: Session, principal: P, values: Mapping[str, Any]) -> P:
        """Apply only the given fields. Unknown field names raise ValueError."""
        unknown = set(values) - self.updatable_fields
        if unknown:
            raise ValueError(f"Fields not updatable on {self.model.__tablename__}: {sorted(unknown)}")
        if not values:
            return principal
        for field, value in values.items():
            setattr(principal, field, value)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(f"{self._label} update conflicts with an existing record") from e
        db.refresh(principal)
        return principal

    def update_token(self, db: Session, principal: P, token: str) -> P:
        """Store a newly issued token; the previous one stops working."""
        return self.update(db, principal, {"token": token})

    def delete(self, db: Session, principal: P) -> None:
        db.delete(principal)
        db.commit()

    @property
    def _label(self) -> str:
        return self.model.__name__


class UserStore(PrincipalStore[User]):
    """User table adds email lookups and the admin-existence check."""

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email).first()

    def has_admin(self, db: Session) -> bool:
        return db.query(User.id).filter(User.role == "admin").first() is not None


account_store: PrincipalStore[Account] = PrincipalStore(
    Account, frozenset({"password", "name", "status", "token"})
)
user_store = UserStore(
    User,
    frozenset({"password_hash", "name", "email", "role", "status", "token", "bootstrap_admin"}),
)
