"""SQLAlchemy ORM models."""

from app.models.account import Account
from app.models.base import Base
from app.models.user import User

__all__ = ["Account", "Base", "User"]
