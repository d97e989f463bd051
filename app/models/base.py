"""SQLAlchemy declarative Base and columns shared by both principal tables."""

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase

PRINCIPAL_STATUSES = ("active", "inactive", "locked")


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class PrincipalMixin:
    """
    Columns common to accounts and users: identity, status, bearer token, timestamps.

    id, created_at and updated_at are server-managed and never set from requests.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=True)
    status = Column(String(16), nullable=False, default="active", server_default="active")
    token = Column(String(512), nullable=True, unique=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
