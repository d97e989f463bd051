"""ORM model for system users (token auth and role-based access control)."""

from sqlalchemy import Boolean, CheckConstraint, Column, String

from app.models.base import Base, PrincipalMixin

USER_ROLES = ("admin", "user")


class User(PrincipalMixin, Base):
    """
    System user authenticated by bearer token.

    role: 'admin' or 'user'
    bootstrap_admin: true only on the admin created by first-admin setup; the
    unique constraint lets at most one row ever claim it (NULLs do not collide).
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'locked')",
            name="ck_users_status",
        ),
        CheckConstraint("role IN ('admin', 'user')", name="ck_users_role"),
    )

    password_hash = Column(String(255), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    role = Column(String(16), nullable=False, default="user", server_default="user")
    bootstrap_admin = Column(Boolean, nullable=True, unique=True)
