"""ORM model for bank-linked accounts driven through the banking service."""

from sqlalchemy import CheckConstraint, Column, String

from app.models.base import Base, PrincipalMixin


class Account(PrincipalMixin, Base):
    """
    Bank login managed by admins and used for balance and transaction lookups.

    password is the bank credential forwarded to the banking service; it is
    never returned by the API.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'locked')",
            name="ck_accounts_status",
        ),
    )

    password = Column(String(255), nullable=False)
