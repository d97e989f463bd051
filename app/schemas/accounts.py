"""Request/response schemas for bank-linked accounts and admin bulk checks."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.users import PrincipalStatus


class AccountCreate(BaseModel):
    """Provision a bank login (admin only)."""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=255)
    name: str | None = Field(default=None, max_length=100)
    status: PrincipalStatus = "active"


class AccountUpdate(BaseModel):
    """Partial update; username is immutable after creation."""

    model_config = ConfigDict(extra="forbid")

    password: str | None = Field(default=None, min_length=1, max_length=255)
    name: str | None = Field(default=None, max_length=100)
    status: PrincipalStatus | None = None


class AccountOut(BaseModel):
    """Account as returned to admins (bank password omitted)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str | None = None
    status: str
    token: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AccountStatusItem(BaseModel):
    """One row of GET /admin/accounts/status."""

    id: int
    username: str
    name: str | None = None
    status: str
    login_status: Literal["logged_in", "logged_out", "error"]
    message: str | None = None


class AccountBalanceItem(BaseModel):
    """One row of GET /admin/accounts/balance; balance is null when error is set."""

    id: int
    username: str
    name: str | None = None
    status: str
    balance: Any | None = None
    error: str | None = None
