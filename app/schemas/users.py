"""Request/response schemas for system users."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["admin", "user"]
PrincipalStatus = Literal["active", "inactive", "locked"]


class UserCreate(BaseModel):
    """Self-service signup; role=admin requires an admin caller."""

    username: str | None = None
    password: str | None = None
    email: str | None = None
    name: str | None = None
    role: UserRole | None = None


class UserUpdate(BaseModel):
    """Partial update: only provided fields change. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    email: str | None = None
    password: str | None = Field(default=None, min_length=1, max_length=128)
    role: UserRole | None = None
    status: PrincipalStatus | None = None


class UserOut(BaseModel):
    """User as returned by the API (no password hash, no token)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str | None = None
    email: str | None = None
    role: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
