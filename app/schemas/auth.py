"""Request schemas for login and first-admin setup."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login. Presence is checked by the service (400 when missing)."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class AdminSetupRequest(BaseModel):
    """Body for POST /admin/setup."""

    username: str | None = Field(default=None, description="Admin username")
    password: str | None = Field(default=None, description="Admin password")
    email: str | None = Field(default=None, description="Admin email")
    name: str | None = Field(default=None, description="Display name")
