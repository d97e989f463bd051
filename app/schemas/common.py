"""Response envelopes shared by all endpoints: {success, message?, data?, auth?}."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class MessageResponse(BaseModel):
    """Envelope without payload (e.g. delete, logout)."""

    success: bool = True
    message: str | None = None


class DataResponse(MessageResponse, Generic[T]):
    """Envelope carrying a payload under data."""

    data: T


class AuthInfo(BaseModel):
    """Issued bearer token and how to present it."""

    token: str
    type: str = Field(default="Bearer", description="Token type")
    expires: str = Field(default="never", description="Tokens do not expire; re-issue replaces them")
    use_with: str = Field(..., description="Accepted credential carriers")


class AuthDataResponse(DataResponse[T], Generic[T]):
    """Envelope for responses that issue a token."""

    auth: AuthInfo


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
