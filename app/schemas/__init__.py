"""Pydantic request/response schemas."""

from app.schemas.accounts import (
    AccountBalanceItem,
    AccountCreate,
    AccountOut,
    AccountStatusItem,
    AccountUpdate,
)
from app.schemas.auth import AdminSetupRequest, LoginRequest
from app.schemas.banking import TransactionHistoryParams
from app.schemas.common import (
    AuthDataResponse,
    AuthInfo,
    DataResponse,
    ErrorResponse,
    MessageResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.users import UserCreate, UserOut, UserUpdate

__all__ = [
    "AccountBalanceItem",
    "AccountCreate",
    "AccountOut",
    "AccountStatusItem",
    "AccountUpdate",
    "AdminSetupRequest",
    "AuthDataResponse",
    "AuthInfo",
    "DataResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "TransactionHistoryParams",
    "UserCreate",
    "UserOut",
    "UserUpdate",
]
