"""Admin endpoints: first-admin setup, account listing and bulk status/balance checks."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.api.v1.banking_deps import get_banking_client
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import auth_info
from app.models import User
from app.schemas.accounts import AccountBalanceItem, AccountOut, AccountStatusItem
from app.schemas.auth import AdminSetupRequest
from app.schemas.common import AuthDataResponse, AuthInfo, DataResponse
from app.schemas.users import UserOut
from app.services.banking import BankingClient
from app.services.bootstrap import create_first_admin
from app.services.bulk import (
    check_all_accounts_balance,
    check_all_accounts_status,
    load_accounts_snapshot,
)

router = APIRouter()


@router.post("/setup", response_model=AuthDataResponse[UserOut], status_code=201)
def setup_first_admin(
    body: AdminSetupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthDataResponse[UserOut]:
    """
    Create the first admin account. Only works while no admin exists (403 afterwards).
    The returned token can be sent as a Bearer header, X-API-Key header or ?token=.
    """
    user, token = create_first_admin(
        db,
        username=body.username,
        password=body.password,
        email=body.email,
        name=body.name,
    )
    return AuthDataResponse[UserOut](
        message="First admin account created",
        data=UserOut.model_validate(user),
        auth=AuthInfo(**auth_info(token)),
    )


@router.get("/accounts", response_model=DataResponse[list[AccountOut]])
def list_accounts(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[list[AccountOut]]:
    """List all bank accounts (admin only); bank passwords are never returned."""
    accounts = load_accounts_snapshot(db)
    return DataResponse[list[AccountOut]](
        data=[AccountOut.model_validate(a) for a in accounts]
    )


@router.get("/accounts/status", response_model=DataResponse[list[AccountStatusItem]])
async def accounts_status(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> DataResponse[list[AccountStatusItem]]:
    """
    Check the bank login status of every account.

    One row per account in id order; a failing account is reported with
    login_status 'error' and does not affect the others.
    """
    settings = get_settings()
    accounts = load_accounts_snapshot(db)
    items = await check_all_accounts_status(
        accounts,
        banking,
        concurrency=settings.BANKING_BULK_CONCURRENCY,
        timeout=settings.BANKING_REQUEST_TIMEOUT_SEC,
    )
    return DataResponse[list[AccountStatusItem]](data=items)


@router.get("/accounts/balance", response_model=DataResponse[list[AccountBalanceItem]])
async def accounts_balance(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> DataResponse[list[AccountBalanceItem]]:
    """
    Fetch the balance of every account.

    One row per account in id order; a failing account has balance null and an error message.
    """
    settings = get_settings()
    accounts = load_accounts_snapshot(db)
    items = await check_all_accounts_balance(
        accounts,
        banking,
        concurrency=settings.BANKING_BULK_CONCURRENCY,
        timeout=settings.BANKING_REQUEST_TIMEOUT_SEC,
    )
    return DataResponse[list[AccountBalanceItem]](data=items)
