"""MB Bank operations for one account, addressed by path id or by account token."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_account
from app.api.v1.banking_deps import get_banking_client, raise_upstream
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.models import Account
from app.schemas.common import DataResponse, MessageResponse
from app.services.banking import BankingClient, BankingServiceError
from app.services.date_range import resolve_history_params
from app.services.principals import account_store

router = APIRouter()

INVALID_CREDENTIALS_MESSAGE = (
    "Wrong bank username or password. Please update the account credentials."
)


def _get_account(db: Session, account_id: int) -> Account:
    account = account_store.get_by_id(db, account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return account


def _status_response(result: dict[str, Any]) -> JSONResponse:
    """200 with the service payload when logged in, 401 otherwise."""
    if result.get("success"):
        return JSONResponse(status_code=200, content=result)
    if result.get("error_type") == "invalid_credentials":
        return JSONResponse(
            status_code=401,
            content={
                "success": False,
                "message": INVALID_CREDENTIALS_MESSAGE,
                "error_type": "invalid_credentials",
            },
        )
    return JSONResponse(status_code=401, content=result)


async def _check_status(banking: BankingClient, account: Account) -> JSONResponse:
    try:
        result = await banking.check_login_status(account)
    except BankingServiceError as e:
        raise_upstream(e, "checking login status")
    return _status_response(result)


async def _balance(banking: BankingClient, account: Account) -> DataResponse[Any]:
    try:
        result = await banking.get_balance(account)
    except BankingServiceError as e:
        raise_upstream(e, "fetching balance")
    return DataResponse[Any](data=result)


async def _history(
    banking: BankingClient,
    account: Account,
    account_number: str | None,
    from_date: str | None,
    to_date: str | None,
    days: str | None = None,
) -> DataResponse[Any]:
    params = resolve_history_params(account_number, from_date, to_date, days)
    try:
        result = await banking.get_transaction_history(account, params)
    except BankingServiceError as e:
        raise_upstream(e, "fetching transaction history")
    return DataResponse[Any](data=result)


# Token routes are registered before /{account_id} routes so "token" is never parsed as an id.


@router.get("/token/status")
async def status_with_token(
    account: Annotated[Account, Depends(get_current_account)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> JSONResponse:
    """Bank login status of the account bound to the presented token."""
    return await _check_status(banking, account)


@router.get("/token/balance", response_model=DataResponse[Any])
async def balance_with_token(
    account: Annotated[Account, Depends(get_current_account)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> DataResponse[Any]:
    return await _balance(banking, account)


@router.get("/token/transactions", response_model=DataResponse[Any])
async def transactions_with_token(
    account: Annotated[Account, Depends(get_current_account)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
    accountNumber: str | None = None,
    fromDate: str | None = None,
    toDate: str | None = None,
) -> DataResponse[Any]:
    """Transaction history for an explicit range (accountNumber, fromDate, toDate as dd/mm/yyyy)."""
    return await _history(banking, account, accountNumber, fromDate, toDate)


@router.get("/token/transactions/days", response_model=DataResponse[Any])
async def transactions_by_days_with_token(
    account: Annotated[Account, Depends(get_current_account)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
    accountNumber: str | None = None,
    days: str | None = None,
    fromDate: str | None = None,
    toDate: str | None = None,
) -> DataResponse[Any]:
    """Transaction history for the last `days` days (1-90, UTC+7, today included), or explicit dates."""
    return await _history(banking, account, accountNumber, fromDate, toDate, days)


@router.post("/{account_id}/login")
async def login(
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> JSONResponse:
    """Open a bank session for the account; 401 with the service payload when the bank refuses."""
    account = _get_account(db, account_id)
    try:
        result = await banking.login(account)
    except BankingServiceError as e:
        raise_upstream(e, "logging in")
    return JSONResponse(status_code=200 if result.get("success") else 401, content=result)


@router.get("/{account_id}/status")
async def status(
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> JSONResponse:
    return await _check_status(banking, _get_account(db, account_id))


@router.get("/{account_id}/balance", response_model=DataResponse[Any])
async def balance(
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> DataResponse[Any]:
    return await _balance(banking, _get_account(db, account_id))


@router.get("/{account_id}/transactions", response_model=DataResponse[Any])
async def transactions(
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
    accountNumber: str | None = None,
    fromDate: str | None = None,
    toDate: str | None = None,
) -> DataResponse[Any]:
    return await _history(banking, _get_account(db, account_id), accountNumber, fromDate, toDate)


@router.get("/{account_id}/transactions/days", response_model=DataResponse[Any])
async def transactions_by_days(
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
    accountNumber: str | None = None,
    days: str | None = None,
    fromDate: str | None = None,
    toDate: str | None = None,
) -> DataResponse[Any]:
    return await _history(
        banking, _get_account(db, account_id), accountNumber, fromDate, toDate, days
    )


@router.post("/{account_id}/logout", response_model=MessageResponse)
async def logout(
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> MessageResponse:
    account = _get_account(db, account_id)
    try:
        await banking.logout(account)
    except BankingServiceError as e:
        raise_upstream(e, "logging out")
    return MessageResponse(message="Logged out")
