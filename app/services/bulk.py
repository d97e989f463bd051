"""Run one banking operation against every account, isolating per-account failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InternalError
from app.models import Account
from app.schemas.accounts import AccountBalanceItem, AccountStatusItem
from app.services.banking import BankingClient, BankingServiceError
from app.services.principals import account_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BulkItemResult(Generic[T]):
    """Outcome of the operation for one account: payload on success, error message otherwise."""

    account: Account
    payload: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_message(exc: Exception) -> str:
    message = exc.message if isinstance(exc, BankingServiceError) else str(exc)
    return message or type(exc).__name__


def _timeout_message(timeout: float | None) -> str:
    if timeout is None:
        return "Operation timed out"
    return f"Operation timed out after {timeout:g}s"


async def run_bulk(
    accounts: Sequence[Account],
    op: Callable[[Account], Awaitable[T]],
    *,
    concurrency: int = 1,
    timeout: float | None = None,
) -> list[BulkItemResult[T]]:
    """
    Call op for every account and return one result per account, in input order.

    At most `concurrency` calls are in flight. A failure or timeout of one call
    is recorded on that item only; it never cancels or affects the others.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))
    slots: list[BulkItemResult[T] | None] = [None] * len(accounts)

    async def run_one(index: int, account: Account) -> None:
        async with semaphore:
            try:
                payload = await asyncio.wait_for(op(account), timeout=timeout)
            except asyncio.TimeoutError:
                slots[index] = BulkItemResult(account=account, error=_timeout_message(timeout))
            except Exception as e:
                logger.info(
                    "Bulk item failed",
                    extra={"account_id": account.id, "reason": _error_message(e)[:200]},
                )
                slots[index] = BulkItemResult(account=account, error=_error_message(e))
            else:
                slots[index] = BulkItemResult(account=account, payload=payload)

    await asyncio.gather(*(run_one(i, account) for i, account in enumerate(accounts)))
    results = [slot for slot in slots if slot is not None]
    logger.info(
        "Bulk run completed",
        extra={
            "account_count": len(accounts),
            "error_count": sum(1 for r in results if not r.ok),
        },
    )
    return results


def load_accounts_snapshot(db: Session) -> list[Account]:
    """Single ordered read of all accounts. Store failure aborts the whole batch."""
    try:
        return account_store.list_all(db)
    except SQLAlchemyError as e:
        raise InternalError("Failed to load accounts") from e


async def check_all_accounts_status(
    accounts: Sequence[Account],
    banking: BankingClient,
    *,
    concurrency: int = 1,
    timeout: float | None = None,
) -> list[AccountStatusItem]:
    results = await run_bulk(
        accounts, banking.check_login_status, concurrency=concurrency, timeout=timeout
    )
    items: list[AccountStatusItem] = []
    for result in results:
        account = result.account
        if result.ok:
            payload: dict[str, Any] = result.payload or {}
            login_status = "logged_in" if payload.get("success") else "logged_out"
            message = payload.get("message")
        else:
            login_status = "error"
            message = result.error
        items.append(
            AccountStatusItem(
                id=account.id,
                username=account.username,
                name=account.name,
                status=account.status,
                login_status=login_status,
                message=message,
            )
        )
    return items


async def check_all_accounts_balance(
    accounts: Sequence[Account],
    banking: BankingClient,
    *,
    concurrency: int = 1,
    timeout: float | None = None,
) -> list[AccountBalanceItem]:
    results = await run_bulk(
        accounts, banking.get_balance, concurrency=concurrency, timeout=timeout
    )
    return [
        AccountBalanceItem(
            id=result.account.id,
            username=result.account.username,
            name=result.account.name,
            status=result.account.status,
            balance=result.payload if result.ok else None,
            error=result.error,
        )
        for result in results
    ]
