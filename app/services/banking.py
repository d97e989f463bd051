"""Client for the banking automation service: login, status, balance, history, logout."""

import json
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from app.models import Account
from app.schemas.banking import TransactionHistoryParams

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

PING_TIMEOUT_SEC = 2.0


class BankingServiceError(Exception):
    """Raised when the banking service cannot complete (unreachable, timeout, bad status or body)."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        unavailable: bool = False,
    ) -> None:
        self.message = message
        self.cause = cause
        self.unavailable = unavailable
        super().__init__(message)


class BankingClient:
    """
    Thin async HTTP client. Each operation POSTs the account's bank credentials
    plus operation parameters and returns the service's JSON object.
    """

    def __init__(self, settings: "Settings") -> None:
        self.base_url = settings.BANKING_SERVICE_URL.rstrip("/")
        self.timeout = settings.BANKING_REQUEST_TIMEOUT_SEC

    async def login(self, account: Account) -> dict[str, Any]:
        return await self._call("login", account)

    async def check_login_status(self, account: Account) -> dict[str, Any]:
        return await self._call("status", account)

    async def get_balance(self, account: Account) -> dict[str, Any]:
        return await self._call("balance", account)

    async def get_transaction_history(
        self, account: Account, params: TransactionHistoryParams
    ) -> dict[str, Any]:
        return await self._call("transactions", account, params.model_dump(by_alias=True))

    async def logout(self, account: Account) -> dict[str, Any]:
        return await self._call("logout", account)

    async def ping(self) -> bool:
        """True when GET /health on the service answers 2xx within a short timeout."""
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(PING_TIMEOUT_SEC)) as client:
                response = await client.get(f"{self.base_url}/health")
        except httpx.HTTPError:
            return False
        return response.is_success

    async def _call(
        self,
        operation: str,
        account: Account,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}/{operation}"
        payload: dict[str, Any] = {"username": account.username, "password": account.password}
        if extra:
            payload.update(extra)
        log_extra: dict[str, Any] = {"operation": operation, "account_id": account.id}
        start = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                response = await client.post(url, json=payload)
        except httpx.ConnectError as e:
            log_extra.update(latency_seconds=time.perf_counter() - start, status="error")
            logger.info("Banking service request failed", extra=log_extra)
            raise BankingServiceError(
                "Banking service is unreachable. Check BANKING_SERVICE_URL.",
                cause=e,
                unavailable=True,
            ) from e
        except httpx.TimeoutException as e:
            log_extra.update(latency_seconds=time.perf_counter() - start, status="error")
            logger.info("Banking service request failed", extra=log_extra)
            raise BankingServiceError(
                "Banking service request timed out.",
                cause=e,
                unavailable=True,
            ) from e
        except httpx.HTTPError as e:
            log_extra.update(latency_seconds=time.perf_counter() - start, status="error")
            logger.info("Banking service request failed", extra=log_extra)
            raise BankingServiceError("Banking service request failed.", cause=e) from e

        log_extra.update(
            latency_seconds=time.perf_counter() - start,
            status_code=response.status_code,
        )
        logger.info("Banking service request completed", extra=log_extra)

        if response.status_code != 200:
            raise BankingServiceError(
                f"Banking service returned status {response.status_code} for {operation}."
            )
        try:
            body = response.json()
        except json.JSONDecodeError as e:
            raise BankingServiceError(
                "Banking service response body is not valid JSON.",
                cause=e,
            ) from e
        if not isinstance(body, dict):
            raise BankingServiceError("Banking service response is not a JSON object.")
        return body
