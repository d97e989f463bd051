"""Banking client dependency and mapping of banking service failures to API errors."""

from typing import NoReturn

from app.core.config import get_settings
from app.core.errors import UpstreamError
from app.services.banking import BankingClient, BankingServiceError


def get_banking_client() -> BankingClient:
    """Dependency: client for the banking automation service."""
    return BankingClient(get_settings())


def raise_upstream(e: BankingServiceError, action: str) -> NoReturn:
    """Unreachable/timed out → 503; any other banking service failure → 502."""
    status = 503 if e.unavailable else 502
    raise UpstreamError(f"Error while {action}: {e.message}", status_code=status) from e
