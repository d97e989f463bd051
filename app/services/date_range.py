"""Resolve transaction history bounds from explicit dates or a "last N days" count."""

import re
from datetime import datetime, timedelta, timezone

from app.core.errors import InvalidArgumentError, MissingArgumentError
from app.schemas.banking import TransactionHistoryParams

# Bank ledger days are counted in Vietnam local time.
LOCAL_TZ = timezone(timedelta(hours=7))

MIN_DAYS = 1
MAX_DAYS = 90
DATE_FORMAT = "%d/%m/%Y"
# ASCII digits only: no sign, underscore or exponent.
DAYS_PATTERN = re.compile(r"[0-9]+")


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def parse_days(days: str | int) -> int:
    """Parse a days count; must be a whole number in [MIN_DAYS, MAX_DAYS]."""
    text = str(days).strip()
    value = int(text) if DAYS_PATTERN.fullmatch(text) else None
    if value is None or not (MIN_DAYS <= value <= MAX_DAYS):
        raise InvalidArgumentError(
            f"Invalid days parameter: must be a positive integer not greater than {MAX_DAYS}"
        )
    return value


def local_today(now: datetime | None = None) -> datetime:
    """Midnight of the current day at UTC+7."""
    current = (now or datetime.now(timezone.utc)).astimezone(LOCAL_TZ)
    return current.replace(hour=0, minute=0, second=0, microsecond=0)


def days_to_range(days: int, now: datetime | None = None) -> tuple[str, str]:
    """Inclusive window of `days` calendar days ending today: (from_date, to_date)."""
    today = local_today(now)
    start = today - timedelta(days=days - 1)
    return start.strftime(DATE_FORMAT), today.strftime(DATE_FORMAT)


def resolve_history_params(
    account_number: str | None,
    from_date: str | None = None,
    to_date: str | None = None,
    days: str | int | None = None,
    now: datetime | None = None,
) -> TransactionHistoryParams:
    """
    Build the history query for the banking service.

    Explicit bounds win when both are given (passed through unchanged; the
    bank validates calendar dates). Otherwise a days count is turned into a
    range ending today. account_number is checked before anything else.
    """
    if _is_blank(account_number):
        raise MissingArgumentError("Missing parameter: accountNumber is required")

    if not _is_blank(from_date) and not _is_blank(to_date):
        return TransactionHistoryParams(
            account_number=account_number, from_date=from_date, to_date=to_date
        )

    if not _is_blank(days):
        start, end = days_to_range(parse_days(days), now)
        return TransactionHistoryParams(
            account_number=account_number, from_date=start, to_date=end
        )

    raise MissingArgumentError(
        "Missing parameters: fromDate and toDate are required, or provide a valid days value"
    )
