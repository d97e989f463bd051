"""Schemas for banking service calls."""

from pydantic import BaseModel, Field


class TransactionHistoryParams(BaseModel):
    """Resolved transaction history query (dates as dd/mm/yyyy)."""

    account_number: str = Field(..., serialization_alias="accountNumber")
    from_date: str = Field(..., serialization_alias="fromDate")
    to_date: str = Field(..., serialization_alias="toDate")
