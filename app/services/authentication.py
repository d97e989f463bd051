"""Resolve a presented bearer token to an active principal (account or user)."""

from collections.abc import Callable
from typing import TypeVar

from app.core.errors import MalformedCredentialError, UnauthenticatedError
from app.core.security import is_valid_token_syntax
from app.models import Account, User

P = TypeVar("P", Account, User)


def status_message(label: str, status: str) -> str:
    if status == "locked":
        return f"{label} is locked"
    return f"{label} is inactive"


def authenticate_principal(
    token: str | None,
    lookup: Callable[[str], P | None],
    label: str,
) -> P:
    """
    Shared gate for both principal kinds.

    lookup resolves a token in the matching table; label ("Account" or "User")
    only shapes the locked/inactive message. Never mutates the principal.
    """
    if not token:
        raise UnauthenticatedError("Authentication token not found")
    if not is_valid_token_syntax(token):
        raise MalformedCredentialError("Token contains invalid characters")

    principal = lookup(token)
    if principal is None:
        raise UnauthenticatedError("Invalid or expired token")

    if principal.status and principal.status != "active":
        raise UnauthenticatedError(status_message(label, principal.status))
    return principal
