"""Credential extraction and auth dependencies (get_current_account, get_current_user, require_admin)."""

import logging
from collections.abc import Mapping
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, APIKeyQuery, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models import Account, User
from app.services.authentication import authenticate_principal
from app.services.authorization import ADMIN_ROLE, require_role
from app.services.principals import account_store, user_store

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Declared for the OpenAPI docs only; extract_token applies the precedence.
bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)
query_token_scheme = APIKeyQuery(name="token", auto_error=False)


def extract_token(headers: Mapping[str, str], query: Mapping[str, str]) -> str | None:
    """
    Return the presented token or None. First non-empty match wins:
    Authorization: Bearer <token>, then X-API-Key, then ?token=.
    """
    try:
        auth_header = headers.get("authorization")
        if isinstance(auth_header, str) and auth_header.startswith(BEARER_PREFIX):
            token = auth_header[len(BEARER_PREFIX):].strip()
            if token:
                return token

        api_key = headers.get("x-api-key")
        if isinstance(api_key, str) and api_key.strip():
            return api_key.strip()

        query_token = query.get("token")
        if isinstance(query_token, str) and query_token.strip():
            return query_token.strip()
    except Exception:
        logger.warning("Failed to extract token from request", exc_info=True)
    return None


def get_request_token(
    request: Request,
    _bearer: Annotated[object, Depends(bearer_scheme)],
    _api_key: Annotated[object, Depends(api_key_scheme)],
    _query: Annotated[object, Depends(query_token_scheme)],
) -> str | None:
    """Dependency: token from the request (see extract_token)."""
    return extract_token(request.headers, request.query_params)


def get_current_account(
    request: Request,
    token: Annotated[str | None, Depends(get_request_token)],
    db: Annotated[Session, Depends(get_db)],
) -> Account:
    """Dependency: require a valid account token; binds request.state.account."""
    account = authenticate_principal(
        token, lambda t: account_store.get_by_token(db, t), label="Account"
    )
    request.state.account = account
    return account


def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(get_request_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Dependency: require a valid user token; binds request.state.user."""
    user = authenticate_principal(
        token, lambda t: user_store.get_by_token(db, t), label="User"
    )
    request.state.user = user
    return user


def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(get_request_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Dependency: the calling user when a token is presented, else None."""
    if token is None:
        return None
    return get_current_user(request, token, db)


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    return require_role(current_user, ADMIN_ROLE)
