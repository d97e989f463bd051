"""Account provisioning endpoints (admin only): create, read, update, delete, issue token."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.core.errors import ConflictError, NotFoundError
from app.core.security import auth_info, generate_token
from app.models import Account, User
from app.schemas.accounts import AccountCreate, AccountOut, AccountUpdate
from app.schemas.common import AuthDataResponse, AuthInfo, DataResponse, MessageResponse
from app.services.principals import account_store

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_account_or_404(db: Session, account_id: int) -> Account:
    account = account_store.get_by_id(db, account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return account


@router.post("", response_model=DataResponse[AccountOut], status_code=201)
def create_account(
    body: AccountCreate,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[AccountOut]:
    """Register a bank login. The account has no token until one is issued."""
    if account_store.get_by_username(db, body.username) is not None:
        raise ConflictError("Account username already exists")
    account = Account(
        username=body.username,
        password=body.password,
        name=body.name,
        status=body.status,
    )
    account_store.insert(db, account)
    logger.info("Account created", extra={"account_id": account.id})
    return DataResponse[AccountOut](message="Account created", data=AccountOut.model_validate(account))


@router.get("/{account_id}", response_model=DataResponse[AccountOut])
def get_account(
    account_id: int,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[AccountOut]:
    return DataResponse[AccountOut](data=AccountOut.model_validate(_get_account_or_404(db, account_id)))


@router.put("/{account_id}", response_model=DataResponse[AccountOut])
def update_account(
    account_id: int,
    body: AccountUpdate,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[AccountOut]:
    """Partially update password, name or status; only provided fields change."""
    account = _get_account_or_404(db, account_id)
    values = body.model_dump(exclude_none=True)
    account = account_store.update(db, account, values)
    return DataResponse[AccountOut](message="Account updated", data=AccountOut.model_validate(account))


@router.delete("/{account_id}", response_model=MessageResponse)
def delete_account(
    account_id: int,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    account_store.delete(db, _get_account_or_404(db, account_id))
    logger.info("Account deleted", extra={"account_id": account_id})
    return MessageResponse(message="Account deleted")


@router.post("/{account_id}/token", response_model=AuthDataResponse[AccountOut])
def issue_account_token(
    account_id: int,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthDataResponse[AccountOut]:
    """Issue a new account token for the /mbbank/token endpoints. Any previous token stops working."""
    account = _get_account_or_404(db, account_id)
    token = generate_token(account.username, account.id)
    account = account_store.update_token(db, account, token)
    return AuthDataResponse[AccountOut](
        message="Account token issued",
        data=AccountOut.model_validate(account),
        auth=AuthInfo(**auth_info(token)),
    )
