"""User endpoints: login, signup, current user, admin list/update/delete."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, get_optional_user, require_admin
from app.core.database import get_db
from app.core.security import auth_info
from app.models import User
from app.schemas.auth import LoginRequest
from app.schemas.common import AuthDataResponse, AuthInfo, DataResponse, MessageResponse
from app.schemas.users import UserCreate, UserOut, UserUpdate
from app.services import users as user_service

router = APIRouter()


class LoginData(UserOut):
    token: str


@router.post("/login", response_model=AuthDataResponse[LoginData])
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthDataResponse[LoginData]:
    """
    Authenticate with username and password and issue a new token.
    The previously issued token stops working.
    """
    user, token = user_service.login(db, body.username, body.password)
    data = LoginData.model_validate({**UserOut.model_validate(user).model_dump(), "token": token})
    return AuthDataResponse[LoginData](
        message="Login successful",
        data=data,
        auth=AuthInfo(**auth_info(token)),
    )


@router.post("", response_model=AuthDataResponse[UserOut], status_code=201)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[User | None, Depends(get_optional_user)],
) -> AuthDataResponse[UserOut]:
    """Create a user. Open signup for role 'user'; role 'admin' needs an admin token."""
    user, token = user_service.create_user(db, body, actor)
    return AuthDataResponse[UserOut](
        message="User created",
        data=UserOut.model_validate(user),
        auth=AuthInfo(**auth_info(token)),
    )


@router.get("/me", response_model=DataResponse[UserOut])
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserOut]:
    """The user bound to the presented token."""
    return DataResponse[UserOut](data=UserOut.model_validate(current_user))


@router.get("", response_model=DataResponse[list[UserOut]])
def list_users(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[list[UserOut]]:
    """List all users (admin only)."""
    users = user_service.list_users(db, admin)
    return DataResponse[list[UserOut]](data=[UserOut.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=DataResponse[UserOut])
def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[UserOut]:
    """Get one user (admin or the user themself)."""
    user = user_service.get_user(db, user_id, current_user)
    return DataResponse[UserOut](data=UserOut.model_validate(user))


@router.put("/{user_id}", response_model=DataResponse[UserOut])
def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> DataResponse[UserOut]:
    """Partially update a user. Role and status can only be changed by an admin."""
    user = user_service.update_user(db, user_id, body, current_user)
    return DataResponse[UserOut](message="User updated", data=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a user (admin only; admins cannot delete themselves)."""
    user_service.delete_user(db, user_id, admin)
    return MessageResponse(message="User deleted")
