"""Shared test helpers: in-memory SQLite sessions, principal factories, fake banking service."""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import generate_token, hash_password
from app.models import Account, Base, User
from app.services.banking import BankingServiceError


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with both principal tables; one shared connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    username: str,
    role: str = "user",
    status: str = "active",
    password: str = "secret-pass",
    with_token: bool = True,
) -> User:
    user = User(
        username=username,
        password_hash=hash_password(password),
        email=f"{username}@example.com",
        role=role,
        status=status,
        token=generate_token(username) if with_token else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_account(db: Session, username: str, status: str = "active", with_token: bool = False) -> Account:
    account = Account(
        username=username,
        password="bank-pass",
        name=f"{username} name",
        status=status,
        token=generate_token(username) if with_token else None,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


class FakeBanking:
    """Stands in for BankingClient; accounts whose username is in `failing` raise."""

    def __init__(self, failing: tuple[str, ...] = (), unavailable: bool = False) -> None:
        self.failing = set(failing)
        self.unavailable = unavailable
        self.history_calls: list = []
        self.status_payload: dict = {"success": True, "message": "Logged in"}

    def _maybe_fail(self, account: Account) -> None:
        if account.username in self.failing:
            raise BankingServiceError("Bank session error", unavailable=self.unavailable)

    async def login(self, account: Account) -> dict:
        self._maybe_fail(account)
        return {"success": True, "message": "Login successful"}

    async def check_login_status(self, account: Account) -> dict:
        self._maybe_fail(account)
        return dict(self.status_payload)

    async def get_balance(self, account: Account) -> dict:
        self._maybe_fail(account)
        return {"totalBalance": 1000, "currency": "VND", "owner": account.username}

    async def get_transaction_history(self, account: Account, params) -> dict:
        self._maybe_fail(account)
        self.history_calls.append(params)
        return {"transactions": []}

    async def logout(self, account: Account) -> dict:
        self._maybe_fail(account)
        return {"success": True}

    async def ping(self) -> bool:
        return True
