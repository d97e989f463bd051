"""Password hashing, bearer token issuance and token/email syntax checks."""

import re
import secrets
from datetime import UTC, datetime
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 10

# Max lengths match the column sizes in app.models.
USERNAME_MAX_LEN = 50
NAME_MAX_LEN = 100
EMAIL_MAX_LEN = 100
PASSWORD_MAX_LEN = 128

# Characters a presented bearer token may contain. Issued tokens (JWS compact form) stay within it.
TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

TOKEN_TYPE = "Bearer"
TOKEN_EXPIRES = "never"
TOKEN_USAGE = (
    "Authorization: Bearer <token> header, X-API-Key: <token> header, "
    "or ?token=<token> query parameter"
)


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_token(username: str, principal_id: int | None = None) -> str:
    """
    Issue a fresh opaque bearer token bound to a username.

    The token is a signed JWT without an exp claim; a random jti makes every
    issuance distinct so re-issuing always replaces the stored value.
    """
    payload: dict[str, Any] = {
        "sub": username,
        "jti": secrets.token_hex(16),
        "iat": datetime.now(UTC),
    }
    if principal_id is not None:
        payload["uid"] = principal_id
    secret = settings.TOKEN_SECRET.get_secret_value()
    return jwt.encode(payload, secret, algorithm=settings.TOKEN_ALGORITHM)


def is_valid_token_syntax(token: str) -> bool:
    return bool(TOKEN_PATTERN.match(token))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def auth_info(token: str) -> dict[str, str]:
    """Describe an issued token and how to present it on later calls."""
    return {
        "token": token,
        "type": TOKEN_TYPE,
        "expires": TOKEN_EXPIRES,
        "use_with": TOKEN_USAGE,
    }
