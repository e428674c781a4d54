"""Password hashing and signed access tokens.

Passwords are hashed with bcrypt through passlib. Access tokens are HS256
JWTs signed with ``AuthConfig.jwt_secret_key`` and carry:

- ``sub``: admin username or back-office user id
- ``kind``: ``"admin"`` for the admin panel, ``"user"`` for back-office users
- ``role``: the user's role (back-office tokens only)
- ``exp``, ``iat`` and ``nbf`` timestamps
"""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from loguru import logger
from passlib.context import CryptContext
from pydantic import BaseModel

from src.core.config import AuthConfig
from src.core.exceptions import UnauthorizedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenKind(StrEnum):
    """Who a token was issued to."""

    ADMIN = "admin"
    USER = "user"


class TokenClaims(BaseModel):
    """Validated claims of a decoded access token."""

    sub: str
    kind: TokenKind
    role: str | None = None
    exp: datetime


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a password against a stored bcrypt hash.

    Args:
        plain_password: Password as typed by the user.
        hashed_password: Stored hash, may be missing.

    Returns:
        bool: True when the password matches. Malformed hashes never match.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(
    subject: str,
    kind: TokenKind,
    config: AuthConfig,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed access token.

    Args:
        subject: Admin username or user id.
        kind: Token kind.
        config: Authentication settings holding the signing key.
        role: Role claim for back-office users.
        expires_delta: Lifetime override, defaults to the configured expiry.

    Returns:
        str: The encoded JWT.
    """
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=config.access_token_expire_minutes)
    )
    claims: dict[str, Any] = {
        "sub": subject,
        "kind": kind.value,
        "exp": expire,
        "iat": now,
        "nbf": now,
    }
    if role is not None:
        claims["role"] = role

    return jwt.encode(
        claims,
        config.jwt_secret_key.get_secret_value(),
        algorithm=config.jwt_algorithm,
    )


def decode_access_token(token: str, config: AuthConfig) -> TokenClaims:
    """Verify a token's signature and expiry and return its claims.

    Args:
        token: Encoded JWT from the Authorization header.
        config: Authentication settings holding the signing key.

    Returns:
        TokenClaims: The validated claims.

    Raises:
        UnauthorizedError: If the token is expired, tampered with or malformed.
    """
    try:
        payload = jwt.decode(
            token,
            config.jwt_secret_key.get_secret_value(),
            algorithms=[config.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise UnauthorizedError("Token has expired", cause=e) from e
    except JWTError as e:
        raise UnauthorizedError("Invalid token", cause=e) from e

    try:
        return TokenClaims.model_validate(payload)
    except ValueError as e:
        raise UnauthorizedError("Invalid token claims", cause=e) from e
