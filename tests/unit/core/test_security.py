"""Unit tests for password hashing and access tokens."""

from datetime import timedelta

import pytest
import pytest_check
from jose import jwt

from src.core.config import AuthConfig
from src.core.exceptions import UnauthorizedError
from src.core.security import (
    TokenKind,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.mark.unit
class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("s3nha-forte")
        with pytest_check.check:
            assert hashed != "s3nha-forte"
        with pytest_check.check:
            assert hashed.startswith("$2")
        with pytest_check.check:
            assert verify_password("s3nha-forte", hashed)
        with pytest_check.check:
            assert not verify_password("outra", hashed)

    @pytest.mark.parametrize("stored", [None, "", "plain-text-password"])
    def test_missing_or_malformed_hash_never_matches(self, stored: str | None) -> None:
        assert not verify_password("plain-text-password", stored)


@pytest.mark.unit
class TestAccessTokens:
    def test_round_trip_admin_token(self, auth_config: AuthConfig) -> None:
        token = create_access_token("admin", TokenKind.ADMIN, auth_config)
        claims = decode_access_token(token, auth_config)
        with pytest_check.check:
            assert claims.sub == "admin"
        with pytest_check.check:
            assert claims.kind is TokenKind.ADMIN
        with pytest_check.check:
            assert claims.role is None

    def test_user_token_carries_role(self, auth_config: AuthConfig) -> None:
        token = create_access_token("42", TokenKind.USER, auth_config, role="vendedor")
        claims = decode_access_token(token, auth_config)
        assert (claims.sub, claims.kind, claims.role) == (
            "42",
            TokenKind.USER,
            "vendedor",
        )

    def test_expired_token(self, auth_config: AuthConfig) -> None:
        token = create_access_token(
            "admin", TokenKind.ADMIN, auth_config, expires_delta=timedelta(minutes=-1)
        )
        with pytest.raises(UnauthorizedError, match="Token has expired"):
            decode_access_token(token, auth_config)

    def test_token_signed_with_another_key(self, auth_config: AuthConfig) -> None:
        other = AuthConfig(jwt_secret_key="another-secret-key")
        token = create_access_token("admin", TokenKind.ADMIN, other)
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_access_token(token, auth_config)

    def test_garbage_token(self, auth_config: AuthConfig) -> None:
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_access_token("not-a-jwt", auth_config)

    def test_token_without_kind_is_rejected(self, auth_config: AuthConfig) -> None:
        token = jwt.encode(
            {"sub": "admin", "exp": 4102444800},
            auth_config.jwt_secret_key.get_secret_value(),
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError, match="Invalid token claims"):
            decode_access_token(token, auth_config)
