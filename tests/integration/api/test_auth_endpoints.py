"""Integration tests for login and user provisioning endpoints."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
import pytest_check
from httpx import AsyncClient

from src.core.config import AuthConfig
from src.core.security import TokenKind, decode_access_token, hash_password
from src.domain.roles import AppRole
from src.infrastructure.database.models import AdminUser, User


@pytest.fixture(scope="module")
def password_hash() -> str:
    return hash_password("s3cret-pass")


@pytest.mark.integration
class TestAdminLoginEndpoint:
    async def test_login_returns_token(
        self,
        client: AsyncClient,
        repos: SimpleNamespace,
        auth_config: AuthConfig,
        password_hash: str,
    ) -> None:
        repos.admins.get_by_username.return_value = AdminUser(
            id=1, username="gerente", password_hash=password_hash
        )

        response = await client.post(
            "/api/v1/auth/admin/login",
            json={"username": "gerente", "password": "s3cret-pass"},
        )

        assert response.status_code == 200
        body = response.json()
        with pytest_check.check:
            assert body["success"] is True
        with pytest_check.check:
            assert body["username"] == "gerente"
        with pytest_check.check:
            claims = decode_access_token(body["token"], auth_config)
            assert claims.kind is TokenKind.ADMIN

    async def test_wrong_password_reports_remaining_attempts(
        self, client: AsyncClient, repos: SimpleNamespace, password_hash: str
    ) -> None:
        repos.admins.get_by_username.return_value = AdminUser(
            id=1, username="gerente", password_hash=password_hash
        )

        response = await client.post(
            "/api/v1/auth/admin/login",
            json={"username": "gerente", "password": "wrong"},
        )

        assert response.status_code == 401
        body = response.json()
        with pytest_check.check:
            assert body["error_code"] == "UNAUTHORIZED"
        with pytest_check.check:
            assert body["message"] == "Invalid credentials"
        with pytest_check.check:
            assert body["details"] == {"remaining_attempts": 2}
        repos.attempts.record.assert_awaited_once_with(
            "gerente", success=False, ip_address="127.0.0.1", commit=True
        )

    async def test_locked_out(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        newest = datetime.now(UTC) - timedelta(minutes=3)
        repos.attempts.recent_failures.return_value = [newest, newest, newest]

        response = await client.post(
            "/api/v1/auth/admin/login",
            json={"username": "gerente", "password": "s3cret-pass"},
        )

        assert response.status_code == 429
        assert response.json()["details"] == {"remaining_minutes": 12}

    async def test_missing_field_is_400(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/admin/login", json={"username": "gerente"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "password" in body["details"]["validation_errors"]


@pytest.mark.integration
class TestUserLoginEndpoint:
    async def test_login_returns_role(
        self, client: AsyncClient, repos: SimpleNamespace, password_hash: str
    ) -> None:
        repos.users.get_by_email.return_value = User(
            id=7, email="ana@primeprint.com", password_hash=password_hash
        )
        repos.users.get_role.return_value = AppRole.FINANCEIRO

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "ana@primeprint.com", "password": "s3cret-pass"},
        )

        assert response.status_code == 200
        body = response.json()
        assert (body["user_id"], body["email"], body["role"]) == (
            7,
            "ana@primeprint.com",
            "financeiro",
        )

    async def test_unknown_email(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        repos.users.get_by_email.return_value = None

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "ghost@primeprint.com", "password": "x"},
        )

        assert response.status_code == 401


@pytest.mark.integration
class TestUserProvisioningEndpoints:
    async def test_create_with_setup_key(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        async def create(user: User) -> User:
            user.id = 30
            return user

        repos.users.get_by_email.return_value = None
        repos.users.create.side_effect = create

        response = await client.post(
            "/api/v1/auth/users",
            json={
                "email": "novo@primeprint.com",
                "password": "pw-123456",
                "role": "vendedor",
                "setup_key": "bootstrap-key",
            },
        )

        assert response.status_code == 201
        assert response.json() == {"success": True, "user_id": 30}

    async def test_create_by_non_admin_is_forbidden(
        self,
        client: AsyncClient,
        repos: SimpleNamespace,
        user_headers: dict[str, str],
    ) -> None:
        repos.users.get_by_id.return_value = User(
            id=7, email="ana@primeprint.com", password_hash="x"
        )
        repos.users.get_role.return_value = AppRole.VENDEDOR

        response = await client.post(
            "/api/v1/auth/users",
            json={"email": "novo@primeprint.com", "password": "pw"},
            headers=user_headers,
        )

        assert response.status_code == 403
        repos.users.create.assert_not_called()

    async def test_create_without_credentials(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/users",
            json={"email": "novo@primeprint.com", "password": "pw"},
        )

        assert response.status_code == 401

    async def test_reset_with_wrong_key(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/users/reset",
            json={"email": "ana@primeprint.com", "password": "pw", "setup_key": "x"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid setup key"
