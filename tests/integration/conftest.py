"""Fixtures for API tests.

The application is built with test settings. Every repository provider and
the carrier client are replaced by mocks, so requests run the real routers,
middleware and services without a database or network access.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture

from src.api import dependencies
from src.api.main import create_app
from src.core.config import AuthConfig, Settings, get_settings
from src.core.security import TokenKind, create_access_token
from src.infrastructure.carriers import CarrierClient
from src.infrastructure.repositories import (
    AdminUserRepository,
    CompanyRepository,
    LoginAttemptRepository,
    OrderRepository,
    OrderTrackingRepository,
    UserRepository,
    VideoTestimonialRepository,
)
from src.infrastructure.storage import LocalBlobStorage, get_blob_storage


@pytest.fixture
def repos(mocker: MockerFixture) -> SimpleNamespace:
    attempts = mocker.MagicMock(spec=LoginAttemptRepository)
    attempts.recent_failures.return_value = []
    return SimpleNamespace(
        admins=mocker.MagicMock(spec=AdminUserRepository),
        users=mocker.MagicMock(spec=UserRepository),
        attempts=attempts,
        testimonials=mocker.MagicMock(spec=VideoTestimonialRepository),
        orders=mocker.MagicMock(spec=OrderRepository),
        trackings=mocker.MagicMock(spec=OrderTrackingRepository),
        companies=mocker.MagicMock(spec=CompanyRepository),
    )


@pytest.fixture
def carrier(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=CarrierClient)


@pytest.fixture
def storage(tmp_path: Path) -> LocalBlobStorage:
    return LocalBlobStorage(tmp_path / "storage", "http://test/files")


@pytest.fixture
def app(
    test_settings: Settings,
    repos: SimpleNamespace,
    carrier: MagicMock,
    storage: LocalBlobStorage,
) -> FastAPI:
    application = create_app(test_settings)
    overrides = application.dependency_overrides
    overrides[get_settings] = lambda: test_settings
    overrides[get_blob_storage] = lambda: storage
    overrides[dependencies.get_carrier_client] = lambda: carrier
    overrides[dependencies.get_admin_user_repository] = lambda: repos.admins
    overrides[dependencies.get_user_repository] = lambda: repos.users
    overrides[dependencies.get_login_attempt_repository] = lambda: repos.attempts
    overrides[dependencies.get_testimonial_repository] = lambda: repos.testimonials
    overrides[dependencies.get_order_repository] = lambda: repos.orders
    overrides[dependencies.get_tracking_repository] = lambda: repos.trackings
    overrides[dependencies.get_company_repository] = lambda: repos.companies
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client


@pytest.fixture
def admin_token(auth_config: AuthConfig) -> str:
    """Token of an admin panel account."""
    return create_access_token("gerente", TokenKind.ADMIN, auth_config)


@pytest.fixture
def user_token(auth_config: AuthConfig) -> str:
    """Token of back-office user 7, a ``vendedor``."""
    return create_access_token("7", TokenKind.USER, auth_config, role="vendedor")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return bearer(admin_token)


@pytest.fixture
def user_headers(user_token: str) -> dict[str, str]:
    return bearer(user_token)
