"""Project-wide fixtures: isolated settings, environment and request context."""

import os
from collections.abc import Generator

import pytest
from loguru import logger

from src.core.config import AuthConfig, Settings, get_settings
from src.core.context import RequestContext
from src.core.logging import _state
from src.infrastructure.storage import get_blob_storage

APP_ENV_PREFIXES = (
    "APP_",
    "API_",
    "ENVIRONMENT",
    "DEBUG",
    "CORS_",
    "LOG_CONFIG__",
    "OBSERVABILITY_CONFIG__",
    "DATABASE_CONFIG__",
    "AUTH_CONFIG__",
    "STORAGE_CONFIG__",
    "TRACKING_CONFIG__",
    "BUSINESS_CONFIG__",
)


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Start and end every test with freshly built settings and storage."""
    get_settings.cache_clear()
    get_blob_storage.cache_clear()
    yield
    get_settings.cache_clear()
    get_blob_storage.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch]:
    """Remove application variables so tests only see what they set."""
    original_env = os.environ.copy()
    for key in list(os.environ):
        if key.startswith(APP_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None]:
    """Keep Loguru sinks out of test output.

    Logging stays marked as configured so ``create_app`` does not add a
    stdout sink.
    """
    logger.remove()
    _state.configured = True
    yield
    logger.remove()


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(
        jwt_secret_key="test-secret-key-with-enough-length",
        setup_key="bootstrap-key",
        max_login_attempts=3,
        login_block_minutes=15,
    )


@pytest.fixture
def test_settings(auth_config: AuthConfig, tmp_path: os.PathLike[str]) -> Settings:
    """Settings for tests: tracing off, storage in a temporary directory."""
    return Settings(
        environment="development",
        debug=False,
        auth_config=auth_config,
        observability_config={"enable_tracing": False, "exporter_type": "none"},
        storage_config={
            "root_path": str(tmp_path),
            "public_base_url": "http://test/files",
        },
        log_config={"log_formatter_type": "console"},
    )
