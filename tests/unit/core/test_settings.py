"""Unit tests for settings loading and environment defaults."""

import pytest
import pytest_check
from pydantic import ValidationError

from src.core.config import (
    AuthConfig,
    DatabaseConfig,
    Settings,
    StorageConfig,
    get_settings,
)


@pytest.mark.unit
class TestSettingsDefaults:
    def test_defaults(self) -> None:
        settings = Settings()
        with pytest_check.check:
            assert settings.app_name == "Prime Print"
        with pytest_check.check:
            assert settings.api_prefix == "/api/v1"
        with pytest_check.check:
            assert settings.auth_config.setup_key is None
        with pytest_check.check:
            assert settings.storage_config.pdf_bucket == "pdf-exports"
        with pytest_check.check:
            assert settings.storage_config.pdf_max_age_days == 60
        with pytest_check.check:
            assert settings.business_config.whatsapp_number == "5574981138033"

    def test_development_uses_console_formatter(self) -> None:
        assert Settings(environment="development").log_config.log_formatter_type == (
            "console"
        )

    def test_production_switches_exporter_and_sampling(self) -> None:
        settings = Settings(environment="production")
        with pytest_check.check:
            assert settings.log_config.log_formatter_type == "json"
        with pytest_check.check:
            assert settings.observability_config.exporter_type == "otlp"
        with pytest_check.check:
            assert settings.observability_config.trace_sample_rate == 0.1

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestEnvironmentOverrides:
    def test_nested_values_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AUTH_CONFIG__SETUP_KEY", "from-env")
        monkeypatch.setenv("AUTH_CONFIG__MAX_LOGIN_ATTEMPTS", "7")
        monkeypatch.setenv("STORAGE_CONFIG__PDF_MAX_AGE_DAYS", "30")
        monkeypatch.setenv("TRACKING_CONFIG__LINKETRACK_TOKEN", "tok")

        settings = get_settings()

        with pytest_check.check:
            assert settings.auth_config.setup_key is not None
            assert settings.auth_config.setup_key.get_secret_value() == "from-env"
        with pytest_check.check:
            assert settings.auth_config.max_login_attempts == 7
        with pytest_check.check:
            assert settings.storage_config.pdf_max_age_days == 30
        with pytest_check.check:
            assert settings.tracking_config.linketrack_token is not None

    def test_empty_docs_url_disables_docs(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DOCS_URL", "")
        assert Settings().docs_url is None


@pytest.mark.unit
class TestSectionValidation:
    def test_database_url_requires_asyncpg(self) -> None:
        with pytest.raises(ValidationError, match="postgresql\\+asyncpg"):
            DatabaseConfig(database_url="postgresql://u:p@localhost/db")

    def test_empty_setup_key_disables_it(self) -> None:
        assert AuthConfig(setup_key="").setup_key is None

    def test_secrets_are_hidden_in_repr(self) -> None:
        config = AuthConfig(jwt_secret_key="super-secret", setup_key="bootstrap")
        assert "super-secret" not in repr(config)
        assert "bootstrap" not in repr(config)

    def test_public_base_url_trailing_slash_is_removed(self) -> None:
        config = StorageConfig(public_base_url="https://cdn.example.com/files/")
        assert config.public_base_url == "https://cdn.example.com/files"

    def test_max_login_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AuthConfig(max_login_attempts=0)
