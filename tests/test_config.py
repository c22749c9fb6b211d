"""
Tests for configuration and database URL handling.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from rent_tracker.core.config import Settings
from rent_tracker.core.database import get_async_database_url


class TestSettings:
    """Test Settings validation."""

    def test_environment_validation(self) -> None:
        with pytest.raises(PydanticValidationError):
            Settings(ENVIRONMENT="qa")

    def test_environment_flags(self) -> None:
        assert Settings(ENVIRONMENT="production").is_production
        assert Settings(ENVIRONMENT="development").is_development

    def test_page_sizes_must_be_positive(self) -> None:
        with pytest.raises(PydanticValidationError):
            Settings(DEFAULT_PAGE_SIZE=0)

    def test_sqlite_engine_settings(self) -> None:
        """Test that SQLite engines get no pool sizing."""
        settings = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")

        assert settings.is_sqlite
        assert "pool_size" not in settings.get_database_settings()

    def test_postgres_engine_settings(self) -> None:
        settings = Settings(DATABASE_URL="postgresql://u:p@db:5432/rent")

        assert settings.get_database_settings()["pool_size"] == 20


class TestAsyncDatabaseUrl:
    """Test get_async_database_url."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@db/rent", "postgresql+asyncpg://u:p@db/rent"),
            ("postgresql+asyncpg://u:p@db/rent", "postgresql+asyncpg://u:p@db/rent"),
            ("sqlite:///./rent.db", "sqlite+aiosqlite:///./rent.db"),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ],
    )
    def test_normalizes_driver(self, url, expected) -> None:
        assert get_async_database_url(url) == expected

    def test_rejects_unknown_scheme(self) -> None:
        with pytest.raises(ValueError):
            get_async_database_url("mysql://u:p@db/rent")
