"""
Tests for the application settings.
"""

import pytest
from pydantic import ValidationError

from ironhub.core.config import Settings

STRONG_KEY = "k" * 48


def production(**overrides) -> Settings:
    values = {
        "app_env": "production",
        "secret_key": STRONG_KEY,
        "operator_password_hash": "$2b$12$abcdefghijklmnopqrstuv",
        "cors_origins": ["https://portal.americaniron.com"],
    }
    values.update(overrides)
    return Settings(**values)


class TestSettings:
    def test_development_defaults(self):
        settings = Settings(app_env="development")

        assert settings.storage_backend in ("memory", "postgres")
        assert settings.is_development
        assert not settings.is_production

    def test_valid_production(self):
        assert production().is_production

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"secret_key": "changeme-in-production"}, "secret_key"),
            ({"secret_key": "short"}, "secret_key"),
            ({"operator_password_hash": None}, "operator_password_hash"),
            ({"debug": True}, "debug"),
            ({"cors_origins": ["http://localhost:3000"]}, "cors_origins"),
            (
                {"storage_backend": "postgres", "database_url": "postgresql+asyncpg://u:changeme@db/ironhub"},
                "database_url",
            ),
        ],
    )
    def test_production_rejects_unsafe_values(self, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            production(**overrides)

        assert field in str(exc_info.value)

    def test_id_prefix_normalized(self):
        assert Settings(quote_id_prefix=" qt ").quote_id_prefix == "QT"

    @pytest.mark.parametrize("prefix", ["", "QT-", "TOOLONGPREFIX"])
    def test_id_prefix_invalid(self, prefix):
        with pytest.raises(ValidationError):
            Settings(quote_id_prefix=prefix)
