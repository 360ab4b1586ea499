"""
Tests for settings and database URL handling.
"""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from unittest.mock import patch

import config
from config import Settings, get_pricing_url, is_development
from database import build_engine, normalize_database_url


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("NEON_DATABASE_URL", raising=False)
        monkeypatch.delenv("FREE_TIER_CASE_LIMIT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.free_tier_case_limit == 1
        assert settings.database_url.startswith("sqlite")

    def test_neon_database_url_accepted(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("NEON_DATABASE_URL", "postgresql://user:pw@ep-neon.example/db")

        settings = Settings(_env_file=None)

        assert settings.database_url == "postgresql://user:pw@ep-neon.example/db"

    def test_free_tier_limit_from_env(self, monkeypatch):
        monkeypatch.setenv("FREE_TIER_CASE_LIMIT", "3")

        assert Settings(_env_file=None).free_tier_case_limit == 3


class TestHelpers:
    """Tests for config helper functions."""

    def test_is_development(self):
        with patch.object(config, "get_settings", return_value=Settings(_env_file=None, environment="Development")):
            assert is_development() is True
        with patch.object(config, "get_settings", return_value=Settings(_env_file=None, environment="production")):
            assert is_development() is False

    def test_pricing_url(self):
        settings = Settings(_env_file=None, frontend_url="https://ncnotify.example/", pricing_path="/pricing")
        with patch.object(config, "get_settings", return_value=settings):
            assert get_pricing_url() == "https://ncnotify.example/pricing"


class TestDatabaseUrl:
    """Tests for database URL normalization."""

    def test_postgres_scheme_rewritten(self):
        assert normalize_database_url("postgres://u:p@host/db") == "postgresql://u:p@host/db"

    def test_other_schemes_untouched(self):
        assert normalize_database_url("sqlite:///./x.db") == "sqlite:///./x.db"
        assert normalize_database_url("postgresql://u:p@host/db") == "postgresql://u:p@host/db"

    def test_sqlite_engine(self):
        engine = build_engine("sqlite:///./test_engine.db")
        assert engine.dialect.name == "sqlite"
        engine.dispose()

    def test_postgres_engine_uses_pool(self):
        engine = build_engine("postgres://u:p@localhost/db")
        assert engine.dialect.name == "postgresql"
        assert engine.pool is not None
        engine.dispose()
