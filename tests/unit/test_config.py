"""Unit tests for application settings."""

from crypto_sensei.core.config import Settings, get_settings


class TestSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.app_name == "Crypto Sensei"
        assert settings.environment == "development"
        assert settings.history_days == 200
        assert settings.news_limit == 5
        assert settings.history_cache_ttl == 1800
        assert settings.stale_cache_ttl == 86400
        assert settings.market_data_min_interval == 6.0
        assert settings.news_min_interval == 60.0
        assert settings.log_json is True
        assert not hasattr(settings, "is_production")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Production")
        monkeypatch.setenv("HISTORY_DAYS", "90")
        monkeypatch.setenv("NARRATIVE_ENABLED", "false")
        monkeypatch.setenv("LOG_JSON", "false")

        settings = Settings(_env_file=None)

        assert settings.environment == "Production"
        assert settings.log_json is False
        assert settings.history_days == 90
        assert settings.narrative_enabled is False

    def test_test_environment(self):
        """conftest sets ENVIRONMENT=test before any import."""
        settings = Settings(_env_file=None)

        assert settings.environment == "test"
        assert settings.log_level == "WARNING"

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
