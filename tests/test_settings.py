"""
Settings Tests.

Run with:
    pytest tests/test_settings.py -v
"""

import os

from workforce_exposure.config import Settings, get_settings, load_settings_from_env


class TestSettings:
    """Tests for environment-based configuration."""

    def test_defaults(self, settings):
        assert settings.score_scale == 10.0
        assert settings.high_risk_threshold == 6.0
        assert settings.max_top_tasks == 10
        assert settings.usage_segment_total == 100
        assert settings.catalog_path is None
        assert not settings.is_production

    def test_env_override(self, monkeypatch):
        """WORKFORCE_EXPOSURE_* variables override defaults."""
        monkeypatch.setenv("WORKFORCE_EXPOSURE_HIGH_RISK_THRESHOLD", "7.5")
        monkeypatch.setenv("WORKFORCE_EXPOSURE_ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.high_risk_threshold == 7.5
        assert settings.is_production

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_load_from_env_file(self, tmp_path):
        """A specific .env file is loaded and the cache refreshed."""
        env_file = tmp_path / "analytics.env"
        env_file.write_text("WORKFORCE_EXPOSURE_MAX_TOP_TASKS=3\n", encoding="utf-8")

        try:
            settings = load_settings_from_env(str(env_file))
            assert settings.max_top_tasks == 3
            assert get_settings() is settings
        finally:
            os.environ.pop("WORKFORCE_EXPOSURE_MAX_TOP_TASKS", None)
