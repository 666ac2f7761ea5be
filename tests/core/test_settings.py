"""Tests for lcp.core.settings module."""

from pathlib import Path

from lcp.core.settings import LcpSettings, RollbackOrder, get_settings


class TestLcpSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LCP_DATA_DIR", raising=False)
        settings = LcpSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_json is None
        assert settings.rollback_order is RollbackOrder.REVERSE
        assert settings.default_content_type == "application/octet-stream"
        assert settings.data_dir == Path.home() / ".lcp"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LCP_ROLLBACK_ORDER", "forward")
        monkeypatch.setenv("LCP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LCP_DATA_DIR", str(tmp_path))
        settings = LcpSettings(_env_file=None)
        assert settings.rollback_order is RollbackOrder.FORWARD
        assert settings.log_level == "DEBUG"
        assert settings.data_dir == tmp_path

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
        get_settings.cache_clear()
        assert isinstance(get_settings(), LcpSettings)
