"""
Unit tests for the application configuration (Settings).

Tests cover:
- Default values
- FUND_API_BASE_URL derivation
- Backend URL validation
"""

import pytest
from pydantic import ValidationError


class TestSettingsDefaults:
    """Tests for default settings values."""

    def test_project_name(self):
        from fundmanager.core.config import settings

        assert settings.PROJECT_NAME == "Mutual Fund Management App"

    def test_logging_settings_have_defaults(self):
        from fundmanager.core.config import settings

        assert settings.LOG_FILE_MAX_BYTES > 0
        assert settings.LOG_FILE_BACKUP_COUNT > 0
        assert isinstance(settings.DEBUG, bool)

    def test_backend_url_is_http(self):
        from fundmanager.core.config import settings

        assert settings.FUND_API_URL.startswith(("http://", "https://"))


class TestFundApiBaseUrl:
    """Tests for the FUND_API_BASE_URL property."""

    def test_appends_fixed_path(self):
        from fundmanager.core.config import Settings

        s = Settings(FUND_API_URL="http://funds.internal:9000")
        assert s.FUND_API_BASE_URL == "http://funds.internal:9000/fundapi"

    def test_trailing_slash_stripped(self):
        from fundmanager.core.config import Settings

        s = Settings(FUND_API_URL="https://funds.example.com/ ")
        assert s.FUND_API_URL == "https://funds.example.com"
        assert s.FUND_API_BASE_URL == "https://funds.example.com/fundapi"

    def test_reads_environment(self, monkeypatch):
        from fundmanager.core.config import Settings

        monkeypatch.setenv("FUND_API_URL", "http://from-env:8080")
        assert Settings().FUND_API_BASE_URL == "http://from-env:8080/fundapi"


class TestBackendUrlValidation:
    """A root that is not an http(s) URL fails fast."""

    @pytest.mark.parametrize("url", ["localhost:8080", "ftp://funds", ""])
    def test_rejects_non_http_urls(self, url):
        from fundmanager.core.config import Settings

        with pytest.raises(ValidationError, match="FUND_API_URL"):
            Settings(FUND_API_URL=url)
