import sys
import os
import logging

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PAYMENTS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PAYMENTS_LOG_FORMAT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.log_level_number == logging.WARNING
        assert settings.log_format == "%(levelname)s: %(message)s"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PAYMENTS_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.log_level == "DEBUG"
        assert settings.log_level_number == logging.DEBUG

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("PAYMENTS_LOG_FORMAT=%(message)s\n")
        assert Settings().log_format == "%(message)s"

    def test_invalid_level(self, monkeypatch):
        monkeypatch.setenv("PAYMENTS_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()
