"""Tests for app/configs/settings.py."""

from importlib import import_module
from logging import getLogger
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from app.configs import LimiterConfig, Settings, file_logger, settings

settings_module = import_module("app.configs.settings")


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "MAIL_USER": "relay@example.com",
        "MAIL_PASS": "secret",
        "ALLOWED_ORIGINS": "https://example.com",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[arg-type]


class TestSettings:
    def test_allowed_origins_split_and_trimmed(self) -> None:
        config = make_settings(ALLOWED_ORIGINS=" https://a.example ,https://b.example,, ")
        assert config.allowed_origins == ["https://a.example", "https://b.example"]

    def test_recipient_defaults_to_mail_user(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MAIL_TO", raising=False)
        assert make_settings().recipient == "relay@example.com"

    def test_recipient_override(self) -> None:
        assert make_settings(MAIL_TO="inbox@example.com").recipient == "inbox@example.com"

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("ENVIRONMENT", "LOG_TO_FILE", "MAIL_VERIFY_ON_STARTUP"):
            monkeypatch.delenv(name, raising=False)
        config = make_settings()
        assert config.ENVIRONMENT == "production"
        assert config.is_development is False
        assert config.PORT == 5500
        assert config.MAIL_SERVER == "smtp.gmail.com"
        assert config.MAIL_PORT == 587
        assert config.MAX_BODY_BYTES == 10240
        assert config.SEND_RATE_LIMIT == "30/15minutes"

    def test_password_is_secret(self) -> None:
        config = make_settings()
        assert "secret" not in repr(config)
        assert config.MAIL_PASS.get_secret_value() == "secret"

    def test_mail_credentials_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MAIL_USER", raising=False)
        monkeypatch.delenv("MAIL_PASS", raising=False)
        with pytest.raises(ValueError, match="MAIL_USER"):
            Settings(_env_file=None, ALLOWED_ORIGINS="https://example.com")  # type: ignore[call-arg]


def test_limiter_config_defaults() -> None:
    config = LimiterConfig().model_dump()
    assert config["storage_uri"] == "memory://"
    assert config["headers_enabled"] is True


class TestFileLogger:
    def test_disabled_adds_no_handler(self) -> None:
        logger = getLogger("tests.file_logger.disabled")
        assert settings.LOG_TO_FILE is False
        file_logger(logger)
        assert not logger.handlers

    def test_enabled_adds_single_rotating_handler(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setattr(settings, "LOG_TO_FILE", True)
        monkeypatch.setattr(settings_module, "LOG_DIR", tmp_path)
        logger = getLogger("tests.file_logger.enabled")

        file_logger(logger)
        file_logger(logger)

        handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert Path(handlers[0].baseFilename) == tmp_path / "app.log"
        for handler in handlers:
            logger.removeHandler(handler)
            handler.close()
