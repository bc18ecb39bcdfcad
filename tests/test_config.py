"""Tests for settings and logging setup."""

import json
import logging

import pytest
import structlog
from pydantic import ValidationError
from structlog.testing import capture_logs

from jwecore.config import RSA_KEY_BITS_FLOOR, Settings, get_settings
from jwecore.core.errors import InvalidKeyError
from jwecore.core.jwk import Jwk
from jwecore.core.rsaes import RsaesJweAlgorithm
from jwecore.logging import configure_logging


@pytest.fixture
def restore_logging():
    """Undo global logging configuration after the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSettings:
    """Tests for the settings model."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("JWECORE_MIN_RSA_KEY_BITS", raising=False)
        settings = get_settings()

        assert settings.min_rsa_key_bits == RSA_KEY_BITS_FLOOR == 2048

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("JWECORE_MIN_RSA_KEY_BITS", "4096")
        monkeypatch.setenv("JWECORE_LOG_LEVEL", "DEBUG")

        settings = get_settings()

        assert settings.min_rsa_key_bits == 4096
        assert settings.log_level == "debug"

    def test_minimum_cannot_go_below_floor(self):
        with pytest.raises(ValidationError):
            Settings(min_rsa_key_bits=1024)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")


class TestLogging:
    """Tests for the structlog configuration."""

    def test_json_records(self, capsys, restore_logging):
        configure_logging(level="info", json=True)

        structlog.get_logger("jwecore.test").info("jwe.test_event", alg="RSA-OAEP")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "jwe.test_event"
        assert record["alg"] == "RSA-OAEP"
        assert record["level"] == "info"
        assert record["component"] == "jwecore.test"
        assert "ts" in record

    def test_level_filtering(self, capsys, restore_logging):
        configure_logging(level="warning", json=True)

        structlog.get_logger("jwecore.test").info("jwe.hidden")

        assert "jwe.hidden" not in capsys.readouterr().err

    def test_console_renderer(self, capsys, restore_logging):
        configure_logging(level="info", json=False)

        structlog.get_logger("jwecore.test").info("jwe.console_event")

        assert "jwe.console_event" in capsys.readouterr().err


class TestEvents:
    """Tests for the events emitted by key handling."""

    def test_rsa1_5_deprecation_warning(self, public_jwk):
        with capture_logs() as logs:
            RsaesJweAlgorithm.RSA1_5.encrypter_from_jwk(public_jwk)

        events = [entry for entry in logs if entry["event"] == "jwe.algorithm_deprecated"]
        assert events and events[0]["log_level"] == "warning"
        assert events[0]["alg"] == "RSA1_5"

    def test_no_warning_for_oaep(self, public_jwk):
        with capture_logs() as logs:
            RsaesJweAlgorithm.RSA_OAEP.encrypter_from_jwk(public_jwk)

        assert all(entry["event"] != "jwe.algorithm_deprecated" for entry in logs)

    def test_key_rejected(self, public_jwk):
        jwk = public_jwk.to_dict()
        jwk["use"] = "sig"

        with capture_logs() as logs:
            with pytest.raises(InvalidKeyError):
                RsaesJweAlgorithm.RSA_OAEP.encrypter_from_jwk(Jwk(jwk))

        assert any(entry["event"] == "jwe.key_rejected" for entry in logs)
