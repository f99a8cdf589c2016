"""Tests for startup validation of usage thresholds and soft config."""

import logging
from types import SimpleNamespace

import pytest

from tierscore.core.config import Settings, validate_config
from tierscore.core.errors import ConfigurationError
from tierscore.core.validation import validate_env


def make_settings(**overrides):
    defaults = dict(
        ENV="development",
        USAGE_WARNING_THRESHOLD=80,
        USAGE_BLOCK_THRESHOLD=100,
        UPGRADE_SUGGESTION_THRESHOLD=80,
        UPGRADE_HIGH_URGENCY_THRESHOLD=95,
        CORS_ALLOWED_ORIGINS="http://localhost:3000",
        LOG_LEVEL="INFO",
    )
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.fixture(autouse=True)
def _no_skip(monkeypatch):
    monkeypatch.delenv("SKIP_ENV_VALIDATION", raising=False)


def test_defaults_pass():
    assert validate_env(settings_obj=make_settings()) is True
    assert validate_env(settings_obj=make_settings(ENV="production")) is True


@pytest.mark.parametrize("name", [
    "USAGE_WARNING_THRESHOLD",
    "USAGE_BLOCK_THRESHOLD",
    "UPGRADE_SUGGESTION_THRESHOLD",
    "UPGRADE_HIGH_URGENCY_THRESHOLD",
])
def test_out_of_range_threshold_fails(name):
    with pytest.raises(ConfigurationError):
        validate_env(settings_obj=make_settings(**{name: 120}))
    with pytest.raises(ConfigurationError):
        validate_env(settings_obj=make_settings(**{name: -1}))


def test_non_numeric_threshold_fails():
    with pytest.raises(ConfigurationError):
        validate_env(settings_obj=make_settings(USAGE_WARNING_THRESHOLD="eighty"))


def test_warning_above_block_fails():
    with pytest.raises(ConfigurationError):
        validate_env(settings_obj=make_settings(USAGE_WARNING_THRESHOLD=90, USAGE_BLOCK_THRESHOLD=85))


def test_suggestion_above_urgency_fails():
    with pytest.raises(ConfigurationError):
        validate_env(settings_obj=make_settings(UPGRADE_SUGGESTION_THRESHOLD=97))


def test_early_block_only_outside_production():
    relaxed = make_settings(USAGE_WARNING_THRESHOLD=70, USAGE_BLOCK_THRESHOLD=90)
    assert validate_env(settings_obj=relaxed) is True
    with pytest.raises(ConfigurationError):
        validate_env(env="production", settings_obj=relaxed)


def test_skip_env_validation_bypass(monkeypatch):
    monkeypatch.setenv("SKIP_ENV_VALIDATION", "1")
    assert validate_env(settings_obj=make_settings(USAGE_BLOCK_THRESHOLD=500)) is True


def test_validate_config_warns(caplog):
    cfg = make_settings(ENV="production", CORS_ALLOWED_ORIGINS="*")
    with caplog.at_level(logging.WARNING, logger="tierscore"):
        assert validate_config(strict=False, settings_obj=cfg) is True
    assert any("CORS_ALLOWED_ORIGINS" in r.getMessage() for r in caplog.records)


def test_validate_config_strict_raises():
    with pytest.raises(RuntimeError):
        validate_config(strict=True, settings_obj=make_settings(LOG_LEVEL="LOUD"))


def test_settings_cors_origins(monkeypatch):
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    cfg = Settings(_env_file=None)
    assert cfg.cors_origins == ["https://a.example", "https://b.example"]
    assert cfg.USAGE_WARNING_THRESHOLD == 80.0
