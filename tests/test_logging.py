"""Tests for logging setup."""

import logging

from gemini_mcp_tools.logging import LOG_LEVEL_ENV, setup_logging


def test_explicit_level(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
    assert setup_logging("debug").level == logging.DEBUG


def test_env_level(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "WARNING")
    assert setup_logging().level == logging.WARNING


def test_invalid_level_falls_back_to_info(monkeypatch, capsys):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

    logger = setup_logging("LOUD")

    assert logger.level == logging.INFO
    assert "Invalid log level" in capsys.readouterr().err


def test_noisy_libraries_stay_at_warning():
    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING
