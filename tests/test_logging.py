"""
Tests for logging setup.
"""

import logging

from panai_sage.config import Settings
from panai_sage.logging_config import LOG_FORMAT, setup_logging


def test_setup_logging_uses_settings_level(monkeypatch):
    """setup_logging should install one stdout handler at the configured level."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setattr(logging.getLogger("httpx"), "level", logging.NOTSET)
    settings = Settings()
    settings.log_level = "warning"

    setup_logging(settings)

    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_keeps_existing_handlers(monkeypatch):
    """An already configured root logger is left alone."""
    root = logging.getLogger()
    existing = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [existing])

    setup_logging(Settings())

    assert root.handlers == [existing]
