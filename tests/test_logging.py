"""Tests for structlog configuration."""

from __future__ import annotations

import logging

import pytest
import structlog

from depclean.core.logging import setup_logging


@pytest.fixture
def restore_logging():
    root_handlers = logging.root.handlers[:]
    root_level = logging.root.level
    yield
    structlog.reset_defaults()
    logging.root.handlers[:] = root_handlers
    logging.root.setLevel(root_level)
    logging.getLogger("depclean").setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_default_level_is_quiet(self, monkeypatch, restore_logging):
        monkeypatch.delenv("DEPCLEAN_LOG_LEVEL", raising=False)
        setup_logging()
        assert logging.getLogger("depclean").level == logging.WARNING

    def test_verbose(self, monkeypatch, restore_logging):
        monkeypatch.delenv("DEPCLEAN_LOG_LEVEL", raising=False)
        setup_logging(verbose=True)
        assert logging.getLogger("depclean").level == logging.DEBUG

    def test_env_override(self, monkeypatch, restore_logging):
        monkeypatch.setenv("DEPCLEAN_LOG_LEVEL", "info")
        monkeypatch.setenv("DEPCLEAN_LOG_FORMAT", "json")
        setup_logging(verbose=True)
        assert logging.getLogger("depclean").level == logging.INFO
