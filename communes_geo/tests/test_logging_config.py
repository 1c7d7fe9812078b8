"""
Tests for logging setup.
"""

from __future__ import annotations

import logging

import json_log_formatter
import pytest

from communes_geo import logging_config
from communes_geo.config import Settings


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_production_uses_json(self, monkeypatch, restore_root_logger):
        monkeypatch.setattr(logging_config, "get_settings", lambda: Settings(env="production", log_level="WARNING"))
        logging_config.setup_logging()
        [handler] = restore_root_logger.handlers
        assert isinstance(handler.formatter, json_log_formatter.JSONFormatter)
        assert restore_root_logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, monkeypatch, restore_root_logger):
        monkeypatch.setattr(logging_config, "get_settings", lambda: Settings(env="production", log_level="chatty"))
        logging_config.setup_logging()
        assert restore_root_logger.level == logging.INFO
