"""
Unit tests for JSON logging setup
"""

import json
import logging
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.logging_setup import JsonFormatter, get_logger


class TestJsonFormatter:
    """Test cases for JsonFormatter"""

    def test_format_with_extra(self):
        record = logging.LogRecord("og_image.handler", logging.INFO, __file__, 1, "rendered %s", ("card",), None)
        record.extra = {"layout": "grid", "tiles": 4}

        payload = json.loads(JsonFormatter().format(record))

        assert payload["lvl"] == "INFO"
        assert payload["name"] == "og_image.handler"
        assert payload["msg"] == "rendered card"
        assert payload["extra"] == {"layout": "grid", "tiles": 4}

    def test_format_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        payload = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in payload["exc_info"]

    def test_format_without_extra(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "plain", (), None)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["lvl"] == "WARNING"
        assert "extra" not in payload
        assert "exc_info" not in payload


class TestGetLogger:
    """Test cases for get_logger"""

    def test_root_configured_once(self):
        first = get_logger("og_image.a")
        handlers = list(logging.getLogger().handlers)
        second = get_logger("og_image.b")

        assert first.name == "og_image.a"
        assert second.name == "og_image.b"
        assert logging.getLogger().handlers == handlers
        assert getattr(logging.getLogger(), "_onview_configured", False) is True
