from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Optional


class JsonFormatter(logging.Formatter):
    """
    One JSON object per log line:
      { "t": 1712345678901, "lvl": "INFO", "name": "og_image.handler", "msg": "text", "extra": {...} }

    Pass structured fields with `log.info("...", extra={"extra": {...}})`.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            payload["extra"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once.
    Level precedence: explicit `level`, then env LOG_LEVEL, then INFO.
    """
    root = logging.getLogger()
    if getattr(root, "_onview_configured", False):
        return

    lvl_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = logging.getLevelName(lvl_name)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(lvl)
    root._onview_configured = True  # type: ignore[attr-defined]

    # urllib3 logs every pooled connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(lvl, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Module logger with the root handler guaranteed to exist."""
    setup_logging()
    return logging.getLogger(name)
