from __future__ import annotations

import json
import logging
from io import StringIO

import structlog

from storeguard.logging import configure_logging


def test_configure_logging_emits_json() -> None:
    stream = StringIO()
    try:
        configure_logging([logging.StreamHandler(stream)])
        structlog.get_logger("storeguard.guard").info("cache.hit", type="widget")

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "cache.hit"
        assert event["type"] == "widget"
        assert event["level"] == "info"
        assert event["logger"] == "storeguard.guard"
        assert "timestamp" in event
    finally:
        structlog.reset_defaults()
        logging.basicConfig(force=True, handlers=[logging.NullHandler()])
