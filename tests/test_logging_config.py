from __future__ import annotations

import json

import structlog

from logging_config import get_logger, setup_logging


def test_json_logging_renders_one_object_per_line(capsys) -> None:
    setup_logging("INFO", "json", service_name="sciencefair-test")
    try:
        get_logger("tests").info("project_status_changed", project_id="p1")
        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        record = json.loads(lines[-1])
        assert record["event"] == "project_status_changed"
        assert record["project_id"] == "p1"
        assert record["service"] == "sciencefair-test"
        assert record["level"] == "info"
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()
