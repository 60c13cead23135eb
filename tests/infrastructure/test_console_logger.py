from __future__ import annotations

import json

from infrastructure.logging.console_logger import ConsoleLogger


def test_console_logger_emits_type_field(capsys) -> None:
    logger = ConsoleLogger()

    logger.info("action.start", action_type="navigate")

    captured = capsys.readouterr()
    line = captured.out.strip()

    assert line.startswith("action.start ")
    payload = json.loads(line.replace("action.start ", "", 1))
    assert payload["type"] == "action.start"
    assert payload["level"] == "info"
    assert payload["action_type"] == "navigate"


def test_console_logger_bind_adds_fields(capsys) -> None:
    logger = ConsoleLogger().bind(invocation_id="inv-1")

    logger.warning("expression.rejected", mode="condition")

    payload = json.loads(capsys.readouterr().out.split(" ", 1)[1])
    assert payload["invocation_id"] == "inv-1"
    assert payload["mode"] == "condition"


def test_console_logger_filters_below_min_level(capsys) -> None:
    logger = ConsoleLogger(min_level="warning")

    logger.debug("noise")
    logger.info("noise")
    logger.error("action.handler_failed", error="boom")

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("action.handler_failed ")
