from __future__ import annotations

from application.ports.logger import NullLogger
from fakes import RecordingLogger
from infrastructure.logging.composite_logger import CompositeLogger


def test_fans_out_to_every_logger() -> None:
    a, b = RecordingLogger(), RecordingLogger()
    logger = CompositeLogger(a, b)

    logger.info("action.start", action_type="reload")

    assert a.records == [("info", "action.start", {"action_type": "reload"})]
    assert b.records == a.records


def test_bind_is_applied_to_children() -> None:
    a = RecordingLogger()

    CompositeLogger(a).bind(invocation_id="x").error("action.unknown_type")

    assert a.records == [("error", "action.unknown_type", {"invocation_id": "x"})]


def test_flattens_nested_and_drops_null_loggers() -> None:
    a, b = RecordingLogger(), RecordingLogger()

    logger = CompositeLogger(CompositeLogger(a, NullLogger()), b, NullLogger())

    assert logger.loggers == (a, b)
