# infrastructure/logging/composite_logger.py
from __future__ import annotations

from typing import Any, Dict, Tuple

from application.ports.logger import LoggerPort, NullLogger


class CompositeLogger(LoggerPort):
    """
    複数のロガーへ同じイベントを流す。
    ネストした CompositeLogger は平坦化し、NullLogger は捨てる。
    """

    def __init__(self, *loggers: LoggerPort):
        flat = []
        for lg in loggers:
            if isinstance(lg, CompositeLogger):
                flat.extend(lg.loggers)
            elif not isinstance(lg, NullLogger):
                flat.append(lg)
        self._loggers: Tuple[LoggerPort, ...] = tuple(flat)

    @property
    def loggers(self) -> Tuple[LoggerPort, ...]:
        return self._loggers

    def bind(self, **fields: Any) -> "CompositeLogger":
        return CompositeLogger(*(lg.bind(**fields) for lg in self._loggers))

    def debug(self, event: str, **fields: Any) -> None:
        self._fan_out("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._fan_out("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._fan_out("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._fan_out("error", event, fields)

    def _fan_out(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        for lg in self._loggers:
            getattr(lg, level)(event, **fields)
