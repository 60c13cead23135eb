# application/ports/loguru_logger.py
from __future__ import annotations

from typing import Any, Dict, Optional

from loguru import logger as _loguru

from application.ports.logger import LoggerPort


class LoguruLogger(LoggerPort):
    """LoggerPort を loguru に流すアダプタ（フィールドは extra に入る）"""

    def __init__(self, bound: Optional[Dict[str, Any]] = None):
        self._bound = dict(bound or {})
        self._logger = _loguru.bind(**self._bound)

    def bind(self, **fields: Any) -> "LoguruLogger":
        merged = dict(self._bound)
        merged.update(fields)
        return LoguruLogger(merged)

    def debug(self, event: str, **fields: Any) -> None:
        self._logger.bind(**fields).debug(event)

    def info(self, event: str, **fields: Any) -> None:
        self._logger.bind(**fields).info(event)

    def warning(self, event: str, **fields: Any) -> None:
        self._logger.bind(**fields).warning(event)

    def error(self, event: str, **fields: Any) -> None:
        self._logger.bind(**fields).error(event)
