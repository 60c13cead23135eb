# infrastructure/logging/trace_logger.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from application.ports.logger import LoggerPort
from domain.trace import TraceEntry


class TraceBuffer:
    """1回のシミュレーション分のログを貯める"""

    def __init__(self) -> None:
        self._entries: List[TraceEntry] = []

    def append(self, entry: TraceEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> List[TraceEntry]:
        return list(self._entries)

    def events(self) -> List[str]:
        return [e.event for e in self._entries]


@dataclass(frozen=True)
class TraceLogger(LoggerPort):
    buffer: TraceBuffer
    bound: Dict[str, Any] = field(default_factory=dict)

    def bind(self, **fields: Any) -> "TraceLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return TraceLogger(buffer=self.buffer, bound=merged)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        self.buffer.append(
            TraceEntry(
                timestamp=datetime.now(timezone.utc),
                level=level,
                event=event,
                fields=payload,
            )
        )
