# application/executor/handler_registry.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from application.handlers.base import ActionHandler, HandlerMetadata
from application.ports.logger import LoggerPort, NullLogger


class HandlerRegistry:
    """action type 文字列 -> ハンドラ"""

    def __init__(self, handlers: Iterable[ActionHandler] = (), logger: Optional[LoggerPort] = None):
        self._handlers: Dict[str, ActionHandler] = {}
        self._logger = logger or NullLogger()
        for h in handlers:
            self.register(h)

    def register(self, handler: ActionHandler) -> None:
        if not handler.action_type:
            raise ValueError(f"{type(handler).__name__} has no action_type")
        if handler.action_type in self._handlers:
            self._logger.warning(
                "registry.handler_overwritten",
                action_type=handler.action_type,
                previous=type(self._handlers[handler.action_type]).__name__,
                handler=type(handler).__name__,
            )
        self._handlers[handler.action_type] = handler

    def unregister(self, action_type: str) -> bool:
        return self._handlers.pop(action_type, None) is not None

    def has(self, action_type: str) -> bool:
        return action_type in self._handlers

    def types(self) -> List[str]:
        return list(self._handlers)

    def get_handler(self, action_type: str) -> ActionHandler:
        h = self._handlers.get(action_type)
        if h is None:
            raise RuntimeError(f"No handler found for action type: {action_type}")
        return h

    def get_metadata(self, action_type: str) -> Optional[HandlerMetadata]:
        h = self._handlers.get(action_type)
        return h.metadata if h is not None else None

    def clear(self) -> None:
        self._handlers.clear()
