# domain/exceptions.py
from __future__ import annotations

from typing import Optional


class ValidationError(Exception):
    """Raised when an action definition or its params are malformed."""


class ExpressionError(Exception):
    """式のパース/評価エラー"""

    def __init__(self, message: str, expression: Optional[str] = None):
        super().__init__(message)
        self.expression = expression


class ActionCancelledError(Exception):
    def __init__(self, reason: str = "Action was cancelled", timed_out: bool = False):
        super().__init__(reason)
        self.reason = reason
        self.timed_out = timed_out
