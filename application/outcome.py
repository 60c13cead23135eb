# application/outcome.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

CANCELLED = "CANCELLED"
UNKNOWN_ACTION = "UNKNOWN_ACTION"
HANDLER_ERROR = "HANDLER_ERROR"
INVALID_ACTION = "INVALID_ACTION"


@dataclass(frozen=True)
class ActionError:
    message: str
    code: Optional[str] = None
    status: Optional[int] = None
    field_errors: Optional[Dict[str, Any]] = None
    cause: Any = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"message": self.message}
        if self.code is not None:
            out["code"] = self.code
        if self.status is not None:
            out["status"] = self.status
        if self.field_errors is not None:
            out["fieldErrors"] = self.field_errors
        if isinstance(self.cause, BaseException):
            out["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        elif self.cause is not None:
            out["cause"] = self.cause
        return out


@dataclass(frozen=True)
class ResultMetadata:
    duration_ms: float = 0.0
    cancelled: bool = False
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"duration": round(self.duration_ms, 3)}
        if self.cancelled:
            out["cancelled"] = True
        if self.skipped:
            out["skipped"] = True
        return out


@dataclass(frozen=True)
class ActionResult:
    """
    ハンドラ/Executor の戻り値。例外は投げず、失敗も値として返す。
    success=False の場合は必ず error.message を持つ。
    """

    success: bool
    data: Any = None
    error: Optional[ActionError] = None
    metadata: ResultMetadata = field(default_factory=ResultMetadata)

    def __post_init__(self) -> None:
        if not self.success and (self.error is None or not self.error.message):
            raise ValueError("failed ActionResult requires a non-empty error message")

    @property
    def cancelled(self) -> bool:
        return self.metadata.cancelled

    @classmethod
    def ok(cls, data: Any = None, skipped: bool = False) -> "ActionResult":
        return cls(success=True, data=data, metadata=ResultMetadata(skipped=skipped))

    @classmethod
    def failure(
        cls,
        message: str,
        code: Optional[str] = None,
        status: Optional[int] = None,
        field_errors: Optional[Dict[str, Any]] = None,
        cause: Any = None,
        data: Any = None,
    ) -> "ActionResult":
        return cls(
            success=False,
            data=data,
            error=ActionError(
                message=message or "Action failed",
                code=code,
                status=status,
                field_errors=field_errors,
                cause=cause,
            ),
        )

    @classmethod
    def from_exception(cls, exc: BaseException, code: str) -> "ActionResult":
        return cls.failure(str(exc) or type(exc).__name__, code=code, cause=exc)

    @classmethod
    def cancelled_result(cls, reason: Optional[str] = None) -> "ActionResult":
        return cls(
            success=False,
            error=ActionError(message=reason or "Action was cancelled", code=CANCELLED),
            metadata=ResultMetadata(cancelled=True),
        )

    def with_duration(self, duration_ms: float) -> "ActionResult":
        return replace(self, metadata=replace(self.metadata, duration_ms=duration_ms))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = _jsonable(self.data)
        if self.error is not None:
            out["error"] = self.error.to_dict()
        out["metadata"] = self.metadata.to_dict()
        return out


def _jsonable(value: Any) -> Any:
    if isinstance(value, ActionResult):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def first_failure(results: List[ActionResult]) -> Optional[ActionResult]:
    for r in results:
        if not r.success:
            return r
    return None
