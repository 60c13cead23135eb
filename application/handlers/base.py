# application/handlers/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Optional

from application.outcome import ActionResult
from domain.exceptions import ActionCancelledError

if TYPE_CHECKING:
    from application.action_context import ActionContext
    from application.executor.cancellation import CancelSignal
    from application.services.execution_deps import ExecutionDeps


@dataclass(frozen=True)
class HandlerMetadata:
    display_name: str
    description: str = ""
    cancellable: bool = False


class ActionHandler(ABC):
    """
    1種類のアクションを実行するハンドラ。

    handle() は例外を外に出さない。パラメータ不備（ValidationError）も含めて
    error_code 付きの失敗結果に変換する。
    """

    action_type: str = ""
    error_code: str = "HANDLER_ERROR"
    metadata: HandlerMetadata = HandlerMetadata(display_name="")
    # テンプレート展開しない params キー（ネストしたアクションや式）
    raw_param_keys: FrozenSet[str] = frozenset()

    async def handle(
        self,
        params: Dict[str, Any],
        ctx: "ActionContext",
        deps: "ExecutionDeps",
        signal: Optional["CancelSignal"] = None,
    ) -> ActionResult:
        try:
            if signal is not None:
                signal.raise_if_aborted()
            return await self._handle(params, ctx, deps, signal)
        except ActionCancelledError as e:
            return ActionResult.cancelled_result(e.reason)
        except Exception as e:
            deps.logger.error(
                "action.handler_failed",
                action_type=self.action_type,
                code=self.error_code,
                error=f"{type(e).__name__}: {e}",
            )
            return ActionResult.from_exception(e, self.error_code)

    @abstractmethod
    async def _handle(
        self,
        params: Dict[str, Any],
        ctx: "ActionContext",
        deps: "ExecutionDeps",
        signal: Optional["CancelSignal"],
    ) -> ActionResult:
        ...
