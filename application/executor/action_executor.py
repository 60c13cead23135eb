# application/executor/action_executor.py
from __future__ import annotations

import asyncio
import time
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from application.action_context import ActionContext
from application.executor.cancellation import CancelSignal
from application.executor.handler_registry import HandlerRegistry
from application.outcome import (
    CANCELLED,
    HANDLER_ERROR,
    INVALID_ACTION,
    UNKNOWN_ACTION,
    ActionError,
    ActionResult,
    ResultMetadata,
    first_failure,
)
from application.ports.logger import NullLogger
from application.services.execution_deps import ExecutionDeps
from application.services.page_state import BranchStateStore
from domain.actions.base import ActionConfig
from domain.exceptions import ValidationError

ActionLike = Union[ActionConfig, Mapping[str, Any]]


class ActionExecutor:
    """
    アクションツリーを実行する。

    ノードごとの流れ:
      キャンセル確認 -> condition ゲート -> params のテンプレート展開
      -> ハンドラ実行（親 signal にリンクした子 signal 付き）
      -> onSuccess / onError を sequence として実行
    例外は外に出さず、すべて ActionResult に変換する。
    """

    def __init__(self, registry: HandlerRegistry, deps: ExecutionDeps):
        self._registry = registry
        if not deps.settings.enable_action_logging:
            deps = deps.with_logger(NullLogger())
        self._deps = deps.with_runner(self)
        self._pending: Dict[str, CancelSignal] = {}

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def execute(
        self, action: ActionLike, ctx: ActionContext, signal: Optional[CancelSignal] = None
    ) -> ActionResult:
        # invocation_id を付与（呼び元が指定していれば尊重）
        if not ctx.invocation_id:
            ctx.invocation_id = uuid.uuid4().hex

        t0 = time.perf_counter()
        try:
            action = self._coerce(action)
        except ValidationError as e:
            self._deps.logger.error("action.invalid", invocation_id=ctx.invocation_id, error=str(e))
            return ActionResult.failure(str(e), code=INVALID_ACTION, cause=e)

        deps = self._deps.with_logger(
            self._deps.logger.bind(invocation_id=ctx.invocation_id, action_id=action.label)
        )

        if signal is not None and signal.aborted:
            return ActionResult.cancelled_result(signal.reason).with_duration(self._elapsed_ms(t0))

        if action.condition is not None and not deps.evaluator.evaluate_condition(
            action.condition, ctx.template_source()
        ):
            deps.logger.info("action.skipped", action_type=action.type, condition=str(action.condition))
            result = ActionResult.ok({"skipped": True, "reason": "condition_not_met"}, skipped=True)
            return result.with_duration(self._elapsed_ms(t0))

        deps.logger.info("action.start", action_type=action.type)
        result = await self._run_handler(action, ctx, deps, signal)
        result = result.with_duration(self._elapsed_ms(t0))

        deps.logger.info(
            "action.end",
            action_type=action.type,
            ok=result.success,
            cancelled=result.cancelled,
            code=result.error.code if result.error else None,
            elapsed_ms=int(result.metadata.duration_ms),
        )

        # キャンセルされたノードの後続は実行しない
        if result.cancelled:
            return result

        follow_up = action.on_success if result.success else action.on_error
        if follow_up:
            branch = "onSuccess" if result.success else "onError"
            chained = await self.execute_sequence(follow_up, ctx, signal)
            if not chained.success:
                deps.logger.info(
                    "action.follow_up_failed",
                    branch=branch,
                    error=chained.error.message if chained.error else None,
                )

        return result

    async def execute_sequence(
        self, actions: Sequence[ActionLike], ctx: ActionContext, signal: Optional[CancelSignal] = None
    ) -> ActionResult:
        """先頭から順に実行し、失敗またはキャンセルで打ち切る"""
        results: List[ActionResult] = []
        for action in actions:
            if signal is not None and signal.aborted:
                break
            result = await self.execute(action, ctx, signal)
            results.append(result)
            if not result.success:
                break
        return self._composite(results, len(actions), signal)

    async def execute_parallel(
        self, actions: Sequence[ActionLike], ctx: ActionContext, signal: Optional[CancelSignal] = None
    ) -> ActionResult:
        """
        すべて並行に実行する（兄弟の失敗で打ち切らない）。
        isolate_parallel_state が有効なら、各分岐は pageState のコピーに書き込み、
        join 時に宣言順で親へ反映する。
        """
        isolate = self._deps.settings.isolate_parallel_state
        branches = [ctx.branch() if isolate else ctx for _ in actions]

        results = list(
            await asyncio.gather(*(self.execute(a, b, signal) for a, b in zip(actions, branches)))
        )

        if isolate:
            applied = 0
            for branch in branches:
                if isinstance(branch.state_store, BranchStateStore):
                    applied += branch.state_store.replay(ctx.state_store)
            self._deps.logger.debug(
                "parallel.state_merged",
                invocation_id=ctx.invocation_id,
                branches=len(branches),
                operations=applied,
            )

        return self._composite(results, len(actions), signal)

    def cancel_all(self, reason: str = "All pending actions were cancelled") -> int:
        pending = list(self._pending.values())
        self._pending.clear()
        for sig in pending:
            sig.abort(reason)
        return len(pending)

    # ------------------------------------------------------------------

    async def _run_handler(
        self, action: ActionConfig, ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        if not self._registry.has(action.type):
            deps.logger.error("action.unknown_type", action_type=action.type)
            return ActionResult.failure(f"Unknown action type: {action.type}", code=UNKNOWN_ACTION)

        handler = self._registry.get_handler(action.type)
        try:
            params = deps.renderer.render_params(action.params, ctx.template_source(), handler.raw_param_keys)
        except ValidationError as e:
            return ActionResult.failure(str(e), code=handler.error_code, cause=e)

        child = CancelSignal.any(signal)
        key = uuid.uuid4().hex
        self._pending[key] = child
        try:
            result = await handler.handle(params, ctx, deps, child)
        except Exception as e:
            deps.logger.error("action.handler_crashed", handler=type(handler).__name__, error=str(e))
            result = ActionResult.from_exception(e, HANDLER_ERROR)
        finally:
            self._pending.pop(key, None)
            child.dispose()

        if result is None:
            return ActionResult.failure(
                f"Handler returned None: handler={type(handler).__name__}, action={action.label}",
                code=HANDLER_ERROR,
            )
        return result

    def _composite(
        self, results: List[ActionResult], expected: int, signal: Optional[CancelSignal]
    ) -> ActionResult:
        data = {"results": results}
        if signal is not None and signal.aborted and (
            len(results) < expected or any(r.cancelled for r in results)
        ):
            return ActionResult(
                success=False,
                data=data,
                error=ActionError(message=signal.reason or "Action was cancelled", code=CANCELLED),
                metadata=ResultMetadata(cancelled=True),
            )

        failed = first_failure(results)
        if failed is None:
            return ActionResult.ok(data)
        return ActionResult(
            success=False,
            data=data,
            error=failed.error,
            metadata=ResultMetadata(cancelled=failed.cancelled),
        )

    def _coerce(self, action: ActionLike) -> ActionConfig:
        if isinstance(action, ActionConfig):
            return action
        return ActionConfig.from_dict(action)

    def _elapsed_ms(self, t0: float) -> float:
        return (time.perf_counter() - t0) * 1000
