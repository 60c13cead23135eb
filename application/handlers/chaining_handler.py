# application/handlers/chaining_handler.py
from __future__ import annotations

from typing import Any, Dict, Optional

from application.action_context import ActionContext
from application.executor.cancellation import CancelSignal
from application.handlers.base import ActionHandler, HandlerMetadata
from application.outcome import ActionResult
from application.services.execution_deps import ExecutionDeps
from domain.actions.base import ActionKind
from domain.actions.params import ChildActionsParams, ConditionalParams


class SequenceHandler(ActionHandler):
    action_type = ActionKind.SEQUENCE.value
    error_code = "SEQUENCE_ERROR"
    metadata = HandlerMetadata("Sequence", "Run actions one after another", cancellable=True)
    raw_param_keys = frozenset({"actions"})

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ChildActionsParams.from_params(params, "Sequence")
        return await deps.require_runner().execute_sequence(p.actions, ctx, signal)


class ParallelHandler(ActionHandler):
    action_type = ActionKind.PARALLEL.value
    error_code = "PARALLEL_ERROR"
    metadata = HandlerMetadata("Parallel", "Run actions concurrently", cancellable=True)
    raw_param_keys = frozenset({"actions"})

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ChildActionsParams.from_params(params, "Parallel")
        return await deps.require_runner().execute_parallel(p.actions, ctx, signal)


class ConditionalHandler(ActionHandler):
    action_type = ActionKind.CONDITIONAL.value
    error_code = "CONDITIONAL_ERROR"
    metadata = HandlerMetadata("Conditional", "Run one of two branches based on an expression", cancellable=True)
    raw_param_keys = frozenset({"condition", "then", "else"})

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ConditionalParams.from_params(params)

        # 条件は1回だけ評価する
        matched = deps.evaluator.evaluate_condition(p.condition, ctx.template_source())
        branch = p.then if matched else p.otherwise
        deps.logger.debug("conditional.evaluated", condition=str(p.condition), matched=matched)

        if not branch:
            return ActionResult.ok({"condition": matched, "executed": False})

        seq = await deps.require_runner().execute_sequence(branch, ctx, signal)
        data = {"condition": matched, "executed": True, "results": seq.data["results"]}
        return ActionResult(success=seq.success, data=data, error=seq.error, metadata=seq.metadata)
