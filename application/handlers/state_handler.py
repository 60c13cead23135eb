# application/handlers/state_handler.py
from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from application.action_context import ActionContext
from application.executor.cancellation import CancelSignal
from application.handlers.base import ActionHandler, HandlerMetadata
from application.outcome import ActionResult
from application.services.execution_deps import ExecutionDeps
from domain.actions.base import ActionKind
from domain.actions.params import MergeStateParams, ResetStateParams, SetStateParams
from domain.expressions.paths import get_nested_value, has_nested_value


class SetStateHandler(ActionHandler):
    action_type = ActionKind.SET_STATE.value
    error_code = "SET_STATE_ERROR"
    metadata = HandlerMetadata("Set state", "Update a page state path")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = SetStateParams.from_params(params)
        if p.path:
            ctx.set_state(p.path, p.value, p.merge)
        else:
            # path なしは state 全体を置き換える
            ctx.state_store.replace_all(dict(p.value))
        return ActionResult.ok({"path": p.path, "value": p.value})


class ResetStateHandler(ActionHandler):
    action_type = ActionKind.RESET_STATE.value
    error_code = "RESET_STATE_ERROR"
    metadata = HandlerMetadata("Reset state", "Revert page state to its initial values")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ResetStateParams.from_params(params)
        initial = ctx.initial_page_state

        if not p.paths:
            ctx.state_store.replace_all(copy.deepcopy(initial) if initial is not None else {})
            return ActionResult.ok({"paths": []})

        for path in p.paths:
            if initial is not None and has_nested_value(initial, path):
                ctx.set_state(path, copy.deepcopy(get_nested_value(initial, path)), merge=False)
            else:
                ctx.set_state(path, None, merge=False)
        return ActionResult.ok({"paths": list(p.paths)})


class MergeStateHandler(ActionHandler):
    action_type = ActionKind.MERGE_STATE.value
    error_code = "MERGE_STATE_ERROR"
    metadata = HandlerMetadata("Merge state", "Merge several values into page state")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = MergeStateParams.from_params(params)
        for path, value in p.updates.items():
            ctx.set_state(path, value, merge=True)
        return ActionResult.ok({"updates": p.updates})
