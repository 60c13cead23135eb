# application/handlers/feedback_handler.py
from __future__ import annotations

from typing import Any, Dict, Optional

from application.action_context import ActionContext
from application.executor.cancellation import CancelSignal, run_cancellable
from application.handlers.base import ActionHandler, HandlerMetadata
from application.outcome import ActionResult
from application.ports.feedback import DialogRequest
from application.services.execution_deps import ExecutionDeps
from domain.actions.base import ActionKind
from domain.actions.params import ShowDialogParams, ShowToastParams


class ShowToastHandler(ActionHandler):
    action_type = ActionKind.SHOW_TOAST.value
    error_code = "SHOW_TOAST_ERROR"
    metadata = HandlerMetadata("Show toast", "Show a transient notification")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ShowToastParams.from_params(params)
        duration = p.duration_ms if p.duration_ms is not None else deps.settings.default_toast_duration_ms
        ctx.show_toast(p.message, p.variant, duration)
        return ActionResult.ok({"message": p.message, "variant": p.variant})


class ShowDialogHandler(ActionHandler):
    """
    confirm: ユーザーの選択を {confirmed: bool} で返す
    それ以外: alert を表示して confirmed=True
    onConfirm / onCancel があれば選択に応じて続けて実行する
    """

    action_type = ActionKind.SHOW_DIALOG.value
    error_code = "SHOW_DIALOG_ERROR"
    metadata = HandlerMetadata("Show dialog", "Show a modal dialog and wait for the user", cancellable=True)
    raw_param_keys = frozenset({"onConfirm", "onCancel"})

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ShowDialogParams.from_params(params)
        if ctx.dialogs is None:
            raise RuntimeError("dialog service is not available")

        request = DialogRequest(
            title=p.title,
            message=p.message,
            variant=p.variant,
            confirm_label=p.confirm_label,
            cancel_label=p.cancel_label,
        )
        if p.variant == "confirm":
            confirmed = bool(await run_cancellable(ctx.dialogs.confirm(request), signal))
        else:
            await run_cancellable(ctx.dialogs.alert(request), signal)
            confirmed = True

        data: Dict[str, Any] = {"confirmed": confirmed}
        follow_up = p.on_confirm if confirmed else p.on_cancel
        if not follow_up:
            return ActionResult.ok(data)

        result = await deps.require_runner().execute_sequence(follow_up, ctx, signal)
        data["followUp"] = result
        if result.success:
            return ActionResult.ok(data)
        return ActionResult(success=False, data=data, error=result.error, metadata=result.metadata)
