# application/handlers/navigation_handler.py
from __future__ import annotations

from typing import Any, Dict, Optional

from application.action_context import ActionContext
from application.executor.cancellation import CancelSignal
from application.handlers.base import ActionHandler, HandlerMetadata
from application.outcome import ActionResult
from application.services.execution_deps import ExecutionDeps
from domain.actions.base import ActionKind
from domain.actions.params import GoBackParams, NavigateParams, ReloadParams


def _require_browser(ctx: ActionContext):
    if ctx.browser is None:
        raise RuntimeError("browser service is not available")
    return ctx.browser


class NavigateHandler(ActionHandler):
    action_type = ActionKind.NAVIGATE.value
    error_code = "NAVIGATION_ERROR"
    metadata = HandlerMetadata("Navigate", "Navigate to a route or an external URL")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = NavigateParams.from_params(params)

        # 外部URLはルーターを通さずブラウザへ
        if p.external:
            _require_browser(ctx).open_url(p.to, new_tab=p.open_in_new_tab)
            deps.logger.debug("navigate.external", url=p.to, new_tab=p.open_in_new_tab)
            return ActionResult.ok({"url": p.to, "external": True})

        ctx.navigate(p.to, replace=p.replace, query=p.query)
        deps.logger.debug("navigate.route", path=p.to, replace=p.replace)
        return ActionResult.ok({"path": p.to})


class GoBackHandler(ActionHandler):
    action_type = ActionKind.GO_BACK.value
    error_code = "GO_BACK_ERROR"
    metadata = HandlerMetadata("Go back", "Go back in history or to a fallback route")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = GoBackParams.from_params(params)
        history_length = ctx.browser.history_length() if ctx.browser is not None else 0

        if history_length > 1:
            ctx.browser.back()
            return ActionResult.ok({"method": "history"})
        if p.fallback:
            ctx.navigate(p.fallback)
            return ActionResult.ok({"method": "fallback", "path": p.fallback})
        return ActionResult.ok({"method": "none"})


class ReloadHandler(ActionHandler):
    """
    hard=True: ブラウザのフルリロード
    hard=False: 現在のパスへ replace で再遷移（アプリ内リロード）
    """

    action_type = ActionKind.RELOAD.value
    error_code = "RELOAD_ERROR"
    metadata = HandlerMetadata("Reload", "Reload the current page")

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ReloadParams.from_params(params)
        if p.hard:
            _require_browser(ctx).reload()
        else:
            ctx.navigate(ctx.current_path, replace=True, query=dict(ctx.query_params) or None)
        return ActionResult.ok({"hard": p.hard})
