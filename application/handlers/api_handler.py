# application/handlers/api_handler.py
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from application.action_context import ActionContext
from application.executor.cancellation import CancelSignal, run_cancellable
from application.handlers.base import ActionHandler, HandlerMetadata
from application.outcome import ActionResult
from application.ports.fetch import FetchPort, FetchRequest, FetchResponse
from application.services.execution_deps import ExecutionDeps
from application.services.redactor import mask_dict
from domain.actions.base import ActionKind
from domain.actions.params import ApiCallParams, ExecuteActionParams
from domain.exceptions import ActionCancelledError
from domain.expressions.coercion import to_js_string

JSON_HEADERS = {"Content-Type": "application/json"}


def _require_fetch(ctx: ActionContext) -> FetchPort:
    if ctx.fetch is None:
        raise RuntimeError("fetch service is not available")
    return ctx.fetch


def build_url(url: str, query_params: Optional[Mapping[str, Any]]) -> str:
    if not query_params:
        return url
    query = urlencode([(k, to_js_string(v)) for k, v in query_params.items()])
    return f"{url}{'&' if '?' in url else '?'}{query}"


def _error_fields(body: Any, default_message: str, default_code: str) -> Dict[str, Any]:
    body_dict = body if isinstance(body, dict) else {}
    return {
        "message": body_dict.get("message") or default_message,
        "code": body_dict.get("code") or default_code,
        "field_errors": body_dict.get("fieldErrors"),
    }


class ApiCallHandler(ActionHandler):
    action_type = ActionKind.API_CALL.value
    error_code = "API_CALL_ERROR"
    metadata = HandlerMetadata("API call", "Call an HTTP endpoint and return its JSON body", cancellable=True)

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ApiCallParams.from_params(params)
        fetch = _require_fetch(ctx)
        full_url = build_url(p.url, p.query_params)

        headers = dict(JSON_HEADERS)
        headers.update(p.headers)
        body = None
        if p.body is not None and p.method != "GET":
            body = json.dumps(p.body, ensure_ascii=False)

        request = FetchRequest(
            method=p.method,
            headers=headers,
            body=body,
            timeout_sec=(p.timeout_ms / 1000.0) if p.timeout_ms else deps.settings.http_timeout_sec,
        )

        # timeout と呼び出し元の signal のどちらでもキャンセルできるように合成する
        effective = signal
        timeout_signal = None
        if p.timeout_ms:
            timeout_signal = CancelSignal.timeout(p.timeout_ms)
            effective = CancelSignal.any(timeout_signal, signal)

        deps.logger.debug(
            "api_call.request",
            method=p.method,
            url=full_url,
            headers=mask_dict(headers),
            timeout_ms=p.timeout_ms,
        )

        try:
            response = await run_cancellable(fetch.fetch(full_url, request), effective)
        except ActionCancelledError as e:
            if e.timed_out:
                deps.logger.info("api_call.timed_out", url=full_url, timeout_ms=p.timeout_ms)
                return ActionResult.failure(e.reason, code=self.error_code, cause=e)
            raise
        finally:
            if timeout_signal is not None:
                timeout_signal.dispose()
            if effective is not None and effective is not signal:
                effective.dispose()

        content_type = response.header("content-type") or ""
        if "application/json" not in content_type.lower():
            snippet = response.text[:200]
            message = (
                f'Expected JSON response from "{full_url}" but received content type '
                f'"{content_type}" with status {response.status}.'
            )
            if snippet:
                message += f" Body (truncated): {snippet}"
            raise ValueError(message)

        try:
            data = response.json()
        except ValueError as e:
            raise ValueError(f'Failed to parse JSON response from "{full_url}": {e}') from e

        if not response.ok:
            fields = _error_fields(data, "API request failed", "API_ERROR")
            deps.logger.info("api_call.failed", url=full_url, status=response.status, code=fields["code"])
            return ActionResult.failure(status=response.status, cause=data, **fields)

        deps.logger.debug("api_call.response", url=full_url, status=response.status)
        return ActionResult.ok({"status": response.status, "data": data, "headers": dict(response.headers)})


class ExecuteActionHandler(ActionHandler):
    """バックエンドのアクションゲートウェイへ {actionId, context} を POST する"""

    action_type = ActionKind.EXECUTE_ACTION.value
    error_code = "EXECUTE_ACTION_ERROR"
    metadata = HandlerMetadata("Execute action", "Run a backend action through the gateway", cancellable=True)

    async def _handle(
        self, params: Dict[str, Any], ctx: ActionContext, deps: ExecutionDeps, signal: Optional[CancelSignal]
    ) -> ActionResult:
        p = ExecuteActionParams.from_params(params)
        fetch = _require_fetch(ctx)
        gateway = deps.settings.action_gateway_path

        request = FetchRequest(
            method="POST",
            headers=dict(JSON_HEADERS),
            body=json.dumps({"actionId": p.action_id, "context": p.context}, ensure_ascii=False),
            timeout_sec=deps.settings.http_timeout_sec,
        )
        deps.logger.debug("execute_action.request", action_id=p.action_id, gateway=gateway)

        response: FetchResponse = await run_cancellable(fetch.fetch(gateway, request), signal)

        try:
            data = response.json()
        except ValueError as e:
            raise ValueError(
                f"Failed to parse JSON response from action gateway (status {response.status}): {e}"
            ) from e

        if not response.ok:
            fields = _error_fields(data, "Action execution failed", self.error_code)
            deps.logger.info(
                "execute_action.failed", action_id=p.action_id, status=response.status, code=fields["code"]
            )
            return ActionResult.failure(status=response.status, cause=data, **fields)

        return ActionResult.ok(data)
