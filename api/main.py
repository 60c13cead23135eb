"""FastAPI アプリケーション - アクションのシミュレーション/式評価エンドポイント"""
import math
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import Body, FastAPI, HTTPException
from pydantic import BaseModel, Field

import sys

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from infrastructure.collaborators.in_memory_fetch import InMemoryFetchClient
from infrastructure.collaborators.recording import (
    EffectRecorder,
    RecordingBrowser,
    RecordingNavigator,
    RecordingToast,
    ScriptedDialogs,
)
from infrastructure.config.env_settings_provider import EnvSettingsProvider
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.trace_logger import TraceBuffer, TraceLogger
from application.action_context import ActionContext
from application.executor.builtin import build_executor
from application.ports.fetch import FetchPort
from application.ports.logger import NullLogger
from application.ports.requests_client import RequestsFetchClient
from application.services.expression_evaluator import ExpressionEvaluator
from application.settings import EngineSettings
from domain.actions.base import as_action_list
from domain.exceptions import ValidationError
from domain.expressions.coercion import format_number
from domain.expressions.dependencies import extract_field_dependencies, extract_template_paths


# リクエストモデル
class MockResponse(BaseModel):
    """シミュレーション中に fetch が返すレスポンス"""
    url: str = Field(description="完全一致で照合するURL")
    method: Optional[str] = Field(default=None, description="省略時は全メソッドに一致")
    status: int = Field(default=200, description="HTTPステータス")
    body: Any = Field(default=None, description="文字列以外は JSON として返す")
    headers: Dict[str, str] = Field(default_factory=dict, description="レスポンスヘッダ")
    delay_ms: float = Field(default=0, ge=0, description="応答までの遅延")


class SimulateActionRequest(BaseModel):
    """アクション実行シミュレーションのリクエスト"""
    action: Union[Dict[str, Any], List[Dict[str, Any]]] = Field(description="ActionConfig またはその配列")
    page_state: Dict[str, Any] = Field(default_factory=dict)
    initial_page_state: Optional[Dict[str, Any]] = Field(default=None)
    form_data: Dict[str, Any] = Field(default_factory=dict)
    widget_states: Dict[str, Any] = Field(default_factory=dict)
    user: Optional[Dict[str, Any]] = Field(default=None)
    tenant: Optional[Dict[str, Any]] = Field(default=None)
    permissions: List[str] = Field(default_factory=list)
    route_params: Dict[str, str] = Field(default_factory=dict)
    query_params: Dict[str, str] = Field(default_factory=dict)
    current_path: str = Field(default="/")
    history_length: int = Field(default=1, ge=0, description="ブラウザ履歴の長さ")
    dialog_answers: List[bool] = Field(default_factory=list, description="confirm への回答（先頭から消費）")
    dialog_default: bool = Field(default=True, description="回答が尽きた後の confirm の結果")
    mock_responses: List[MockResponse] = Field(default_factory=list)
    passthrough: bool = Field(
        default=False,
        description="モックに無いリクエストを実際に送信する",
    )


class SimulateActionResponse(BaseModel):
    result: Dict[str, Any] = Field(description="ActionResult")
    effects: List[Dict[str, Any]] = Field(description="発生順の副作用")
    page_state: Dict[str, Any] = Field(description="実行後のページ状態")
    trace: List[Dict[str, Any]] = Field(description="実行ログ")


class EvaluateExpressionRequest(BaseModel):
    expression: Union[str, bool, None] = Field(description="{{path}} を含む式")
    context: Dict[str, Any] = Field(default_factory=dict, description="pageState/formData などのルート")
    mode: str = Field(default="value", pattern="^(condition|value)$")


class EvaluateExpressionResponse(BaseModel):
    value: Any = Field(description="評価結果")
    dependencies: List[str] = Field(description="参照している formData のフィールド")
    references: List[str] = Field(description="参照しているパス")


# 設定
SETTINGS: EngineSettings = EnvSettingsProvider().get()
# passthrough 時に全リクエストで共有する実 HTTP クライアント
PASSTHROUGH_FETCH = RequestsFetchClient(
    base_url=SETTINGS.api_base_url,
    timeout_sec=SETTINGS.http_timeout_sec,
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    PASSTHROUGH_FETCH.close()


# FastAPIアプリケーション
app = FastAPI(
    title="UI Action Engine",
    description="宣言的UIアクションと式評価のシミュレーター",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/")
def read_root():
    """ヘルスチェック"""
    return {"status": "ok", "service": "ui-actions"}


def _build_fetch(request: SimulateActionRequest, recorder: EffectRecorder) -> InMemoryFetchClient:
    fallback: Optional[FetchPort] = PASSTHROUGH_FETCH if request.passthrough else None
    client = InMemoryFetchClient(fallback=fallback, recorder=recorder)
    for mock in request.mock_responses:
        client.add_route(
            mock.url,
            method=mock.method,
            status=mock.status,
            body=mock.body,
            headers=mock.headers,
            delay_sec=mock.delay_ms / 1000,
        )
    return client


def _build_context(request: SimulateActionRequest, recorder: EffectRecorder) -> ActionContext:
    return ActionContext(
        page_state=dict(request.page_state),
        initial_page_state=request.initial_page_state,
        form_data=dict(request.form_data),
        widget_states=dict(request.widget_states),
        user=request.user,
        tenant=request.tenant,
        permissions=list(request.permissions),
        route_params=dict(request.route_params),
        query_params=dict(request.query_params),
        current_path=request.current_path,
        navigator=RecordingNavigator(recorder),
        fetch=_build_fetch(request, recorder),
        toast=RecordingToast(recorder),
        dialogs=ScriptedDialogs(request.dialog_answers, default=request.dialog_default, recorder=recorder),
        browser=RecordingBrowser(request.history_length, recorder=recorder),
    )


@app.post("/actions/simulate", response_model=SimulateActionResponse)
async def simulate_action(request: SimulateActionRequest = Body(...)) -> SimulateActionResponse:
    """
    記録用コラボレーターの上でアクションを実行する

    Returns:
        実行結果、副作用、最終ページ状態、ログ
    """
    try:
        actions = as_action_list(request.action)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not actions:
        raise HTTPException(status_code=400, detail="action is required")

    buffer = TraceBuffer()
    logger = CompositeLogger(TraceLogger(buffer), ConsoleLogger(min_level=SETTINGS.log_level.lower()))
    executor = build_executor(logger, SETTINGS)

    recorder = EffectRecorder()
    ctx = _build_context(request, recorder)

    logger.info("simulation.start", actions=len(actions))
    if len(actions) == 1:
        result = await executor.execute(actions[0], ctx)
    else:
        result = await executor.execute_sequence(actions, ctx)
    logger.info("simulation.end", ok=result.success)

    return SimulateActionResponse(
        result=_json_safe(result.to_dict()),
        effects=_json_safe(recorder.effects),
        page_state=_json_safe(ctx.page_state),
        trace=[_json_safe(entry.to_dict()) for entry in buffer.entries],
    )


@app.post("/expressions/evaluate", response_model=EvaluateExpressionResponse)
def evaluate_expression(request: EvaluateExpressionRequest = Body(...)) -> EvaluateExpressionResponse:
    evaluator = ExpressionEvaluator(ConsoleLogger(min_level=SETTINGS.log_level.lower()), SETTINGS.max_expression_length)
    if request.mode == "condition":
        value = evaluator.evaluate_condition(request.expression, request.context)
    else:
        value = evaluator.evaluate_value(request.expression, request.context)

    return EvaluateExpressionResponse(
        value=_json_safe(value),
        dependencies=extract_field_dependencies(request.expression),
        references=extract_template_paths(request.expression),
    )


@app.get("/actions/types")
def list_action_types() -> List[Dict[str, Any]]:
    registry = build_executor(NullLogger(), SETTINGS).registry
    out: List[Dict[str, Any]] = []
    for action_type in registry.types():
        meta = registry.get_metadata(action_type)
        out.append(
            {
                "type": action_type,
                "displayName": meta.display_name if meta else action_type,
                "description": meta.description if meta else "",
                "cancellable": meta.cancellable if meta else False,
            }
        )
    return out


def _json_safe(value: Any) -> Any:
    # NaN / Infinity は JSON にできないので JS と同じ文字列表現にする
    if isinstance(value, float) and not math.isfinite(value):
        return format_number(value)
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value
