# application/services/execution_deps.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from application.ports.action_runner import ActionRunnerPort
from application.ports.logger import LoggerPort
from application.services.expression_evaluator import ExpressionEvaluator
from application.services.template_renderer import TemplateRenderer
from application.settings import EngineSettings


@dataclass(frozen=True)
class ExecutionDeps:
    logger: LoggerPort
    evaluator: ExpressionEvaluator = field(default_factory=ExpressionEvaluator)
    settings: EngineSettings = field(default_factory=EngineSettings)
    renderer: TemplateRenderer = field(default_factory=TemplateRenderer)
    runner: Optional[ActionRunnerPort] = None

    # logger 差し替えのためのコピー生成
    def with_logger(self, logger: LoggerPort) -> "ExecutionDeps":
        return replace(self, logger=logger)

    def with_runner(self, runner: ActionRunnerPort) -> "ExecutionDeps":
        return replace(self, runner=runner)

    def require_runner(self) -> ActionRunnerPort:
        if self.runner is None:
            raise RuntimeError("nested actions require an action runner")
        return self.runner
