# application/executor/builtin.py
from __future__ import annotations

from typing import Iterable, List, Optional

from application.executor.action_executor import ActionExecutor
from application.executor.handler_registry import HandlerRegistry
from application.handlers.api_handler import ApiCallHandler, ExecuteActionHandler
from application.handlers.base import ActionHandler
from application.handlers.chaining_handler import ConditionalHandler, ParallelHandler, SequenceHandler
from application.handlers.feedback_handler import ShowDialogHandler, ShowToastHandler
from application.handlers.navigation_handler import GoBackHandler, NavigateHandler, ReloadHandler
from application.handlers.state_handler import MergeStateHandler, ResetStateHandler, SetStateHandler
from application.ports.logger import LoggerPort
from application.services.execution_deps import ExecutionDeps
from application.services.expression_evaluator import ExpressionEvaluator
from application.settings import EngineSettings


def builtin_handlers() -> List[ActionHandler]:
    return [
        NavigateHandler(),
        GoBackHandler(),
        ReloadHandler(),
        ApiCallHandler(),
        ExecuteActionHandler(),
        SetStateHandler(),
        ResetStateHandler(),
        MergeStateHandler(),
        ShowToastHandler(),
        ShowDialogHandler(),
        SequenceHandler(),
        ParallelHandler(),
        ConditionalHandler(),
    ]


def build_executor(
    logger: LoggerPort,
    settings: Optional[EngineSettings] = None,
    extra_handlers: Iterable[ActionHandler] = (),
) -> ActionExecutor:
    settings = settings or EngineSettings()
    registry = HandlerRegistry(builtin_handlers(), logger=logger)
    for handler in extra_handlers:
        registry.register(handler)

    deps = ExecutionDeps(
        logger=logger,
        settings=settings,
        evaluator=ExpressionEvaluator(logger, max_length=settings.max_expression_length),
    )
    return ActionExecutor(registry, deps)
