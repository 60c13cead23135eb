# application/ports/action_runner.py
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from application.outcome import ActionResult
from domain.actions.base import ActionConfig

if TYPE_CHECKING:
    from application.action_context import ActionContext
    from application.executor.cancellation import CancelSignal


class ActionRunnerPort(Protocol):
    """Re-entry point handlers use to run nested actions."""

    async def execute(
        self, action: ActionConfig, ctx: "ActionContext", signal: Optional["CancelSignal"] = None
    ) -> ActionResult:
        ...

    async def execute_sequence(
        self, actions: Sequence[ActionConfig], ctx: "ActionContext", signal: Optional["CancelSignal"] = None
    ) -> ActionResult:
        ...

    async def execute_parallel(
        self, actions: Sequence[ActionConfig], ctx: "ActionContext", signal: Optional["CancelSignal"] = None
    ) -> ActionResult:
        ...
