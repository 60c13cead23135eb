# tests/application/handlers/test_feedback_handler.py
import asyncio

from application.executor.cancellation import CancelSignal
from application.handlers.feedback_handler import ShowDialogHandler, ShowToastHandler
from application.ports.feedback import DialogPort
from application.services.execution_deps import ExecutionDeps
from application.settings import EngineSettings
from fakes import RecordingLogger, make_context, make_executor, run


class NeverAnsweringDialogs(DialogPort):
    async def alert(self, request):
        await asyncio.sleep(5)

    async def confirm(self, request):
        await asyncio.sleep(5)
        return True


class TestShowToastHandler:
    def test_uses_default_duration(self):
        ctx = make_context()

        result = run(ShowToastHandler().handle({"message": "Saved", "variant": "success"}, ctx, ExecutionDeps(logger=RecordingLogger())))

        assert result.data == {"message": "Saved", "variant": "success"}
        assert ctx.toast.toasts == [("Saved", "success", 5000)]

    def test_explicit_and_configured_duration(self):
        ctx = make_context()
        deps = ExecutionDeps(logger=RecordingLogger(), settings=EngineSettings(default_toast_duration_ms=3000))

        run(ShowToastHandler().handle({"message": "a"}, ctx, deps))
        run(ShowToastHandler().handle({"message": "b", "duration": 100}, ctx, deps))

        assert ctx.toast.toasts == [("a", "info", 3000), ("b", "info", 100.0)]

    def test_missing_message(self):
        result = run(ShowToastHandler().handle({}, make_context(), ExecutionDeps(logger=RecordingLogger())))

        assert result.error.code == "SHOW_TOAST_ERROR"


class TestShowDialogHandler:
    def test_confirm_reports_choice(self):
        ctx = make_context(dialog_answers=[False])
        action = {"type": "showDialog", "params": {"title": "Delete?", "message": "Sure?", "variant": "confirm"}}

        result = run(make_executor().execute(action, ctx))

        assert result.success is True
        assert result.data == {"confirmed": False}

    def test_alert_is_confirmed(self):
        ctx = make_context()
        action = {"type": "showDialog", "params": {"title": "Hi", "message": "There"}}

        result = run(make_executor().execute(action, ctx))

        assert result.data == {"confirmed": True}
        assert ctx.dialogs.recorder.of("dialog")[0]["kind"] == "alert"

    def test_runs_follow_up_for_choice(self):
        ctx = make_context(dialog_answers=[True])
        action = {
            "type": "showDialog",
            "params": {
                "title": "Delete?",
                "message": "Delete {{pageState.name}}?",
                "variant": "confirm",
                "onConfirm": {"type": "setState", "params": {"path": "deleted", "value": "{{pageState.name}}"}},
                "onCancel": {"type": "setState", "params": {"path": "deleted", "value": False}},
            },
        }
        ctx.page_state["name"] = "row-1"

        result = run(make_executor().execute(action, ctx))

        assert result.success is True
        assert result.data["followUp"].success is True
        assert ctx.page_state["deleted"] == "row-1"
        assert ctx.dialogs.recorder.of("dialog")[0]["message"] == "Delete row-1?"

    def test_cancel_while_waiting_for_user(self):
        ctx = make_context()
        ctx.dialogs = NeverAnsweringDialogs()
        deps = ExecutionDeps(logger=RecordingLogger())

        async def scenario():
            signal = CancelSignal()
            asyncio.get_running_loop().call_later(0.01, signal.abort, "closed")
            return await ShowDialogHandler().handle(
                {"title": "t", "message": "m", "variant": "confirm"}, ctx, deps, signal
            )

        result = run(scenario())

        assert result.cancelled is True
        assert result.error.message == "closed"
