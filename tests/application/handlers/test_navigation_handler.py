# tests/application/handlers/test_navigation_handler.py
from application.action_context import ActionContext
from application.handlers.navigation_handler import GoBackHandler, NavigateHandler, ReloadHandler
from application.services.execution_deps import ExecutionDeps
from fakes import RecordingLogger, make_context, run


def _deps():
    return ExecutionDeps(logger=RecordingLogger())


class TestNavigateHandler:
    def test_navigates_through_router(self):
        ctx = make_context()

        result = run(NavigateHandler().handle({"to": "/users", "replace": True, "query": {"page": 2}}, ctx, _deps()))

        assert result.success is True
        assert result.data == {"path": "/users"}
        assert ctx.navigator.recorder.of("navigate") == [
            {"effect": "navigate", "path": "/users", "replace": True, "query": {"page": 2}}
        ]

    def test_external_url_bypasses_router(self):
        ctx = make_context()

        result = run(
            NavigateHandler().handle({"to": "https://example.com", "external": True, "openInNewTab": True}, ctx, _deps())
        )

        assert result.data == {"url": "https://example.com", "external": True}
        assert ctx.navigator.current_path is None
        assert ctx.browser.recorder.of("openUrl")[0]["newTab"] is True

    def test_missing_to_is_navigation_error(self):
        result = run(NavigateHandler().handle({}, make_context(), _deps()))

        assert result.success is False
        assert result.error.code == "NAVIGATION_ERROR"
        assert 'requires "to"' in result.error.message

    def test_missing_navigator_is_navigation_error(self):
        result = run(NavigateHandler().handle({"to": "/x"}, ActionContext(), _deps()))

        assert result.error.code == "NAVIGATION_ERROR"


class TestGoBackHandler:
    def test_uses_history_when_available(self):
        ctx = make_context(history_length=3)

        result = run(GoBackHandler().handle({"fallback": "/home"}, ctx, _deps()))

        assert result.data == {"method": "history"}
        assert ctx.browser.history_length() == 2

    def test_uses_fallback_without_history(self):
        ctx = make_context(history_length=1)

        result = run(GoBackHandler().handle({"fallback": "/home"}, ctx, _deps()))

        assert result.data == {"method": "fallback", "path": "/home"}
        assert ctx.navigator.current_path == "/home"

    def test_no_history_and_no_fallback_is_silent_success(self):
        ctx = make_context(history_length=1)

        result = run(GoBackHandler().handle({}, ctx, _deps()))

        assert result.success is True
        assert result.data == {"method": "none"}
        assert ctx.navigator.recorder.effects == []


class TestReloadHandler:
    def test_hard_reload_uses_browser(self):
        ctx = make_context()

        result = run(ReloadHandler().handle({"hard": True}, ctx, _deps()))

        assert result.data == {"hard": True}
        assert len(ctx.browser.recorder.of("reload")) == 1

    def test_soft_reload_renavigates_current_path(self):
        ctx = make_context(current_path="/orders", query_params={"tab": "open"})

        run(ReloadHandler().handle({}, ctx, _deps()))

        assert ctx.navigator.recorder.of("navigate") == [
            {"effect": "navigate", "path": "/orders", "replace": True, "query": {"tab": "open"}}
        ]
        assert ctx.browser.recorder.of("reload") == []
