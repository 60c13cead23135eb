# tests/application/handlers/test_state_handler.py
from application.handlers.state_handler import MergeStateHandler, ResetStateHandler, SetStateHandler
from application.services.execution_deps import ExecutionDeps
from fakes import RecordingLogger, make_context, run


def _deps():
    return ExecutionDeps(logger=RecordingLogger())


class TestSetStateHandler:
    def test_sets_path_with_merge(self):
        ctx = make_context(page_state={"filters": {"a": 1}})

        result = run(SetStateHandler().handle({"path": "filters", "value": {"b": 2}}, ctx, _deps()))

        assert result.success is True
        assert ctx.page_state == {"filters": {"a": 1, "b": 2}}

    def test_sets_path_without_merge(self):
        ctx = make_context(page_state={"filters": {"a": 1}})

        run(SetStateHandler().handle({"path": "filters", "value": {"b": 2}, "merge": False}, ctx, _deps()))

        assert ctx.page_state == {"filters": {"b": 2}}

    def test_without_path_replaces_whole_state_in_place(self):
        state = {"old": True}
        ctx = make_context(page_state=state)

        run(SetStateHandler().handle({"value": {"new": True}}, ctx, _deps()))

        assert state == {"new": True}
        assert ctx.page_state is state

    def test_missing_value_is_set_state_error(self):
        result = run(SetStateHandler().handle({"path": "x"}, make_context(), _deps()))

        assert result.error.code == "SET_STATE_ERROR"


class TestResetStateHandler:
    def test_resets_named_paths_to_initial_values(self):
        ctx = make_context(
            page_state={"a": 5, "b": {"c": 9}, "extra": 1},
            initial_page_state={"a": 1, "b": {"c": 2}},
        )

        run(ResetStateHandler().handle({"paths": ["a", "b.c", "extra"]}, ctx, _deps()))

        assert ctx.page_state == {"a": 1, "b": {"c": 2}, "extra": None}

    def test_resets_whole_state(self):
        initial = {"a": {"list": [1]}}
        ctx = make_context(page_state={"a": {"list": [1, 2]}, "b": 1}, initial_page_state=initial)

        run(ResetStateHandler().handle({}, ctx, _deps()))
        ctx.page_state["a"]["list"].append(3)

        assert initial == {"a": {"list": [1]}}

    def test_without_initial_state_clears(self):
        ctx = make_context(page_state={"a": 1})

        run(ResetStateHandler().handle({}, ctx, _deps()))

        assert ctx.page_state == {}


def test_merge_state_applies_each_update():
    ctx = make_context(page_state={"user": {"name": "A"}})

    result = run(
        MergeStateHandler().handle({"updates": {"user": {"age": 3}, "flags.ready": True}}, ctx, _deps())
    )

    assert result.success is True
    assert ctx.page_state == {"user": {"name": "A", "age": 3}, "flags": {"ready": True}}
