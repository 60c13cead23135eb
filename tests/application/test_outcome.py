# tests/application/test_outcome.py
import pytest

from application.outcome import CANCELLED, ActionError, ActionResult, first_failure


class TestActionResult:
    def test_ok_result(self):
        result = ActionResult.ok({"a": 1})

        assert result.success is True
        assert result.error is None
        assert result.cancelled is False

    def test_failure_requires_message(self):
        with pytest.raises(ValueError):
            ActionResult(success=False)
        with pytest.raises(ValueError):
            ActionResult(success=False, error=ActionError(message=""))

    def test_failure_falls_back_to_default_message(self):
        result = ActionResult.failure("", code="X")
        assert result.error.message == "Action failed"

    def test_from_exception_uses_type_name_for_empty_message(self):
        result = ActionResult.from_exception(KeyError(), "HANDLER_ERROR")

        assert result.error.message == "KeyError"
        assert result.error.code == "HANDLER_ERROR"

    def test_cancelled_result(self):
        result = ActionResult.cancelled_result("user left")

        assert result.success is False
        assert result.cancelled is True
        assert result.error.code == CANCELLED
        assert result.error.message == "user left"

    def test_with_duration_keeps_flags(self):
        result = ActionResult.ok(skipped=True).with_duration(12.5)

        assert result.metadata.duration_ms == 12.5
        assert result.metadata.skipped is True

    def test_to_dict_uses_camel_case_and_nests_results(self):
        child = ActionResult.failure("bad", code="API_ERROR", status=422, field_errors={"name": ["required"]})
        parent = ActionResult(success=False, data={"results": [child]}, error=child.error)

        out = parent.to_dict()

        assert out["error"] == {
            "message": "bad",
            "code": "API_ERROR",
            "status": 422,
            "fieldErrors": {"name": ["required"]},
        }
        assert out["data"]["results"][0]["success"] is False
        assert "duration" in out["metadata"]

    def test_to_dict_stringifies_exception_cause(self):
        out = ActionResult.failure("boom", cause=RuntimeError("boom")).to_dict()
        assert out["error"]["cause"] == "RuntimeError: boom"


def test_first_failure():
    ok = ActionResult.ok()
    bad = ActionResult.failure("x")

    assert first_failure([ok, bad, ActionResult.failure("y")]) is bad
    assert first_failure([ok]) is None
