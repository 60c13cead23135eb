# tests/application/services/test_expression_evaluator.py
import math

import pytest

from application.services.expression_evaluator import ExpressionEvaluator, default_evaluator
from domain.exceptions import ExpressionError
from fakes import RecordingLogger


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def evaluator(logger):
    return ExpressionEvaluator(logger)


CTX = {"formData": {"age": 20, "name": "O'Brien"}, "pageState": {"items": [1, 2, 3]}}


class TestEvaluateCondition:
    def test_truthy_expression(self, evaluator):
        assert evaluator.evaluate_condition("{{formData.age}} >= 18", CTX) is True

    def test_empty_is_true(self, evaluator):
        assert evaluator.evaluate_condition("", CTX) is True
        assert evaluator.evaluate_condition(None, CTX) is True
        assert evaluator.evaluate_condition("   ", CTX) is True

    def test_boolean_passes_through(self, evaluator):
        assert evaluator.evaluate_condition(False, CTX) is False

    def test_string_values_cannot_change_expression_structure(self, evaluator):
        assert evaluator.evaluate_condition("{{formData.name}} === \"O'Brien\"", CTX) is True

    def test_invalid_expression_is_false_and_logged(self, evaluator, logger):
        assert evaluator.evaluate_condition("{{formData.age}} >", CTX) is False

        level, event, fields = logger.records[0]
        assert (level, event, fields["mode"]) == ("warning", "expression.rejected", "condition")


class TestEvaluateValue:
    def test_missing_references_are_zero(self, evaluator):
        assert evaluator.evaluate_value("{{formData.qty}} * 2 + {{formData.age}}", CTX) == 20

    def test_empty_is_none(self, evaluator):
        assert evaluator.evaluate_value("", CTX) is None

    def test_failure_is_none(self, evaluator):
        assert evaluator.evaluate_value("constructor", CTX) is None

    def test_division_by_zero_is_not_guarded(self, evaluator):
        assert evaluator.evaluate_value("{{formData.age}} / 0", CTX) == math.inf


class TestEvaluateSafeExpression:
    @pytest.mark.parametrize(
        "expression",
        ['eval("x")', "window", "document.cookie", "{{a}}.__proto__", "require('x')", "globalThis"],
    )
    def test_never_executes_and_returns_false(self, evaluator, expression):
        assert evaluator.evaluate_safe_expression(expression) is False

    def test_plain_arithmetic(self, evaluator):
        assert evaluator.evaluate_safe_expression("1 + 1 === 2") is True

    def test_non_string_is_false(self, evaluator):
        assert evaluator.evaluate_safe_expression(None) is False


def test_evaluate_raises_for_invalid_input(evaluator):
    with pytest.raises(ExpressionError):
        evaluator.evaluate("1 +", CTX)
    with pytest.raises(ExpressionError):
        evaluator.evaluate(123, CTX)


def test_overlong_expression_is_rejected(logger):
    evaluator = ExpressionEvaluator(logger, max_length=10)

    assert evaluator.evaluate_condition("1 + 1 + 1 + 1 === 4", {}) is False
    assert "longer than 10" in logger.records[0][2]["error"]


def test_resolve_template_variables(evaluator):
    text = evaluator.resolve_template_variables("{{formData.name}} + {{formData.none}}", CTX)
    assert text == '"O\'Brien" + null'

    zeroed = evaluator.resolve_template_variables("{{formData.none}} + 1", CTX, missing_as_zero=True)
    assert zeroed == "0 + 1"


def test_default_evaluator_is_shared():
    assert default_evaluator() is default_evaluator()
