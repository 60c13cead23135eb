# application/services/expression_evaluator.py
from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Optional

from application.ports.logger import LoggerPort
from application.ports.loguru_logger import LoguruLogger
from domain.exceptions import ExpressionError
from domain.expressions.coercion import encode_literal, is_truthy
from domain.expressions.dependencies import TEMPLATE_PATTERN
from domain.expressions.interpreter import evaluate_node
from domain.expressions.parser import parse_expression
from domain.expressions.paths import get_nested_value

# 評価中に起こりうる例外（すべて安全な既定値に変換する）
_EVAL_ERRORS = (ExpressionError, ArithmeticError, RecursionError, ValueError, TypeError)


class ExpressionEvaluator:
    """
    テンプレート付きの小さな式を評価する。

    {{path}} は参照ノードとしてパースされ、評価時にコンテキストから値を引く。
    値が式のソースに埋め込まれることはないので、値によって式の構造が変わることはない。

    公開メソッドのうち evaluate 以外は例外を投げない:
      - evaluate_condition: 空 => True、失敗 => False
      - evaluate_value:     空 => None、失敗 => None（未定義参照は 0）
      - evaluate_safe_expression: テンプレートなしの式、失敗 => False
    """

    def __init__(self, logger: Optional[LoggerPort] = None, max_length: int = 2000):
        self._logger = logger or LoguruLogger()
        self._max_length = max_length

    def evaluate(self, expression: str, context: Mapping[str, Any], missing_as_zero: bool = False) -> Any:
        if not isinstance(expression, str):
            raise ExpressionError(f"expression must be a string, got {type(expression).__name__}")
        if len(expression) > self._max_length:
            raise ExpressionError(
                f"expression is longer than {self._max_length} characters", expression[:80]
            )
        node = parse_expression(expression)
        return evaluate_node(node, context, missing_as_zero=missing_as_zero)

    def evaluate_condition(self, expression: Any, context: Mapping[str, Any]) -> bool:
        if isinstance(expression, bool):
            return expression
        if expression is None or (isinstance(expression, str) and not expression.strip()):
            return True
        try:
            return is_truthy(self.evaluate(expression, context))
        except _EVAL_ERRORS as e:
            self._reject(expression, e, mode="condition")
            return False

    def evaluate_value(self, expression: Any, context: Mapping[str, Any]) -> Any:
        if expression is None or (isinstance(expression, str) and not expression.strip()):
            return None
        try:
            return self.evaluate(expression, context, missing_as_zero=True)
        except _EVAL_ERRORS as e:
            self._reject(expression, e, mode="value")
            return None

    def evaluate_safe_expression(self, expression: Any) -> bool:
        if not isinstance(expression, str) or not expression.strip():
            return False
        try:
            return is_truthy(self.evaluate(expression, {}))
        except _EVAL_ERRORS as e:
            self._reject(expression, e, mode="safe")
            return False

    def resolve_template_variables(
        self, expression: str, context: Mapping[str, Any], missing_as_zero: bool = False
    ) -> str:
        """{{path}} を値のリテラル表現に置き換えた文字列（ログ・表示用）"""

        def _replace(m) -> str:
            value = get_nested_value(context, m.group(1).strip())
            if value is None and missing_as_zero:
                return "0"
            return encode_literal(value)

        return TEMPLATE_PATTERN.sub(_replace, expression)

    def _reject(self, expression: Any, error: BaseException, mode: str) -> None:
        self._logger.warning(
            "expression.rejected",
            mode=mode,
            expression=str(expression)[:200],
            error=f"{type(error).__name__}: {error}",
        )


@lru_cache(maxsize=None)
def default_evaluator() -> ExpressionEvaluator:
    return ExpressionEvaluator()
