# domain/expressions/interpreter.py
from __future__ import annotations

from typing import Any, Mapping

from domain.expressions import coercion
from domain.expressions.nodes import (
    ArrayLiteral,
    Binary,
    Conditional,
    Index,
    Literal,
    Logical,
    Member,
    Node,
    Reference,
    Unary,
)
from domain.expressions.paths import get_nested_value


class Interpreter:
    """
    AST をコンテキストに対して評価する（コンテキストは読み取り専用）

    missing_as_zero=True のとき、見つからない参照は 0 として扱う（計算フィールド用）
    """

    def __init__(self, context: Mapping[str, Any], missing_as_zero: bool = False):
        self._context = context
        self._missing_as_zero = missing_as_zero

    def evaluate(self, node: Node) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Reference):
            value = get_nested_value(self._context, node.path)
            if value is None and self._missing_as_zero:
                return 0
            return value
        if isinstance(node, ArrayLiteral):
            return [self.evaluate(item) for item in node.items]
        if isinstance(node, Unary):
            return self._unary(node)
        if isinstance(node, Logical):
            left = self.evaluate(node.left)
            if node.op == "&&":
                return self.evaluate(node.right) if coercion.is_truthy(left) else left
            return left if coercion.is_truthy(left) else self.evaluate(node.right)
        if isinstance(node, Binary):
            return self._binary(node.op, self.evaluate(node.left), self.evaluate(node.right))
        if isinstance(node, Conditional):
            branch = node.consequent if coercion.is_truthy(self.evaluate(node.test)) else node.alternate
            return self.evaluate(branch)
        if isinstance(node, Member):
            return self._property(self.evaluate(node.obj), node.name)
        if isinstance(node, Index):
            return self._index(self.evaluate(node.obj), self.evaluate(node.index))
        raise TypeError(f"unsupported node: {type(node).__name__}")

    def _unary(self, node: Unary) -> Any:
        operand = self.evaluate(node.operand)
        if node.op == "!":
            return not coercion.is_truthy(operand)
        number = coercion.to_number(operand)
        if node.op == "-":
            return coercion.normalize_number(-number)
        return coercion.normalize_number(number)

    def _binary(self, op: str, left: Any, right: Any) -> Any:
        if op == "+":
            return coercion.add(left, right)
        if op in ("-", "*", "/", "%"):
            return coercion.arithmetic(op, left, right)
        if op in ("<", "<=", ">", ">="):
            return coercion.compare(op, left, right)
        if op == "===":
            return coercion.strict_equals(left, right)
        if op == "!==":
            return not coercion.strict_equals(left, right)
        if op == "==":
            return coercion.loose_equals(left, right)
        if op == "!=":
            return not coercion.loose_equals(left, right)
        raise TypeError(f"unsupported operator: {op}")

    def _property(self, obj: Any, name: str) -> Any:
        if isinstance(obj, (str, list, tuple)) and name == "length":
            return len(obj)
        if isinstance(obj, Mapping):
            return obj.get(name)
        return None

    def _index(self, obj: Any, key: Any) -> Any:
        if isinstance(obj, (list, tuple, str)):
            number = coercion.to_number(key)
            if number.is_integer() and 0 <= number < len(obj):
                return obj[int(number)]
            if key == "length":
                return len(obj)
            return None
        if isinstance(obj, Mapping):
            return obj.get(coercion.to_js_string(key))
        return None


def evaluate_node(node: Node, context: Mapping[str, Any], missing_as_zero: bool = False) -> Any:
    return Interpreter(context, missing_as_zero=missing_as_zero).evaluate(node)
