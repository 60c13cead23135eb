# application/services/visibility.py
"""
Conditional visibility for widgets.

A condition is ``None`` (visible), a bool, an expression string or a
VisibilityCondition combining an expression with required permissions and
roles. The context is a plain mapping: ``formData``, ``pageState``,
``permissions``, ``roles`` and whatever else the expression references.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union

from application.services.expression_evaluator import ExpressionEvaluator, default_evaluator
from domain.expressions.dependencies import extract_field_dependencies


@dataclass(frozen=True)
class VisibilityCondition:
    condition: Union[str, bool, None] = None
    dependencies: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)
    roles: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VisibilityCondition":
        return cls(
            condition=data.get("condition"),
            dependencies=list(data.get("dependencies") or []),
            permissions=list(data.get("permissions") or []),
            roles=list(data.get("roles") or []),
        )


ConditionLike = Union[VisibilityCondition, Mapping[str, Any], str, bool, None]


def _as_condition(condition: ConditionLike) -> Union[VisibilityCondition, str, bool, None]:
    if isinstance(condition, Mapping):
        return VisibilityCondition.from_dict(condition)
    return condition


def evaluate_visibility(
    condition: ConditionLike,
    context: Optional[Mapping[str, Any]] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> bool:
    context = context or {}
    condition = _as_condition(condition)

    if condition is None:
        return True
    if isinstance(condition, bool):
        return condition
    if isinstance(condition, str):
        return evaluate_expression(condition, context, evaluator)

    held_permissions = set(context.get("permissions") or [])
    if any(p not in held_permissions for p in condition.permissions):
        return False

    held_roles = set(context.get("roles") or [])
    if any(r not in held_roles for r in condition.roles):
        return False

    if condition.condition is not None:
        return evaluate_visibility(condition.condition, context, evaluator)
    return True


def evaluate_expression(
    expression: str,
    context: Mapping[str, Any],
    evaluator: Optional[ExpressionEvaluator] = None,
) -> bool:
    return (evaluator or default_evaluator()).evaluate_condition(expression, context)


def get_visibility_dependencies(condition: ConditionLike) -> List[str]:
    condition = _as_condition(condition)
    if not condition or isinstance(condition, bool):
        return []
    if isinstance(condition, str):
        return extract_field_dependencies(condition)
    if condition.dependencies:
        return list(condition.dependencies)
    return extract_field_dependencies(condition.condition)


def evaluate_multiple_conditions(
    conditions: Iterable[ConditionLike],
    context: Mapping[str, Any],
    evaluator: Optional[ExpressionEvaluator] = None,
) -> bool:
    return all(evaluate_visibility(c, context, evaluator) for c in conditions)


def evaluate_any_condition(
    conditions: Iterable[ConditionLike],
    context: Mapping[str, Any],
    evaluator: Optional[ExpressionEvaluator] = None,
) -> bool:
    return any(evaluate_visibility(c, context, evaluator) for c in conditions)
