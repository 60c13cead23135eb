# application/services/computed_fields.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from application.services.expression_evaluator import ExpressionEvaluator, default_evaluator
from domain.expressions.coercion import encode_literal, format_number, is_number, normalize_number
from domain.expressions.dependencies import extract_field_dependencies

Expression = Union[str, Callable[[Dict[str, Any]], Any]]
Formatter = Callable[[Any], str]


@dataclass(frozen=True)
class ComputedFieldConfig:
    expression: Expression
    dependencies: List[str] = field(default_factory=list)
    format: Optional[Formatter] = None
    precision: Optional[int] = None
    reactive: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComputedFieldConfig":
        return cls(
            expression=data.get("expression", ""),
            dependencies=list(data.get("dependencies") or []),
            format=data.get("format"),
            precision=data.get("precision"),
            reactive=data.get("reactive", True) is not False,
        )


ConfigLike = Union[ComputedFieldConfig, Mapping[str, Any]]


def _as_config(config: ConfigLike) -> ComputedFieldConfig:
    if isinstance(config, ComputedFieldConfig):
        return config
    return ComputedFieldConfig.from_dict(config)


def to_fixed(value: float, precision: int) -> str:
    """Number.prototype.toFixed: exact binary value, ties away from zero."""
    if not math.isfinite(value):
        return format_number(value)
    quantum = Decimal(1).scaleb(-precision)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_computed_value(value: Any, format: Optional[Formatter] = None, precision: Optional[int] = None) -> Any:
    if format is not None:
        return format(value)
    if is_number(value) and precision is not None:
        if not math.isfinite(value):
            return value
        return normalize_number(float(to_fixed(float(value), precision)))
    return value


def resolve_computed_expression(
    expression: str, context: Mapping[str, Any], evaluator: Optional[ExpressionEvaluator] = None
) -> str:
    return (evaluator or default_evaluator()).resolve_template_variables(expression, context, missing_as_zero=True)


def evaluate_computed_expression(expression: str, evaluator: Optional[ExpressionEvaluator] = None) -> Any:
    """Evaluate an already-resolved expression; None on failure."""
    return (evaluator or default_evaluator()).evaluate_value(expression, {})


def evaluate_computed_field(
    config: ConfigLike, context: Mapping[str, Any], evaluator: Optional[ExpressionEvaluator] = None
) -> Any:
    cfg = _as_config(config)
    if callable(cfg.expression):
        result = cfg.expression(context.get("formData") or {})
    else:
        result = (evaluator or default_evaluator()).evaluate_value(cfg.expression, context)
    return format_computed_value(result, cfg.format, cfg.precision)


def get_computed_dependencies(expression: Expression) -> List[str]:
    return extract_field_dependencies(expression)


def get_affected_computed_fields(field_name: str, computed_fields: Mapping[str, ConfigLike]) -> List[str]:
    affected: List[str] = []
    for name, config in computed_fields.items():
        cfg = _as_config(config)
        if not cfg.reactive:
            continue
        if field_name in cfg.dependencies or field_name in get_computed_dependencies(cfg.expression):
            affected.append(name)
    return affected


def update_computed_fields(
    form_data: Dict[str, Any],
    computed_fields: Mapping[str, ConfigLike],
    context: Optional[Mapping[str, Any]] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> Dict[str, Any]:
    return _recompute(form_data, list(computed_fields), computed_fields, context, evaluator)


def update_affected_computed_fields(
    field_name: str,
    form_data: Dict[str, Any],
    computed_fields: Mapping[str, ConfigLike],
    context: Optional[Mapping[str, Any]] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> Dict[str, Any]:
    """
    field_name に依存する計算フィールドだけ再計算する。
    影響がなければ form_data をそのまま（同じオブジェクトで）返す。
    """
    affected = get_affected_computed_fields(field_name, computed_fields)
    if not affected:
        return form_data
    return _recompute(form_data, affected, computed_fields, context, evaluator)


def _recompute(
    form_data: Dict[str, Any],
    names: Sequence[str],
    computed_fields: Mapping[str, ConfigLike],
    context: Optional[Mapping[str, Any]],
    evaluator: Optional[ExpressionEvaluator],
) -> Dict[str, Any]:
    updated = dict(form_data)
    # 後ろのフィールドは前で計算した値を参照できる
    computed_context = dict(context or {})
    computed_context["formData"] = updated
    for name in names:
        updated[name] = evaluate_computed_field(computed_fields[name], computed_context, evaluator)
    return updated


# ---------------------------------------------------------------- helpers
def _ref(name: str) -> str:
    return "{{formData.%s}}" % name


def create_sum_field(fields: Sequence[str], precision: int = 2) -> ComputedFieldConfig:
    return ComputedFieldConfig(
        expression=" + ".join(_ref(f) for f in fields),
        dependencies=list(fields),
        precision=precision,
    )


def create_product_field(field1: str, field2: str, precision: int = 2) -> ComputedFieldConfig:
    return ComputedFieldConfig(
        expression=f"{_ref(field1)} * {_ref(field2)}",
        dependencies=[field1, field2],
        precision=precision,
    )


def create_percentage_field(value_field: str, total_field: str, precision: int = 2) -> ComputedFieldConfig:
    def _format(value: Any) -> str:
        if is_number(value):
            return f"{to_fixed(float(value), precision)}%"
        return "0%"

    return ComputedFieldConfig(
        expression=f"({_ref(value_field)} / {_ref(total_field)}) * 100",
        dependencies=[value_field, total_field],
        precision=precision,
        format=_format,
    )


def create_concat_field(fields: Sequence[str], separator: str = " ") -> ComputedFieldConfig:
    joiner = f" + {encode_literal(separator)} + "
    return ComputedFieldConfig(
        expression=joiner.join(_ref(f) for f in fields),
        dependencies=list(fields),
    )


def create_conditional_field(
    condition_field: str, condition_value: Any, true_value: Any, false_value: Any
) -> ComputedFieldConfig:
    return ComputedFieldConfig(
        expression=(
            f"{_ref(condition_field)} === {encode_literal(condition_value)}"
            f" ? {encode_literal(true_value)} : {encode_literal(false_value)}"
        ),
        dependencies=[condition_field],
    )
