# application/services/cross_field_validation.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from domain.expressions.coercion import format_number, is_number, to_number

ValidateFn = Callable[[Any, Mapping[str, Any]], Union[bool, str]]


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class CrossFieldValidationRule:
    """validate(value, form_data) は True かエラーメッセージを返す"""

    dependencies: List[str]
    validate: ValidateFn
    message: Optional[str] = None


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif is_number(value):
        if not math.isfinite(value):
            return None
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc).replace(tzinfo=None)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def compare_dates(left: Any, right: Any) -> float:
    """left - right in seconds; 0 when either side is not a date."""
    d1, d2 = _to_datetime(left), _to_datetime(right)
    if d1 is None or d2 is None:
        return 0
    return (d1 - d2).total_seconds()


def validate_date_range(end_date_field: str, start_date_field: str, message: Optional[str] = None) -> CrossFieldValidationRule:
    def _validate(end_value: Any, form_data: Mapping[str, Any]) -> Union[bool, str]:
        start_value = form_data.get(start_date_field)
        # どちらかが空なら検証しない
        if not end_value or not start_value:
            return True
        if compare_dates(end_value, start_value) <= 0:
            return message or "End date must be after start date"
        return True

    return CrossFieldValidationRule(dependencies=[start_date_field], validate=_validate, message=message)


def validate_after_date(
    value: Any, other_field: str, form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    other = form_data.get(other_field)
    if not value or not other:
        return ValidationResult(True)
    if compare_dates(value, other) <= 0:
        return ValidationResult(False, message or f"Must be after {other_field}")
    return ValidationResult(True)


def validate_before_date(
    value: Any, other_field: str, form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    other = form_data.get(other_field)
    if not value or not other:
        return ValidationResult(True)
    if compare_dates(value, other) >= 0:
        return ValidationResult(False, message or f"Must be before {other_field}")
    return ValidationResult(True)


def _numbers(value: Any, other: Any) -> Optional[tuple]:
    if value is None or other is None:
        return None
    a, b = to_number(value), to_number(other)
    if math.isnan(a) or math.isnan(b):
        return None
    return a, b


def validate_greater_than(
    value: Any, other_field: str, form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    pair = _numbers(value, form_data.get(other_field))
    if pair is not None and pair[0] <= pair[1]:
        return ValidationResult(False, message or f"Must be greater than {other_field}")
    return ValidationResult(True)


def validate_less_than(
    value: Any, other_field: str, form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    pair = _numbers(value, form_data.get(other_field))
    if pair is not None and pair[0] >= pair[1]:
        return ValidationResult(False, message or f"Must be less than {other_field}")
    return ValidationResult(True)


def validate_field_match(
    value: Any, other_field: str, form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    if value != form_data.get(other_field):
        return ValidationResult(False, message or f"Must match {other_field}")
    return ValidationResult(True)


def validate_password_confirmation(
    confirm_value: Any, password_field: str, form_data: Mapping[str, Any]
) -> ValidationResult:
    return validate_field_match(confirm_value, password_field, form_data, "Passwords must match")


def validate_at_least_one(
    fields: Sequence[str], form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    if not any(not _is_empty(form_data.get(f)) for f in fields):
        return ValidationResult(False, message or f"At least one of {', '.join(fields)} is required")
    return ValidationResult(True)


def validate_all_or_none(
    fields: Sequence[str], form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    filled = [f for f in fields if not _is_empty(form_data.get(f))]
    if 0 < len(filled) < len(fields):
        return ValidationResult(False, message or f"Either fill all or none of {', '.join(fields)}")
    return ValidationResult(True)


def validate_conditional_required(
    value: Any,
    condition_field: str,
    condition_value: Any,
    form_data: Mapping[str, Any],
    message: Optional[str] = None,
) -> ValidationResult:
    if form_data.get(condition_field) == condition_value and _is_empty(value):
        return ValidationResult(False, message or "This field is required")
    return ValidationResult(True)


SUM_EPSILON = 0.01


def validate_sum(
    value: Any, fields: Sequence[str], form_data: Mapping[str, Any], message: Optional[str] = None
) -> ValidationResult:
    # None は null 扱い（0 として合計と比較する）
    expected = to_number(value)
    if math.isnan(expected):
        return ValidationResult(True)

    total = 0.0
    for f in fields:
        n = to_number(form_data.get(f))
        total += 0.0 if math.isnan(n) else n

    if abs(expected - total) > SUM_EPSILON:
        return ValidationResult(
            False, message or f"Must equal the sum of {', '.join(fields)} ({format_number(total)})"
        )
    return ValidationResult(True)


def create_cross_field_rule(
    dependencies: Sequence[str], validate: ValidateFn, message: Optional[str] = None
) -> CrossFieldValidationRule:
    def _validate(value: Any, form_data: Mapping[str, Any]) -> Union[bool, str]:
        result = validate(value, form_data)
        if result is False:
            return message or "Validation failed"
        return result

    return CrossFieldValidationRule(dependencies=list(dependencies), validate=_validate, message=message)


def get_cross_field_dependencies(rules: Sequence[CrossFieldValidationRule]) -> List[str]:
    seen: Dict[str, None] = {}
    for rule in rules:
        for dep in rule.dependencies:
            seen.setdefault(dep, None)
    return list(seen)


def execute_cross_field_validation(
    field_name: str,
    value: Any,
    rules: Sequence[CrossFieldValidationRule],
    form_data: Mapping[str, Any],
) -> ValidationResult:
    """宣言順に実行し、最初の失敗を返す"""
    for rule in rules:
        result = rule.validate(value, form_data)
        if result is not True:
            return ValidationResult(False, str(result))
    return ValidationResult(True)
