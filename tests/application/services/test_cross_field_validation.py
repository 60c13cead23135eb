# tests/application/services/test_cross_field_validation.py
from datetime import date

from application.services.cross_field_validation import (
    ValidationResult,
    compare_dates,
    create_cross_field_rule,
    execute_cross_field_validation,
    get_cross_field_dependencies,
    validate_after_date,
    validate_all_or_none,
    validate_at_least_one,
    validate_before_date,
    validate_conditional_required,
    validate_date_range,
    validate_field_match,
    validate_greater_than,
    validate_less_than,
    validate_password_confirmation,
    validate_sum,
)


class TestValidateDateRange:
    def test_end_before_start_fails(self):
        rule = validate_date_range("end", "start")
        form = {"start": "2024-12-31", "end": "2024-01-01"}

        assert rule.validate(form["end"], form) == "End date must be after start date"

    def test_end_after_start_passes(self):
        rule = validate_date_range("end", "start")
        form = {"start": "2024-01-01", "end": "2024-12-31"}

        assert rule.validate(form["end"], form) is True

    def test_same_day_fails_and_empty_skips(self):
        rule = validate_date_range("end", "start", message="bad range")

        assert rule.validate("2024-01-01", {"start": "2024-01-01"}) == "bad range"
        assert rule.validate("", {"start": "2024-01-01"}) is True
        assert rule.dependencies == ["start"]


def test_compare_dates_handles_mixed_inputs():
    assert compare_dates(date(2024, 1, 2), "2024-01-01T00:00:00Z") == 86400
    assert compare_dates("not a date", "2024-01-01") == 0


def test_after_and_before():
    form = {"start": "2024-05-01"}

    assert validate_after_date("2024-06-01", "start", form).valid is True
    assert validate_after_date("2024-04-01", "start", form) == ValidationResult(False, "Must be after start")
    assert validate_before_date("2024-04-01", "start", form).valid is True
    assert validate_before_date("2024-06-01", "start", form).valid is False


def test_greater_and_less_than():
    form = {"min": "10"}

    assert validate_greater_than(11, "min", form).valid is True
    assert validate_greater_than(10, "min", form).error == "Must be greater than min"
    assert validate_less_than(9, "min", form).valid is True
    assert validate_less_than(5, "missing", form).valid is True


def test_field_match_and_password_confirmation():
    form = {"password": "s3cret"}

    assert validate_field_match("s3cret", "password", form).valid is True
    assert validate_password_confirmation("other", "password", form) == ValidationResult(False, "Passwords must match")


def test_at_least_one_and_all_or_none():
    assert validate_at_least_one(["phone", "email"], {"email": "a@b"}).valid is True
    assert validate_at_least_one(["phone", "email"], {"phone": ""}).valid is False

    assert validate_all_or_none(["a", "b"], {}).valid is True
    assert validate_all_or_none(["a", "b"], {"a": 1, "b": 2}).valid is True
    assert validate_all_or_none(["a", "b"], {"a": 1}).valid is False


def test_conditional_required():
    form = {"contact": "email"}

    assert validate_conditional_required("", "contact", "email", form).error == "This field is required"
    assert validate_conditional_required("", "contact", "phone", form).valid is True


def test_sum_tolerates_rounding_error():
    form = {"a": 0.1, "b": 0.2}

    assert validate_sum(0.3, ["a", "b"], form).valid is True
    assert validate_sum("0.305", ["a", "b"], form).valid is True
    assert validate_sum(0.4, ["a", "b"], form).valid is False


def test_sum_treats_missing_total_as_zero():
    assert validate_sum(None, ["a", "b"], {"a": 0, "b": None}).valid is True

    result = validate_sum(None, ["a", "b"], {"a": 2, "b": 3})

    assert result.valid is False
    assert result.error == "Must equal the sum of a, b (5)"
    # 数値にならない値は検証対象外
    assert validate_sum("abc", ["a"], {"a": 2}).valid is True


class TestExecuteCrossFieldValidation:
    def test_returns_first_failure_in_declared_order(self):
        calls = []

        def first(value, form):
            calls.append("first")
            return "first failed"

        def second(value, form):
            calls.append("second")
            return "second failed"

        rules = [create_cross_field_rule(["a"], first), create_cross_field_rule(["b"], second)]

        result = execute_cross_field_validation("x", 1, rules, {})

        assert result == ValidationResult(False, "first failed")
        assert calls == ["first"]

    def test_false_uses_rule_message(self):
        rule = create_cross_field_rule(["a"], lambda value, form: False, message="nope")

        assert execute_cross_field_validation("x", 1, [rule], {}).error == "nope"

    def test_all_passing(self):
        rule = create_cross_field_rule(["a"], lambda value, form: True)

        assert execute_cross_field_validation("x", 1, [rule], {}).valid is True


def test_get_cross_field_dependencies_deduplicates():
    rules = [validate_date_range("end", "start"), create_cross_field_rule(["start", "other"], lambda v, f: True)]

    assert get_cross_field_dependencies(rules) == ["start", "other"]
