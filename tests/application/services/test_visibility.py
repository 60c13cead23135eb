# tests/application/services/test_visibility.py
from application.services.visibility import (
    VisibilityCondition,
    evaluate_any_condition,
    evaluate_expression,
    evaluate_multiple_conditions,
    evaluate_visibility,
    get_visibility_dependencies,
)

CTX = {
    "formData": {"country": "JP", "age": 20},
    "permissions": ["orders.read", "orders.write"],
    "roles": ["admin"],
}


def test_absent_condition_is_visible():
    assert evaluate_visibility(None, CTX) is True
    assert evaluate_visibility("", CTX) is True


def test_boolean_condition():
    assert evaluate_visibility(False, CTX) is False


def test_string_condition():
    assert evaluate_visibility("{{formData.country}} === 'JP'", CTX) is True
    assert evaluate_visibility("{{formData.country}} === 'US'", CTX) is False


def test_invalid_expression_hides_widget():
    assert evaluate_visibility("{{formData.age}} >>", CTX) is False


def test_permissions_and_roles_must_all_be_held():
    assert evaluate_visibility(VisibilityCondition(permissions=["orders.read", "orders.write"]), CTX) is True
    assert evaluate_visibility(VisibilityCondition(permissions=["orders.read", "orders.delete"]), CTX) is False
    assert evaluate_visibility({"roles": ["admin", "owner"]}, CTX) is False


def test_permission_check_is_anded_with_expression():
    condition = {"condition": "{{formData.age}} >= 18", "permissions": ["orders.write"]}

    assert evaluate_visibility(condition, CTX) is True
    assert evaluate_visibility(condition, {**CTX, "formData": {"age": 10}}) is False
    assert evaluate_visibility(condition, {**CTX, "permissions": []}) is False


def test_evaluate_expression():
    assert evaluate_expression("{{formData.age}} > 18", CTX) is True


def test_dependencies_explicit_win_over_extracted():
    assert get_visibility_dependencies({"condition": "{{formData.a}}", "dependencies": ["x"]}) == ["x"]
    assert get_visibility_dependencies({"condition": "{{formData.a}} && {{formData.b}}"}) == ["a", "b"]
    assert get_visibility_dependencies("{{formData.c}}") == ["c"]
    assert get_visibility_dependencies(True) == []
    assert get_visibility_dependencies(None) == []


def test_multiple_and_any():
    conditions = ["{{formData.age}} > 18", "{{formData.country}} === 'US'"]

    assert evaluate_multiple_conditions(conditions, CTX) is False
    assert evaluate_any_condition(conditions, CTX) is True
    assert evaluate_multiple_conditions([], CTX) is True
