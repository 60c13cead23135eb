# tests/domain/test_coercion.py
import math

import pytest

from domain.expressions.coercion import (
    add,
    encode_literal,
    format_number,
    is_truthy,
    loose_equals,
    normalize_number,
    strict_equals,
    to_js_string,
    to_number,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 0.0),
        (True, 1.0),
        ("", 0.0),
        (" 42 ", 42.0),
        ("0x10", 16.0),
        ("1e3", 1000.0),
        ([], 0.0),
        ([5], 5.0),
    ],
)
def test_to_number(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize("value", ["abc", "inf", "nan", "1_000", {}])
def test_to_number_nan(value):
    assert math.isnan(to_number(value))


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "null"),
        (True, "true"),
        (1.0, "1"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1e21, "1e+21"),
        ([1, None, "a"], "1,,a"),
        ({"a": 1}, "[object Object]"),
    ],
)
def test_to_js_string(value, expected):
    assert to_js_string(value) == expected


def test_format_number_specials():
    assert format_number(math.nan) == "NaN"
    assert format_number(-math.inf) == "-Infinity"


@pytest.mark.parametrize("value", [None, False, 0, 0.0, "", math.nan])
def test_falsy_values(value):
    assert is_truthy(value) is False


@pytest.mark.parametrize("value", ["0", "false", [], {}, -1, 0.5])
def test_truthy_values(value):
    assert is_truthy(value) is True


def test_strict_equals_does_not_coerce():
    assert strict_equals(1, 1.0) is True
    assert strict_equals(1, "1") is False
    assert strict_equals(True, 1) is False
    assert strict_equals(None, None) is True


def test_loose_equals_coerces():
    assert loose_equals(1, "1") is True
    assert loose_equals(True, 1) is True
    assert loose_equals(None, 0) is False
    assert loose_equals("", 0) is True


def test_add_concatenates_when_either_side_is_string():
    assert add(1, "2") == "12"
    assert add(1, 2) == 3
    assert add(None, 1) == 1


def test_normalize_number():
    assert normalize_number(25.0) == 25
    assert isinstance(normalize_number(25.0), int)
    assert normalize_number(2.5) == 2.5


def test_encode_literal():
    assert encode_literal("a\"b") == '"a\\"b"'
    assert encode_literal(None) == "null"
    assert encode_literal([1, "x"]) == '[1, "x"]'
