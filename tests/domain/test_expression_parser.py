# tests/domain/test_expression_parser.py
import pytest

from domain.exceptions import ExpressionError
from domain.expressions.nodes import Binary, Conditional, Literal, Logical, Member, Reference, Unary
from domain.expressions.parser import parse_expression
from domain.expressions.tokens import IDENT, NUMBER, OP, STRING, TEMPLATE, tokenize


class TestTokenize:
    def test_template_reference_is_single_token(self):
        tokens = tokenize("{{ formData.age }} >= 18")

        assert [(t.kind, t.value) for t in tokens[:3]] == [
            (TEMPLATE, "formData.age"),
            (OP, ">="),
            (NUMBER, "18"),
        ]

    def test_string_escapes(self):
        tokens = tokenize(r"'it\'s' + " + '"a\\nb"' + r" + 'A'")

        strings = [t.value for t in tokens if t.kind == STRING]
        assert strings == ["it's", "a\nb", "A"]

    def test_identifier_token(self):
        tokens = tokenize("true")
        assert tokens[0].kind == IDENT

    def test_unknown_character_raises(self):
        with pytest.raises(ExpressionError):
            tokenize("1 # 2")

    def test_empty_template_raises(self):
        with pytest.raises(ExpressionError):
            tokenize("{{ }}")


class TestParseExpression:
    def test_precedence_multiplication_binds_tighter(self):
        node = parse_expression("1 + 2 * 3")

        assert isinstance(node, Binary)
        assert node.op == "+"
        assert isinstance(node.right, Binary)
        assert node.right.op == "*"

    def test_logical_and_ternary(self):
        node = parse_expression("{{a}} && {{b}} ? 'x' : 'y'")

        assert isinstance(node, Conditional)
        assert isinstance(node.test, Logical)
        assert node.consequent == Literal("x")

    def test_nested_ternary_is_right_associative(self):
        node = parse_expression("{{a}} ? 1 : {{b}} ? 2 : 3")

        assert isinstance(node.alternate, Conditional)

    def test_reference_and_member_access(self):
        node = parse_expression("{{formData.items}}.length")

        assert isinstance(node, Member)
        assert node.obj == Reference("formData.items")
        assert node.name == "length"

    def test_unary_not(self):
        node = parse_expression("!{{flag}}")
        assert isinstance(node, Unary)
        assert node.op == "!"

    def test_keywords(self):
        assert parse_expression("null") == Literal(None)
        assert parse_expression("true") == Literal(True)

    def test_result_is_cached(self):
        assert parse_expression("1 + 1") is parse_expression("1 + 1")

    @pytest.mark.parametrize(
        "source",
        [
            'eval("x")',
            "window.location",
            "document",
            "process.exit",
            "require('fs')",
            "{{a}}.constructor",
            "{{a}}.__proto__",
            "{{a}}.__class__",
            "Function('return 1')",
        ],
    )
    def test_rejects_identifiers_calls_and_blocked_members(self, source):
        with pytest.raises(ExpressionError):
            parse_expression(source)

    def test_rejects_call_on_value(self):
        with pytest.raises(ExpressionError, match="function calls"):
            parse_expression("{{fn}}(1)")

    def test_rejects_trailing_tokens(self):
        with pytest.raises(ExpressionError):
            parse_expression("1 2")

    def test_rejects_unbalanced_paren(self):
        with pytest.raises(ExpressionError):
            parse_expression("(1 + 2")
