from domain.expressions.dependencies import extract_field_dependencies, extract_template_paths
from domain.expressions.interpreter import Interpreter, evaluate_node
from domain.expressions.parser import parse_expression
from domain.expressions.paths import get_nested_value, has_nested_value, set_nested_value, split_path

__all__ = [
    "Interpreter",
    "evaluate_node",
    "extract_field_dependencies",
    "extract_template_paths",
    "get_nested_value",
    "has_nested_value",
    "parse_expression",
    "set_nested_value",
    "split_path",
]
