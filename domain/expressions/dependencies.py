# domain/expressions/dependencies.py
from __future__ import annotations

import re
from typing import Any, Dict, List

TEMPLATE_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")
FORM_FIELD_PATTERN = re.compile(r"\{\{\s*formData\.([^}.\s\[]+)[^}]*\}\}")


def extract_field_dependencies(expression: Any) -> List[str]:
    """
    {{formData.<name>...}} の先頭セグメントを出現順・重複なしで返す。
    文字列以外（関数など）は []。
    """
    if not isinstance(expression, str):
        return []
    seen: Dict[str, None] = {}
    for m in FORM_FIELD_PATTERN.finditer(expression):
        seen.setdefault(m.group(1), None)
    return list(seen)


def extract_template_paths(expression: Any) -> List[str]:
    if not isinstance(expression, str):
        return []
    return [m.group(1).strip() for m in TEMPLATE_PATTERN.finditer(expression)]
