from __future__ import annotations

from typing import Any, Collection, Dict, Mapping

from domain.exceptions import ValidationError
from domain.expressions.coercion import to_js_string
from domain.expressions.paths import get_nested_value


class TemplateRenderError(ValidationError):
    pass


class TemplateRenderer:
    """
    {{pageState.xxx}}, {{formData.xxx}}, {{user.xxx}} などを展開する。
    - 文字列全体が1つのテンプレートの場合は値をそのまま返す（型を保つ）
      例: "{{formData.items}}" => ["a", "b"]
    - 部分埋め込みは文字列化（None は空文字）
    - ネストした dict / list も再帰的に展開する
    """

    def render_params(
        self,
        params: Mapping[str, Any],
        src: Mapping[str, Any],
        skip_keys: Collection[str] = (),
    ) -> Dict[str, Any]:
        """
        params のトップレベルキーのうち skip_keys 以外を展開する。
        ネストしたアクションや式を持つキーは呼び出し側で skip_keys に入れる。
        """
        out: Dict[str, Any] = {}
        for k, v in params.items():
            out[k] = v if k in skip_keys else self.render_value(v, src)
        return out

    def render_value(self, value: Any, src: Mapping[str, Any]) -> Any:
        if isinstance(value, str):
            return self._render_value(value, src)
        if isinstance(value, list):
            return [self.render_value(v, src) for v in value]
        if isinstance(value, tuple):
            return tuple(self.render_value(v, src) for v in value)
        if isinstance(value, dict):
            return {k: self.render_value(v, src) for k, v in value.items()}
        return value

    def _render_value(self, s: str, src: Mapping[str, Any]) -> Any:
        if "{{" not in s:
            return s

        # テンプレートが1つだけで、かつ全体がテンプレートの場合
        if s.startswith("{{") and s.endswith("}}") and s.count("{{") == 1:
            return self._eval(s[2:-2].strip(), src)

        return self._render_str_scalar(s, src)

    def _render_str_scalar(self, s: str, src: Mapping[str, Any]) -> str:
        if "{{" not in s:
            return s

        result = ""
        i = 0
        while i < len(s):
            start = s.find("{{", i)
            if start < 0:
                result += s[i:]
                break
            result += s[i:start]
            end = s.find("}}", start + 2)
            if end < 0:
                raise TemplateRenderError(f"unclosed template: {s}")
            value = self._eval(s[start + 2 : end].strip(), src)
            result += "" if value is None else to_js_string(value)
            i = end + 2

        return result

    def _eval(self, expr: str, src: Mapping[str, Any]) -> Any:
        if not expr:
            raise TemplateRenderError("empty template reference")
        return self._resolve_path(src, expr)

    def _resolve_path(self, obj: Any, path: str) -> Any:
        return get_nested_value(obj, path)
