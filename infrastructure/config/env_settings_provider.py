# infrastructure/config/env_settings_provider.py
from __future__ import annotations

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

from application.settings import EngineSettings
from domain.exceptions import ValidationError

PREFIX = "UI_ACTIONS_"
DEFAULT_ENV_PATH = Path(__file__).parent.parent.parent / ".env"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class EnvSettingsProvider:
    """
    .env と環境変数から EngineSettings を組み立てる。

    キーは UI_ACTIONS_<フィールド名大文字>（例: UI_ACTIONS_ACTION_GATEWAY_PATH）。
    同じキーがあれば .env の値を優先する。
    """

    def __init__(self, env_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        path = env_path or DEFAULT_ENV_PATH
        values: Dict[str, Optional[str]] = dict(dotenv_values(path)) if path.exists() else {}

        environ = os.environ if environ is None else environ
        for key, value in environ.items():
            if key.startswith(PREFIX) and key not in values:
                values[key] = value
        self._values = values

    def get(self) -> EngineSettings:
        defaults = EngineSettings()
        kwargs: Dict[str, Any] = {}
        for f in fields(EngineSettings):
            key = PREFIX + f.name.upper()
            raw = self._values.get(key)
            if raw is None or raw == "":
                continue
            kwargs[f.name] = _coerce(key, raw, getattr(defaults, f.name))
        return EngineSettings(**kwargs)


def _coerce(key: str, raw: str, default: Any) -> Any:
    text = raw.strip()
    if isinstance(default, bool):
        lowered = text.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValidationError(f"{key} must be a boolean, got {raw!r}")
    if isinstance(default, int):
        try:
            return int(text)
        except ValueError as e:
            raise ValidationError(f"{key} must be an integer, got {raw!r}") from e
    if isinstance(default, float):
        try:
            return float(text)
        except ValueError as e:
            raise ValidationError(f"{key} must be a number, got {raw!r}") from e
    return text
