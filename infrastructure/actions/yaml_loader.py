# infrastructure/actions/yaml_loader.py
"""
YAMLで書かれたアクション定義を読み込む（キーは JSON と同じ camelCase）
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from infrastructure.actions.base_loader import ActionLoaderBase


class YamlActionLoader(ActionLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
