# infrastructure/actions/base_loader.py
"""
アクション定義ファイルのローダー基底

ファイルの中身は次のいずれか:
- 単一アクション: {"type": "showToast", ...}
- アクション配列: [{"type": ...}, ...]
- ラッパー: {"actions": [...]}
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

from domain.actions.base import ActionConfig, as_action_list
from domain.exceptions import ValidationError


class ActionLoadError(Exception):
    pass


class ActionLoaderBase(ABC):
    def load_from_file(self, path: Union[str, Path]) -> Tuple[ActionConfig, ...]:
        p = Path(path)
        if not p.exists():
            raise ActionLoadError(f"Action file not found: {path}")

        try:
            data = self._load_file(p)
        except ActionLoadError:
            raise
        except Exception as e:
            raise ActionLoadError(f"Action file could not be parsed: {path}: {e}") from e

        if data is None:
            raise ActionLoadError(f"Action file is empty: {path}")

        if not isinstance(data, (Mapping, list)):
            raise ActionLoadError(f"Action file is invalid: {path}")

        return self.load_many(data)

    def load_from_dict(self, data: Mapping[str, Any]) -> ActionConfig:
        """dict から1件の ActionConfig を生成"""
        try:
            return ActionConfig.from_dict(data)
        except ValidationError as e:
            raise ActionLoadError(str(e)) from e

    def load_many(self, data: Any) -> Tuple[ActionConfig, ...]:
        if isinstance(data, Mapping) and "type" not in data:
            if "actions" not in data:
                raise ActionLoadError("Action document requires 'type' or 'actions'")
            data = data["actions"]
        try:
            actions = as_action_list(data)
        except ValidationError as e:
            raise ActionLoadError(str(e)) from e
        if not actions:
            raise ActionLoadError("Action document contains no actions")
        return actions

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        raise NotImplementedError
