# infrastructure/actions/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple, Union

from domain.actions.base import ActionConfig
from infrastructure.actions.base_loader import ActionLoaderBase, ActionLoadError
from infrastructure.actions.json_loader import JsonActionLoader
from infrastructure.actions.yaml_loader import YamlActionLoader


class ActionLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, ActionLoaderBase] = {
            ".yaml": YamlActionLoader(),
            ".yml": YamlActionLoader(),
            ".json": JsonActionLoader(),
        }

    def get_loader(self, path: Path) -> ActionLoaderBase:
        ext = path.suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise ActionLoadError(f"Unsupported action file format: {ext}")
        return loader

    def load(self, path: Union[str, Path]) -> Tuple[ActionConfig, ...]:
        p = Path(path)
        return self.get_loader(p).load_from_file(p)
