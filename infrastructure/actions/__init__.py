# infrastructure/actions/__init__.py
from infrastructure.actions.base_loader import ActionLoadError, ActionLoaderBase
from infrastructure.actions.json_loader import JsonActionLoader
from infrastructure.actions.loader_registry import ActionLoaderRegistry
from infrastructure.actions.yaml_loader import YamlActionLoader

__all__ = [
    "ActionLoadError",
    "ActionLoaderBase",
    "ActionLoaderRegistry",
    "YamlActionLoader",
    "JsonActionLoader",
]
