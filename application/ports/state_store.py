# application/ports/state_store.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StateStorePort(ABC):
    """ページ状態（pageState）への読み書き"""

    @abstractmethod
    def get(self, path: Optional[str] = None) -> Any:
        """path 省略時は状態全体"""
        ...

    @abstractmethod
    def set(self, path: str, value: Any, merge: bool = True) -> None:
        ...

    @abstractmethod
    def replace_all(self, value: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def snapshot(self) -> Dict[str, Any]:
        ...
