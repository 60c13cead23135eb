# application/ports/navigation.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class NavigatorPort(ABC):
    """アプリ内ルーティング"""

    @abstractmethod
    def navigate(self, path: str, replace: bool = False, query: Optional[Dict[str, Any]] = None) -> None:
        ...


class BrowserPort(ABC):
    """ブラウザの履歴/ロケーション操作"""

    @abstractmethod
    def history_length(self) -> int:
        ...

    @abstractmethod
    def back(self) -> None:
        ...

    @abstractmethod
    def reload(self) -> None:
        ...

    @abstractmethod
    def open_url(self, url: str, new_tab: bool = False) -> None:
        ...
