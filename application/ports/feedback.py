# application/ports/feedback.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class ToastPort(ABC):
    @abstractmethod
    def show_toast(self, message: str, variant: str, duration_ms: float) -> None:
        ...


@dataclass(frozen=True)
class DialogRequest:
    title: str
    message: str
    variant: str
    confirm_label: str = "OK"
    cancel_label: str = "Cancel"


class DialogPort(ABC):
    @abstractmethod
    async def alert(self, request: DialogRequest) -> None:
        ...

    @abstractmethod
    async def confirm(self, request: DialogRequest) -> bool:
        """True when the user confirmed."""
        ...
