# application/ports/fetch.py
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class FetchRequest:
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    timeout_sec: Optional[float] = None


@dataclass(frozen=True)
class FetchResponse:
    status: int
    url: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for k, v in self.headers.items():
            if k.lower() == lowered:
                return v
        return None

    def json(self) -> Any:
        return json.loads(self.text)


class FetchPort(ABC):
    @abstractmethod
    async def fetch(self, url: str, request: FetchRequest) -> FetchResponse:
        ...
