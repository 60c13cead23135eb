# infrastructure/collaborators/in_memory_fetch.py
"""
登録済みのレスポンスを返す FetchPort

ルールは (method, url) の完全一致、次に url の完全一致で探す。
どちらにも無ければ fallback に委譲し、fallback も無ければ 404 を返す。
"""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from application.ports.fetch import FetchPort, FetchRequest, FetchResponse
from infrastructure.collaborators.recording import EffectRecorder


@dataclass(frozen=True)
class MockRoute:
    status: int = 200
    body: Any = None
    headers: Optional[Dict[str, str]] = None
    delay_sec: float = 0.0

    def to_response(self, url: str) -> FetchResponse:
        headers = dict(self.headers or {})
        if isinstance(self.body, str):
            text = self.body
            headers.setdefault("Content-Type", "text/plain")
        else:
            text = json.dumps(self.body) if self.body is not None else ""
            headers.setdefault("Content-Type", "application/json")
        return FetchResponse(status=self.status, url=url, headers=headers, text=text)


class InMemoryFetchClient(FetchPort):
    def __init__(self, fallback: Optional[FetchPort] = None, recorder: Optional[EffectRecorder] = None):
        self.recorder = recorder or EffectRecorder()
        self._routes: Dict[Tuple[Optional[str], str], MockRoute] = {}
        self._fallback = fallback
        self.requests: List[Tuple[str, FetchRequest]] = []

    def add_route(
        self,
        url: str,
        *,
        method: Optional[str] = None,
        status: int = 200,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        delay_sec: float = 0.0,
    ) -> None:
        key = (method.upper() if method else None, url)
        self._routes[key] = MockRoute(status=status, body=body, headers=headers, delay_sec=delay_sec)

    async def fetch(self, url: str, request: FetchRequest) -> FetchResponse:
        self.requests.append((url, request))
        self.recorder.record("request", method=request.method.upper(), url=url, body=request.body)

        route = self._routes.get((request.method.upper(), url)) or self._routes.get((None, url))
        if route is None:
            if self._fallback is not None:
                return await self._fallback.fetch(url, request)
            return FetchResponse(
                status=404,
                url=url,
                headers={"Content-Type": "application/json"},
                text=json.dumps({"message": f"No route for {request.method} {url}"}),
            )

        if route.delay_sec > 0:
            await asyncio.sleep(route.delay_sec)
        return route.to_response(url)
