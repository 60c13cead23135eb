# application/ports/requests_client.py
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import requests

from application.ports.fetch import FetchPort, FetchRequest, FetchResponse
from infrastructure.url.base_url_resolver import BaseUrlResolver


class RequestsFetchClient(FetchPort):
    """
    requests.Session をワーカースレッドで実行する FetchPort 実装。
    キャンセル時は await を打ち切るが、実行中のスレッド自体は止められない。
    """

    def __init__(
        self,
        base_url: str = "",
        base_headers: Optional[Dict[str, str]] = None,
        timeout_sec: float = 20,
        session: Optional[requests.Session] = None,
    ):
        self._session = session or requests.Session()
        self._resolver = BaseUrlResolver(base_url) if base_url else None
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec

    async def fetch(self, url: str, request: FetchRequest) -> FetchResponse:
        return await asyncio.to_thread(self._send, url, request)

    def _send(self, url: str, request: FetchRequest) -> FetchResponse:
        if self._resolver is not None:
            url = self._resolver.resolve_url(url)

        merged = dict(self._base_headers)
        merged.update(request.headers)

        resp = self._session.request(
            method=request.method.upper(),
            url=url,
            headers=merged,
            data=request.body.encode("utf-8") if request.body is not None else None,
            timeout=request.timeout_sec or self._timeout,
        )

        return FetchResponse(
            status=resp.status_code,
            url=str(resp.url),
            headers=dict(resp.headers),
            text=resp.text,
        )

    def close(self) -> None:
        self._session.close()
