# infrastructure/url/base_url_resolver.py
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class BaseUrlResolver:
    """
    相対URL（/api/users など）を base_url 配下の絶対URLにする。
    絶対URL・プロトコル相対URLはそのまま、base_url が空なら何もしない。
    """

    base_url: str

    def resolve_url(self, url: str) -> str:
        if urlsplit(url).scheme in ("http", "https"):
            return url
        if not self.base_url:
            return url
        if url.startswith("//"):
            scheme = urlsplit(self.base_url).scheme or "https"
            return f"{scheme}:{url}"
        if url.startswith("?"):
            return self.base_url + url
        return self.base_url.rstrip("/") + "/" + url.lstrip("/")
