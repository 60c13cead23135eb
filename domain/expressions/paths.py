# domain/expressions/paths.py
from __future__ import annotations

import re
from typing import Any, List, Mapping, MutableMapping

_INDEX_RE = re.compile(r"\[\s*(\d+)\s*\]")


def split_path(path: str) -> List[str]:
    """
    "a.b[0].c" -> ["a", "b", "0", "c"]
    """
    if not path:
        return []
    normalized = _INDEX_RE.sub(r".\1", path.strip())
    return [p for p in normalized.split(".") if p != ""]


def get_nested_value(obj: Any, path: str) -> Any:
    """
    ドット区切りのパスで値を取り出す。途中で見つからなければ None。
    dict のキーと list のインデックスに対応。
    """
    parts = split_path(path)
    if not parts:
        return None

    cur = obj
    for part in parts:
        if cur is None:
            return None
        if isinstance(cur, Mapping):
            if part not in cur:
                return None
            cur = cur[part]
        elif isinstance(cur, (list, tuple)):
            if not part.isdigit():
                return None
            idx = int(part)
            if idx >= len(cur):
                return None
            cur = cur[idx]
        else:
            return None
    return cur


def has_nested_value(obj: Any, path: str) -> bool:
    parts = split_path(path)
    if not parts:
        return False
    cur = obj
    for part in parts:
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        elif isinstance(cur, (list, tuple)) and part.isdigit() and int(part) < len(cur):
            cur = cur[int(part)]
        else:
            return False
    return True


def set_nested_value(obj: MutableMapping[str, Any], path: str, value: Any, merge: bool = True) -> None:
    """
    パスに値を書き込む。途中の中間ノードが dict でなければ {} で置き換える。
    merge=True かつ既存値・新値がともに dict の場合はシャローマージ。
    """
    parts = split_path(path)
    if not parts:
        return

    *parents, last = parts
    cur: MutableMapping[str, Any] = obj
    for part in parents:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt

    existing = cur.get(last)
    if merge and isinstance(value, dict) and isinstance(existing, dict):
        merged = dict(existing)
        merged.update(value)
        cur[last] = merged
    else:
        cur[last] = value

