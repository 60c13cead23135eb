# application/services/page_state.py
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from application.ports.state_store import StateStorePort
from domain.expressions.paths import get_nested_value, set_nested_value


class PageStateStore(StateStorePort):
    """dict をその場で書き換える StateStore（参照は共有される）"""

    def __init__(self, state: Optional[Dict[str, Any]] = None):
        self._state: Dict[str, Any] = state if state is not None else {}

    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    def get(self, path: Optional[str] = None) -> Any:
        if not path:
            return self._state
        return get_nested_value(self._state, path)

    def set(self, path: str, value: Any, merge: bool = True) -> None:
        set_nested_value(self._state, path, value, merge)

    def replace_all(self, value: Dict[str, Any]) -> None:
        new_state = dict(value)
        self._state.clear()
        self._state.update(new_state)

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self._state)


@dataclass(frozen=True)
class StateOp:
    kind: str  # "set" | "replace"
    path: Optional[str]
    value: Any
    merge: bool = True


class BranchStateStore(PageStateStore):
    """
    parallel の分岐用 copy-on-write ストア。
    親のスナップショット上で書き込み、操作を記録して join 時に親へ再適用する。
    """

    def __init__(self, parent: StateStorePort):
        super().__init__(parent.snapshot())
        self._ops: List[StateOp] = []

    @property
    def ops(self) -> List[StateOp]:
        return list(self._ops)

    def set(self, path: str, value: Any, merge: bool = True) -> None:
        super().set(path, value, merge)
        self._ops.append(StateOp("set", path, copy.deepcopy(value), merge))

    def replace_all(self, value: Dict[str, Any]) -> None:
        super().replace_all(value)
        self._ops.append(StateOp("replace", None, copy.deepcopy(value)))

    def replay(self, target: StateStorePort) -> int:
        for op in self._ops:
            if op.kind == "replace":
                target.replace_all(copy.deepcopy(op.value))
            else:
                target.set(op.path or "", copy.deepcopy(op.value), op.merge)
        return len(self._ops)
