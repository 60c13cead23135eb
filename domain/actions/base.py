# domain/actions/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from domain.exceptions import ValidationError


class ActionKind(str, Enum):
    # navigation
    NAVIGATE = "navigate"
    GO_BACK = "goBack"
    RELOAD = "reload"
    # api
    API_CALL = "apiCall"
    EXECUTE_ACTION = "executeAction"
    # state
    SET_STATE = "setState"
    RESET_STATE = "resetState"
    MERGE_STATE = "mergeState"
    # ui feedback
    SHOW_TOAST = "showToast"
    SHOW_DIALOG = "showDialog"
    # chaining
    SEQUENCE = "sequence"
    PARALLEL = "parallel"
    CONDITIONAL = "conditional"

    @classmethod
    def parse(cls, raw: str) -> Optional["ActionKind"]:
        """Known kind for ``raw``, or None for an unknown tag."""
        try:
            return cls(raw)
        except ValueError:
            return None


Condition = Union[bool, str, None]


@dataclass(frozen=True)
class ActionConfig:
    """
    1ノード分のアクション定義（ページ設定JSONの ActionConfig に対応）

    - type: アクション種別（未知の種別もそのまま保持する）
    - params: 種別ごとのパラメータ（camelCase のまま）
    - on_success / on_error: 後続アクション
    - condition: 実行前ゲート（bool または式）
    """

    type: str
    id: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    on_success: Tuple["ActionConfig", ...] = ()
    on_error: Tuple["ActionConfig", ...] = ()
    condition: Condition = None

    @property
    def kind(self) -> Optional[ActionKind]:
        return ActionKind.parse(self.type)

    @property
    def label(self) -> str:
        return self.id or self.type

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActionConfig":
        if isinstance(data, ActionConfig):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError(f"action must be an object, got {type(data).__name__}")

        action_type = data.get("type")
        if not isinstance(action_type, str) or not action_type:
            raise ValidationError("action requires a non-empty 'type'")

        params = data.get("params") or {}
        if not isinstance(params, Mapping):
            raise ValidationError(f"action '{action_type}' params must be an object")

        # 'when' は旧形式の条件キー
        condition = data.get("condition", data.get("when"))
        if condition is not None and not isinstance(condition, (bool, str)):
            raise ValidationError(f"action '{action_type}' condition must be a string or boolean")

        return cls(
            type=action_type,
            id=data.get("id"),
            params=dict(params),
            on_success=as_action_list(data.get("onSuccess")),
            on_error=as_action_list(data.get("onError")),
            condition=condition,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type}
        if self.id is not None:
            out["id"] = self.id
        if self.params:
            out["params"] = dict(self.params)
        if self.on_success:
            out["onSuccess"] = [a.to_dict() for a in self.on_success]
        if self.on_error:
            out["onError"] = [a.to_dict() for a in self.on_error]
        if self.condition is not None:
            out["condition"] = self.condition
        return out


def as_action_list(value: Any) -> Tuple[ActionConfig, ...]:
    """Normalize a single action, a list of actions or None into a tuple."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(ActionConfig.from_dict(v) for v in value)
    return (ActionConfig.from_dict(value),)
