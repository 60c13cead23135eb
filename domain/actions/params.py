# domain/actions/params.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from domain.actions.base import ActionConfig, as_action_list
from domain.exceptions import ValidationError

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
TOAST_VARIANTS = ("success", "error", "warning", "info")
DIALOG_VARIANTS = ("info", "warning", "error", "confirm")


def _require(params: Mapping[str, Any], key: str, message: str) -> Any:
    value = params.get(key)
    if value is None or value == "":
        raise ValidationError(message)
    return value


def _optional_mapping(params: Mapping[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = params.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValidationError(f"'{key}' must be an object")
    return dict(value)


def _optional_ms(params: Mapping[str, Any], key: str) -> Optional[float]:
    value = params.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"'{key}' must be a number of milliseconds")
    return float(value)


# ---------------------------------------------------------------- navigation
@dataclass(frozen=True)
class NavigateParams:
    to: str
    query: Optional[Dict[str, Any]] = None
    replace: bool = False
    external: bool = False
    open_in_new_tab: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "NavigateParams":
        to = _require(params, "to", 'Navigate action requires "to" parameter')
        return cls(
            to=str(to),
            query=_optional_mapping(params, "query"),
            replace=bool(params.get("replace", False)),
            external=bool(params.get("external", False)),
            open_in_new_tab=bool(params.get("openInNewTab", False)),
        )


@dataclass(frozen=True)
class GoBackParams:
    fallback: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "GoBackParams":
        fallback = params.get("fallback")
        return cls(fallback=str(fallback) if fallback else None)


@dataclass(frozen=True)
class ReloadParams:
    hard: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ReloadParams":
        return cls(hard=bool(params.get("hard", False)))


# ---------------------------------------------------------------- api
@dataclass(frozen=True)
class ApiCallParams:
    url: str
    method: str
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Optional[Dict[str, Any]] = None
    timeout_ms: Optional[float] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ApiCallParams":
        url = _require(params, "url", 'API call action requires "url" parameter')
        method = _require(params, "method", 'API call action requires "method" parameter')
        method = str(method).upper()
        if method not in HTTP_METHODS:
            raise ValidationError(f"Unsupported HTTP method: {method}")
        headers = _optional_mapping(params, "headers") or {}
        return cls(
            url=str(url),
            method=method,
            body=params.get("body"),
            headers={str(k): str(v) for k, v in headers.items()},
            query_params=_optional_mapping(params, "queryParams"),
            timeout_ms=_optional_ms(params, "timeout"),
        )


@dataclass(frozen=True)
class ExecuteActionParams:
    action_id: str
    context: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ExecuteActionParams":
        action_id = _require(params, "actionId", 'Execute action requires "actionId" parameter')
        return cls(action_id=str(action_id), context=_optional_mapping(params, "context") or {})


# ---------------------------------------------------------------- state
_MISSING = object()


@dataclass(frozen=True)
class SetStateParams:
    value: Any
    path: Optional[str] = None
    merge: bool = True

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SetStateParams":
        value = params.get("value", _MISSING)
        if value is _MISSING:
            raise ValidationError('Set state action requires "value" parameter')
        path = params.get("path")
        if path is None and not isinstance(value, Mapping):
            raise ValidationError('Set state without "path" requires an object "value"')
        return cls(value=value, path=str(path) if path else None, merge=bool(params.get("merge", True)))


@dataclass(frozen=True)
class ResetStateParams:
    paths: Tuple[str, ...] = ()

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ResetStateParams":
        paths = params.get("paths") or ()
        if isinstance(paths, str) or not isinstance(paths, (list, tuple)):
            raise ValidationError('"paths" must be an array of state paths')
        return cls(paths=tuple(str(p) for p in paths))


@dataclass(frozen=True)
class MergeStateParams:
    updates: Dict[str, Any]

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "MergeStateParams":
        updates = params.get("updates")
        if not isinstance(updates, Mapping):
            raise ValidationError('Merge state action requires "updates" object parameter')
        return cls(updates=dict(updates))


# ---------------------------------------------------------------- ui feedback
@dataclass(frozen=True)
class ShowToastParams:
    message: str
    variant: str = "info"
    duration_ms: Optional[float] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ShowToastParams":
        message = _require(params, "message", 'Show toast action requires "message" parameter')
        variant = str(params.get("variant") or "info")
        if variant not in TOAST_VARIANTS:
            raise ValidationError(f"Unsupported toast variant: {variant}")
        return cls(message=str(message), variant=variant, duration_ms=_optional_ms(params, "duration"))


@dataclass(frozen=True)
class ShowDialogParams:
    title: str
    message: str
    variant: str = "info"
    confirm_label: str = "OK"
    cancel_label: str = "Cancel"
    on_confirm: Tuple[ActionConfig, ...] = ()
    on_cancel: Tuple[ActionConfig, ...] = ()

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ShowDialogParams":
        title = _require(params, "title", 'Show dialog action requires "title" parameter')
        message = _require(params, "message", 'Show dialog action requires "message" parameter')
        variant = str(params.get("variant") or "info")
        if variant not in DIALOG_VARIANTS:
            raise ValidationError(f"Unsupported dialog variant: {variant}")
        return cls(
            title=str(title),
            message=str(message),
            variant=variant,
            confirm_label=str(params.get("confirmLabel") or "OK"),
            cancel_label=str(params.get("cancelLabel") or "Cancel"),
            on_confirm=as_action_list(params.get("onConfirm")),
            on_cancel=as_action_list(params.get("onCancel")),
        )


# ---------------------------------------------------------------- chaining
@dataclass(frozen=True)
class ChildActionsParams:
    actions: Tuple[ActionConfig, ...]

    @classmethod
    def from_params(cls, params: Mapping[str, Any], label: str = "Sequence") -> "ChildActionsParams":
        actions = params.get("actions")
        if not isinstance(actions, (list, tuple)):
            raise ValidationError(f'{label} action requires "actions" array parameter')
        return cls(actions=as_action_list(actions))


@dataclass(frozen=True)
class ConditionalParams:
    condition: Any
    then: Tuple[ActionConfig, ...]
    otherwise: Tuple[ActionConfig, ...] = ()

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ConditionalParams":
        condition = params.get("condition")
        # False は有効な条件。None と空文字は未指定扱い
        if condition is None or (isinstance(condition, str) and not condition.strip()):
            raise ValidationError('Conditional action requires "condition" parameter')
        then = params.get("then")
        if then is None:
            raise ValidationError('Conditional action requires "then" parameter')
        return cls(
            condition=condition,
            then=as_action_list(then),
            otherwise=as_action_list(params.get("else")),
        )
