from domain.actions.base import ActionConfig, ActionKind, as_action_list
from domain.actions.params import (
    ApiCallParams,
    ChildActionsParams,
    ConditionalParams,
    ExecuteActionParams,
    GoBackParams,
    MergeStateParams,
    NavigateParams,
    ReloadParams,
    ResetStateParams,
    SetStateParams,
    ShowDialogParams,
    ShowToastParams,
)

__all__ = [
    "ActionConfig",
    "ActionKind",
    "as_action_list",
    "ApiCallParams",
    "ChildActionsParams",
    "ConditionalParams",
    "ExecuteActionParams",
    "GoBackParams",
    "MergeStateParams",
    "NavigateParams",
    "ReloadParams",
    "ResetStateParams",
    "SetStateParams",
    "ShowDialogParams",
    "ShowToastParams",
]
