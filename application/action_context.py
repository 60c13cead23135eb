# application/action_context.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from application.ports.feedback import DialogPort, ToastPort
from application.ports.fetch import FetchPort
from application.ports.navigation import BrowserPort, NavigatorPort
from application.ports.state_store import StateStorePort
from application.services.page_state import BranchStateStore, PageStateStore


@dataclass
class ActionContext:
    """
    1回のトップレベル呼び出しで共有されるコンテキスト。
    page_state / form_data は参照で共有され、その場で書き換えられる。
    """

    page_state: Dict[str, Any] = field(default_factory=dict)
    initial_page_state: Optional[Dict[str, Any]] = None
    form_data: Dict[str, Any] = field(default_factory=dict)
    widget_states: Dict[str, Any] = field(default_factory=dict)
    user: Optional[Dict[str, Any]] = None
    tenant: Optional[Dict[str, Any]] = None
    permissions: List[str] = field(default_factory=list)
    route_params: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, str] = field(default_factory=dict)
    current_path: str = "/"
    trigger: Optional[Dict[str, Any]] = None
    invocation_id: str = ""

    # collaborators
    navigator: Optional[NavigatorPort] = None
    fetch: Optional[FetchPort] = None
    toast: Optional[ToastPort] = None
    dialogs: Optional[DialogPort] = None
    browser: Optional[BrowserPort] = None
    state_store: Optional[StateStorePort] = None

    def __post_init__(self) -> None:
        if self.state_store is None:
            self.state_store = PageStateStore(self.page_state)
        if isinstance(self.state_store, PageStateStore):
            self.page_state = self.state_store.state

    # ---- services
    def navigate(self, path: str, replace: bool = False, query: Optional[Dict[str, Any]] = None) -> None:
        if self.navigator is None:
            raise RuntimeError("navigation service is not available")
        self.navigator.navigate(path, replace=replace, query=query)

    def show_toast(self, message: str, variant: str = "info", duration_ms: float = 5000) -> None:
        if self.toast is None:
            raise RuntimeError("toast service is not available")
        self.toast.show_toast(message, variant, duration_ms)

    def set_state(self, path: str, value: Any, merge: bool = True) -> None:
        self.state_store.set(path, value, merge)

    def get_state(self, path: Optional[str] = None) -> Any:
        return self.state_store.get(path)

    # ---- parallel branches
    def branch(self) -> "ActionContext":
        """Copy of this context whose state writes go to a copy-on-write store."""
        store = BranchStateStore(self.state_store)
        return replace(self, state_store=store, page_state=store.state)

    # ---- templates / expressions
    @property
    def roles(self) -> List[str]:
        if isinstance(self.user, dict):
            return list(self.user.get("roles") or [])
        return []

    def template_source(self) -> Dict[str, Any]:
        return {
            # state_store が正。独自ストアでは page_state は更新されない
            "pageState": self.state_store.get(),
            "formData": self.form_data,
            "widgetStates": self.widget_states,
            "user": self.user,
            "tenant": self.tenant,
            "permissions": self.permissions,
            "roles": self.roles,
            "routeParams": self.route_params,
            "queryParams": self.query_params,
            "currentPath": self.current_path,
            "trigger": self.trigger,
        }
