# application/settings.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineSettings:
    # executeAction の送信先
    action_gateway_path: str = "/ui/actions/execute"
    default_toast_duration_ms: int = 5000
    enable_action_logging: bool = True
    max_expression_length: int = 2000
    # parallel の各分岐を copy-on-write で分離し、宣言順にマージする
    isolate_parallel_state: bool = True
    http_timeout_sec: float = 20.0
    api_base_url: str = ""
    log_level: str = "INFO"
