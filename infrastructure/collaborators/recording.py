# infrastructure/collaborators/recording.py
"""
ブラウザ無しで副作用を記録するだけのコラボレーター群

シミュレーションAPIとテストで使う。全コラボレーターが1つの EffectRecorder を
共有すれば、発生順がそのまま effects に残る。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from application.ports.feedback import DialogPort, DialogRequest, ToastPort
from application.ports.navigation import BrowserPort, NavigatorPort


@dataclass
class EffectRecorder:
    effects: List[Dict[str, Any]] = field(default_factory=list)

    def record(self, effect: str, **fields: Any) -> None:
        self.effects.append({"effect": effect, **fields})

    def of(self, effect: str) -> List[Dict[str, Any]]:
        return [e for e in self.effects if e["effect"] == effect]


class RecordingNavigator(NavigatorPort):
    def __init__(self, recorder: Optional[EffectRecorder] = None):
        self.recorder = recorder or EffectRecorder()
        self.current_path: Optional[str] = None

    def navigate(self, path: str, replace: bool = False, query: Optional[Dict[str, Any]] = None) -> None:
        self.current_path = path
        self.recorder.record("navigate", path=path, replace=replace, query=dict(query or {}))


class RecordingBrowser(BrowserPort):
    def __init__(self, history_length: int = 1, recorder: Optional[EffectRecorder] = None):
        self.recorder = recorder or EffectRecorder()
        self._history_length = history_length

    def history_length(self) -> int:
        return self._history_length

    def back(self) -> None:
        if self._history_length > 1:
            self._history_length -= 1
        self.recorder.record("back")

    def reload(self) -> None:
        self.recorder.record("reload")

    def open_url(self, url: str, new_tab: bool = False) -> None:
        self.recorder.record("openUrl", url=url, newTab=new_tab)


class RecordingToast(ToastPort):
    def __init__(self, recorder: Optional[EffectRecorder] = None):
        self.recorder = recorder or EffectRecorder()

    def show_toast(self, message: str, variant: str, duration_ms: float) -> None:
        self.recorder.record("toast", message=message, variant=variant, duration=duration_ms)

    @property
    def toasts(self) -> List[tuple]:
        return [(e["message"], e["variant"], e["duration"]) for e in self.recorder.of("toast")]


class ScriptedDialogs(DialogPort):
    """
    confirm の回答を事前に決めておくダイアログ

    answers を先頭から消費し、尽きたら default を返す。
    """

    def __init__(
        self,
        answers: Sequence[bool] = (),
        default: bool = True,
        recorder: Optional[EffectRecorder] = None,
    ):
        self.recorder = recorder or EffectRecorder()
        self._answers = list(answers)
        self._default = default

    async def alert(self, request: DialogRequest) -> None:
        self.recorder.record("dialog", kind="alert", title=request.title, message=request.message, variant=request.variant)

    async def confirm(self, request: DialogRequest) -> bool:
        answer = self._answers.pop(0) if self._answers else self._default
        self.recorder.record(
            "dialog",
            kind="confirm",
            title=request.title,
            message=request.message,
            variant=request.variant,
            confirmed=answer,
        )
        return answer
