# application/executor/cancellation.py
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from domain.exceptions import ActionCancelledError

T = TypeVar("T")

DEFAULT_REASON = "Action was cancelled"


class CancelSignal:
    """
    AbortSignal 相当。abort() は同期的に状態を確定させ、リスナーを呼ぶ。
    子シグナルは link() で作り、親の abort が子へ伝播する。
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._timed_out = False
        self._listeners: List[Callable[["CancelSignal"], None]] = []
        self._cleanups: List[Callable[[], Any]] = []

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    def abort(self, reason: Optional[str] = None, timed_out: bool = False) -> None:
        if self.aborted:
            return
        self._reason = reason or DEFAULT_REASON
        self._timed_out = timed_out
        self._event.set()
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self)
        self.dispose()

    def add_listener(self, listener: Callable[["CancelSignal"], None]) -> Callable[[], None]:
        if self.aborted:
            listener(self)
            return lambda: None
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def raise_if_aborted(self) -> None:
        if self.aborted:
            raise ActionCancelledError(self._reason or DEFAULT_REASON, timed_out=self._timed_out)

    async def wait(self) -> None:
        await self._event.wait()

    def link(self) -> "CancelSignal":
        """Child signal aborted whenever this one is."""
        return CancelSignal.any(self)

    def dispose(self) -> None:
        cleanups, self._cleanups = self._cleanups, []
        for cleanup in cleanups:
            cleanup()

    @classmethod
    def any(cls, *signals: Optional["CancelSignal"]) -> "CancelSignal":
        """AbortSignal.any: aborted as soon as any of ``signals`` is."""
        combined = cls()
        for source in signals:
            if source is None:
                continue
            if source.aborted:
                combined.abort(source.reason, timed_out=source.timed_out)
                break
            remove = source.add_listener(
                lambda s: combined.abort(s.reason, timed_out=s.timed_out)
            )
            combined._cleanups.append(remove)
        return combined

    @classmethod
    def timeout(cls, timeout_ms: float, reason: Optional[str] = None) -> "CancelSignal":
        signal = cls()
        message = reason or f"Request timed out after {int(timeout_ms)}ms"
        handle = asyncio.get_running_loop().call_later(
            max(timeout_ms, 0) / 1000.0, lambda: signal.abort(message, timed_out=True)
        )
        signal._cleanups.append(handle.cancel)
        return signal


async def run_cancellable(awaitable: Awaitable[T], signal: Optional[CancelSignal]) -> T:
    """
    awaitable を signal と競争させる。signal が先に abort されたら
    タスクをキャンセルして ActionCancelledError を投げる。
    """
    if signal is None:
        return await awaitable
    signal.raise_if_aborted()

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(signal.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task.done():
        return task.result()

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    raise ActionCancelledError(signal.reason or DEFAULT_REASON, timed_out=signal.timed_out)
