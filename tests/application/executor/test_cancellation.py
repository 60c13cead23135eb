# tests/application/executor/test_cancellation.py
import asyncio

import pytest

from application.executor.cancellation import CancelSignal, run_cancellable
from domain.exceptions import ActionCancelledError


def test_abort_sets_reason_and_notifies_listeners():
    signal = CancelSignal()
    seen = []
    signal.add_listener(lambda s: seen.append(s.reason))

    signal.abort("stop")
    signal.abort("again")

    assert signal.aborted is True
    assert signal.reason == "stop"
    assert seen == ["stop"]


def test_default_reason():
    signal = CancelSignal()
    signal.abort()
    assert signal.reason == "Action was cancelled"


def test_listener_added_after_abort_runs_immediately():
    signal = CancelSignal()
    signal.abort("done")
    seen = []

    signal.add_listener(lambda s: seen.append(s.reason))

    assert seen == ["done"]


def test_removed_listener_is_not_called():
    signal = CancelSignal()
    seen = []
    remove = signal.add_listener(lambda s: seen.append(1))

    remove()
    signal.abort()

    assert seen == []


def test_raise_if_aborted():
    signal = CancelSignal()
    signal.raise_if_aborted()

    signal.abort("x", timed_out=True)

    with pytest.raises(ActionCancelledError) as exc_info:
        signal.raise_if_aborted()
    assert exc_info.value.timed_out is True


def test_any_follows_first_aborted_source():
    a, b = CancelSignal(), CancelSignal()
    combined = CancelSignal.any(a, None, b)

    b.abort("from b")

    assert combined.aborted
    assert combined.reason == "from b"
    assert not a.aborted


def test_any_with_already_aborted_source():
    a = CancelSignal()
    a.abort("early")

    assert CancelSignal.any(a).reason == "early"


def test_link_propagates_parent_abort_to_child_only():
    parent = CancelSignal()
    child = parent.link()

    child.abort("child only")
    assert not parent.aborted

    other = parent.link()
    parent.abort("parent")
    assert other.aborted and other.reason == "parent"


def test_timeout_aborts_with_timed_out_flag():
    async def scenario():
        signal = CancelSignal.timeout(10)
        await asyncio.wait_for(signal.wait(), timeout=1)
        return signal

    signal = asyncio.run(scenario())

    assert signal.timed_out is True
    assert signal.reason == "Request timed out after 10ms"


def test_run_cancellable_returns_result():
    async def work():
        return 42

    async def scenario():
        return await run_cancellable(work(), CancelSignal())

    assert asyncio.run(scenario()) == 42


def test_run_cancellable_cancels_work_when_signal_wins():
    state = {"cancelled": False}

    async def slow():
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise

    async def scenario():
        signal = CancelSignal()
        asyncio.get_running_loop().call_later(0.01, signal.abort, "user cancelled")
        await run_cancellable(slow(), signal)

    with pytest.raises(ActionCancelledError, match="user cancelled"):
        asyncio.run(scenario())
    assert state["cancelled"] is True


def test_run_cancellable_with_pre_aborted_signal_does_not_start_work():
    started = []

    async def work():
        started.append(1)

    async def scenario():
        signal = CancelSignal()
        signal.abort()
        coro = work()
        try:
            await run_cancellable(coro, signal)
        finally:
            coro.close()

    with pytest.raises(ActionCancelledError):
        asyncio.run(scenario())
    assert started == []
