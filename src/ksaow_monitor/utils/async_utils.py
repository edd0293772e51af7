"""Event loop helpers for the long-running service."""

import asyncio
import signal
import sys
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


def _install_stop_handlers(
    loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event
) -> Callable[[], None]:
    """Make SIGINT/SIGTERM set ``stop_event``; return a function that undoes it."""
    if threading.current_thread() is not threading.main_thread():
        return lambda: None

    signals = [signal.SIGINT, signal.SIGTERM]
    if sys.platform != "win32":
        for signum in signals:
            loop.add_signal_handler(signum, stop_event.set)

        def _remove() -> None:
            for signum in signals:
                loop.remove_signal_handler(signum)

        return _remove

    # Windows has no loop signal handlers; fall back to signal.signal.
    originals = {}

    def handler(signum: int, frame: Any) -> None:
        loop.call_soon_threadsafe(stop_event.set)

    for signum in signals:
        originals[signum] = signal.signal(signum, handler)

    def _restore() -> None:
        for signum, original in originals.items():
            signal.signal(signum, original)

    return _restore


def run_until_stopped(main: Callable[[asyncio.Event], Coroutine[Any, Any, T]]) -> T:
    """
    Run ``main(stop_event)`` in a fresh event loop.

    The stop event is set on SIGINT/SIGTERM so the coroutine can finish its
    current wait and exit cleanly.
    """

    async def _runner() -> T:
        stop_event = asyncio.Event()
        undo = _install_stop_handlers(asyncio.get_running_loop(), stop_event)
        try:
            return await main(stop_event)
        finally:
            undo()

    return asyncio.run(_runner())
