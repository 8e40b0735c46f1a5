"""Signals that ask blocks to refresh or the bar to restart."""

from __future__ import annotations

import asyncio
import signal
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import ClassVar


def _rt_bounds() -> tuple[int, int]:
    low = getattr(signal, "SIGRTMIN", None)
    high = getattr(signal, "SIGRTMAX", None)
    if low is None or high is None:
        return 0, 0
    return int(low), int(high)


@dataclass(frozen=True)
class Signal:
    """USR1, USR2, or a real-time signal given by its offset from SIGRTMIN."""

    kind: str
    offset: int | None = None

    USR1: ClassVar[Signal]
    USR2: ClassVar[Signal]

    @classmethod
    def custom(cls, offset: int) -> Signal:
        return cls("custom", offset)


Signal.USR1 = Signal("usr1")
Signal.USR2 = Signal("usr2")


def classify_signal(signum: int) -> Signal:
    """Map a raw signal number to a Signal."""
    if signum == signal.SIGUSR1:
        return Signal.USR1
    if signum == signal.SIGUSR2:
        return Signal.USR2
    return Signal.custom(int(signum) - _rt_bounds()[0])


def _watched_signals() -> list[int]:
    low, high = _rt_bounds()
    return [*range(low, high), int(signal.SIGUSR1), int(signal.SIGUSR2)]


async def signals_stream() -> AsyncIterator[Signal]:
    """Yield signals as they arrive; handlers are removed when the stream closes."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[int] = asyncio.Queue()
    registered: list[int] = []
    try:
        for signum in _watched_signals():
            loop.add_signal_handler(signum, queue.put_nowait, signum)
            registered.append(signum)
        while True:
            yield classify_signal(await queue.get())
    finally:
        for signum in registered:
            loop.remove_signal_handler(signum)