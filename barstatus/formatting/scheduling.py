"""Scheduling of widget redraws driven by formatter refresh intervals."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable, Sequence

# Longest wait, in milliseconds, before schedules are looked at again.
_MAX_DELAY_MS = 100_000


def single_block_next_update(intervals: Sequence[int], time: int, last_update: int) -> int:
    """Milliseconds until one of the intervals next ticks; 0 if a tick was missed."""

    def next_update(moment: int, interval: int) -> int:
        return moment + interval - moment % interval

    time_to_next: int | None = None
    for interval in intervals:
        if next_update(last_update, interval) <= time:
            return 0
        wait = next_update(time, interval) - time
        time_to_next = wait if time_to_next is None else min(time_to_next, wait)
    return time_to_next if time_to_next is not None else 2**64 - 1


class WidgetUpdates:
    """An async stream yielding the ids of blocks whose widgets are due for a redraw."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._anchor = clock()
        self._last_update = 0
        self._intervals: dict[int, list[int]] = {}
        self._changed = asyncio.Event()

    def _now_ms(self) -> int:
        return int((self._clock() - self._anchor) * 1000)

    def set_intervals(self, block_id: int, intervals: Iterable[int]) -> None:
        """Replace a block's refresh intervals; an empty list unschedules it."""
        self._intervals.pop(block_id, None)
        intervals = list(intervals)
        if intervals:
            self._intervals[block_id] = intervals
        self._changed.set()

    def _schedule(self, now: int) -> tuple[int, list[int]]:
        blocks: list[int] = []
        delay = _MAX_DELAY_MS
        for block_id, intervals in self._intervals.items():
            block_delay = single_block_next_update(intervals, now, self._last_update)
            if block_delay < delay:
                delay = block_delay
                blocks.clear()
            if block_delay == delay:
                blocks.append(block_id)
        return delay, blocks

    def next_due(self) -> tuple[int, list[int]] | None:
        """Milliseconds until the next redraw and the blocks due then, or None."""
        if not self._intervals:
            return None
        return self._schedule(self._now_ms())

    def __aiter__(self) -> WidgetUpdates:
        return self

    async def __anext__(self) -> list[int]:
        while True:
            if not self._intervals:
                self._changed.clear()
                await self._changed.wait()
                continue
            now = self._now_ms()
            delay, blocks = self._schedule(now)
            if delay == 0:
                self._last_update = now
                return blocks
            self._changed.clear()
            try:
                await asyncio.wait_for(self._changed.wait(), delay / 1000)
            except TimeoutError:
                pass