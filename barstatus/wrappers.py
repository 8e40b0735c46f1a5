"""Configuration value wrappers: durations, shell strings and range maps."""

from __future__ import annotations

import asyncio
import math
import os
import re
from collections.abc import AsyncIterator, Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Generic, TypeVar

from barstatus.util import StatusError

K = TypeVar("K")
V = TypeVar("V")

ONCE = timedelta(seconds=60 * 60 * 24 * 365)
# A tick later than this is treated as missed and the schedule shifts.
_MISSED_TICK_SLACK = 0.005

_ENV_VAR = re.compile(r"\$(?:\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")


@dataclass(frozen=True)
class Seconds:
    """An interval given in seconds, or ``"once"`` for a year."""

    duration: timedelta

    @classmethod
    def parse(cls, value: Any, allow_once: bool = True) -> Seconds:
        """Read ``"once"``, an integer or a float number of seconds."""
        if isinstance(value, str):
            if allow_once and value == "once":
                return cls(ONCE)
            raise StatusError(f"'{value}' is not a valid duration")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise StatusError('expected "once", i64 or f64')
        if (isinstance(value, float) and not math.isfinite(value)) or value < 0:
            raise StatusError(f"'{value}' is not a valid duration")
        try:
            return cls(timedelta(seconds=value))
        except OverflowError:
            raise StatusError(f"'{value}' is not a valid duration") from None

    def seconds(self) -> int:
        """Whole seconds, fractions dropped."""
        return int(self.duration.total_seconds())

    async def ticks(self) -> AsyncIterator[float]:
        """Yield the loop time once per interval, starting one interval from now.

        A late tick delays the following ones instead of firing them in a burst.
        """
        period = self.duration.total_seconds()
        if period <= 0:
            raise StatusError("interval must be greater than zero")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + period
        while True:
            delay = deadline - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            now = loop.time()
            if now - deadline > _MISSED_TICK_SLACK:
                deadline = now + period
            else:
                deadline += period
            yield now


def _home() -> str | None:
    try:
        return str(Path.home())
    except RuntimeError:
        return None


@dataclass(frozen=True)
class ShellString:
    """A string that may hold ``~`` and ``$VAR`` references."""

    value: str

    def expand(self) -> str:
        """Expand environment variables, then a leading ``~``."""

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1) or match.group(2)
            found = os.environ.get(name)
            if found is None:
                raise KeyError(name)
            return found

        try:
            expanded = _ENV_VAR.sub(substitute, self.value)
        except KeyError as exc:
            raise StatusError("Failed to expand string") from exc

        if expanded == "~" or expanded.startswith("~/"):
            home = _home()
            if home is not None:
                expanded = home + expanded[1:]
        return expanded


@dataclass
class RangeMap(Generic[K, V]):
    """Values keyed by inclusive ranges; the first matching range wins."""

    entries: list[tuple[K, K, V]] = field(default_factory=list)

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, V], key_type: Callable[[str], K]
    ) -> RangeMap[K, V]:
        """Read ``{"start..end": value}`` entries, parsing bounds with key_type."""
        if not isinstance(mapping, Mapping):
            raise StatusError("expected range map")
        entries: list[tuple[K, K, V]] = []
        for range_text, value in mapping.items():
            start_text, sep, end_text = str(range_text).partition("..")
            if not sep:
                raise StatusError("invalid range")
            try:
                start = key_type(start_text)
                end = key_type(end_text)
            except (ValueError, TypeError) as exc:
                raise StatusError(f"invalid range bound in '{range_text}'") from exc
            entries.append((start, end, value))
        return cls(entries)

    def get(self, key: K) -> V | None:
        return next(
            (value for start, end, value in self.entries if start <= key <= end),
            None,
        )