"""Units attached to numeric values."""

from __future__ import annotations

from enum import Enum

from barstatus.formatting.prefix import Prefix
from barstatus.util import StatusError


class Unit(Enum):
    """A measurement unit; the value is its display symbol."""

    BYTES = "B"
    BITS = "b"
    PERCENTS = "%"
    DEGREES = "°"
    SECONDS = "s"
    WATTS = "W"
    HERTZ = "Hz"
    NONE = ""

    @classmethod
    def parse(cls, text: str) -> Unit:
        try:
            return _BY_NAME[text]
        except KeyError:
            raise StatusError(f"Unknown unit: '{text}'") from None

    def convert(self, value: float, unit: Unit) -> float:
        """Convert value from this unit to another."""
        if self is unit:
            return value
        if self is Unit.BYTES and unit is Unit.BITS:
            return value * 8.0
        if self is Unit.BITS and unit is Unit.BYTES:
            return value / 8.0
        raise StatusError(f"Failed to convert '{self}' to '{unit}")

    def clamp_prefix(self, prefix: Prefix) -> Prefix:
        """Restrict a prefix to what makes sense for this unit."""
        if self in (Unit.BYTES, Unit.BITS):
            return max(prefix, Prefix.ONE)
        if self in (Unit.PERCENTS, Unit.DEGREES, Unit.NONE):
            return Prefix.ONE
        return prefix

    def __str__(self) -> str:
        return self.value


_BY_NAME = {
    "B": Unit.BYTES,
    "b": Unit.BITS,
    "%": Unit.PERCENTS,
    "deg": Unit.DEGREES,
    "s": Unit.SECONDS,
    "W": Unit.WATTS,
    "Hz": Unit.HERTZ,
    "": Unit.NONE,
}