"""SI and binary prefixes for numeric values."""

from __future__ import annotations

import math
from enum import Enum

from barstatus.util import StatusError


class Prefix(Enum):
    """A metric or binary prefix, ordered from smallest to largest."""

    NANO = 0
    MICRO = 1
    MILLI = 2
    ONE = 3
    ONE_BUT_BINARY = 4
    KILO = 5
    KIBI = 6
    MEGA = 7
    MEBI = 8
    GIGA = 9
    GIBI = 10
    TERA = 11
    TEBI = 12

    def __lt__(self, other: Prefix) -> bool:
        if not isinstance(other, Prefix):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: Prefix) -> bool:
        if not isinstance(other, Prefix):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: Prefix) -> bool:
        if not isinstance(other, Prefix):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: Prefix) -> bool:
        if not isinstance(other, Prefix):
            return NotImplemented
        return self.value >= other.value

    @classmethod
    def min_available(cls) -> Prefix:
        return cls.NANO

    @classmethod
    def max_available(cls) -> Prefix:
        return cls.TERA

    def apply(self, value: float) -> float:
        """Scale a plain value into this prefix."""
        return value / _MULTIPLIERS[self]

    @classmethod
    def eng(cls, number: float) -> Prefix:
        """Pick the decimal prefix that suits the magnitude of number."""
        if number == 0.0:
            return cls.ONE
        group = _floor_group(math.log10(abs(number)) / 3.0)
        if group <= -3:
            return cls.NANO
        if group >= 4:
            return cls.TERA
        return {
            -2: cls.MICRO,
            -1: cls.MILLI,
            0: cls.ONE,
            1: cls.KILO,
            2: cls.MEGA,
            3: cls.GIGA,
        }[group]

    @classmethod
    def eng_binary(cls, number: float) -> Prefix:
        """Pick the binary prefix that suits the magnitude of number."""
        if number == 0.0:
            return cls.ONE
        group = _floor_group(math.log2(abs(number)) / 10.0)
        if group <= 0:
            return cls.ONE_BUT_BINARY
        if group >= 4:
            return cls.TEBI
        return {1: cls.KIBI, 2: cls.MEBI, 3: cls.GIBI}[group]

    def is_binary(self) -> bool:
        return self in _BINARY

    @classmethod
    def parse(cls, text: str) -> Prefix:
        try:
            return _BY_NAME[text]
        except KeyError:
            raise StatusError(f"Unknown prefix: '{text}'") from None

    def __str__(self) -> str:
        return _DISPLAY[self]


def _floor_group(x: float) -> int:
    if math.isnan(x):
        return 0
    if math.isinf(x):
        return 1 << 31 if x > 0 else -(1 << 31)
    return math.floor(x)


_MULTIPLIERS = {
    Prefix.NANO: 1e-9,
    Prefix.MICRO: 1e-6,
    Prefix.MILLI: 1e-3,
    Prefix.ONE: 1.0,
    Prefix.ONE_BUT_BINARY: 1.0,
    Prefix.KILO: 1e3,
    Prefix.KIBI: 1024.0,
    Prefix.MEGA: 1e6,
    Prefix.MEBI: 1024.0**2,
    Prefix.GIGA: 1e9,
    Prefix.GIBI: 1024.0**3,
    Prefix.TERA: 1e12,
    Prefix.TEBI: 1024.0**4,
}

_BINARY = frozenset(
    {Prefix.ONE_BUT_BINARY, Prefix.KIBI, Prefix.MEBI, Prefix.GIBI, Prefix.TEBI}
)

_BY_NAME = {
    "n": Prefix.NANO,
    "u": Prefix.MICRO,
    "m": Prefix.MILLI,
    "1": Prefix.ONE,
    "1i": Prefix.ONE_BUT_BINARY,
    "K": Prefix.KILO,
    "Ki": Prefix.KIBI,
    "M": Prefix.MEGA,
    "Mi": Prefix.MEBI,
    "G": Prefix.GIGA,
    "Gi": Prefix.GIBI,
    "T": Prefix.TERA,
    "Ti": Prefix.TEBI,
}

_DISPLAY = {
    Prefix.NANO: "n",
    Prefix.MICRO: "u",
    Prefix.MILLI: "m",
    Prefix.ONE: "",
    Prefix.ONE_BUT_BINARY: "",
    Prefix.KILO: "K",
    Prefix.KIBI: "Ki",
    Prefix.MEGA: "M",
    Prefix.MEBI: "Mi",
    Prefix.GIGA: "G",
    Prefix.GIBI: "Gi",
    Prefix.TERA: "T",
    Prefix.TEBI: "Ti",
}