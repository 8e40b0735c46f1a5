"""Colours: RGBA, HSVA, and the theme-level Color that may also be none or auto."""

from __future__ import annotations

import math
import string
import sys
from dataclasses import dataclass

from barstatus.util import StatusError

_EPSILON = sys.float_info.epsilon
_MAX = sys.float_info.max


def _to_u8(x: float) -> int:
    """Saturating, truncating conversion to a byte."""
    if math.isnan(x):
        return 0
    return int(min(max(x, 0.0), 255.0))


def _fmod(a: float, b: float) -> float:
    if math.isinf(a) or math.isnan(a):
        return math.nan
    return math.fmod(a, b)


def approx(a: float, b: float) -> bool:
    """Relative comparison of two floats with a 1% tolerance."""
    if a == b:
        return True
    eps = 1e-2
    abs_a = abs(a)
    abs_b = abs(b)
    diff = abs(abs_a - abs_b)
    if a == 0.0 or b == 0.0 or abs_a + abs_b < _EPSILON:
        return diff < eps * _EPSILON
    return diff / min(abs_a + abs_b, _MAX) < eps


@dataclass(frozen=True)
class Rgba:
    """An RGBA colour with byte components."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    @classmethod
    def from_hex(cls, value: int) -> Rgba:
        """Build from a 32-bit ``0xRRGGBBAA`` value."""
        value &= 0xFFFFFFFF
        return cls(
            (value >> 24) & 0xFF,
            (value >> 16) & 0xFF,
            (value >> 8) & 0xFF,
            value & 0xFF,
        )

    def __add__(self, other: Rgba) -> Rgba:
        if not isinstance(other, Rgba):
            return NotImplemented
        return Rgba(
            min(self.r + other.r, 255),
            min(self.g + other.g, 255),
            min(self.b + other.b, 255),
            min(self.a + other.a, 255),
        )

    def to_hsva(self) -> Hsva:
        r, g, b = self.r / 255.0, self.g / 255.0, self.b / 255.0
        low = min(r, g, b)
        high = max(r, g, b)
        delta = high - low
        saturation = delta / high if high > 1e-3 else 0.0
        if delta == 0.0:
            hue = 0.0
        elif r == high:
            hue = (g - b) / delta
        elif g == high:
            hue = 2.0 + (b - r) / delta
        else:
            hue = 4.0 + (r - g) / delta
        return Hsva(math.fmod(hue * 60.0 + 360.0, 360.0), saturation, high, self.a)


@dataclass(frozen=True, eq=False)
class Hsva:
    """An HSVA colour: hue in degrees, saturation and value in 0..1, byte alpha."""

    h: float = 0.0
    s: float = 0.0
    v: float = 0.0
    a: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hsva):
            return NotImplemented
        return (
            approx(self.h, other.h)
            and approx(self.s, other.s)
            and approx(self.v, other.v)
            and self.a == other.a
        )

    def __hash__(self) -> int:
        return hash(self.a)

    def __add__(self, other: Hsva) -> Hsva:
        if not isinstance(other, Hsva):
            return NotImplemented
        return Hsva(
            _fmod(self.h + other.h, 360.0),
            min(max(self.s + other.s, 0.0), 1.0),
            min(max(self.v + other.v, 0.0), 1.0),
            min(self.a + other.a, 255),
        )

    def to_rgba(self) -> Rgba:
        sector = _to_u8(self.h / 60.0)
        chroma = self.v * self.s
        x = chroma * (1.0 - abs(_fmod(self.h / 60.0, 2.0) - 1.0))
        m = self.v - chroma

        cm = _to_u8((chroma + m) * 255.0)
        xm = _to_u8((x + m) * 255.0)
        mm = _to_u8(m * 255.0)

        components = {
            0: (cm, xm, mm),
            1: (xm, cm, mm),
            2: (mm, cm, xm),
            3: (mm, xm, cm),
            4: (xm, mm, cm),
        }.get(sector, (cm, mm, xm))
        return Rgba(*components, self.a)


def _parse_f64(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(text)
    return float(text)


def _parse_hex(text: str) -> int:
    digits = text[1:] if text.startswith("+") else text
    if not digits or any(c not in string.hexdigits for c in digits):
        raise ValueError(text)
    return int(digits, 16)


def _byte_slice(raw: bytes, start: int, stop: int) -> str | None:
    if len(raw) < stop:
        return None
    try:
        return raw[start:stop].decode("utf-8")
    except UnicodeDecodeError:
        return None


@dataclass(frozen=True)
class Color:
    """A theme colour: an RGBA or HSVA value, nothing, or ``auto``."""

    value: Rgba | Hsva | None = None
    auto: bool = False

    def __post_init__(self) -> None:
        if self.auto and self.value is not None:
            raise ValueError("an auto color carries no value")

    @classmethod
    def parse(cls, text: str) -> Color:
        """Parse ``none``, ``auto``, ``hsv:H:S:V[:A]`` or ``#RRGGBB[AA]``."""
        if text in ("none", ""):
            return cls()
        if text == "auto":
            return cls(auto=True)
        if text.startswith("hsv:"):
            message = f"'{text}' is not a valid HSVA color"
            parts = text[4:].split(":")
            try:
                if len(parts) < 3:
                    raise ValueError(text)
                h, s, v = (_parse_f64(p) for p in parts[:3])
                a = _parse_f64(parts[3]) if len(parts) > 3 else 100.0
            except ValueError:
                raise StatusError(message) from None
            return cls(Hsva(h, s / 100.0, v / 100.0, _to_u8(a / 100.0 * 255.0)))

        message = f"'{text}' is not a valid RGBA color"
        raw = text.encode("utf-8")
        rgb = _byte_slice(raw, 1, 7)
        alpha = _byte_slice(raw, 7, 9) or "FF"
        if rgb is None:
            raise StatusError(message)
        try:
            value = (_parse_hex(rgb) << 8) + _parse_hex(alpha)
        except ValueError:
            raise StatusError(message) from None
        return cls(Rgba.from_hex(value))

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        if other.value is None:
            return self
        if self.value is None:
            return other
        if isinstance(self.value, Hsva) and isinstance(other.value, Hsva):
            return Color(self.value + other.value)
        if isinstance(self.value, Rgba) and isinstance(other.value, Rgba):
            return Color(self.value + other.value)
        if isinstance(self.value, Hsva):
            hsva, rgba = self.value, other.value
        else:
            hsva, rgba = other.value, self.value
        assert isinstance(hsva, Hsva) and isinstance(rgba, Rgba)
        return Color(hsva + rgba.to_hsva())

    def is_hidden(self) -> bool:
        """Whether the colour is left out of the bar's output (none or auto)."""
        return self.value is None

    def to_json(self) -> str | None:
        """The ``#RRGGBBAA`` string for the bar protocol, or None."""
        if self.value is None:
            return None
        rgba = self.value if isinstance(self.value, Rgba) else self.value.to_rgba()
        return f"#{rgba.r:02X}{rgba.g:02X}{rgba.b:02X}{rgba.a:02X}"