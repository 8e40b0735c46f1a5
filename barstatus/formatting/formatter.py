"""Formatters that turn placeholder values into text."""

from __future__ import annotations

import locale as _locale
import math
import re
import sys
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Callable, Sequence

from barstatus.formatting.parse import Arg
from barstatus.formatting.prefix import Prefix
from barstatus.formatting.unit import Unit
from barstatus.formatting.value import (
    DatetimeValue,
    FlagValue,
    IconValue,
    NumberValue,
    TextValue,
    Value,
    ValueInner,
)
from barstatus.util import FormatError, StatusError

DEFAULT_STR_MIN_WIDTH = 0
DEFAULT_BAR_WIDTH = 5
DEFAULT_BAR_MAX_VAL = 100.0
DEFAULT_NUMBER_WIDTH = 2
DEFAULT_NUMBER_PAD_WITH = " "
DEFAULT_DATETIME_FORMAT = "%a %d/%m %R"

_VERTICAL_BAR_CHARS = " \u258f\u258e\u258d\u258c\u258b\u258a\u2589\u2588"
_PANGO_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", "'": "&#39;", '"': "&quot;"}
)
_USIZE = re.compile(r"\+?[0-9]+", re.ASCII)
_LOCALE_NAME = re.compile(r"POSIX|[a-z]{2,3}_[A-Z]{2}(?:@[a-z]+)?")
_U64_MAX = 2**64 - 1
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1


def _pango_escape(text: str) -> str:
    return text.translate(_PANGO_ESCAPES)


def _cannot(value: ValueInner, name: str) -> FormatError:
    return FormatError(f"{value.type_name} cannot be formatted with '{name}' formatter")


def _parse_usize(text: str, message: str) -> int:
    if not _USIZE.fullmatch(text):
        raise StatusError(message)
    return int(text)


def _parse_f64(text: str, message: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise StatusError(message)
    try:
        return float(text)
    except ValueError:
        raise StatusError(message) from None


def _parse_bool(text: str, message: str) -> bool:
    parsed = {"true": True, "false": False}.get(text)
    if parsed is None:
        raise StatusError(message)
    return parsed


def _clamp(x: float, low: float, high: float) -> float:
    if math.isnan(x):
        return x
    return min(max(x, low), high)


def _div(a: float, b: float) -> float:
    """Division with IEEE semantics for a zero divisor."""
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _trunc_index(x: float) -> int:
    return 0 if math.isnan(x) else int(x)


class Formatter(ABC):
    """Turns a value into text."""

    @abstractmethod
    def format(self, value: ValueInner) -> str:
        """Render the value, raising FormatError for unsupported kinds."""

    def interval(self) -> timedelta | None:
        """How often the output changes on its own, if ever."""
        return None


@dataclass
class StrFormatter(Formatter):
    """Pads, truncates or scrolls text; the result is markup-escaped."""

    min_width: int = DEFAULT_STR_MIN_WIDTH
    max_width: int | None = None
    rot_interval_ms: int | None = None
    init_time: float | None = None
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    def format(self, value: ValueInner) -> str:
        if isinstance(value, TextValue):
            return _pango_escape(self._fit(value.text))
        if isinstance(value, IconValue):
            return value.icon
        raise _cannot(value, "str")

    def _fit(self, text: str) -> str:
        width = len(text)
        limit = self.max_width
        if (
            self.rot_interval_ms is not None
            and self.init_time is not None
            and limit is not None
            and width > limit
        ):
            cycle = text + "|"
            elapsed_ms = max(int((self.clock() - self.init_time) * 1000), 0)
            step = (elapsed_ms // self.rot_interval_ms) % len(cycle)
            shown = cycle[step : step + min(limit, len(cycle) - step)]
            return (shown + text)[:limit]
        padded = text + " " * max(0, self.min_width - width)
        return padded if limit is None else padded[:limit]

    def interval(self) -> timedelta | None:
        if self.rot_interval_ms is None:
            return None
        return timedelta(milliseconds=self.rot_interval_ms)


@dataclass
class PangoStrFormatter(Formatter):
    """Passes text through untouched, so it may hold markup."""

    def format(self, value: ValueInner) -> str:
        if isinstance(value, TextValue):
            return value.text
        if isinstance(value, IconValue):
            return value.icon
        raise _cannot(value, "str")


@dataclass
class BarFormatter(Formatter):
    """Draws a number as a horizontal bar of partial blocks."""

    width: int = DEFAULT_BAR_WIDTH
    max_value: float = DEFAULT_BAR_MAX_VAL

    def format(self, value: ValueInner) -> str:
        if not isinstance(value, NumberValue):
            raise _cannot(value, "bar")
        fill = _clamp(_div(value.val, self.max_value), 0.0, 1.0) * self.width
        return "".join(
            _VERTICAL_BAR_CHARS[_trunc_index(_clamp(fill - i, 0.0, 1.0) * 8.0)]
            for i in range(self.width)
        )


@dataclass
class EngFixConfig:
    """Options shared by the engineering and fixed-point number formatters."""

    width: int = DEFAULT_NUMBER_WIDTH
    unit: Unit | None = None
    unit_has_space: bool = False
    unit_hidden: bool = False
    prefix: Prefix | None = None
    prefix_has_space: bool = False
    prefix_hidden: bool = False
    prefix_forced: bool = False
    pad_with: str = DEFAULT_NUMBER_PAD_WITH

    @classmethod
    def from_args(cls, args: Sequence[Arg]) -> EngFixConfig:
        config = cls()
        flags = {
            "hide_unit": "unit_hidden",
            "unit_space": "unit_has_space",
            "hide_prefix": "prefix_hidden",
            "prefix_space": "prefix_has_space",
            "force_prefix": "prefix_forced",
        }
        for arg in args:
            if arg.key in ("width", "w"):
                config.width = _parse_usize(arg.val, "Width must be a positive integer")
            elif arg.key in ("unit", "u"):
                config.unit = Unit.parse(arg.val)
            elif arg.key in ("prefix", "p"):
                config.prefix = Prefix.parse(arg.val)
            elif arg.key in flags:
                message = f"{arg.key} must be true or false"
                setattr(config, flags[arg.key], _parse_bool(arg.val, message))
            elif arg.key == "pad_with":
                if len(arg.val) != 1:
                    raise StatusError("pad_with must be a single character")
                config.pad_with = arg.val
            else:
                raise StatusError(f"Unknown argument for 'fix'/'eng': '{arg.key}'")
        return config


def _display_float(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x == 0 and math.copysign(1.0, x) < 0:
        return "-0"
    return str(int(x))


def _digits(val: float) -> int:
    biggest = val if val > 1.0 else 1.0
    digits = sys.maxsize if math.isinf(biggest) else math.floor(math.log10(biggest)) + 1
    if val < 0:
        digits += 1
    return digits


def _as_i64(x: float) -> int:
    if math.isnan(x):
        return 0
    if math.isinf(x):
        return _I64_MAX if x > 0 else _I64_MIN
    return min(max(int(x), _I64_MIN), _I64_MAX)


@dataclass
class EngFormatter(Formatter):
    """Shows a number with a fixed number of characters and an SI or binary prefix."""

    config: EngFixConfig = field(default_factory=EngFixConfig)

    def format(self, value: ValueInner) -> str:
        if not isinstance(value, NumberValue):
            raise _cannot(value, "eng")
        cfg = self.config
        val, unit = value.val, value.unit
        if cfg.unit is not None:
            val = unit.convert(val, cfg.unit)
            unit = cfg.unit

        if cfg.prefix is not None:
            low = cfg.prefix
            high = cfg.prefix if cfg.prefix_forced else Prefix.max_available()
        else:
            low, high = Prefix.min_available(), Prefix.max_available()

        guess = Prefix.eng_binary(val) if low.is_binary() else Prefix.eng(val)
        prefix = unit.clamp_prefix(guess)
        if prefix < low:
            prefix = low
        elif prefix > high:
            prefix = high
        val = prefix.apply(val)

        rest = cfg.width - _digits(val)
        if rest <= 0:
            text = _display_float(math.floor(val) if math.isfinite(val) else val)
        elif rest == 1:
            floored = math.floor(val) if math.isfinite(val) else val
            text = f"{cfg.pad_with}{_as_i64(floored)}"
        elif math.isnan(val):
            text = "NaN"
        else:
            text = f"{val:.{rest - 1}f}"

        show_prefix = not cfg.prefix_hidden and prefix not in (
            Prefix.ONE,
            Prefix.ONE_BUT_BINARY,
        )
        show_unit = not cfg.unit_hidden and unit is not Unit.NONE
        if show_prefix:
            if cfg.prefix_has_space:
                text += " "
            text += str(prefix)
        if show_unit:
            if cfg.unit_has_space or (cfg.prefix_has_space and not show_prefix):
                text += " "
            text += str(unit)
        return text


@dataclass
class FixFormatter(Formatter):
    """Fixed-point number formatting; not available yet for numbers."""

    config: EngFixConfig = field(default_factory=EngFixConfig)

    def format(self, value: ValueInner) -> str:
        if isinstance(value, NumberValue):
            raise FormatError("'fix' formatter is not implemented yet")
        raise _cannot(value, "fix")


@dataclass(frozen=True)
class _Names:
    short_days: tuple[str, ...]
    long_days: tuple[str, ...]
    short_months: tuple[str, ...]
    long_months: tuple[str, ...]
    am: str
    pm: str


_ENGLISH = _Names(
    ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    "AM",
    "PM",
)

_LOCALE_LOCK = threading.Lock()


@lru_cache(maxsize=None)
def _locale_names(name: str) -> _Names:
    """Day, month and am/pm names of a system locale; English if it is missing."""
    with _LOCALE_LOCK:
        saved = _locale.setlocale(_locale.LC_TIME)
        try:
            for candidate in (f"{name}.UTF-8", f"{name}.utf8", name):
                try:
                    _locale.setlocale(_locale.LC_TIME, candidate)
                except _locale.Error:
                    continue
                break
            else:
                return _ENGLISH
            # 2024-01-01 is a Monday.
            days = [datetime(2024, 1, 1 + i).timetuple() for i in range(7)]
            months = [datetime(2024, m, 1).timetuple() for m in range(1, 13)]
            return _Names(
                tuple(time.strftime("%a", d) for d in days),
                tuple(time.strftime("%A", d) for d in days),
                tuple(time.strftime("%b", m) for m in months),
                tuple(time.strftime("%B", m) for m in months),
                time.strftime("%p", datetime(2024, 1, 1, 9).timetuple()),
                time.strftime("%p", datetime(2024, 1, 1, 21).timetuple()),
            )
        finally:
            _locale.setlocale(_locale.LC_TIME, saved)


_Item = Callable[[datetime, _Names], str]


def _hour12(d: datetime) -> int:
    return d.hour % 12 or 12


def _week_sunday(d: datetime) -> int:
    yday = d.timetuple().tm_yday - 1
    return (yday + 7 - (d.weekday() + 1) % 7) // 7


def _week_monday(d: datetime) -> int:
    yday = d.timetuple().tm_yday - 1
    return (yday + 7 - d.weekday()) // 7


_NUMERIC: dict[str, tuple[Callable[[datetime], int], int, str]] = {
    "Y": (lambda d: d.year, 4, "0"),
    "C": (lambda d: d.year // 100, 2, "0"),
    "y": (lambda d: d.year % 100, 2, "0"),
    "m": (lambda d: d.month, 2, "0"),
    "d": (lambda d: d.day, 2, "0"),
    "e": (lambda d: d.day, 2, " "),
    "H": (lambda d: d.hour, 2, "0"),
    "k": (lambda d: d.hour, 2, " "),
    "I": (_hour12, 2, "0"),
    "l": (_hour12, 2, " "),
    "M": (lambda d: d.minute, 2, "0"),
    "S": (lambda d: d.second, 2, "0"),
    "j": (lambda d: d.timetuple().tm_yday, 3, "0"),
    "w": (lambda d: d.isoweekday() % 7, 1, "0"),
    "u": (lambda d: d.isoweekday(), 1, "0"),
    "U": (_week_sunday, 2, "0"),
    "W": (_week_monday, 2, "0"),
    "G": (lambda d: d.isocalendar()[0], 4, "0"),
    "g": (lambda d: d.isocalendar()[0] % 100, 2, "0"),
    "V": (lambda d: d.isocalendar()[1], 2, "0"),
    "s": (lambda d: int(d.timestamp()), 1, "0"),
}


def _offset(d: datetime, colon: bool) -> str:
    total = int((d.utcoffset() or timedelta(0)).total_seconds())
    sign = "-" if total < 0 else "+"
    hours, rem = divmod(abs(total), 3600)
    minutes = rem // 60
    return f"{sign}{hours:02d}:{minutes:02d}" if colon else f"{sign}{hours:02d}{minutes:02d}"


_TEXT: dict[str, _Item] = {
    "a": lambda d, n: n.short_days[d.weekday()],
    "A": lambda d, n: n.long_days[d.weekday()],
    "b": lambda d, n: n.short_months[d.month - 1],
    "h": lambda d, n: n.short_months[d.month - 1],
    "B": lambda d, n: n.long_months[d.month - 1],
    "p": lambda d, n: n.am if d.hour < 12 else n.pm,
    "P": lambda d, n: (n.am if d.hour < 12 else n.pm).lower(),
    "Z": lambda d, n: d.tzname() or "",
    "z": lambda d, n: _offset(d, False),
    "f": lambda d, n: f"{d.microsecond * 1000:09d}",
    "n": lambda d, n: "\n",
    "t": lambda d, n: "\t",
    "%": lambda d, n: "%",
}

_COMPOSITE = {
    "R": "%H:%M",
    "T": "%H:%M:%S",
    "D": "%m/%d/%y",
    "F": "%Y-%m-%d",
    "x": "%m/%d/%y",
    "X": "%H:%M:%S",
    "c": "%a %b %e %H:%M:%S %Y",
    "r": "%I:%M:%S %p",
    "v": "%e-%b-%Y",
}


def _const(text: str) -> _Item:
    return lambda d, n: text


def _numeric(getter: Callable[[datetime], int], width: int, pad: str, modifier: str | None) -> _Item:
    if modifier == "-":
        return lambda d, n: str(getter(d))
    fill = {"_": " ", "0": "0"}.get(modifier or "", pad)
    return lambda d, n: str(getter(d)).rjust(width, fill)


def _fraction(digits: int, dot: bool) -> _Item:
    divisor = 10 ** (9 - digits)
    lead = "." if dot else ""
    return lambda d, n: f"{lead}{d.microsecond * 1000 // divisor:0{digits}d}"


def _fraction_auto(d: datetime, _names: _Names) -> str:
    nanos = d.microsecond * 1000
    if nanos == 0:
        return ""
    if nanos % 1_000_000 == 0:
        return f".{nanos // 1_000_000:03d}"
    if nanos % 1000 == 0:
        return f".{nanos // 1000:06d}"
    return f".{nanos:09d}"


def _compile(pattern: str) -> list[_Item]:
    """Turn a strftime-style pattern into a list of rendering steps."""
    items: list[_Item] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            items.append(_const("".join(literal)))
            literal.clear()

    def invalid() -> StatusError:
        return StatusError(f"Invalid datetime format: '{pattern}'")

    pos, end = 0, len(pattern)
    while pos < end:
        ch = pattern[pos]
        pos += 1
        if ch != "%":
            literal.append(ch)
            continue
        modifier = None
        if pos < end and pattern[pos] in "-_0":
            modifier = pattern[pos]
            pos += 1
        if pos >= end:
            raise invalid()
        spec = pattern[pos]
        pos += 1
        flush()
        if spec == ".":
            if pattern[pos : pos + 1] == "f":
                pos += 1
                items.append(_fraction_auto)
            elif pattern[pos : pos + 2] in ("3f", "6f", "9f"):
                items.append(_fraction(int(pattern[pos]), dot=True))
                pos += 2
            else:
                raise invalid()
        elif spec in "369" and pattern[pos : pos + 1] == "f":
            pos += 1
            items.append(_fraction(int(spec), dot=False))
        elif spec == ":":
            if pattern[pos : pos + 1] != "z":
                raise invalid()
            pos += 1
            items.append(lambda d, n: _offset(d, True))
        elif spec in _COMPOSITE:
            items.extend(_compile(_COMPOSITE[spec]))
        elif spec in _NUMERIC:
            items.append(_numeric(*_NUMERIC[spec], modifier))
        elif spec in _TEXT:
            items.append(_TEXT[spec])
        else:
            raise invalid()
    flush()
    return items


class DatetimeFormatter(Formatter):
    """Renders a point in time with a strftime-style pattern and optional locale."""

    def __init__(self, pattern: str = DEFAULT_DATETIME_FORMAT, locale: str | None = None) -> None:
        if locale is not None and not _LOCALE_NAME.fullmatch(locale):
            raise StatusError("invalid locale")
        self.pattern = pattern
        self.locale = locale
        self._items = _compile(pattern)

    def __repr__(self) -> str:
        return f"DatetimeFormatter(pattern={self.pattern!r}, locale={self.locale!r})"

    def format(self, value: ValueInner) -> str:
        if not isinstance(value, DatetimeValue):
            raise _cannot(value, "datetime")
        moment = value.moment.astimezone(value.tz) if value.tz else value.moment.astimezone()
        names = _ENGLISH if self.locale is None else _locale_names(self.locale)
        return "".join(item(moment, names) for item in self._items)


@dataclass
class FlagFormatter(Formatter):
    """Flags render as nothing; their presence alone matters."""

    def format(self, value: ValueInner) -> str:
        if isinstance(value, FlagValue):
            return ""
        raise _cannot(value, "flag")


DEFAULT_STRING_FORMATTER = StrFormatter()
DEFAULT_NUMBER_FORMATTER = EngFormatter()
DEFAULT_DATETIME_FORMATTER = DatetimeFormatter()
DEFAULT_FLAG_FORMATTER = FlagFormatter()


def _new_str_formatter(args: Sequence[Arg]) -> StrFormatter:
    min_width = DEFAULT_STR_MIN_WIDTH
    max_width: int | None = None
    rot_interval: float | None = None
    width_error = "Width must be a positive integer"
    for arg in args:
        if arg.key in ("min_width", "min_w"):
            min_width = _parse_usize(arg.val, width_error)
        elif arg.key in ("max_width", "max_w"):
            max_width = _parse_usize(arg.val, width_error)
        elif arg.key in ("width", "w"):
            min_width = _parse_usize(arg.val, width_error)
            max_width = min_width
        elif arg.key == "rot_interval":
            rot_interval = _parse_f64(arg.val, "Interval must be a positive number")
        else:
            raise StatusError(f"Unknown argument for 'str': '{arg.key}'")
    if max_width is not None and max_width < min_width:
        raise StatusError("Max width must be greater of equal to min width")
    rot_ms = None
    if rot_interval is not None:
        if not rot_interval >= 0.1:
            raise StatusError("Interval must be greater than 0.1")
        rot_ms = int(min(rot_interval * 1e3, _U64_MAX))
    return StrFormatter(min_width, max_width, rot_ms, time.monotonic())


def _new_bar_formatter(args: Sequence[Arg]) -> BarFormatter:
    width = DEFAULT_BAR_WIDTH
    max_value = DEFAULT_BAR_MAX_VAL
    for arg in args:
        if arg.key in ("width", "w"):
            width = _parse_usize(arg.val, "Width must be a positive integer")
        elif arg.key == "max_value":
            max_value = _parse_f64(arg.val, "Max value must be a number")
        else:
            raise StatusError(f"Unknown argument for 'bar': '{arg.key}'")
    return BarFormatter(width, max_value)


def _new_datetime_formatter(args: Sequence[Arg]) -> DatetimeFormatter:
    pattern: str | None = None
    locale: str | None = None
    for arg in args:
        if arg.key in ("format", "f"):
            pattern = arg.val
        elif arg.key in ("locale", "l"):
            locale = arg.val
        else:
            raise StatusError(f"Unknown argument for 'datetime': '{arg.key}'")
    return DatetimeFormatter(pattern if pattern is not None else DEFAULT_DATETIME_FORMAT, locale)


def new_formatter(name: str, args: Sequence[Arg]) -> Formatter:
    """Build the formatter called name with key:val arguments."""
    if name == "str":
        return _new_str_formatter(args)
    if name == "pango-str":
        for arg in args:
            raise StatusError(f"Unknown argument for 'pango-str': '{arg.key}'")
        return PangoStrFormatter()
    if name == "bar":
        return _new_bar_formatter(args)
    if name == "eng":
        return EngFormatter(EngFixConfig.from_args(args))
    if name == "fix":
        return FixFormatter(EngFixConfig.from_args(args))
    if name == "datetime":
        return _new_datetime_formatter(args)
    raise StatusError(f"Unknown formatter: '{name}'")


def default_formatter(value: Value) -> Formatter:
    """The formatter used for a placeholder that names none."""
    inner = value.inner
    if isinstance(inner, (TextValue, IconValue)):
        return DEFAULT_STRING_FORMATTER
    if isinstance(inner, NumberValue):
        return DEFAULT_NUMBER_FORMATTER
    if isinstance(inner, DatetimeValue):
        return DEFAULT_DATETIME_FORMATTER
    return DEFAULT_FLAG_FORMATTER