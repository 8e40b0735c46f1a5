"""Themes: the colours and separators used to draw blocks, and widget states."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from barstatus.themes.color import Color
from barstatus.themes.separator import Separator
from barstatus.util import StatusError, deserialize_toml_file, find_file

DEFAULT_THEME = "plain"

_COLOR_FIELDS = (
    "idle_bg",
    "idle_fg",
    "info_bg",
    "info_fg",
    "good_bg",
    "good_fg",
    "warning_bg",
    "warning_fg",
    "critical_bg",
    "critical_fg",
    "separator_bg",
    "separator_fg",
    "alternating_tint_bg",
    "alternating_tint_fg",
)
_SEPARATOR_FIELDS = ("separator", "end_separator")
_USER_CONFIG_KEYS = frozenset({"theme", "overrides"})


class State(Enum):
    """State of a widget; it picks the colours the widget is drawn with."""

    IDLE = "idle"
    INFO = "info"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, text: str) -> State:
        """Accept the capitalised name (``Idle``) or the lower-case one (``idle``)."""
        for state in cls:
            if text in (state.value, state.value.capitalize()):
                return state
        raise StatusError(f"unknown state '{text}'")


def _parse_color(name: str, value: Any) -> Color:
    if not isinstance(value, str):
        raise StatusError(f"'{name}' must be a color string")
    return Color.parse(value)


def _parse_separator(name: str, value: Any) -> Separator:
    if not isinstance(value, str):
        raise StatusError(f"'{name}' must be a separator string or 'native'")
    return Separator.parse(value)


@dataclass
class Theme:
    """Colours for each widget state plus separator settings."""

    idle_bg: Color = Color()
    idle_fg: Color = Color()
    info_bg: Color = Color()
    info_fg: Color = Color()
    good_bg: Color = Color()
    good_fg: Color = Color()
    warning_bg: Color = Color()
    warning_fg: Color = Color()
    critical_bg: Color = Color()
    critical_fg: Color = Color()
    separator: Separator = Separator()
    separator_bg: Color = Color()
    separator_fg: Color = Color()
    alternating_tint_bg: Color = Color()
    alternating_tint_fg: Color = Color()
    end_separator: Separator = Separator()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Theme:
        """Build a theme from a parsed theme file; unknown keys are an error."""
        if not isinstance(data, Mapping):
            raise StatusError("a theme must be a table")
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise StatusError(f"unknown field '{key}' in theme")
            if key in _SEPARATOR_FIELDS:
                values[key] = _parse_separator(key, value)
            else:
                values[key] = _parse_color(key, value)
        return cls(**values)

    @classmethod
    def from_user_config(cls, config: Mapping[str, Any] | None) -> Theme:
        """Load the named theme (``plain`` by default) and apply the user's overrides."""
        config = config or {}
        if not isinstance(config, Mapping):
            raise StatusError("theme configuration must be a table")
        for key in config:
            if key not in _USER_CONFIG_KEYS:
                raise StatusError(f"unknown field '{key}' in theme configuration")
        name = config.get("theme") or DEFAULT_THEME
        path = find_file(name, "themes", "toml")
        if path is None:
            raise StatusError(f"Theme '{name}' not found")
        theme = cls.from_dict(deserialize_toml_file(path))
        overrides = config.get("overrides")
        if overrides is not None:
            theme.apply_overrides(overrides)
        return theme

    def get_colors(self, state: State) -> tuple[Color, Color]:
        """Background and foreground colours for a widget state."""
        return {
            State.IDLE: (self.idle_bg, self.idle_fg),
            State.INFO: (self.info_bg, self.info_fg),
            State.GOOD: (self.good_bg, self.good_fg),
            State.WARNING: (self.warning_bg, self.warning_fg),
            State.CRITICAL: (self.critical_bg, self.critical_fg),
        }[state]

    def apply_overrides(self, overrides: Mapping[str, Any]) -> None:
        """Replace colours and separators; links refer to the theme as it was before."""
        if not isinstance(overrides, Mapping):
            raise StatusError("theme overrides must be a table")
        changes: dict[str, Any] = {}
        for name in _SEPARATOR_FIELDS:
            if name in overrides:
                changes[name] = _parse_separator(name, overrides[name])
        for name in _COLOR_FIELDS:
            if name in overrides:
                changes[name] = self._eval_color_or_link(name, overrides[name])
        for name, value in changes.items():
            setattr(self, name, value)

    def _eval_color_or_link(self, name: str, value: Any) -> Color:
        if isinstance(value, str):
            return Color.parse(value)
        if isinstance(value, Mapping) and isinstance(value.get("link"), str):
            link = value["link"]
            if link not in _COLOR_FIELDS:
                raise StatusError(f"{link} is not a correct theme color")
            return getattr(self, link)
        raise StatusError(f"'{name}' must be a color or a {{ link = ... }} table")