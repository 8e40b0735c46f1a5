"""Icon sets: names mapped to a glyph or to a progression of glyphs."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from barstatus.util import StatusError, deserialize_toml_file, find_file

Icon = Union[str, tuple[str, ...]]

_CONFIG_KEYS = frozenset({"icons", "overrides"})

_NONE_ICONS: dict[str, str] = {
    "backlight": "BRIGHT",
    "bat": "BAT",
    "bat_charging": "CHG",
    "bat_discharging": "DCG",
    "bat_empty": "EMP",
    "bat_full": "FULL",
    "bat_not_available": "BAT N/A",
    "bell": "ON",
    "bell-slash": "OFF",
    "bluetooth": "BT",
    "calendar": "CAL",
    "cogs": "LOAD",
    "cpu": "CPU",
    "cpu_boost_on": "BOOST ON",
    "cpu_boost_off": "BOOST OFF",
    "disk_drive": "DISK",
    "docker": "DOCKER",
    "github": "GITHUB",
    "gpu": "GPU",
    "headphones": "HEAD",
    "joystick": "JOY",
    "keyboard": "KBD",
    "mail": "MAIL",
    "memory_mem": "MEM",
    "memory_swap": "SWAP",
    "mouse": "MOUSE",
    "music": "MUSIC",
    "music_next": ">",
    "music_pause": "||",
    "music_play": ">",
    "music_prev": "<",
    "net_bridge": "BRIDGE",
    "net_down": "DOWN",
    "net_loopback": "LO",
    "net_modem": "MODEM",
    "net_up": "UP ",
    "net_vpn": "VPN",
    "net_wired": "ETH",
    "net_wireless": "WLAN",
    "notification": "NOTIF",
    "phone": "PHONE",
    "phone_disconnected": "PHONE",
    "ping": "PING",
    "pomodoro": "POMODORO",
    "pomodoro_break": "BREAK",
    "pomodoro_paused": "PAUSED",
    "pomodoro_started": "STARTED",
    "pomodoro_stopped": "STOPPED",
    "resolution": "RES",
    "tasks": "TSK",
    "tea": "TEA",
    "thermometer": "TEMP",
    "time": "TIME",
    "toggle_off": "OFF",
    "toggle_on": "ON",
    "unknown": "??",
    "update": "UPD",
    "uptime": "UP",
    "volume": "VOL",
    "volume_muted": "VOL MUTED",
    "microphone": "MIC",
    "microphone_muted": "MIC MUTED",
    "weather_clouds": "CLOUDY",
    "weather_default": "WEATHER",
    "weather_rain": "RAIN",
    "weather_snow": "SNOW",
    "weather_sun": "SUNNY",
    "weather_thunder": "STORM",
    "xrandr": "SCREEN",
}


def _coerce_icon(name: str, value: Any) -> Icon:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise StatusError(f"icon '{name}' must be a string or a list of strings")


def _coerce_icons(icons: Mapping[str, Any]) -> dict[str, Icon]:
    if not isinstance(icons, Mapping):
        raise StatusError("icons must be a table")
    return {name: _coerce_icon(name, value) for name, value in icons.items()}


@dataclass
class Icons:
    """A named set of icons."""

    icons: dict[str, Icon] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.icons = _coerce_icons(self.icons)

    @classmethod
    def default(cls) -> Icons:
        """The plain-text ``none`` icon set."""
        return cls(dict(_NONE_ICONS))

    @classmethod
    def from_file(cls, file: str) -> Icons:
        """Load an icon set by name or path; ``none`` gives the built-in set."""
        if file == "none":
            return cls.default()
        path = find_file(file, "icons", "toml")
        if path is None:
            raise StatusError(f"Icon set '{file}' not found")
        return cls(deserialize_toml_file(path))

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> Icons:
        """Build from an ``icons``/``overrides`` configuration table."""
        config = config or {}
        if not isinstance(config, Mapping):
            raise StatusError("icons configuration must be a table")
        for key in config:
            if key not in _CONFIG_KEYS:
                raise StatusError(f"unknown field '{key}' in icons configuration")
        icons = cls.from_file(config.get("icons") or "none")
        overrides = config.get("overrides")
        if overrides is not None:
            icons.apply_overrides(overrides)
        return icons

    def apply_overrides(self, overrides: Mapping[str, Any]) -> None:
        """Add or replace icons."""
        self.icons.update(_coerce_icons(overrides))

    def get(self, icon: str, value: float | None = None) -> str | None:
        """Look up an icon; for a progression, value in 0..1 picks the step."""
        found = self.icons.get(icon)
        if found is None:
            return None
        if isinstance(found, str):
            return found
        if not found:
            return None
        if value is None:
            return found[-1]
        scaled = value * len(found)
        index = 0 if math.isnan(scaled) else int(min(max(scaled, 0.0), len(found) - 1))
        return found[index]