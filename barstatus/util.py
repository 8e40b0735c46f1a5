"""Shared helpers: errors, file lookup, TOML loading and small text utilities."""

from __future__ import annotations

import asyncio
import math
import tomllib
from pathlib import Path
from typing import Any, Iterable

from platformdirs import user_config_path, user_data_path

APP_DIR = "barstatus"
SYSTEM_SHARE_DIR = Path("/usr/share") / APP_DIR

# One eighth block steps, lowest to full.
_BARS = "\u2581\u2582\u2583\u2584\u2585\u2586\u2587\u2588"


class StatusError(Exception):
    """An error reported by the status bar or one of its parts."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FormatError(StatusError):
    """A formatting failure; a template may fall back to its next alternative."""


def _exists_with_opt_extension(path: Path, extension: str | None) -> Path | None:
    if path.exists():
        return path
    if extension is not None and not path.suffix:
        candidate = path.with_name(f"{path.name}.{extension}")
        if candidate.exists():
            return candidate
    return None


def _search_roots() -> Iterable[Path]:
    yield user_config_path() / APP_DIR
    yield user_data_path() / APP_DIR
    yield SYSTEM_SHARE_DIR


def find_file(file: str, subdir: str | None = None, extension: str | None = None) -> Path | None:
    """Look for a file by absolute path, then in the user config, user data and system dirs.

    An extension is appended when the name has none and the bare name does not exist.
    """
    path = Path(file)
    if path.is_absolute() and path.exists():
        return path

    for root in _search_roots():
        base = root / subdir if subdir is not None else root
        found = _exists_with_opt_extension(base / path, extension)
        if found is not None:
            return found
    return None


def deserialize_toml_file(path: str | Path) -> dict[str, Any]:
    """Read and parse a TOML file, raising StatusError on failure."""
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StatusError(f"Failed to read file: {path}") from exc
    try:
        return tomllib.loads(contents)
    except tomllib.TOMLDecodeError as exc:
        raise StatusError(f"Failed to deserialize TOML file {path}: {exc}") from exc


async def read_file(path: str | Path) -> str:
    """Read a text file and return its contents without trailing whitespace."""

    def _read() -> str:
        return Path(path).read_text(encoding="utf-8")

    content = await asyncio.to_thread(_read)
    return content.rstrip()


async def has_command(command: str) -> bool:
    """Tell whether a shell command is available."""
    try:
        proc = await asyncio.create_subprocess_exec(
            "sh",
            "-c",
            f"command -v {command} >/dev/null 2>&1",
        )
        return_code = await proc.wait()
    except OSError as exc:
        raise StatusError(f"Failed to check {command} presence") from exc
    return return_code == 0


def format_bar_graph(content: Iterable[float]) -> str:
    """Render values as a one-line bar graph scaled between their min and max."""
    values = list(content)
    if not values:
        return ""
    low = min(values)
    span = max(values) - low

    def bar(value: float) -> str:
        try:
            level = (value - low) / span * 7.0
        except ZeroDivisionError:
            level = math.nan
        if math.isnan(level):
            return _BARS[0]
        return _BARS[int(min(max(level, 0.0), 7.0))]

    return "".join(bar(v) for v in values)


def country_flag_from_iso_code(country_code: str) -> str:
    """Turn a two-letter upper-case country code into its flag emoji.

    Anything else is returned unchanged.
    """
    raw = country_code.encode("utf-8")
    if len(raw) != 2 or not all(ord("A") <= b <= ord("Z") for b in raw):
        return country_code
    return "".join(chr(0x1F1E6 + b - ord("A")) for b in raw)