"""One block of the status bar as the i3bar/swaybar JSON protocol describes it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from barstatus.themes.color import Color

_OPTIONAL_BORDER_FIELDS = (
    "border",
    "border_top",
    "border_right",
    "border_bottom",
    "border_left",
    "min_width",
)
_OPTIONAL_TAIL_FIELDS = ("urgent", "separator", "separator_block_width", "markup")


class Align(Enum):
    """Text alignment inside a block wider than its text."""

    CENTER = "center"
    RIGHT = "right"
    LEFT = "left"


@dataclass
class I3BarBlock:
    """A single segment sent to the bar.

    ``name`` identifies the logical block a segment belongs to; ``instance`` holds
    ``{block_id}:{widget_name}`` and is used to dispatch click events.
    """

    full_text: str = ""
    short_text: str = ""
    color: Color = field(default_factory=Color)
    background: Color = field(default_factory=Color)
    border: str | None = None
    border_top: int | None = None
    border_right: int | None = None
    border_bottom: int | None = None
    border_left: int | None = None
    min_width: int | str | None = None
    align: Align | None = None
    name: str | None = None
    instance: str = ""
    urgent: bool | None = None
    separator: bool | None = False
    separator_block_width: int | None = 0
    markup: str | None = "pango"

    def to_dict(self) -> dict[str, Any]:
        """The JSON object for this block; unset fields are left out."""
        out: dict[str, Any] = {"full_text": self.full_text}
        if self.short_text:
            out["short_text"] = self.short_text
        for name in ("color", "background"):
            color: Color = getattr(self, name)
            if not color.is_hidden():
                out[name] = color.to_json()
        for name in _OPTIONAL_BORDER_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        if self.align is not None:
            out["align"] = self.align.value
        if self.name is not None:
            out["name"] = self.name
        if self.instance:
            out["instance"] = self.instance
        for name in _OPTIONAL_TAIL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out