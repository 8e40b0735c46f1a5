"""Writing the bar protocol: the header and each line of rendered blocks."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TextIO

from barstatus.protocol.i3bar_block import I3BarBlock
from barstatus.themes.color import Color
from barstatus.themes.theme import Theme

_AUTO = Color.parse("auto")


@dataclass
class RenderedBlock:
    """The segments one configured block currently shows."""

    segments: list[I3BarBlock] = field(default_factory=list)
    merge_with_next: bool = False


def init_header(never_pause: bool) -> str:
    """The protocol header followed by the opening of the infinite array."""
    if never_pause:
        return '{"version": 1, "click_events": true, "stop_signal": 0}\n['
    return '{"version": 1, "click_events": true}\n['


def init(never_pause: bool, stream: TextIO | None = None) -> None:
    """Send the protocol header."""
    out = stream if stream is not None else sys.stdout
    print(init_header(never_pause), file=out, flush=True)


def render_blocks(blocks: Iterable[RenderedBlock], theme: Theme) -> list[I3BarBlock]:
    """Lay blocks out with names, alternating tints and separators."""
    shown = [block for block in blocks if block.segments]
    prev_last_bg = Color()
    rendered: list[I3BarBlock] = []

    # The right-most block is never tinted.
    alt = sum(1 for block in shown if not block.merge_with_next) % 2 == 0
    logical_index = 0
    prev_merge_with_next = False

    for block in shown:
        segments = [replace(segment) for segment in block.segments]
        merge = block.merge_with_next

        for segment in segments:
            segment.name = str(logical_index)
            if alt:
                segment.background = segment.background + theme.alternating_tint_bg
                segment.color = segment.color + theme.alternating_tint_fg

        if not merge:
            alt = not alt

        if not theme.separator.is_native():
            if not prev_merge_with_next:
                sep_fg = (
                    segments[0].background
                    if theme.separator_fg == _AUTO
                    else theme.separator_fg
                )
                sep_bg = prev_last_bg if theme.separator_bg == _AUTO else theme.separator_bg
                rendered.append(
                    I3BarBlock(
                        full_text=theme.separator.custom or "",
                        background=sep_bg,
                        color=sep_fg,
                    )
                )
        elif not merge:
            # Let the bar draw its own separator after the last segment.
            segments[-1].separator = None
            segments[-1].separator_block_width = None

        if not merge:
            logical_index += 1

        prev_merge_with_next = merge
        prev_last_bg = segments[-1].background
        rendered.extend(segments)

    if not theme.end_separator.is_native():
        rendered.append(
            I3BarBlock(
                full_text=theme.end_separator.custom or "",
                background=Color(),
                color=prev_last_bg,
            )
        )
    return rendered


def print_blocks(
    blocks: Iterable[RenderedBlock], theme: Theme, stream: TextIO | None = None
) -> None:
    """Write one line of the protocol's infinite array."""
    out = stream if stream is not None else sys.stdout
    payload = [block.to_dict() for block in render_blocks(blocks, theme)]
    line = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    print(f"{line},", file=out, flush=True)