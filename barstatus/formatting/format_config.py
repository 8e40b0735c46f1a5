"""Format configuration: a full template and an optional short one."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from barstatus.formatting.template import FormatTemplate
from barstatus.util import StatusError

_FIELDS = ("full", "short")


@dataclass
class Format:
    """Ready-to-render full and short templates with their refresh intervals."""

    full: FormatTemplate = field(default_factory=FormatTemplate)
    short: FormatTemplate = field(default_factory=FormatTemplate)
    intervals: list[int] = field(default_factory=list)


def _build(full: FormatTemplate, short: FormatTemplate) -> Format:
    return Format(full, short, full.intervals() + short.intervals())


@dataclass
class FormatConfig:
    """User format settings; missing parts are filled in from defaults."""

    full: FormatTemplate | None = None
    short: FormatTemplate | None = None

    @classmethod
    def parse(cls, text: str) -> FormatConfig:
        """A config with only the full template given."""
        return cls(full=FormatTemplate.parse(text))

    @classmethod
    def from_value(cls, value: Any) -> FormatConfig:
        """Read ``"template"`` or ``{full = "...", short = "..."}``."""
        if isinstance(value, str):
            return cls.parse(value)
        if not isinstance(value, Mapping):
            raise StatusError("expected format structure")
        templates: dict[str, FormatTemplate] = {}
        for key, text in value.items():
            if key not in _FIELDS:
                raise StatusError(f"unknown field '{key}', expected 'full' or 'short'")
            if not isinstance(text, str):
                raise StatusError(f"format field '{key}' must be a string")
            templates[key] = FormatTemplate.parse(text)
        return cls(**templates)

    def with_default(self, default_full: str) -> Format:
        return self.with_defaults(default_full, "")

    def with_defaults(self, default_full: str, default_short: str) -> Format:
        full = self.full if self.full is not None else FormatTemplate.parse(default_full)
        short = self.short if self.short is not None else FormatTemplate.parse(default_short)
        return _build(full, short)

    def with_default_config(self, default_config: FormatConfig) -> Format:
        full = self.full if self.full is not None else default_config.full
        short = self.short if self.short is not None else default_config.short
        return _build(full or FormatTemplate(), short or FormatTemplate())