"""Block separators: the bar's native one or a custom string."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Separator:
    """A separator; custom is None for the bar's native separator."""

    custom: str | None = None

    @classmethod
    def parse(cls, text: str) -> Separator:
        if text == "native":
            return cls()
        return cls(text)

    def is_native(self) -> bool:
        return self.custom is None