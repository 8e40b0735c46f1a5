"""Compiled format templates and their rendering into fragments."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Union

from barstatus.formatting import parse
from barstatus.formatting.formatter import Formatter, default_formatter, new_formatter
from barstatus.formatting.value import Metadata, Value
from barstatus.icons import Icons
from barstatus.util import FormatError, StatusError

_MILLISECOND = timedelta(milliseconds=1)


@dataclass
class Fragment:
    """A run of rendered text that shares one set of metadata."""

    text: str = ""
    metadata: Metadata = field(default_factory=Metadata)


@dataclass(frozen=True)
class _Text:
    text: str


@dataclass(frozen=True)
class _Placeholder:
    name: str
    formatter: Formatter | None = None


@dataclass(frozen=True)
class _Icon:
    name: str


_Token = Union[_Text, _Placeholder, _Icon, "FormatTemplate"]


@dataclass
class TokenList:
    """One alternative of a template."""

    tokens: list[_Token] = field(default_factory=list)

    def render(self, values: Mapping[str, Value], icons: Icons) -> list[Fragment]:
        """Render the tokens, merging neighbours that share metadata."""
        result: list[Fragment] = []
        cur = Fragment()

        def push_plain(text: str) -> Fragment:
            if cur.metadata.is_default():
                cur.text += text
                return cur
            if cur.text:
                result.append(cur)
            return Fragment(text)

        for token in self.tokens:
            if isinstance(token, _Text):
                cur = push_plain(token.text)
            elif isinstance(token, FormatTemplate):
                if cur.text:
                    result.append(cur)
                result.extend(token.render(values, icons))
                cur = result.pop() if result else Fragment()
            elif isinstance(token, _Placeholder):
                value = values.get(token.name)
                if value is None:
                    raise FormatError(f"Placeholder '{token.name}' not found")
                formatter = token.formatter or default_formatter(value)
                formatted = formatter.format(value.inner)
                if value.metadata == cur.metadata:
                    cur.text += formatted
                else:
                    if cur.text:
                        result.append(cur)
                    cur = Fragment(formatted, value.metadata)
            else:
                icon = icons.get(token.name, None)
                if icon is None:
                    raise FormatError(f"Icon '{token.name}' not found")
                cur = push_plain(icon)

        if cur.text:
            result.append(cur)
        return result


@dataclass
class FormatTemplate:
    """Alternatives tried in order; the first that renders without a format error wins."""

    alternatives: list[TokenList] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> FormatTemplate:
        """Parse and compile a template string."""
        try:
            return _compile_template(parse.parse_full(text))
        except StatusError as exc:
            raise StatusError(f"Incorrect format template: {exc.message}") from exc

    def contains_key(self, key: str) -> bool:
        """Whether a placeholder with this name appears anywhere in the template."""
        return any(
            (isinstance(token, _Placeholder) and token.name == key)
            or (isinstance(token, FormatTemplate) and token.contains_key(key))
            for token_list in self.alternatives
            for token in token_list.tokens
        )

    def render(self, values: Mapping[str, Value], icons: Icons) -> list[Fragment]:
        last = len(self.alternatives) - 1
        for index, token_list in enumerate(self.alternatives):
            try:
                return token_list.render(values, icons)
            except FormatError:
                if index == last:
                    raise
        return []

    def intervals(self) -> list[int]:
        """Refresh intervals, in milliseconds, asked for by the template's formatters."""
        found: list[int] = []
        for token_list in self.alternatives:
            for token in token_list.tokens:
                if isinstance(token, FormatTemplate):
                    found.extend(token.intervals())
                elif isinstance(token, _Placeholder) and token.formatter is not None:
                    interval = token.formatter.interval()
                    if interval is not None:
                        found.append(interval // _MILLISECOND)
        return found


def _compile_token(token: parse.Token) -> _Token:
    if isinstance(token, str):
        return _Text(token)
    if isinstance(token, parse.Placeholder):
        formatter = None
        if token.formatter is not None:
            formatter = new_formatter(token.formatter.name, token.formatter.args)
        return _Placeholder(token.name, formatter)
    if isinstance(token, parse.IconRef):
        return _Icon(token.name)
    return _compile_template(token)


def _compile_template(parsed: parse.ParsedTemplate) -> FormatTemplate:
    return FormatTemplate(
        [
            TokenList([_compile_token(token) for token in token_list.tokens])
            for token_list in parsed.alternatives
        ]
    )