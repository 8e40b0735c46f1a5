"""Parser for format template strings such as ``" ^icon_cpu $usage.eng(w:3) | N/A "``."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, TypeVar, Union

from barstatus.util import StatusError

T = TypeVar("T")

_SPACES = frozenset(" \t\n\r\x0c")
_SPECIAL = frozenset("$^{}|\\")


class ParseError(StatusError):
    """A template syntax error; ``cut`` marks an error that stops backtracking."""

    def __init__(self, message: str, *, cut: bool = False) -> None:
        super().__init__(message)
        self.cut = cut


@dataclass(frozen=True)
class Arg:
    """A ``key:val`` formatter argument."""

    key: str
    val: str


@dataclass
class FormatterCall:
    """A ``.name(args)`` suffix on a placeholder."""

    name: str
    args: list[Arg] = field(default_factory=list)


@dataclass
class Placeholder:
    """A ``$name`` placeholder with an optional formatter."""

    name: str
    formatter: FormatterCall | None = None


@dataclass(frozen=True)
class IconRef:
    """A ``^icon_name`` reference."""

    name: str


@dataclass
class TokenList:
    """One alternative of a template: text, placeholders, icons and nested templates."""

    tokens: list[Token] = field(default_factory=list)


@dataclass
class ParsedTemplate:
    """Alternatives separated by ``|``; the first that renders wins."""

    alternatives: list[TokenList] = field(default_factory=list)


Token = Union[str, Placeholder, IconRef, ParsedTemplate]


def _expected(char: str, text: str) -> ParseError:
    if text:
        return ParseError(f"expected '{char}', got '{text[0]}'")
    return ParseError(f"expected '{char}', got EOF")


def _near(text: str, kind: str) -> ParseError:
    return ParseError(f"{kind} error near '{text}'")


@contextmanager
def _committed() -> Iterator[None]:
    """Turn any error raised inside into one that stops backtracking."""
    try:
        yield
    except ParseError as exc:
        exc.cut = True
        raise


def _char(text: str, char: str) -> str:
    if text[:1] == char:
        return text[1:]
    raise _expected(char, text)


def _span(text: str, pred: Callable[[str], bool]) -> int:
    for pos, ch in enumerate(text):
        if not pred(ch):
            return pos
    return len(text)


def _take_while1(text: str, pred: Callable[[str], bool]) -> tuple[str, str]:
    n = _span(text, pred)
    if n == 0:
        raise _near(text, "TakeWhile1")
    return text[:n], text[n:]


def _spaces(text: str) -> str:
    return text[_span(text, lambda c: c in _SPACES):]


def _is_word(ch: str) -> bool:
    return ch.isalnum() or ch in "_-"


def _is_arg_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-.%"


def _opt(parser: Callable[[str], tuple[T, str]], text: str) -> tuple[T | None, str]:
    try:
        return parser(text)
    except ParseError as exc:
        if exc.cut:
            raise
        return None, text


def _separated_list0(
    text: str,
    sep: Callable[[str], str],
    elem: Callable[[str], tuple[T, str]],
) -> tuple[list[T], str]:
    items: list[T] = []
    try:
        item, text = elem(text)
    except ParseError as exc:
        if exc.cut:
            raise
        return items, text
    items.append(item)
    while True:
        try:
            after = sep(text)
        except ParseError as exc:
            if exc.cut:
                raise
            return items, text
        if len(after) == len(text):
            raise _near(after, "SeparatedList")
        try:
            item, after = elem(after)
        except ParseError as exc:
            if exc.cut:
                raise
            return items, text
        items.append(item)
        text = after


def _arg_value(text: str) -> tuple[str, str]:
    n = _span(text, _is_arg_char)
    if n:
        return text[:n], text[n:]
    rest = _char(text, "'")
    with _committed():
        n = _span(rest, lambda c: c != "'")
        if n == 0:
            raise _near(rest, "IsNot")
        value, rest = rest[:n], rest[n:]
        rest = _char(rest, "'")
    return value, rest


def parse_arg(text: str) -> tuple[Arg, str]:
    """Parse ``key:val`` or ``key:'quoted val'``."""
    key, rest = _take_while1(text, _is_word)
    with _committed():
        rest = _char(rest, ":")
        value, rest = _arg_value(rest)
    return Arg(key, value), rest


def parse_args(text: str) -> tuple[list[Arg], str]:
    """Parse a parenthesised, comma separated argument list."""
    rest = _char(text, "(")
    with _committed():
        args, rest = _separated_list0(
            rest,
            lambda t: _char(_spaces(t), ","),
            lambda t: parse_arg(_spaces(t)),
        )
        rest = _char(_spaces(rest), ")")
    return args, rest


def parse_formatter(text: str) -> tuple[FormatterCall, str]:
    """Parse ``.name`` with optional arguments."""
    rest = _char(text, ".")
    with _committed():
        name, rest = _take_while1(rest, _is_word)
        args, rest = _opt(parse_args, rest)
    return FormatterCall(name, args or []), rest


def parse_placeholder(text: str) -> tuple[Placeholder, str]:
    """Parse ``$name`` with an optional formatter."""
    rest = _char(text, "$")
    with _committed():
        name, rest = _take_while1(rest, _is_word)
        formatter, rest = _opt(parse_formatter, rest)
    return Placeholder(name, formatter), rest


def _parse_string(text: str) -> tuple[str, str]:
    if not text:
        raise _near(text, "Not")
    parts: list[str] = []
    pos = 0
    while pos < len(text):
        n = _span(text[pos:], lambda c: c not in _SPECIAL)
        if n:
            parts.append(text[pos : pos + n])
            pos += n
            continue
        if text[pos] == "\\":
            if pos + 1 >= len(text):
                raise _near(text[pos:], "EscapedTransform")
            parts.append(text[pos + 1])
            pos += 2
            continue
        if pos == 0:
            raise _near(text, "EscapedTransform")
        break
    return "".join(parts), text[pos:]


def parse_icon(text: str) -> tuple[str, str]:
    """Parse ``^icon_name`` and return the icon name."""
    rest = _char(text, "^")
    with _committed():
        if not rest.startswith("icon_"):
            raise _near(rest, "Tag")
        name, rest = _take_while1(rest[len("icon_") :], _is_word)
    return name, rest


def _parse_recursive(text: str) -> tuple[ParsedTemplate, str]:
    rest = _char(text, "{")
    with _committed():
        template, rest = parse_format_template(rest)
        rest = _char(rest, "}")
    return template, rest


def _parse_icon_token(text: str) -> tuple[IconRef, str]:
    name, rest = parse_icon(text)
    return IconRef(name), rest


_TOKEN_PARSERS: tuple[Callable[[str], tuple[Token, str]], ...] = (
    _parse_string,
    parse_placeholder,
    _parse_icon_token,
    _parse_recursive,
)


def _parse_token(text: str) -> tuple[Token, str]:
    error: ParseError | None = None
    for parser in _TOKEN_PARSERS:
        try:
            return parser(text)
        except ParseError as exc:
            if exc.cut:
                raise
            error = exc
    assert error is not None
    raise error


def parse_token_list(text: str) -> tuple[TokenList, str]:
    """Parse tokens until something that is not a token is met."""
    tokens: list[Token] = []
    while True:
        try:
            token, after = _parse_token(text)
        except ParseError as exc:
            if exc.cut:
                raise
            return TokenList(tokens), text
        if len(after) == len(text):
            raise _near(text, "Many0")
        tokens.append(token)
        text = after


def parse_format_template(text: str) -> tuple[ParsedTemplate, str]:
    """Parse ``|`` separated alternatives."""
    alternatives, rest = _separated_list0(
        text, lambda t: _char(t, "|"), parse_token_list
    )
    return ParsedTemplate(alternatives), rest


def parse_full(text: str) -> ParsedTemplate:
    """Parse a whole template, failing if anything is left over."""
    template, rest = parse_format_template(text)
    if rest:
        raise ParseError(f"unexpected '{rest[0]}'", cut=True)
    return template