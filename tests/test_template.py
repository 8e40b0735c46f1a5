import pytest

from barstatus.formatting.template import Fragment, FormatTemplate
from barstatus.formatting.value import Metadata, Value
from barstatus.icons import Icons
from barstatus.util import FormatError, StatusError


@pytest.fixture
def icons():
    return Icons.default()


def test_plain_text(icons):
    assert FormatTemplate.parse("simple").render({}, icons) == [Fragment("simple")]


def test_placeholder_and_text_merge(icons):
    template = FormatTemplate.parse("hello $x!")
    result = template.render({"x": Value.text("world")}, icons)
    assert result == [Fragment("hello world!")]


def test_fallback_to_next_alternative(icons):
    template = FormatTemplate.parse("$x|N/A")
    assert template.render({}, icons) == [Fragment("N/A")]


def test_missing_placeholder_in_last_alternative(icons):
    template = FormatTemplate.parse("$x|$y")
    with pytest.raises(FormatError, match="Placeholder 'y' not found"):
        template.render({}, icons)


def test_non_format_error_does_not_fall_back(icons):
    template = FormatTemplate.parse("$x.eng(u:b)|fallback")
    with pytest.raises(StatusError) as info:
        template.render({"x": Value.percents(50)}, icons)
    assert not isinstance(info.value, FormatError)


def test_icon(icons):
    assert FormatTemplate.parse("^icon_cpu").render({}, icons) == [Fragment("CPU")]


def test_unknown_icon(icons):
    with pytest.raises(FormatError, match="Icon 'nope' not found"):
        FormatTemplate.parse("^icon_nope").render({}, icons)


def test_recursive_template(icons):
    template = FormatTemplate.parse("{$x|N/A} end")
    assert template.render({}, icons) == [Fragment("N/A end")]


def test_metadata_splits_fragments(icons):
    values = {"a": Value.text("x").with_instance("i"), "b": Value.text("y")}
    result = FormatTemplate.parse("$a$b tail").render(values, icons)
    assert result == [Fragment("x", Metadata(instance="i")), Fragment("y tail")]


def test_text_after_metadata_starts_new_fragment(icons):
    values = {"a": Value.text("x").underline(True)}
    result = FormatTemplate.parse("$a tail").render(values, icons)
    assert [f.text for f in result] == ["x", " tail"]
    assert result[0].metadata.underline
    assert result[1].metadata.is_default()


def test_empty_template_renders_nothing(icons):
    assert FormatTemplate().render({}, icons) == []
    assert FormatTemplate.parse("").render({}, icons) == []


def test_contains_key():
    template = FormatTemplate.parse("a {$inner|b} $outer")
    assert template.contains_key("inner")
    assert template.contains_key("outer")
    assert not template.contains_key("missing")


def test_intervals():
    template = FormatTemplate.parse("$x.str(rot_interval:0.5) {$y.str(max_w:3,rot_interval:2)}")
    assert template.intervals() == [500, 2000]
    assert FormatTemplate.parse("$x").intervals() == []


@pytest.mark.parametrize("text", ["$x.foo()", "$x.", "{unclosed", "^icon_"])
def test_parse_errors(text):
    with pytest.raises(StatusError, match="Incorrect format template"):
        FormatTemplate.parse(text)