import io
import json

from barstatus.protocol.i3bar_block import I3BarBlock
from barstatus.protocol.output import (
    RenderedBlock,
    init,
    init_header,
    print_blocks,
    render_blocks,
)
from barstatus.themes.color import Color
from barstatus.themes.separator import Separator
from barstatus.themes.theme import Theme


def _block(*texts, merge=False):
    return RenderedBlock([I3BarBlock(full_text=t) for t in texts], merge)


def test_init_header():
    assert init_header(False) == '{"version": 1, "click_events": true}\n['
    assert init_header(True) == (
        '{"version": 1, "click_events": true, "stop_signal": 0}\n['
    )


def test_init_writes_header_line():
    out = io.StringIO()
    init(False, out)
    assert out.getvalue() == init_header(False) + "\n"


def test_native_separator_names_and_separators():
    blocks = [_block("a", "b"), RenderedBlock(), _block("c")]
    result = render_blocks(blocks, Theme())
    assert [s.full_text for s in result] == ["a", "b", "c"]
    assert [s.name for s in result] == ["0", "0", "1"]
    assert result[0].separator is False
    assert result[1].separator is None
    assert result[1].separator_block_width is None
    assert result[2].separator is None


def test_input_is_not_modified():
    blocks = [_block("a")]
    render_blocks(blocks, Theme())
    assert blocks[0].segments[0].name is None
    assert blocks[0].segments[0].separator is False


def test_merged_blocks_share_a_name():
    blocks = [_block("a", merge=True), _block("b"), _block("c")]
    result = render_blocks(blocks, Theme())
    assert [s.name for s in result] == ["0", "0", "1"]
    assert result[0].separator is False


def test_custom_separator_inserted_before_each_logical_block():
    theme = Theme(separator=Separator.parse("|"))
    blocks = [_block("a", merge=True), _block("b"), _block("c")]
    result = render_blocks(blocks, theme)
    assert [s.full_text for s in result] == ["|", "a", "b", "|", "c"]


def test_auto_separator_colors():
    blue = Color.parse("#0000ff")
    green = Color.parse("#00ff00")
    theme = Theme(
        separator=Separator.parse("|"),
        separator_fg=Color.parse("auto"),
        separator_bg=Color.parse("auto"),
    )
    blocks = [
        RenderedBlock([I3BarBlock(full_text="a", background=blue)]),
        RenderedBlock([I3BarBlock(full_text="b", background=green)]),
    ]
    result = render_blocks(blocks, theme)
    first_sep, second_sep = result[0], result[2]
    assert first_sep.color == blue
    assert first_sep.background == Color()
    assert second_sep.color == green
    assert second_sep.background == blue


def test_alternating_tint_skips_rightmost_block():
    tint = Color.parse("#111111")
    theme = Theme(alternating_tint_bg=tint)
    result = render_blocks([_block("a"), _block("b")], theme)
    assert result[0].background == tint
    assert result[1].background == Color()


def test_end_separator_uses_last_background():
    red = Color.parse("#ff0000")
    theme = Theme(end_separator=Separator.parse(">"))
    result = render_blocks([RenderedBlock([I3BarBlock(full_text="a", background=red)])], theme)
    assert result[-1].full_text == ">"
    assert result[-1].color == red
    assert result[-1].background == Color()


def test_print_blocks_writes_json_line():
    out = io.StringIO()
    print_blocks([_block("ä")], Theme(), out)
    text = out.getvalue()
    assert text.endswith(",\n")
    assert "ä" in text
    data = json.loads(text[:-2])
    assert data == [block.to_dict() for block in render_blocks([_block("ä")], Theme())]
    assert data[0]["name"] == "0"