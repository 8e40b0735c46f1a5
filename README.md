# barstatus

Building blocks for a status-bar generator that speaks the JSON protocol
understood by i3bar and swaybar.

## What is in it

- `barstatus.formatting.parse` — parser for the template language, e.g.
  `" ^icon_cpu $usage.eng(w:3) | N/A "`: text, `$placeholders` with an
  optional `.formatter(key:val, ...)`, `^icon_name` references, nested
  `{ ... }` templates and `|`-separated alternatives. `parse_full` parses a
  whole template and raises `ParseError` on bad input.
- `barstatus.formatting.template` — `FormatTemplate.parse` compiles a template;
  `render(values, icons)` returns a list of `Fragment`s. Alternatives are tried
  in order and the first one that renders without a `FormatError` wins.
- `barstatus.formatting.formatter` — the `str`, `pango-str`, `bar`, `eng`,
  `fix` and `datetime` formatters, built by `new_formatter(name, args)`;
  `default_formatter(value)` picks one when a placeholder names none.
  (`fix` raises a `FormatError` for numbers: it is not available yet.)
- `barstatus.formatting.value` — `Value` with constructors such as
  `Value.text`, `Value.percents`, `Value.bytes`, `Value.datetime`,
  `Value.flag`, and metadata via `with_instance`, `underline`, `italic`.
- `barstatus.formatting.unit` / `barstatus.formatting.prefix` — `Unit` and
  SI / binary `Prefix` enums with parsing, conversion and prefix selection.
- `barstatus.formatting.format_config` — `FormatConfig` (a full and an
  optional short template, read from a string or a `{full, short}` table) and
  the ready-to-render `Format`.
- `barstatus.formatting.scheduling` — `single_block_next_update` and the
  async iterator `WidgetUpdates`, which yields the ids of blocks due for a
  redraw according to their refresh intervals.
- `barstatus.themes.color` — `Rgba`, `Hsva` and `Color` (which may also be
  `none` or `auto`), with additive tints and `#RRGGBBAA` output.
- `barstatus.themes.separator` — `Separator`, native or a custom string.
- `barstatus.themes.theme` — `Theme` (colours per widget `State`, separators,
  alternating tints), `Theme.from_user_config` loading a named theme file and
  `apply_overrides`, where an override may be a colour or a
  `{ link = "other_field" }` table.
- `barstatus.icons` — `Icons`: a built-in plain-text set (`Icons.default()`),
  sets loaded from TOML, overrides, and progressions picked by a value in 0..1.
- `barstatus.wrappers` — `Seconds` (a number or `"once"`, with an async
  `ticks()` timer), `ShellString` (`$VAR` and `~` expansion) and `RangeMap`
  (values keyed by `"start..end"` ranges).
- `barstatus.protocol` — `I3BarBlock` and its JSON form; `output.init` writes
  the protocol header, `output.render_blocks` and `output.print_blocks` lay
  `RenderedBlock`s out with logical names, alternating tints and separators.
- `barstatus.signals` — `signals_stream()`, an async iterator of `Signal`s
  (USR1, USR2 and real-time signals by offset from SIGRTMIN).
- `barstatus.spawn` — `spawn_process` / `spawn_shell` start detached
  commands; `spawn_shell_sync` runs a shell command and waits for it.
- `barstatus.util` — `StatusError` and `FormatError`, `find_file`,
  `deserialize_toml_file`, `read_file`, `has_command`, `format_bar_graph`,
  `country_flag_from_iso_code`.

## Examples

Rendering a template:

```python
from barstatus.formatting.template import FormatTemplate
from barstatus.formatting.value import Value
from barstatus.icons import Icons

template = FormatTemplate.parse("^icon_cpu $usage")
fragments = template.render({"usage": Value.percents(42)}, Icons.default())
fragments[0].text   # "CPU 42%"
```

Colors:

```python
from barstatus.themes.color import Color

Color.parse("#FF0000").to_json()   # "#FF0000FF"
```

Prefixes and units:

```python
from barstatus.formatting.prefix import Prefix
from barstatus.formatting.unit import Unit

str(Prefix.eng(1500))                        # "K"
Unit.parse("B").convert(1, Unit.parse("b"))  # 8.0
```

Scheduling:

```python
from barstatus.formatting.scheduling import single_block_next_update

single_block_next_update([200, 300, 500], 50, 0)  # 150 ms until the next redraw
```

Writing protocol output:

```python
from barstatus.protocol.i3bar_block import I3BarBlock
from barstatus.protocol.output import RenderedBlock, init, print_blocks
from barstatus.themes.theme import Theme

init(never_pause=False)
print_blocks([RenderedBlock([I3BarBlock(full_text="hello")])], Theme())
```

Small helpers:

```python
from barstatus.util import country_flag_from_iso_code, format_bar_graph

country_flag_from_iso_code("ES")   # "🇪🇸"
format_bar_graph([0.0, 0.5, 1.0])  # "▁▄█"
```

## Configuration files

`barstatus.util.find_file(file, subdir, extension)` uses an absolute path as
is if it exists; otherwise it searches the user's config directory, then the
user's data directory (both from platformdirs), then `/usr/share`, each under
a `barstatus` folder and the optional subfolder (`themes/` for themes,
`icons/` for icon sets). When the name has no extension and the bare name is
missing, the given extension (`.toml`) is tried too.
`deserialize_toml_file` raises `StatusError` naming the file when it cannot
be read or parsed.

## What it does not do

This is a library, not a running status bar. It has no command to start, no
main event loop, no configuration file describing a bar, no blocks that
collect system information (battery, network, volume and so on), and no
reading of click events from the bar. A program built on it supplies those
and uses these pieces to format and print its output.

## Tests

The test suite uses pytest and pytest-asyncio, available through the
`test` extra:

```
pip install -e .[test]
pytest
```