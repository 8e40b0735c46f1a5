from pathlib import Path

import pytest

from barstatus.util import (
    FormatError,
    StatusError,
    country_flag_from_iso_code,
    deserialize_toml_file,
    find_file,
    format_bar_graph,
    has_command,
    read_file,
)


@pytest.mark.asyncio
async def test_has_command_ok():
    assert await has_command("sh") is True


@pytest.mark.asyncio
async def test_has_command_err():
    assert await has_command("thequickbrownfoxjumpsoverthelazydog") is False


def test_flags():
    assert country_flag_from_iso_code("ES") == "🇪🇸"
    assert country_flag_from_iso_code("US") == "🇺🇸"
    assert country_flag_from_iso_code("USA") == "USA"


def test_flag_lowercase_unchanged():
    assert country_flag_from_iso_code("es") == "es"


def test_read_errors_are_not_format_errors(tmp_path):
    with pytest.raises(StatusError) as info:
        deserialize_toml_file(Path(tmp_path) / "absent.toml")
    assert not isinstance(info.value, FormatError)


def test_bar_graph_increasing():
    graph = format_bar_graph([0, 1, 2, 3, 4, 5, 6, 7])
    assert graph == "\u2581\u2582\u2583\u2584\u2585\u2586\u2587\u2588"


def test_bar_graph_constant_and_empty():
    assert format_bar_graph([3.0, 3.0]) == "\u2581\u2581"
    assert format_bar_graph([]) == ""


def test_bar_graph_length_matches_input():
    data = [5.0, -2.0, 9.5, 0.0, 1.25]
    graph = format_bar_graph(data)
    assert len(graph) == len(data)
    assert graph[1] == "\u2581"
    assert graph[2] == "\u2588"


def test_find_file_absolute(tmp_path):
    target = tmp_path / "some.toml"
    target.write_text("")
    assert find_file(str(target), None, "toml") == target


def test_find_file_in_config_dir_with_extension(tmp_path, monkeypatch):
    config = tmp_path / "config"
    data = tmp_path / "data"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))
    monkeypatch.setenv("XDG_DATA_HOME", str(data))
    themes = config / "barstatus" / "themes"
    themes.mkdir(parents=True)
    target = themes / "mytheme.toml"
    target.write_text("")
    assert find_file("mytheme", "themes", "toml") == target


def test_find_file_in_data_dir(tmp_path, monkeypatch):
    config = tmp_path / "config"
    data = tmp_path / "data"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))
    monkeypatch.setenv("XDG_DATA_HOME", str(data))
    icons = data / "barstatus" / "icons"
    icons.mkdir(parents=True)
    target = icons / "set.toml"
    target.write_text("")
    assert find_file("set.toml", "icons", "toml") == target


def test_find_file_missing(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "c"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "d"))
    assert find_file("no-such-file-anywhere-xyz", "themes", "toml") is None


def test_deserialize_toml_file(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text('theme = "plain"\n[icons]\nname = "none"\n')
    assert deserialize_toml_file(path) == {"theme": "plain", "icons": {"name": "none"}}


def test_deserialize_toml_file_invalid(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("key = = 1\n")
    with pytest.raises(StatusError, match="Failed to deserialize TOML file"):
        deserialize_toml_file(path)


def test_deserialize_toml_file_missing(tmp_path):
    with pytest.raises(StatusError, match="Failed to read file"):
        deserialize_toml_file(Path(tmp_path) / "absent.toml")


@pytest.mark.asyncio
async def test_read_file_trims_end(tmp_path):
    path = tmp_path / "uevent"
    path.write_text("DEVTYPE=wireguard\n\n")
    assert await read_file(path) == "DEVTYPE=wireguard"


@pytest.mark.asyncio
async def test_read_file_missing(tmp_path):
    with pytest.raises(OSError):
        await read_file(tmp_path / "nope")