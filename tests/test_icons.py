import pytest

from barstatus.icons import Icons
from barstatus.util import StatusError


def test_default_set_has_plain_names():
    icons = Icons.default()
    assert icons.get("bat") == "BAT"
    assert icons.get("net_wireless") == "WLAN"
    assert icons.get("unknown") == "??"


def test_missing_icon_is_none():
    assert Icons.default().get("no_such_icon") is None


def test_progression_without_value_gives_last():
    icons = Icons({"vol": ["a", "b", "c"]})
    assert icons.get("vol") == "c"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.0, "a"), (0.5, "b"), (1.0, "c"), (5.0, "c"), (-1.0, "a"), (float("nan"), "a")],
)
def test_progression_with_value(value, expected):
    icons = Icons({"vol": ["a", "b", "c"]})
    assert icons.get("vol", value) == expected


def test_single_icon_ignores_value():
    icons = Icons({"cpu": "C"})
    assert icons.get("cpu", 0.3) == "C"


def test_empty_progression_is_none():
    assert Icons({"x": []}).get("x", 0.5) is None


def test_apply_overrides_replaces_and_adds():
    icons = Icons.default()
    icons.apply_overrides({"bat": "B!", "extra": ["1", "2"]})
    assert icons.get("bat") == "B!"
    assert icons.get("extra", 0.0) == "1"


def test_invalid_icon_value_rejected():
    with pytest.raises(StatusError):
        Icons({"bad": 3})


def test_from_file_none_is_default():
    assert Icons.from_file("none") == Icons.default()


def test_from_file_missing():
    with pytest.raises(StatusError, match="Icon set 'no-such-icons-here' not found"):
        Icons.from_file("no-such-icons-here")


def test_from_file_absolute(tmp_path):
    path = tmp_path / "set.toml"
    path.write_text('cpu = "X"\nbat = ["e", "f"]\n', encoding="utf-8")
    icons = Icons.from_file(str(path))
    assert icons.get("cpu") == "X"
    assert icons.get("bat") == "f"
    assert icons.get("mail") is None


def test_from_config_with_overrides():
    icons = Icons.from_config({"icons": "none", "overrides": {"mail": "M"}})
    assert icons.get("mail") == "M"
    assert icons.get("bat") == "BAT"


def test_from_config_empty_is_default():
    assert Icons.from_config(None) == Icons.default()


def test_from_config_rejects_unknown_key():
    with pytest.raises(StatusError):
        Icons.from_config({"set": "none"})