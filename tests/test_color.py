import pytest

from barstatus.themes.color import Color, Hsva, Rgba, approx
from barstatus.util import StatusError


def test_from_hex_splits_bytes():
    assert Rgba.from_hex(0x11223344) == Rgba(0x11, 0x22, 0x33, 0x44)


def test_rgba_add_saturates():
    total = Rgba(200, 10, 255, 0) + Rgba(100, 20, 1, 0)
    assert total.r == 255
    assert total.g == 30
    assert total.b == 255
    assert total.a == 0


@pytest.mark.parametrize(
    "rgba",
    [
        Rgba(255, 0, 0, 255),
        Rgba(0, 255, 0, 255),
        Rgba(0, 0, 255, 128),
        Rgba(255, 255, 0, 255),
        Rgba(255, 255, 255, 255),
        Rgba(0, 0, 0, 0),
    ],
)
def test_rgba_hsva_round_trip(rgba):
    assert rgba.to_hsva().to_rgba() == rgba


def test_to_hsva_keeps_alpha_and_ranges():
    hsva = Rgba(12, 200, 77, 42).to_hsva()
    assert hsva.a == 42
    assert 0.0 <= hsva.h < 360.0
    assert 0.0 <= hsva.s <= 1.0
    assert 0.0 <= hsva.v <= 1.0


def test_hsva_eq_is_approximate():
    assert Hsva(120.0, 0.5, 0.5, 255) == Hsva(120.0001, 0.5, 0.5, 255)
    assert not Hsva(120.0, 0.5, 0.5, 255) == Hsva(130.0, 0.5, 0.5, 255)
    assert not Hsva(120.0, 0.5, 0.5, 255) == Hsva(120.0, 0.5, 0.5, 254)


def test_hsva_add_wraps_hue_and_clamps():
    total = Hsva(350.0, 0.8, 0.9, 200) + Hsva(20.0, 0.5, 0.5, 100)
    assert approx(total.h, 10.0)
    assert total.s == 1.0
    assert total.v == 1.0
    assert total.a == 255


def test_approx():
    assert approx(0.0, 0.0)
    assert approx(1.0, 1.001)
    assert not approx(1.0, 2.0)


def test_parse_none_and_auto():
    assert Color.parse("none") == Color()
    assert Color.parse("") == Color()
    auto = Color.parse("auto")
    assert auto.auto
    assert auto.is_hidden()
    assert auto.to_json() is None
    assert Color().to_json() is None


def test_parse_rgba_round_trip():
    assert Color.parse("#FF000080").to_json() == "#FF000080"
    assert Color.parse("#12ab34cd").to_json() == "#12AB34CD"


def test_parse_rgb_defaults_alpha():
    assert Color.parse("#FF0000").to_json() == "#FF0000FF"


def test_parse_ignores_first_char():
    assert Color.parse("x112233") == Color.parse("#112233")


def test_parse_hsv():
    color = Color.parse("hsv:120:50:50")
    assert isinstance(color.value, Hsva)
    assert color.value == Hsva(120.0, 0.5, 0.5, 255)
    assert not color.is_hidden()


def test_hsv_serializes_like_rgb():
    assert Color.parse("hsv:0:100:100").to_json() == Color.parse("#FF0000").to_json()


@pytest.mark.parametrize(
    "text",
    ["#12", "#GGGGGG", "#12345", "hsv:1:2", "hsv:a:b:c", "hsv:1:2:3:x", "hsv: 1:2:3"],
)
def test_parse_invalid(text):
    with pytest.raises(StatusError):
        Color.parse(text)


def test_add_with_none_or_auto_keeps_other():
    red = Color.parse("#FF0000")
    assert Color() + red == red
    assert red + Color() == red
    assert red + Color(auto=True) == red
    assert Color(auto=True) + red == red


def test_add_rgba_rgba_stays_rgba():
    total = Color.parse("#100000") + Color.parse("#001000")
    assert isinstance(total.value, Rgba)
    assert total == Color(Rgba(0x10, 0x10, 0, 255))


def test_add_mixed_gives_hsva_either_order():
    rgba = Color.parse("#00FF00")
    hsva = Color.parse("hsv:0:0:0:0")
    left = rgba + hsva
    right = hsva + rgba
    assert isinstance(left.value, Hsva)
    assert left == right
    assert left.to_json() == rgba.to_json()


def test_auto_with_value_rejected():
    with pytest.raises(ValueError):
        Color(Rgba(), auto=True)