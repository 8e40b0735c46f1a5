import pytest

from barstatus.formatting.prefix import Prefix
from barstatus.util import StatusError


@pytest.mark.parametrize(
    "text", ["n", "u", "m", "K", "Ki", "M", "Mi", "G", "Gi", "T", "Ti"]
)
def test_parse_display_round_trip(text):
    assert str(Prefix.parse(text)) == text


def test_one_prefixes_display_empty():
    assert str(Prefix.parse("1")) == ""
    assert Prefix.parse("1i") is Prefix.ONE_BUT_BINARY


def test_parse_unknown():
    with pytest.raises(StatusError, match="Unknown prefix"):
        Prefix.parse("X")


def test_ordering_and_bounds():
    ordered = sorted(Prefix, key=lambda p: p.value)
    assert ordered[0] is Prefix.min_available()
    assert Prefix.max_available() is Prefix.TERA
    assert Prefix.ONE < Prefix.ONE_BUT_BINARY < Prefix.KILO
    assert max(Prefix.MILLI, Prefix.GIGA) is Prefix.GIGA


def test_eng_zero_is_one():
    assert Prefix.eng(0.0) is Prefix.ONE
    assert Prefix.eng_binary(0.0) is Prefix.ONE


@pytest.mark.parametrize("p", [Prefix.MICRO, Prefix.MILLI, Prefix.KILO, Prefix.MEGA, Prefix.GIGA])
def test_eng_picks_prefix_of_its_own_scale(p):
    sample = 5.0 / Prefix.apply(p, 1.0)
    assert Prefix.eng(sample) is p
    assert Prefix.eng(-sample) is p


def test_eng_saturates():
    assert Prefix.eng(1e30) is Prefix.TERA
    assert Prefix.eng(1e-30) is Prefix.NANO


@pytest.mark.parametrize("p", [Prefix.KIBI, Prefix.MEBI, Prefix.GIBI])
def test_eng_binary_picks_prefix_of_its_own_scale(p):
    sample = 3.0 / Prefix.apply(p, 1.0)
    assert Prefix.eng_binary(sample) is p


def test_eng_binary_small_values():
    assert Prefix.eng_binary(1000.0) is Prefix.ONE_BUT_BINARY
    assert Prefix.eng_binary(2.0**50) is Prefix.TEBI


def test_apply_one_is_identity():
    assert Prefix.ONE.apply(123.5) == 123.5
    assert Prefix.KILO.apply(Prefix.KILO.apply(1.0) ** -1) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("n", False),
        ("u", False),
        ("m", False),
        ("1", False),
        ("1i", True),
        ("K", False),
        ("Ki", True),
        ("M", False),
        ("Mi", True),
        ("G", False),
        ("Gi", True),
        ("T", False),
        ("Ti", True),
    ],
)
def test_is_binary(text, expected):
    assert Prefix.parse(text).is_binary() is expected