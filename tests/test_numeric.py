import pytest

from slinkykit.numeric import clamp, get_scaled_value_from_int_or_percent


@pytest.mark.parametrize(
    "val, a, b",
    [
        (0, -10, 10),
        (-10, 0, 10),
        (10, -10, 0),
        (0, 0, 0),
        (0, 0, 10),
        (0, -10, 0),
        (0, 10, -10),
    ],
)
def test_clamp_source_cases(val, a, b):
    assert clamp(val, a, b) == 0


@pytest.mark.parametrize(
    "val, a, b, expected",
    [
        (15, 0, 10, 10),
        (-5, 10, 0, 0),
        (7, 10, 0, 7),
        (2.5, 1.0, 2.0, 2.0),
        ("m", "a", "k", "k"),
    ],
)
def test_clamp_other_values(val, a, b, expected):
    assert clamp(val, a, b) == expected


@pytest.mark.parametrize(
    "int_or_percent, total, round_up, default, expected",
    [
        (None, 0, True, 5, 5),
        ("50%", 10, True, 0, 5),
        (5, 10, True, 0, 5),
        ("33%", 10, True, 0, 4),
        ("33%", 10, False, 0, 3),
        ("abc", 10, True, 7, 7),
        ("5", 10, True, 7, 7),
        ("x%", 10, True, 7, 7),
    ],
)
def test_get_scaled_value(int_or_percent, total, round_up, default, expected):
    got = get_scaled_value_from_int_or_percent(int_or_percent, total, round_up, default)
    assert got == expected