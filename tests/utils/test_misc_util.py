from __future__ import annotations

import math

import pytest

from dinnerlady.util.misc import to_bool, to_float, to_int


@pytest.mark.parametrize(
    "value",
    [
        "true",
        "True",
        "1",
        "yes",
        "on",
        "t",
        "y",
        " YeS ",
    ],
)
def test_to_bool_truthy_strings(value: str) -> None:
    assert to_bool(value) is True


@pytest.mark.parametrize(
    "value",
    [
        "false",
        "False",
        "0",
        "no",
        "off",
        "f",
        "n",
        " Off ",
    ],
)
def test_to_bool_falsy_strings(value: str) -> None:
    assert to_bool(value) is False


@pytest.mark.parametrize(
    "value,expected",
    [
        (1, True),
        (0, False),
        (True, True),
        (None, False),
    ],
)
def test_to_bool_other_types(value: object, expected: bool) -> None:
    assert to_bool(value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (5, 5.0),
        (2.5, 2.5),
        ("12", 12.0),
        (" 0.75 ", 0.75),
    ],
)
def test_to_float_accepts_numbers_and_numeric_strings(
    value: object, expected: float
) -> None:
    assert to_float(value) == expected


@pytest.mark.parametrize(
    "value", [True, False, None, "fast", [1], math.inf, "nan", float("-inf")]
)
def test_to_float_rejects_non_numbers(value: object) -> None:
    with pytest.raises(ValueError):
        to_float(value)


@pytest.mark.parametrize("value,expected", [(3, 3), (2.0, 2), ("4", 4), ("1.0", 1)])
def test_to_int_accepts_integral_values(value: object, expected: int) -> None:
    result = to_int(value)
    assert result == expected
    assert isinstance(result, int)


@pytest.mark.parametrize("value", [1.5, "2.25", "radius"])
def test_to_int_rejects_fractions(value: object) -> None:
    with pytest.raises(ValueError):
        to_int(value)
