from __future__ import annotations

import pytest

from zamm_engine.errors import DivisionByZero
from zamm_engine.kernels.fixed_point import ceil_div, integer_sqrt, mul_div, mul_div_up


def test_mul_div_floors_and_mul_div_up_ceils() -> None:
    assert mul_div(7, 3, 2) == 10
    assert mul_div_up(7, 3, 2) == 11
    # exact division: both agree
    assert mul_div(6, 2, 3) == 4
    assert mul_div_up(6, 2, 3) == 4


def test_mul_div_rejects_zero_denominator() -> None:
    with pytest.raises(DivisionByZero):
        mul_div(1, 1, 0)
    with pytest.raises(DivisionByZero):
        mul_div_up(1, 1, 0)
    with pytest.raises(DivisionByZero):
        ceil_div(1, 0)


def test_mul_div_rejects_negative_and_non_int() -> None:
    with pytest.raises(ValueError):
        mul_div(-1, 2, 3)
    with pytest.raises(TypeError):
        mul_div(1.0, 2, 3)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        mul_div(True, 2, 3)


def test_ceil_div() -> None:
    assert ceil_div(10, 3) == 4
    assert ceil_div(9, 3) == 3
    assert ceil_div(0, 5) == 0


@pytest.mark.parametrize(
    "value,expected",
    [(0, 0), (1, 1), (2, 1), (3, 1), (4, 2), (15, 3), (16, 4), (10**36, 10**18), (10**36 - 1, 10**18 - 1)],
)
def test_integer_sqrt_small_and_boundary_values(value: int, expected: int) -> None:
    assert integer_sqrt(value) == expected


def test_integer_sqrt_is_exact_floor_for_huge_values() -> None:
    for value in ((1 << 255) + 12345, (1 << 256) - 1, 3 * 10**40 + 7):
        r = integer_sqrt(value)
        assert r * r <= value < (r + 1) * (r + 1)
