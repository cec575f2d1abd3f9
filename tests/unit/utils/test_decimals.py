"""Tests for the fixed-point Decimal helpers."""

from __future__ import annotations

from decimal import Decimal, DivisionByZero

import pytest

from Bond_Watch.utils.decimals import (
    FIXED_POINT_CONTEXT,
    add,
    div_to_scale,
    from_raw,
    mul,
    scale_quantum,
    sub,
)


MAX_UINT256 = 2**256 - 1


class TestScaling:
    def test_from_raw_sets_exponent(self) -> None:
        value = from_raw(1_500_000_000, 9)
        assert value == Decimal("1.5")
        assert str(value) == "1.500000000"

    def test_from_raw_zero_decimals(self) -> None:
        assert from_raw(42, 0) == Decimal(42)

    def test_from_raw_is_exact_for_uint256(self) -> None:
        value = from_raw(MAX_UINT256, 18)
        assert value.as_tuple().exponent == -18
        assert int(value.scaleb(18, FIXED_POINT_CONTEXT)) == MAX_UINT256

    def test_scale_quantum(self) -> None:
        assert scale_quantum(9) == Decimal("1E-9")


class TestArithmetic:
    def test_mul_is_exact_for_uint256_products(self) -> None:
        product = mul(from_raw(MAX_UINT256, 18), from_raw(MAX_UINT256, 18))
        assert product.as_tuple().exponent == -36
        assert int(product.scaleb(36, FIXED_POINT_CONTEXT)) == MAX_UINT256 * MAX_UINT256

    def test_add_and_sub_are_exact(self) -> None:
        big = from_raw(MAX_UINT256, 18)
        tiny = Decimal("1E-18")
        assert sub(add(big, tiny), tiny) == big

    def test_div_to_scale_truncates(self) -> None:
        assert div_to_scale(Decimal(2), Decimal(3), 4) == Decimal("0.6666")
        assert div_to_scale(Decimal(-2), Decimal(3), 4) == Decimal("-0.6666")

    def test_div_to_scale_fixes_exponent(self) -> None:
        assert div_to_scale(Decimal(10), Decimal(4), 9).as_tuple().exponent == -9

    def test_div_by_zero_raises(self) -> None:
        with pytest.raises(DivisionByZero):
            div_to_scale(Decimal(1), Decimal(0), 9)
