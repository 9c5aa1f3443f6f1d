"""
Tests for PropDesk currency arithmetic.
"""

from decimal import Decimal

import numpy as np
import pytest

from propdesk.core.currency import (
    add_currency,
    currency_equal,
    multiply_currency,
    round_currency,
    subtract_currency,
)


def test_round_currency_half_up():
    """Half-cent values round up, away from zero."""
    assert round_currency(10.125) == 10.13
    assert round_currency(1.005) == 1.01
    assert round_currency(2.675) == 2.68
    assert round_currency(-10.125) == -10.13
    assert round_currency(10.124) == 10.12


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), None, np.nan])
def test_round_currency_non_finite_is_zero(value):
    assert round_currency(value) == 0.0


def test_round_currency_accepts_numpy_and_decimal():
    assert round_currency(np.float64(2.675)) == 2.68
    assert round_currency(np.int64(7)) == 7.0
    assert round_currency(Decimal("2.345")) == 2.35
    assert round_currency(Decimal("NaN")) == 0.0


def test_add_currency_avoids_float_drift():
    """Summing many small amounts stays exact to the cent."""
    assert add_currency(0.1, 0.2) == 0.3
    assert add_currency(*([0.1] * 1000)) == 100.0
    assert add_currency(*([-0.07] * 3000)) == -210.0


def test_add_currency_rounds_each_operand():
    assert add_currency(50000, 0.105, 0.105) == 50000.22
    assert add_currency() == 0.0
    assert add_currency(None, 5) == 5.0
    assert add_currency(float("nan"), 5) == 5.0


def test_subtract_and_multiply():
    assert subtract_currency(50500, 2000) == 48500.0
    assert subtract_currency(0.3, 0.1) == 0.2
    assert multiply_currency(0.67, 3) == 2.01
    assert multiply_currency(1.335, 1) == 1.34


def test_currency_equal_uses_one_cent_tolerance():
    assert currency_equal(100.0, 100.01)
    assert currency_equal(100.0, 99.99)
    assert not currency_equal(100.0, 100.02)
