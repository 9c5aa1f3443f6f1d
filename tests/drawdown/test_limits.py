"""
Tests for trailing and daily loss limit math.
"""

import pytest

from propdesk.core.models import BrokerId
from propdesk.drawdown.broker_rules import BROKER_MLL_RULES, PostPayoutBehavior, get_available_brokers, get_broker_rule
from propdesk.drawdown.limits import (
    TRAILING_FORMULAS,
    calculate_daily_loss_limit,
    calculate_display_trailing_limit,
    calculate_trailing_drawdown_limit,
    is_within_daily_limit,
    is_within_trailing_limit,
)


def test_every_broker_has_formula_and_rule():
    assert set(TRAILING_FORMULAS) == set(BrokerId)
    assert set(BROKER_MLL_RULES) == set(BrokerId)
    assert set(get_available_brokers()) == set(BrokerId)


def test_limit_trails_the_high():
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, False, False) == 49500.0


def test_limit_is_floored_at_start_minus_amount():
    assert calculate_trailing_drawdown_limit(49000.0, 2000.0, 50000.0, False, False) == 48000.0


@pytest.mark.parametrize("broker", list(BrokerId))
@pytest.mark.parametrize("high", [45000.0, 50000.0, 50000.01, 52345.67])
def test_limit_never_below_floor(broker, high):
    limit = calculate_trailing_drawdown_limit(high, 2000.0, 50000.0, False, False, broker)
    assert limit >= 48000.0
    assert limit >= high - 2000.0 - 0.005


def test_topstep_live_funded_resets_after_payout():
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, True, True, BrokerId.TOPSTEP) == 0.0
    assert calculate_display_trailing_limit(51500.0, 2000.0, True, True, BrokerId.TOPSTEP) == 0.0


def test_live_funded_before_payout_keeps_trailing():
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, True, False, BrokerId.TOPSTEP) == 49500.0


def test_other_brokers_keep_trailing_after_payout():
    assert get_broker_rule(BrokerId.FTMO).post_payout_behavior is PostPayoutBehavior.CONTINUE_TRAILING
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, True, True, BrokerId.FTMO) == 49500.0
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, True, True, "ftmo") == 49500.0
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, True, True, BrokerId.TRADOVATE) == 49500.0
    # Unknown broker names use the generic rule
    assert calculate_trailing_drawdown_limit(51500.0, 2000.0, 50000.0, True, True, "xyz") == 49500.0


def test_display_limit_is_unfloored():
    assert calculate_display_trailing_limit(49000.0, 2000.0, False, False) == 47000.0
    assert calculate_trailing_drawdown_limit(49000.0, 2000.0, 50000.0, False, False) == 48000.0


@pytest.mark.parametrize("amount", [None, 0, 0.0, -5.0])
def test_daily_limit_unset(amount):
    assert calculate_daily_loss_limit(50300.0, amount) is None


def test_daily_limit_anchored_to_current_balance():
    assert calculate_daily_loss_limit(50300.0, 1000.0) == 49300.0


def test_compliance_checks():
    assert is_within_trailing_limit(48000.0, 48000.0)
    assert not is_within_trailing_limit(47999.99, 48000.0)
    assert is_within_daily_limit(1.0, None)
    assert is_within_daily_limit(49300.0, 49300.0)
    assert not is_within_daily_limit(49299.99, 49300.0)
