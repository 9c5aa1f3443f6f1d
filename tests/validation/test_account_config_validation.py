"""
Tests for account settings and risk-state validation.
"""

import pytest

from propdesk.core.models import AccountType
from propdesk.drawdown.defaults import get_drawdown_amount, get_starting_balance
from propdesk.validation.trade_validation import validate_account_config, validate_trailing_drawdown_data


def test_tier_defaults():
    assert get_drawdown_amount("EVALUATION_50K") == 2000.0
    assert get_drawdown_amount("TOPSTEP_100K") == 3000.0
    assert get_drawdown_amount(AccountType.EVALUATION_150K) == 4500.0
    assert get_drawdown_amount("unknown") == 0.0
    assert get_starting_balance(AccountType.EVALUATION_150K) == 150000.0
    assert get_starting_balance(AccountType.LIVE_FUNDED) == 0.0


def test_evaluation_tier_must_match_fixed_values():
    assert validate_account_config(AccountType.EVALUATION_50K, 50000.0, 2000.0).is_valid
    assert validate_account_config("TOPSTEP_100K", 100000.0, 3000.0).is_valid

    result = validate_account_config(AccountType.EVALUATION_50K, 60000.0, 2500.0)
    assert not result.is_valid
    assert "EVALUATION_50K accounts must have a starting balance of $50,000" in result.errors
    assert "EVALUATION_50K accounts must have a trailing drawdown of $2,000" in result.errors


def test_custom_account_rules():
    assert validate_account_config(AccountType.CUSTOM, 25000.0, 1500.0).is_valid

    too_large = validate_account_config(AccountType.CUSTOM, 25000.0, 25000.0)
    assert "Trailing drawdown amount cannot be greater than or equal to starting balance" in too_large.errors

    negative_balance = validate_account_config(AccountType.CUSTOM, -1.0, 100.0)
    assert "Starting balance must be greater than 0" in negative_balance.errors

    negative_drawdown = validate_account_config(AccountType.CUSTOM, 10000.0, -5.0)
    assert "Trailing drawdown amount cannot be negative" in negative_drawdown.errors


def test_missing_values_do_not_raise():
    result = validate_account_config(AccountType.CUSTOM, None, None)
    assert not result.is_valid
    assert "Starting balance must be greater than 0" in result.errors


def test_trailing_drawdown_data_checks():
    stale = validate_trailing_drawdown_data(50000.0, 50500.0, 48000.0, 50000.0)
    assert stale.is_valid
    assert stale.warnings == [
        "Current balance is higher than recorded account high - account high may need updating"
    ]

    broken = validate_trailing_drawdown_data(49000.0, 48500.0, 49500.0, 50000.0)
    assert not broken.is_valid
    assert "Account high cannot be less than starting balance" in broken.errors
    assert "Trailing drawdown limit cannot be higher than account high" in broken.errors
    assert any("below trailing drawdown limit" in w for w in broken.warnings)

    healthy = validate_trailing_drawdown_data(50500.0, 50300.0, 48500.0, 50000.0)
    assert healthy.is_valid
    assert healthy.warnings == []


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_settings_are_rejected(bad):
    balance = validate_account_config(AccountType.CUSTOM, bad, 2000.0)
    assert not balance.is_valid
    assert balance.errors == ["Starting balance must be a valid number"]

    drawdown = validate_account_config(AccountType.CUSTOM, 50000.0, bad)
    assert not drawdown.is_valid
    assert drawdown.errors == ["Trailing drawdown amount must be a valid number"]

    tier = validate_account_config(AccountType.EVALUATION_50K, bad, 2000.0)
    assert "Starting balance must be a valid number" in tier.errors
