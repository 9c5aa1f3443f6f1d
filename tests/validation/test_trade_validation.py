"""
Tests for trade-level validation.
"""

import pytest

from propdesk.validation.trade_validation import TradeData, validate_account_balance, validate_trade_data


def _valid_trade(**overrides) -> TradeData:
    data = dict(
        entry_price=18000.25,
        exit_price=18010.5,
        quantity=2,
        entry_fees=1.34,
        exit_fees=1.34,
        commission=0.0,
        gross_pnl=41.0,
        net_pnl=38.32,
    )
    data.update(overrides)
    return TradeData(**data)


def test_valid_trade_is_sanitized():
    result = validate_trade_data(_valid_trade(entry_fees=0.675, exit_fees=0.675, net_pnl=39.65))

    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []
    assert result.sanitized_data["entry_price"] == 18000.25
    assert result.sanitized_data["entry_fees"] == 0.68


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"entry_price": 0}, "Entry price must be a positive number"),
        ({"entry_price": None}, "Entry price must be a positive number"),
        ({"quantity": -1}, "Quantity must be a positive number"),
        ({"exit_price": 0}, "Exit price must be positive if provided"),
        ({"stop_loss": -1.0}, "Stop loss must be positive if provided"),
        ({"take_profit": 0}, "Take profit must be positive if provided"),
        ({"commission": -0.5}, "commission cannot be negative"),
        ({"swap": float("nan")}, "swap cannot be negative"),
        ({"net_pnl": float("nan")}, "net_pnl must be a valid number"),
        ({"gross_pnl": float("inf")}, "gross_pnl must be a valid number"),
        ({"contract_multiplier": 0}, "Contract multiplier must be positive"),
        ({"risk_amount": -5}, "Risk amount cannot be negative"),
    ],
)
def test_invalid_fields(overrides, message):
    result = validate_trade_data(_valid_trade(**overrides))

    assert not result.is_valid
    assert message in result.errors
    assert result.sanitized_data is None


def test_missing_optional_fields_are_skipped():
    result = validate_trade_data(TradeData(entry_price=100.0, quantity=1))
    assert result.is_valid
    assert result.sanitized_data == {"entry_price": 100.0, "quantity": 1.0}


def test_large_price_move_warns():
    result = validate_trade_data(TradeData(entry_price=100.0, exit_price=160.0, quantity=1))
    assert result.is_valid
    assert any(w.startswith("Large price change detected: 60.00%") for w in result.warnings)


def test_high_fees_warn():
    result = validate_trade_data(TradeData(entry_price=10.0, quantity=1, commission=2.0))
    assert result.is_valid
    assert any(w.startswith("High fees detected: 20.00%") for w in result.warnings)


def test_pnl_mismatch_warns():
    mismatch = validate_trade_data(
        TradeData(entry_price=100.0, quantity=10, commission=5.0, gross_pnl=100.0, net_pnl=90.0)
    )
    assert mismatch.is_valid
    assert any("P&L calculation mismatch" in w for w in mismatch.warnings)

    # One cent off is within tolerance
    close = validate_trade_data(
        TradeData(entry_price=100.0, quantity=10, commission=5.0, gross_pnl=100.0, net_pnl=94.99)
    )
    assert close.warnings == []


def test_from_dict_ignores_unknown_keys():
    data = TradeData.from_dict({"entry_price": 10.0, "quantity": 1, "symbol": "AAPL"})
    assert data.entry_price == 10.0
    assert data.exit_price is None


def test_validate_account_balance():
    low = validate_account_balance(20000.0, 50000.0)
    assert low.is_valid
    assert len(low.warnings) == 1

    assert validate_account_balance(49000.0, 50000.0).warnings == []
    assert not validate_account_balance(float("nan")).is_valid
