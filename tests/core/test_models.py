"""
Tests for PropDesk data model helpers and the injectable clock.
"""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from propdesk.core.clock import FixedClock, SystemClock, to_utc
from propdesk.core.models import AccountType, MarketType, Trade, TradeStatus


def test_account_type_parse():
    assert AccountType.parse("EVALUATION_50K") is AccountType.EVALUATION_50K
    assert AccountType.parse("evaluation_100k") is AccountType.EVALUATION_100K
    # Legacy names
    assert AccountType.parse("TOPSTEP_150K") is AccountType.EVALUATION_150K
    # Unknown / missing
    assert AccountType.parse("SOMETHING_ELSE") is AccountType.CUSTOM
    assert AccountType.parse(None) is AccountType.CUSTOM
    assert AccountType.parse(AccountType.LIVE_FUNDED) is AccountType.LIVE_FUNDED


def test_market_type_parse():
    assert MarketType.parse("micro_futures") is MarketType.MICRO_FUTURES
    assert MarketType.parse("FUTURES") is MarketType.FUTURES
    assert MarketType.parse(None) is MarketType.STOCK
    assert MarketType.parse("") is MarketType.STOCK


def test_trade_is_read_only():
    trade = Trade(entry_date=datetime(2025, 7, 1, tzinfo=timezone.utc), status=TradeStatus.CLOSED, net_pnl=10.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        trade.net_pnl = 20.0


def test_trade_total_fees_and_status():
    trade = Trade(
        entry_date=datetime(2025, 7, 1, tzinfo=timezone.utc),
        status=TradeStatus.CLOSED,
        commission=1.0,
        entry_fees=0.67,
        exit_fees=0.67,
        swap=3.0,
    )
    assert trade.total_fees == pytest.approx(2.34)
    assert trade.is_closed
    assert not Trade(entry_date=datetime(2025, 7, 1), status=TradeStatus.OPEN).is_closed


def test_fixed_clock_and_to_utc():
    clock = FixedClock(datetime(2025, 7, 2, 12, 0))
    assert clock.now() == datetime(2025, 7, 2, 12, 0, tzinfo=timezone.utc)

    clock.advance(hours=13)
    assert clock.now() == datetime(2025, 7, 3, 1, 0, tzinfo=timezone.utc)

    eastern = timezone(timedelta(hours=-4))
    assert to_utc(datetime(2025, 7, 2, 22, 0, tzinfo=eastern)) == datetime(2025, 7, 3, 2, 0, tzinfo=timezone.utc)


def test_system_clock_is_utc():
    assert SystemClock().now().tzinfo == timezone.utc
