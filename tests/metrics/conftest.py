"""
Shared fixtures for service-level metrics tests.
"""

from datetime import datetime, timezone

import pytest

from propdesk.core.clock import FixedClock
from propdesk.core.models import AccountConfig, AccountType, Trade, TradeStatus
from propdesk.metrics.account_service import AccountMetricsService
from propdesk.metrics.account_store import InMemoryAccountStore

ACCOUNT_ID = "acc-1"


def make_trade(day: int, net: float, hour: int = 14) -> Trade:
    return Trade(
        entry_date=datetime(2025, 7, day, hour, 30, tzinfo=timezone.utc),
        status=TradeStatus.CLOSED,
        net_pnl=net,
    )


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 7, 2, 21, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    store = InMemoryAccountStore()
    store.save_config(AccountConfig(
        account_type=AccountType.EVALUATION_50K,
        starting_balance=50000.0,
        account_start_date=datetime(2025, 7, 1, tzinfo=timezone.utc),
        trailing_drawdown_amount=2000.0,
        account_id=ACCOUNT_ID,
    ))
    store.add_trade(ACCOUNT_ID, make_trade(1, 500.0))
    store.add_trade(ACCOUNT_ID, make_trade(2, 300.0))
    return store


@pytest.fixture
def service(store, clock):
    return AccountMetricsService(ledger_store=store, config_store=store, clock=clock)


@pytest.fixture
def account_id():
    return ACCOUNT_ID


@pytest.fixture
def trade_factory():
    """Builds a closed trade on a July 2025 day."""
    return make_trade
