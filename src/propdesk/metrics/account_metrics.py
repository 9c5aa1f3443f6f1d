"""
PropDesk Risk - Account Metrics
===============================

Composes balance, high-water mark, broker detection and limit math into a
single ``AccountMetrics`` snapshot.

Pure functions of (config, trades, reference_time). Persisting the account
high or daily snapshots is the job of ``eod_snapshot``.
"""

from dataclasses import fields
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import numpy as np

from propdesk.core.logging_utils import get_logger
from propdesk.core.currency import add_currency, round_currency, subtract_currency
from propdesk.core.models import AccountConfig, AccountMetrics, AccountMetricsWithFees, Trade
from propdesk.contracts.broker_fees import detect_broker
from propdesk.drawdown.balance import (
    calculate_current_balance,
    filter_closed_trades,
    filter_trades_on_day,
    get_account_high_since_start,
    get_daily_pnl,
)
from propdesk.drawdown.defaults import get_drawdown_amount
from propdesk.drawdown.limits import (
    calculate_daily_loss_limit,
    calculate_display_trailing_limit,
    calculate_trailing_drawdown_limit,
    is_within_daily_limit,
    is_within_trailing_limit,
)
from propdesk.validation.trade_validation import validate_trailing_drawdown_data

logger = get_logger(__name__)


def resolve_trailing_drawdown_amount(config: AccountConfig) -> float:
    """Configured amount, or the tier default when unset/zero."""
    if config.trailing_drawdown_amount:
        return round_currency(config.trailing_drawdown_amount)
    return get_drawdown_amount(config.account_type)


def resolve_account_high(config: AccountConfig, calculated_high: float, current_balance: float) -> float:
    """
    max(stored high or starting balance, calculated end-of-day high, current balance).

    The stored high comes from a previous EOD run and may lag behind the
    ledger; the live balance may exceed both right after a winning trade.
    """
    stored = config.current_account_high if config.current_account_high is not None else config.starting_balance
    return max(round_currency(stored), calculated_high, current_balance, round_currency(config.starting_balance))


def compute_account_metrics(
    config: AccountConfig,
    trades: Sequence[Trade],
    reference_time: datetime,
) -> Optional[AccountMetrics]:
    """
    Compute the risk snapshot for an account.

    Args:
        config: Account settings.
        trades: Full ledger for the account (any order).
        reference_time: "Now", used to pick today's trades.

    Returns:
        AccountMetrics, or None when the account has no starting balance or
        start date configured yet.
    """
    if (
        not config.starting_balance
        or not np.isfinite(config.starting_balance)
        or config.account_start_date is None
    ):
        logger.info(f"Account {config.account_id} not configured yet, skipping metrics")
        return None

    starting_balance = round_currency(config.starting_balance)

    # 1. Balance
    current_balance = calculate_current_balance(starting_balance, trades, config.account_start_date)

    # 2. High-water mark
    calculated_high = get_account_high_since_start(starting_balance, trades, config.account_start_date)
    account_high = resolve_account_high(config, calculated_high, current_balance)

    # 3-4. Drawdown amount and broker
    trailing_amount = resolve_trailing_drawdown_amount(config)
    broker = detect_broker(config.account_type, config.data_source)

    # 5. Limits
    trailing_limit = calculate_trailing_drawdown_limit(
        account_high,
        trailing_amount,
        starting_balance,
        config.is_live_funded,
        config.first_payout_received,
        broker,
    )
    daily_limit = calculate_daily_loss_limit(current_balance, config.daily_loss_limit)
    display_limit = calculate_display_trailing_limit(
        account_high,
        trailing_amount,
        config.is_live_funded,
        config.first_payout_received,
        broker,
    )

    # 6. P&L
    net_pnl_to_date = subtract_currency(current_balance, starting_balance)
    daily_pnl = get_daily_pnl(trades, reference_time)

    # 7. Compliance and buffers
    trailing_buffer = subtract_currency(current_balance, trailing_limit)
    daily_buffer = subtract_currency(current_balance, daily_limit) if daily_limit is not None else None

    warnings = _collect_warnings(config, account_high, current_balance, trailing_limit, starting_balance)

    return AccountMetrics(
        current_balance=current_balance,
        account_high=account_high,
        calculated_trailing_limit=trailing_limit,
        calculated_daily_limit=daily_limit,
        display_trailing_limit=display_limit,
        trailing_drawdown_amount=trailing_amount,
        daily_loss_limit=config.daily_loss_limit,
        trailing_buffer=trailing_buffer,
        daily_buffer=daily_buffer,
        is_within_trailing_limit=is_within_trailing_limit(current_balance, trailing_limit),
        is_within_daily_limit=is_within_daily_limit(current_balance, daily_limit),
        net_pnl_to_date=net_pnl_to_date,
        daily_pnl=daily_pnl,
        account_type=config.account_type,
        broker=broker,
        account_start_date=config.account_start_date,
        is_live_funded=config.is_live_funded,
        first_payout_received=config.first_payout_received,
        warnings=tuple(warnings),
    )


def _collect_warnings(
    config: AccountConfig,
    account_high: float,
    current_balance: float,
    trailing_limit: float,
    starting_balance: float,
) -> List[str]:
    """Data-quality messages; logged and returned, never blocking."""
    warnings: List[str] = []

    # Compare against the persisted high, the computed one is >= balance by construction
    recorded_high = config.current_account_high if config.current_account_high is not None else account_high
    check = validate_trailing_drawdown_data(recorded_high, current_balance, trailing_limit, starting_balance)
    warnings.extend(check.warnings)
    warnings.extend(check.errors)

    for message in warnings:
        logger.warning(f"Account {config.account_id}: {message}")
    return warnings


def _fee_total(trades: Iterable[Trade]) -> float:
    return add_currency(*(add_currency(t.commission, t.entry_fees, t.exit_fees) for t in trades))


def _gross_total(trades: Iterable[Trade]) -> float:
    # Gross falls back to net for trades imported without a gross figure
    return add_currency(*(t.gross_pnl if t.gross_pnl is not None else t.net_pnl for t in trades))


def calculate_fee_impact_percentage(total_fees: float, gross_pnl: float) -> float:
    """Fees as a percentage of gross P&L; 0.0 when gross P&L is not positive."""
    if not gross_pnl > 0:
        return 0.0
    return round_currency(total_fees / gross_pnl * 100)


def compute_account_metrics_with_fees(
    config: AccountConfig,
    trades: Sequence[Trade],
    reference_time: datetime,
) -> Optional[AccountMetricsWithFees]:
    """
    ``compute_account_metrics`` plus fee transparency figures over all
    closed trades and today's closed trades.
    """
    base = compute_account_metrics(config, trades, reference_time)
    if base is None:
        return None

    closed = filter_closed_trades(trades)
    today = filter_trades_on_day(trades, reference_time)

    total_fees = _fee_total(closed)
    gross_to_date = _gross_total(closed)
    average_fee = round_currency(total_fees / len(closed)) if closed else 0.0

    return AccountMetricsWithFees(
        **{f.name: getattr(base, f.name) for f in fields(base)},
        total_fees_to_date=total_fees,
        daily_fees=_fee_total(today),
        gross_pnl_to_date=gross_to_date,
        gross_daily_pnl=_gross_total(today),
        fee_impact_percentage=calculate_fee_impact_percentage(total_fees, gross_to_date),
        average_fee_per_trade=average_fee,
        closed_trade_count=len(closed),
    )
