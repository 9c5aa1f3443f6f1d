"""
PropDesk Risk - End-of-Day Calculation
======================================

Runs after the trading day closes:
1. Computes account metrics as of the reference time.
2. Raises the persisted account high when the balance closed above it.
3. Upserts a ``DailyAccountSnapshot`` for trend charts.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import List, Optional

from propdesk.core.logging_utils import get_logger
from propdesk.core.config import DEFAULT_HISTORY_DAYS
from propdesk.core.currency import round_currency
from propdesk.core.models import AccountMetrics, DailyAccountSnapshot
from propdesk.drawdown.balance import filter_trades_on_day, get_utc_day_bounds
from propdesk.metrics.account_metrics import compute_account_metrics
from propdesk.metrics.account_service import AccountMetricsService
from propdesk.metrics.account_store import ISnapshotStore

logger = get_logger(__name__)


@dataclass
class EodResult:
    """Outcome of one EOD run."""
    account_id: str
    metrics: AccountMetrics
    snapshot: DailyAccountSnapshot
    account_high_updated: bool
    previous_account_high: Optional[float]


def perform_eod_calculation(
    account_id: str,
    service: AccountMetricsService,
    snapshot_store: ISnapshotStore,
) -> Optional[EodResult]:
    """
    End-of-day job for one account, as of ``service.clock.now()``.

    Metrics are always recomputed, never served from the cache.

    Returns None when the account is unknown or not configured.
    """
    reference_time = service.clock.now()
    config = service.config_store.load_config(account_id)
    if config is None:
        logger.info(f"EOD skipped for {account_id}: no account settings")
        return None

    trades = service.ledger_store.load_trades(account_id)
    metrics = compute_account_metrics(config, trades, reference_time)
    if metrics is None:
        logger.info(f"EOD skipped for {account_id}: account not configured")
        return None

    previous_high = config.current_account_high
    recorded_high = previous_high if previous_high is not None else config.starting_balance
    high_updated = metrics.current_balance > round_currency(recorded_high)

    if high_updated:
        service.update_config(replace(config, current_account_high=metrics.current_balance))
        logger.info(
            f"Account {account_id} high raised from {recorded_high:,.2f} to {metrics.current_balance:,.2f}"
        )

    day_start, _ = get_utc_day_bounds(reference_time)
    snapshot = DailyAccountSnapshot(
        account_id=account_id,
        date=day_start,
        end_of_day_balance=metrics.current_balance,
        account_high=metrics.account_high,
        calculated_limit=metrics.calculated_trailing_limit,
        net_pnl_to_date=metrics.net_pnl_to_date,
        daily_pnl=metrics.daily_pnl,
        trades_count=len(filter_trades_on_day(trades, reference_time)),
    )
    snapshot_store.upsert_snapshot(snapshot)

    return EodResult(
        account_id=account_id,
        metrics=metrics,
        snapshot=snapshot,
        account_high_updated=high_updated,
        previous_account_high=previous_high,
    )


def get_account_history(
    snapshot_store: ISnapshotStore,
    account_id: str,
    reference_time: datetime,
    days: int = DEFAULT_HISTORY_DAYS,
) -> List[DailyAccountSnapshot]:
    """Snapshots from the last ``days`` days, oldest first."""
    day_start, _ = get_utc_day_bounds(reference_time)
    return snapshot_store.list_snapshots(account_id, since=day_start - timedelta(days=days))
