"""
PropDesk Risk - Balance & High-Water Mark
=========================================

Running balance and end-of-day high-water mark from a trade ledger.

The high-water mark is sampled once per UTC calendar day, after all of that
day's closed trades settle. Intraday excursions never set a new high.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

import pandas as pd

from propdesk.core.clock import to_utc
from propdesk.core.currency import add_currency, round_currency
from propdesk.core.models import Trade

DAILY_FRAME_COLUMNS = ["date", "daily_pnl", "trade_count", "end_of_day_balance", "high_water_mark"]


def filter_closed_trades(trades: Iterable[Trade], start_date: Optional[datetime] = None) -> List[Trade]:
    """
    CLOSED trades, optionally only those entered on/after ``start_date``.
    Trades before the start date are dropped entirely.
    """
    start = to_utc(start_date) if start_date is not None else None
    return [
        t for t in trades
        if t.is_closed and (start is None or to_utc(t.entry_date) >= start)
    ]


def calculate_current_balance(
    starting_balance: float,
    trades: Iterable[Trade],
    start_date: Optional[datetime] = None,
) -> float:
    """Starting balance plus the net P&L of every closed trade since ``start_date``."""
    closed = filter_closed_trades(trades, start_date)
    return add_currency(starting_balance, *(t.net_pnl for t in closed))


def build_daily_balance_frame(
    starting_balance: float,
    trades: Iterable[Trade],
    start_date: Optional[datetime] = None,
) -> pd.DataFrame:
    """
    One row per trading day (UTC), ascending.

    Columns:
        date: midnight UTC of the day
        daily_pnl: sum of that day's closed net P&L
        trade_count: closed trades that day
        end_of_day_balance: running balance after the day settles
        high_water_mark: max end-of-day balance so far (never below starting balance)
    """
    closed = filter_closed_trades(trades, start_date)
    if not closed:
        return pd.DataFrame(columns=DAILY_FRAME_COLUMNS)

    df = pd.DataFrame({
        "entry_date": pd.to_datetime([to_utc(t.entry_date) for t in closed], utc=True),
        "net_pnl": [round_currency(t.net_pnl) for t in closed],
    })
    df["date"] = df["entry_date"].dt.floor("D")

    # groupby sorts day keys ascending
    daily = df.groupby("date", sort=True).agg(
        daily_pnl=("net_pnl", lambda s: add_currency(*s)),
        trade_count=("net_pnl", "size"),
    ).reset_index()

    balances = []
    running = round_currency(starting_balance)
    for pnl in daily["daily_pnl"]:
        running = add_currency(running, pnl)
        balances.append(running)
    daily["end_of_day_balance"] = balances

    high = round_currency(starting_balance)
    marks = []
    for balance in balances:
        high = max(high, balance)
        marks.append(high)
    daily["high_water_mark"] = marks

    return daily[DAILY_FRAME_COLUMNS]


def get_account_high_since_start(
    starting_balance: float,
    trades: Iterable[Trade],
    start_date: Optional[datetime] = None,
) -> float:
    """
    Highest end-of-day balance since the account start.
    Without a start date there is no history to aggregate and the
    starting balance is returned.
    """
    if start_date is None:
        return round_currency(starting_balance)

    daily = build_daily_balance_frame(starting_balance, trades, start_date)
    if daily.empty:
        return round_currency(starting_balance)
    return float(daily["high_water_mark"].iloc[-1])


def get_utc_day_bounds(reference_time: datetime):
    """(midnight, next midnight) of the UTC day containing ``reference_time``."""
    ref = to_utc(reference_time)
    day_start = ref.replace(hour=0, minute=0, second=0, microsecond=0)
    return day_start, day_start + timedelta(days=1)


def filter_trades_on_day(trades: Iterable[Trade], reference_time: datetime) -> List[Trade]:
    """CLOSED trades entered on the UTC day of ``reference_time``."""
    day_start, day_end = get_utc_day_bounds(reference_time)
    return [
        t for t in trades
        if t.is_closed and day_start <= to_utc(t.entry_date) < day_end
    ]


def get_daily_pnl(trades: Iterable[Trade], reference_time: datetime) -> float:
    """Net P&L of the closed trades entered 'today' (UTC day of ``reference_time``)."""
    return add_currency(*(t.net_pnl for t in filter_trades_on_day(trades, reference_time)))
