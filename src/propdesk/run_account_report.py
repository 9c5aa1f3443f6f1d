"""
PropDesk Risk - Account Report CLI
==================================

Prints the risk snapshot for an account from a settings JSON file and a
ledger CSV in PropDesk's own column layout:

    entry_date,status,net_pnl,gross_pnl,commission,entry_fees,exit_fees,symbol,market,quantity

Usage:
    python -m propdesk.run_account_report --config account.json --ledger trades.csv
    python -m propdesk.run_account_report --config account.json --ledger trades.csv --as-of 2025-07-25 --validate
"""

import argparse
import json
import sys
from dataclasses import fields
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from propdesk.core.clock import FixedClock, SystemClock, to_utc
from propdesk.core.logging_utils import get_logger
from propdesk.core.models import AccountConfig, AccountType, MarketType, Trade, TradeStatus
from propdesk.contracts.broker_fees import format_broker_name
from propdesk.drawdown.balance import build_daily_balance_frame
from propdesk.metrics.account_metrics import compute_account_metrics_with_fees
from propdesk.metrics.calculation_validator import run_full_validation

logger = get_logger(__name__)

LEDGER_REQUIRED_COLUMNS = ["entry_date", "status", "net_pnl"]
_FLOAT_COLUMNS = ["commission", "entry_fees", "exit_fees", "swap", "quantity"]


def _optional_float(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def _optional_datetime(value) -> Optional[datetime]:
    return None if pd.isna(value) else to_utc(pd.Timestamp(value).to_pydatetime())


def load_account_config(path: Path) -> AccountConfig:
    """Read account settings from JSON (keys match AccountConfig fields)."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    known = {f.name for f in fields(AccountConfig)}
    data = {k: v for k, v in raw.items() if k in known}
    data["account_type"] = AccountType.parse(data.get("account_type"))
    data.setdefault("starting_balance", None)
    start = data.get("account_start_date")
    data["account_start_date"] = _optional_datetime(start) if start else None
    return AccountConfig(**data)


def load_ledger_csv(path: Path) -> List[Trade]:
    """Read a ledger CSV into Trade records. Missing optional columns get defaults."""
    df = pd.read_csv(path)
    missing = [c for c in LEDGER_REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Ledger {path} is missing columns: {', '.join(missing)}")

    df["entry_date"] = pd.to_datetime(df["entry_date"], utc=True)
    if "exit_date" in df.columns:
        df["exit_date"] = pd.to_datetime(df["exit_date"], utc=True)
    for col in _FLOAT_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(1.0 if col == "quantity" else 0.0)
    for col in ("symbol", "market"):
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str)

    trades = []
    for row in df.to_dict(orient="records"):
        trades.append(Trade(
            entry_date=row["entry_date"].to_pydatetime(),
            status=TradeStatus(str(row["status"]).upper()),
            net_pnl=_optional_float(row.get("net_pnl")),
            gross_pnl=_optional_float(row.get("gross_pnl")),
            commission=float(row.get("commission", 0.0)),
            entry_fees=float(row.get("entry_fees", 0.0)),
            exit_fees=float(row.get("exit_fees", 0.0)),
            swap=float(row.get("swap", 0.0)),
            symbol=str(row.get("symbol", "")),
            market=MarketType.parse(row.get("market")),
            quantity=float(row.get("quantity", 1.0)),
            entry_price=_optional_float(row.get("entry_price")),
            exit_price=_optional_float(row.get("exit_price")),
            exit_date=_optional_datetime(row.get("exit_date")),
            trade_id=str(row["trade_id"]) if "trade_id" in row and not pd.isna(row["trade_id"]) else None,
        ))
    return trades


def format_report(metrics) -> str:
    lines = [
        f"Broker:                {format_broker_name(metrics.broker)}",
        f"Account type:          {metrics.account_type.value}",
        f"Current balance:       ${metrics.current_balance:,.2f}",
        f"Account high:          ${metrics.account_high:,.2f}",
        f"Trailing limit (MLL):  ${metrics.calculated_trailing_limit:,.2f}  (buffer ${metrics.trailing_buffer:,.2f})",
    ]
    if metrics.calculated_daily_limit is not None:
        lines.append(
            f"Daily limit:           ${metrics.calculated_daily_limit:,.2f}  (buffer ${metrics.daily_buffer:,.2f})"
        )
    else:
        lines.append("Daily limit:           not configured")
    lines += [
        f"Within trailing limit: {'YES' if metrics.is_within_trailing_limit else 'NO'}",
        f"Within daily limit:    {'YES' if metrics.is_within_daily_limit else 'NO'}",
        f"Net P&L to date:       ${metrics.net_pnl_to_date:,.2f}",
        f"Today's P&L:           ${metrics.daily_pnl:,.2f}",
        f"Gross P&L to date:     ${metrics.gross_pnl_to_date:,.2f}",
        f"Fees to date:          ${metrics.total_fees_to_date:,.2f}  ({metrics.fee_impact_percentage:.2f}% of gross)",
        f"Average fee / trade:   ${metrics.average_fee_per_trade:,.2f}",
    ]
    for warning in metrics.warnings:
        lines.append(f"WARNING: {warning}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="PropDesk account risk report")
    parser.add_argument("--config", type=Path, required=True, help="Account settings JSON")
    parser.add_argument("--ledger", type=Path, required=True, help="Ledger CSV")
    parser.add_argument("--as-of", type=str, help="Reference date/time (UTC), defaults to now")
    parser.add_argument("--validate", action="store_true", help="Also run the consistency audit")
    parser.add_argument("--daily", action="store_true", help="Print the end-of-day balance table")

    args = parser.parse_args(argv)

    clock = FixedClock(pd.Timestamp(args.as_of).to_pydatetime()) if args.as_of else SystemClock()
    reference_time = clock.now()

    config = load_account_config(args.config)
    trades = load_ledger_csv(args.ledger)
    logger.info(f"Loaded {len(trades)} trades for account {config.account_id}")

    metrics = compute_account_metrics_with_fees(config, trades, reference_time)
    if metrics is None:
        print("Account is not configured yet (starting balance and start date are required).")
        return 1

    print(format_report(metrics))

    if args.daily:
        daily = build_daily_balance_frame(config.starting_balance, trades, config.account_start_date)
        print()
        print(daily.to_string(index=False))

    if args.validate:
        report = run_full_validation(config, trades, metrics, reference_time)
        print()
        print(f"Validation: {report.overall_status.value}")
        for check in report.checks:
            print(f"  [{check.status.value}] {check.type.value}: {check.description}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
