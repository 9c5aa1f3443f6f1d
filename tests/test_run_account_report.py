"""
Tests for the account report CLI.
"""

import json

import pytest

from propdesk.core.models import AccountType, TradeStatus
from propdesk.run_account_report import load_account_config, load_ledger_csv, main

LEDGER_CSV = """entry_date,status,net_pnl,gross_pnl,commission,symbol,market,quantity
2025-07-01T14:30:00Z,closed,500.0,505.0,5.0,AAPL,STOCK,10
2025-07-02T15:00:00Z,CLOSED,-200.0,-195.0,5.0,AAPL,STOCK,10
2025-07-02T16:00:00Z,OPEN,,,,AAPL,STOCK,10
"""


@pytest.fixture
def account_files(tmp_path):
    config_path = tmp_path / "account.json"
    config_path.write_text(json.dumps({
        "account_id": "acc-1",
        "account_type": "EVALUATION_50K",
        "starting_balance": 50000,
        "account_start_date": "2025-07-01",
        "trailing_drawdown_amount": 2000,
        "unknown_key": "ignored",
    }))
    ledger_path = tmp_path / "trades.csv"
    ledger_path.write_text(LEDGER_CSV)
    return config_path, ledger_path


def test_load_account_config(account_files):
    config = load_account_config(account_files[0])

    assert config.account_id == "acc-1"
    assert config.account_type is AccountType.EVALUATION_50K
    assert config.account_start_date.year == 2025
    assert config.account_start_date.tzinfo is not None


def test_load_ledger_csv(account_files):
    trades = load_ledger_csv(account_files[1])

    assert len(trades) == 3
    assert trades[0].status is TradeStatus.CLOSED
    assert trades[0].gross_pnl == 505.0
    assert trades[2].status is TradeStatus.OPEN
    assert trades[2].net_pnl is None
    assert trades[2].commission == 0.0


def test_load_ledger_csv_requires_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("entry_date,status\n2025-07-01,CLOSED\n")
    with pytest.raises(ValueError, match="net_pnl"):
        load_ledger_csv(path)


def test_report_output(account_files, capsys):
    config_path, ledger_path = account_files
    code = main([
        "--config", str(config_path),
        "--ledger", str(ledger_path),
        "--as-of", "2025-07-02T20:00:00",
        "--validate",
        "--daily",
    ])
    out = capsys.readouterr().out

    assert code == 0
    assert "Broker:                Prop Firm" in out
    assert "Current balance:       $50,300.00" in out
    assert "Account high:          $50,500.00" in out
    assert "Trailing limit (MLL):  $48,500.00  (buffer $1,800.00)" in out
    assert "Daily limit:           not configured" in out
    assert "Fees to date:          $10.00  (3.23% of gross)" in out
    assert "high_water_mark" in out
    # Ledger has no exit prices, so the audit warns
    assert "Validation: WARNING" in out


def test_report_unconfigured_account(tmp_path, account_files, capsys):
    config_path = tmp_path / "empty.json"
    config_path.write_text(json.dumps({"account_type": "CUSTOM"}))

    code = main(["--config", str(config_path), "--ledger", str(account_files[1]), "--as-of", "2025-07-02"])

    assert code == 1
    assert "not configured" in capsys.readouterr().out
