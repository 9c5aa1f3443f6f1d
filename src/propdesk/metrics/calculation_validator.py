"""
PropDesk Risk - Calculation Validator
=====================================

Audits a ledger and its computed metrics for internal consistency:

- P&L: net == gross - fees for every closed trade
- Balance: metrics balance == starting balance + sum of closed net P&L
- Fees: futures fees match the broker schedule
- Drawdown: trailing limit matches a fresh recomputation
- Data integrity: prices/quantities are sane, closed trades have exit data

Each check reports PASS / WARNING / FAIL; the report's overall status is the
worst of them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from propdesk.core.logging_utils import get_logger
from propdesk.core.config import PNL_TOLERANCE
from propdesk.core.currency import add_currency, currency_equal, subtract_currency
from propdesk.core.models import AccountConfig, AccountMetrics, MarketType, Trade
from propdesk.contracts.broker_fees import calculate_trade_fees, detect_broker
from propdesk.contracts.contract_specs import is_futures_contract
from propdesk.drawdown.balance import calculate_current_balance, filter_closed_trades
from propdesk.drawdown.limits import calculate_trailing_drawdown_limit

logger = get_logger(__name__)


class CheckType(Enum):
    PNL_CONSISTENCY = "P&L_CONSISTENCY"
    BALANCE_CONSISTENCY = "BALANCE_CONSISTENCY"
    FEE_CONSISTENCY = "FEE_CONSISTENCY"
    DRAWDOWN_CONSISTENCY = "DRAWDOWN_CONSISTENCY"
    DATA_INTEGRITY = "DATA_INTEGRITY"


class CheckStatus(Enum):
    PASS = "PASS"
    WARNING = "WARNING"
    FAIL = "FAIL"


class OverallStatus(Enum):
    VALID = "VALID"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class ValidationCheck:
    type: CheckType
    status: CheckStatus
    description: str
    details: Optional[str] = None
    expected_value: Optional[float] = None
    actual_value: Optional[float] = None
    tolerance: Optional[float] = None


@dataclass
class ValidationSummary:
    total_checks: int
    passed_checks: int
    warning_checks: int
    failed_checks: int


@dataclass
class ValidationReport:
    account_id: str
    timestamp: datetime
    overall_status: OverallStatus
    checks: List[ValidationCheck] = field(default_factory=list)
    summary: Optional[ValidationSummary] = None


def _is_futures_trade(trade: Trade) -> bool:
    return trade.market in (MarketType.FUTURES, MarketType.MICRO_FUTURES) or is_futures_contract(trade.symbol)


def check_pnl_consistency(trades: Sequence[Trade]) -> ValidationCheck:
    closed = [
        t for t in filter_closed_trades(trades)
        if t.gross_pnl is not None and t.net_pnl is not None
    ]
    inconsistent = 0
    for trade in closed:
        fees = add_currency(trade.commission, trade.entry_fees, trade.exit_fees, trade.swap)
        expected_net = subtract_currency(trade.gross_pnl, fees)
        if not currency_equal(expected_net, trade.net_pnl):
            inconsistent += 1

    if inconsistent == 0:
        return ValidationCheck(
            type=CheckType.PNL_CONSISTENCY,
            status=CheckStatus.PASS,
            description=f"All {len(closed)} closed trades have consistent P&L calculations",
        )
    return ValidationCheck(
        type=CheckType.PNL_CONSISTENCY,
        status=CheckStatus.FAIL,
        description=f"{inconsistent} out of {len(closed)} trades have P&L calculation inconsistencies",
        details=f"Trades where net P&L != gross P&L - fees (tolerance: ${PNL_TOLERANCE})",
        tolerance=PNL_TOLERANCE,
    )


def check_balance_consistency(
    config: AccountConfig,
    trades: Sequence[Trade],
    metrics: Optional[AccountMetrics],
) -> ValidationCheck:
    if metrics is None:
        return ValidationCheck(
            type=CheckType.BALANCE_CONSISTENCY,
            status=CheckStatus.WARNING,
            description="No account metrics available for balance validation",
        )
    if not config.starting_balance:
        return ValidationCheck(
            type=CheckType.BALANCE_CONSISTENCY,
            status=CheckStatus.WARNING,
            description="No starting balance configured for balance validation",
        )

    expected = calculate_current_balance(config.starting_balance, trades, config.account_start_date)
    if currency_equal(expected, metrics.current_balance):
        return ValidationCheck(
            type=CheckType.BALANCE_CONSISTENCY,
            status=CheckStatus.PASS,
            description="Account balance is consistent with trade calculations",
        )
    return ValidationCheck(
        type=CheckType.BALANCE_CONSISTENCY,
        status=CheckStatus.FAIL,
        description="Account balance inconsistent with trade calculations",
        expected_value=expected,
        actual_value=metrics.current_balance,
        tolerance=PNL_TOLERANCE,
    )


def check_fee_consistency(config: AccountConfig, trades: Sequence[Trade]) -> ValidationCheck:
    broker = detect_broker(config.account_type, config.data_source)
    futures = [t for t in filter_closed_trades(trades) if _is_futures_trade(t)]

    mismatched = 0
    for trade in futures:
        expected = calculate_trade_fees(trade.symbol, broker, trade.quantity)
        if not currency_equal(expected.total_fees, trade.total_fees):
            mismatched += 1

    if mismatched == 0:
        return ValidationCheck(
            type=CheckType.FEE_CONSISTENCY,
            status=CheckStatus.PASS,
            description=f"All {len(futures)} futures trades have consistent fee calculations",
        )
    return ValidationCheck(
        type=CheckType.FEE_CONSISTENCY,
        status=CheckStatus.WARNING,
        description=f"{mismatched} out of {len(futures)} futures trades have fee calculation discrepancies",
        details=f"Compared against the {broker.value} fee schedule",
        tolerance=PNL_TOLERANCE,
    )


def check_drawdown_consistency(config: AccountConfig, metrics: Optional[AccountMetrics]) -> List[ValidationCheck]:
    if metrics is None:
        return [ValidationCheck(
            type=CheckType.DRAWDOWN_CONSISTENCY,
            status=CheckStatus.WARNING,
            description="No account metrics available for drawdown validation",
        )]

    checks: List[ValidationCheck] = []
    if metrics.account_high < metrics.current_balance:
        checks.append(ValidationCheck(
            type=CheckType.DRAWDOWN_CONSISTENCY,
            status=CheckStatus.WARNING,
            description="Account high is less than current balance",
            expected_value=metrics.current_balance,
            actual_value=metrics.account_high,
        ))

    expected_limit = calculate_trailing_drawdown_limit(
        metrics.account_high,
        metrics.trailing_drawdown_amount,
        config.starting_balance,
        config.is_live_funded,
        config.first_payout_received,
        metrics.broker,
    )
    if currency_equal(expected_limit, metrics.calculated_trailing_limit):
        checks.append(ValidationCheck(
            type=CheckType.DRAWDOWN_CONSISTENCY,
            status=CheckStatus.PASS,
            description="Trailing drawdown limit calculation is correct",
        ))
    else:
        checks.append(ValidationCheck(
            type=CheckType.DRAWDOWN_CONSISTENCY,
            status=CheckStatus.FAIL,
            description="Trailing drawdown limit calculation is incorrect",
            expected_value=expected_limit,
            actual_value=metrics.calculated_trailing_limit,
            tolerance=PNL_TOLERANCE,
        ))
    return checks


def check_data_integrity(trades: Sequence[Trade]) -> List[ValidationCheck]:
    checks: List[ValidationCheck] = []

    invalid = [
        t for t in trades
        if (t.entry_price is not None and t.entry_price <= 0) or not t.quantity or t.quantity <= 0
    ]
    if not invalid:
        checks.append(ValidationCheck(
            type=CheckType.DATA_INTEGRITY,
            status=CheckStatus.PASS,
            description="All trades have valid price and quantity data",
        ))
    else:
        checks.append(ValidationCheck(
            type=CheckType.DATA_INTEGRITY,
            status=CheckStatus.FAIL,
            description=f"{len(invalid)} trades have invalid price or quantity data",
        ))

    incomplete = [t for t in filter_closed_trades(trades) if t.exit_price is None or t.exit_date is None]
    if not incomplete:
        checks.append(ValidationCheck(
            type=CheckType.DATA_INTEGRITY,
            status=CheckStatus.PASS,
            description="All closed trades have complete exit data",
        ))
    else:
        checks.append(ValidationCheck(
            type=CheckType.DATA_INTEGRITY,
            status=CheckStatus.WARNING,
            description=f"{len(incomplete)} closed trades are missing exit price or date",
        ))
    return checks


def run_full_validation(
    config: AccountConfig,
    trades: Sequence[Trade],
    metrics: Optional[AccountMetrics],
    reference_time: datetime,
) -> ValidationReport:
    """
    Run every consistency check for an account and summarise.
    """
    checks: List[ValidationCheck] = [
        check_pnl_consistency(trades),
        check_balance_consistency(config, trades, metrics),
        check_fee_consistency(config, trades),
        *check_drawdown_consistency(config, metrics),
        *check_data_integrity(trades),
    ]

    summary = ValidationSummary(
        total_checks=len(checks),
        passed_checks=sum(1 for c in checks if c.status is CheckStatus.PASS),
        warning_checks=sum(1 for c in checks if c.status is CheckStatus.WARNING),
        failed_checks=sum(1 for c in checks if c.status is CheckStatus.FAIL),
    )

    if summary.failed_checks > 0:
        overall = OverallStatus.ERROR
    elif summary.warning_checks > 0:
        overall = OverallStatus.WARNING
    else:
        overall = OverallStatus.VALID

    logger.info(
        f"Validation for {config.account_id}: {overall.value} "
        f"({summary.passed_checks} pass, {summary.warning_checks} warn, {summary.failed_checks} fail)"
    )

    return ValidationReport(
        account_id=config.account_id,
        timestamp=reference_time,
        overall_status=overall,
        checks=checks,
        summary=summary,
    )
