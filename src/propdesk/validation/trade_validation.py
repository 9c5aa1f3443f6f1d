"""
PropDesk Risk - Trade & Account Validation
==========================================

Advisory checks for the trade-entry layer and for account settings.

Hard problems are reported as ``errors`` (``is_valid`` False), suspicious but
acceptable values as ``warnings``. Nothing here raises: callers decide what to
do with the result.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

import numpy as np

from propdesk.core.config import HIGH_FEE_PCT, LARGE_PRICE_MOVE_PCT, LOW_BALANCE_RATIO, PNL_TOLERANCE
from propdesk.core.currency import add_currency, round_currency, subtract_currency
from propdesk.core.models import AccountType
from propdesk.drawdown.defaults import EVALUATION_TIERS, get_drawdown_amount, get_starting_balance


@dataclass
class TradeData:
    """
    Numeric fields of a trade as entered by the user, before persistence.
    """
    entry_price: Optional[float]
    quantity: Optional[float]
    exit_price: Optional[float] = None
    entry_fees: Optional[float] = None
    exit_fees: Optional[float] = None
    commission: Optional[float] = None
    swap: Optional[float] = None
    gross_pnl: Optional[float] = None
    net_pnl: Optional[float] = None
    return_percent: Optional[float] = None
    contract_multiplier: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    risk_amount: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TradeData":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class TradeValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    sanitized_data: Optional[Dict[str, float]] = None


@dataclass
class ConfigValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


FEE_FIELDS = ("entry_fees", "exit_fees", "commission", "swap")
PNL_FIELDS = ("gross_pnl", "net_pnl", "return_percent")
POSITIVE_IF_PROVIDED = ("exit_price", "stop_loss", "take_profit")


def _is_finite(value: float) -> bool:
    return bool(np.isfinite(value))


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and _is_finite(value) and value > 0


def validate_trade_data(data: TradeData) -> TradeValidationResult:
    """
    Validate the financial fields of a single trade.

    Errors: non-positive entry price or quantity, negative fees, non-finite
    P&L, non-positive exit/stop/target when provided, negative risk amount,
    non-positive contract multiplier.
    Warnings: price move above LARGE_PRICE_MOVE_PCT, fees above HIGH_FEE_PCT of
    notional, net P&L not matching gross minus fees.

    ``sanitized_data`` is only returned for valid trades, with every monetary
    value rounded to cents.
    """
    errors: List[str] = []
    warnings: List[str] = []
    sanitized: Dict[str, float] = {}

    # Required fields
    if not _is_positive(data.entry_price):
        errors.append("Entry price must be a positive number")
    else:
        sanitized["entry_price"] = round_currency(data.entry_price)

    if not _is_positive(data.quantity):
        errors.append("Quantity must be a positive number")
    else:
        sanitized["quantity"] = round_currency(data.quantity)

    # Optional prices
    for name in POSITIVE_IF_PROVIDED:
        value = getattr(data, name)
        if value is None:
            continue
        if not _is_positive(value):
            label = name.replace("_", " ").capitalize()
            errors.append(f"{label} must be positive if provided")
        else:
            sanitized[name] = round_currency(value)

    # Fees must be non-negative
    for name in FEE_FIELDS:
        value = getattr(data, name)
        if value is None:
            continue
        if not _is_finite(value) or value < 0:
            errors.append(f"{name} cannot be negative")
        else:
            sanitized[name] = round_currency(value)

    # P&L may be negative but must be a real number
    for name in PNL_FIELDS:
        value = getattr(data, name)
        if value is None:
            continue
        if not _is_finite(value):
            errors.append(f"{name} must be a valid number")
        else:
            sanitized[name] = round_currency(value)

    if data.contract_multiplier is not None:
        if not _is_positive(data.contract_multiplier):
            errors.append("Contract multiplier must be positive")
        else:
            sanitized["contract_multiplier"] = float(data.contract_multiplier)

    if data.risk_amount is not None:
        if not _is_finite(data.risk_amount) or data.risk_amount < 0:
            errors.append("Risk amount cannot be negative")
        else:
            sanitized["risk_amount"] = round_currency(data.risk_amount)

    # Logical checks on the sanitized values
    entry = sanitized.get("entry_price")
    exit_ = sanitized.get("exit_price")
    if entry and exit_:
        move_pct = abs(exit_ - entry) / entry * 100
        if move_pct > LARGE_PRICE_MOVE_PCT:
            warnings.append(
                f"Large price change detected: {move_pct:.2f}%. Please verify entry and exit prices."
            )

    total_fees = add_currency(
        sanitized.get("entry_fees"), sanitized.get("exit_fees"), sanitized.get("commission")
    )
    quantity = sanitized.get("quantity")
    if total_fees > 0 and entry and quantity:
        trade_value = entry * quantity
        fee_pct = total_fees / trade_value * 100
        if fee_pct > HIGH_FEE_PCT:
            warnings.append(
                f"High fees detected: {fee_pct:.2f}% of trade value. Please verify fee calculations."
            )

    gross = sanitized.get("gross_pnl")
    net = sanitized.get("net_pnl")
    if gross is not None and net is not None:
        expected_net = subtract_currency(gross, total_fees)
        if abs(subtract_currency(net, expected_net)) > PNL_TOLERANCE:
            warnings.append(
                f"P&L calculation mismatch: Net P&L ({net}) does not match "
                f"Gross P&L ({gross}) minus fees ({total_fees})."
            )

    is_valid = not errors
    return TradeValidationResult(
        is_valid=is_valid,
        errors=errors,
        warnings=warnings,
        sanitized_data=sanitized if is_valid else None,
    )


def validate_account_balance(balance: float, starting_balance: Optional[float] = None) -> TradeValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    if not _is_finite(balance):
        errors.append("Account balance must be a valid number")
    elif starting_balance and balance < starting_balance * LOW_BALANCE_RATIO:
        warnings.append(
            "Account balance is significantly lower than starting balance. "
            f"Current: ${balance:,.2f}, Starting: ${starting_balance:,.2f}"
        )

    return TradeValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        sanitized_data={"balance": round_currency(balance)},
    )


def validate_trailing_drawdown_data(
    account_high: float,
    current_balance: float,
    trailing_limit: float,
    starting_balance: float,
) -> TradeValidationResult:
    """
    Cross-check a computed risk state. The warnings are the data-quality
    messages surfaced alongside account metrics.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if account_high < starting_balance:
        errors.append("Account high cannot be less than starting balance")

    if current_balance > account_high:
        warnings.append("Current balance is higher than recorded account high - account high may need updating")

    if trailing_limit > account_high:
        errors.append("Trailing drawdown limit cannot be higher than account high")

    if current_balance < trailing_limit:
        warnings.append("Current balance is below trailing drawdown limit - account may be in violation")

    return TradeValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        sanitized_data={
            "account_high": round_currency(account_high),
            "current_balance": round_currency(current_balance),
            "trailing_limit": round_currency(trailing_limit),
        },
    )


def validate_account_config(
    account_type: Union[AccountType, str],
    starting_balance: Optional[float],
    trailing_drawdown_amount: Optional[float],
) -> ConfigValidationResult:
    """
    Validate account settings before they are saved.

    Evaluation tiers must use their fixed balance and drawdown. Every account
    needs a positive balance and a non-negative drawdown smaller than it.
    """
    errors: List[str] = []
    tier = AccountType.parse(account_type)
    balance = starting_balance if starting_balance is not None else 0.0
    drawdown = trailing_drawdown_amount if trailing_drawdown_amount is not None else 0.0

    if not _is_finite(balance):
        errors.append("Starting balance must be a valid number")
    if not _is_finite(drawdown):
        errors.append("Trailing drawdown amount must be a valid number")
    if errors:
        return ConfigValidationResult(is_valid=False, errors=errors)

    if tier in EVALUATION_TIERS:
        expected_balance = get_starting_balance(tier)
        expected_drawdown = get_drawdown_amount(tier)
        if balance != expected_balance:
            errors.append(f"{tier.value} accounts must have a starting balance of ${expected_balance:,.0f}")
        if drawdown != expected_drawdown:
            errors.append(f"{tier.value} accounts must have a trailing drawdown of ${expected_drawdown:,.0f}")

    if balance <= 0:
        errors.append("Starting balance must be greater than 0")

    if drawdown < 0:
        errors.append("Trailing drawdown amount cannot be negative")

    if drawdown >= balance:
        errors.append("Trailing drawdown amount cannot be greater than or equal to starting balance")

    return ConfigValidationResult(is_valid=not errors, errors=errors)
