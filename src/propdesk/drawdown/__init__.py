# PropDesk Drawdown Module
"""
Balance, high-water mark and loss-limit calculations.
"""

from .balance import (
    build_daily_balance_frame,
    calculate_current_balance,
    filter_closed_trades,
    get_account_high_since_start,
    get_daily_pnl,
)
from .broker_rules import BrokerMllRule, get_broker_rule
from .defaults import get_drawdown_amount, get_starting_balance
from .limits import (
    calculate_daily_loss_limit,
    calculate_display_trailing_limit,
    calculate_trailing_drawdown_limit,
    is_within_daily_limit,
    is_within_trailing_limit,
)

__all__ = [
    # Balance
    "build_daily_balance_frame",
    "calculate_current_balance",
    "filter_closed_trades",
    "get_account_high_since_start",
    "get_daily_pnl",
    # Rules & defaults
    "BrokerMllRule",
    "get_broker_rule",
    "get_drawdown_amount",
    "get_starting_balance",
    # Limits
    "calculate_daily_loss_limit",
    "calculate_display_trailing_limit",
    "calculate_trailing_drawdown_limit",
    "is_within_daily_limit",
    "is_within_trailing_limit",
]
