"""
PropDesk Risk - Drawdown & Loss Limits
======================================

Trailing max-loss-limit (MLL) and daily loss limit math.

Every function is total over its numeric inputs. Bad configuration (e.g. a
drawdown bigger than the starting balance) is caught by
``validate_account_config`` before it gets here.

Trailing limit:
    limit = max(account_high - amount, starting_balance - amount)
The floor keeps the limit from being harsher than an account that never
made money. TopStep live-funded accounts drop the trailing limit to $0 once
the first payout is received.

Daily limit is anchored to the *current* balance, not the high.
"""

from typing import Callable, Dict, Optional, Union

from propdesk.core.currency import round_currency, subtract_currency
from propdesk.core.models import BrokerId
from propdesk.contracts.broker_fees import parse_broker
from propdesk.drawdown.broker_rules import PostPayoutBehavior, get_broker_rule

TrailingFormula = Callable[[float, float, float], float]


def _floored_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    candidate = subtract_currency(account_high, trailing_amount)
    floor = subtract_currency(starting_balance, trailing_amount)
    return max(candidate, floor)


def _topstep_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    return _floored_trailing(account_high, trailing_amount, starting_balance)


def _ftmo_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    return _floored_trailing(account_high, trailing_amount, starting_balance)


def _my_forex_funds_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    return _floored_trailing(account_high, trailing_amount, starting_balance)


def _apex_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    return _floored_trailing(account_high, trailing_amount, starting_balance)


def _tradovate_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    return _floored_trailing(account_high, trailing_amount, starting_balance)


def _generic_trailing(account_high: float, trailing_amount: float, starting_balance: float) -> float:
    return _floored_trailing(account_high, trailing_amount, starting_balance)


# One entry per broker. The entries are identical today; see broker_rules.
TRAILING_FORMULAS: Dict[BrokerId, TrailingFormula] = {
    BrokerId.TOPSTEP: _topstep_trailing,
    BrokerId.FTMO: _ftmo_trailing,
    BrokerId.MY_FOREX_FUNDS: _my_forex_funds_trailing,
    BrokerId.APEX_TRADER_FUNDING: _apex_trailing,
    BrokerId.TRADOVATE: _tradovate_trailing,
    BrokerId.GENERIC: _generic_trailing,
}


def calculate_trailing_drawdown_limit(
    account_high: float,
    trailing_drawdown_amount: float,
    starting_balance: float,
    is_live_funded: bool,
    first_payout_received: bool,
    broker: Union[BrokerId, str, None] = BrokerId.TOPSTEP,
) -> float:
    """
    Trailing MLL for an account.

    Returns 0.0 for live-funded accounts past their first payout when the
    broker resets on payout (TopStep). Otherwise applies the broker's formula.
    """
    broker_id = parse_broker(broker)
    rule = get_broker_rule(broker_id)

    if (
        is_live_funded
        and first_payout_received
        and rule.post_payout_behavior is PostPayoutBehavior.RESET_TO_ZERO
    ):
        return 0.0

    formula = TRAILING_FORMULAS.get(broker_id, _generic_trailing)
    return formula(
        round_currency(account_high),
        round_currency(trailing_drawdown_amount),
        round_currency(starting_balance),
    )


def calculate_display_trailing_limit(
    account_high: float,
    trailing_drawdown_amount: float,
    is_live_funded: bool,
    first_payout_received: bool,
    broker: Union[BrokerId, str, None] = BrokerId.TOPSTEP,
) -> float:
    """Unfloored ``account_high - amount``, shown in the UI next to the enforced limit."""
    rule = get_broker_rule(broker)
    if (
        is_live_funded
        and first_payout_received
        and rule.post_payout_behavior is PostPayoutBehavior.RESET_TO_ZERO
    ):
        return 0.0
    return subtract_currency(account_high, trailing_drawdown_amount)


def calculate_daily_loss_limit(current_balance: float, daily_loss_amount: Optional[float]) -> Optional[float]:
    """
    Balance floor for today, or None when no positive daily loss amount is configured.
    """
    if daily_loss_amount is None or not daily_loss_amount > 0:
        return None
    return subtract_currency(current_balance, daily_loss_amount)


def is_within_trailing_limit(current_balance: float, trailing_limit: float) -> bool:
    return round_currency(current_balance) >= round_currency(trailing_limit)


def is_within_daily_limit(current_balance: float, daily_limit: Optional[float]) -> bool:
    """No daily limit configured is always compliant."""
    if daily_limit is None:
        return True
    return round_currency(current_balance) >= round_currency(daily_limit)
