# PropDesk Broker MLL Rules
"""
Broker-specific max-loss-limit (MLL) rule descriptions.

Each broker gets its own record, even where the records currently say the
same thing, so a broker's rule can change without touching callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union

from propdesk.core.models import BrokerId
from propdesk.contracts.broker_fees import parse_broker


class PostPayoutBehavior(Enum):
    RESET_TO_ZERO = "reset_to_zero"
    CONTINUE_TRAILING = "continue_trailing"


class FloorProtection(Enum):
    NEVER_PROFITABLE = "never_profitable"  # starting balance - trailing amount


@dataclass(frozen=True)
class BrokerMllRule:
    broker_name: str
    formula: str
    description: str
    post_payout_behavior: PostPayoutBehavior
    has_end_of_day_calculation: bool
    floor_protection: FloorProtection


_TRAILING_FORMULA = "MLL = max(AccountHigh - TrailingAmount, StartingBalance - TrailingAmount)"

BROKER_MLL_RULES: Dict[BrokerId, BrokerMllRule] = {
    BrokerId.TOPSTEP: BrokerMllRule(
        broker_name="TopStep",
        formula=_TRAILING_FORMULA,
        description="Trailing drawdown from the end-of-day high, reset to $0 after the first live-funded payout",
        post_payout_behavior=PostPayoutBehavior.RESET_TO_ZERO,
        has_end_of_day_calculation=True,
        floor_protection=FloorProtection.NEVER_PROFITABLE,
    ),
    # FTMO, MyForexFunds and Apex publish different rules (some trail the
    # intraday high). They share the TopStep math until those are confirmed.
    BrokerId.FTMO: BrokerMllRule(
        broker_name="FTMO",
        formula=_TRAILING_FORMULA,
        description="Trailing drawdown from the end-of-day high",
        post_payout_behavior=PostPayoutBehavior.CONTINUE_TRAILING,
        has_end_of_day_calculation=True,
        floor_protection=FloorProtection.NEVER_PROFITABLE,
    ),
    BrokerId.MY_FOREX_FUNDS: BrokerMllRule(
        broker_name="MyForexFunds",
        formula=_TRAILING_FORMULA,
        description="Trailing drawdown from the end-of-day high",
        post_payout_behavior=PostPayoutBehavior.CONTINUE_TRAILING,
        has_end_of_day_calculation=True,
        floor_protection=FloorProtection.NEVER_PROFITABLE,
    ),
    BrokerId.APEX_TRADER_FUNDING: BrokerMllRule(
        broker_name="Apex Trader Funding",
        formula=_TRAILING_FORMULA,
        description="Trailing drawdown from the end-of-day high",
        post_payout_behavior=PostPayoutBehavior.CONTINUE_TRAILING,
        has_end_of_day_calculation=True,
        floor_protection=FloorProtection.NEVER_PROFITABLE,
    ),
    BrokerId.TRADOVATE: BrokerMllRule(
        broker_name="Tradovate",
        formula=_TRAILING_FORMULA,
        description="Trailing drawdown from the end-of-day high for accounts cleared through Tradovate",
        post_payout_behavior=PostPayoutBehavior.CONTINUE_TRAILING,
        has_end_of_day_calculation=True,
        floor_protection=FloorProtection.NEVER_PROFITABLE,
    ),
    BrokerId.GENERIC: BrokerMllRule(
        broker_name="Generic",
        formula=_TRAILING_FORMULA,
        description="Standard trailing drawdown for most brokers",
        post_payout_behavior=PostPayoutBehavior.CONTINUE_TRAILING,
        has_end_of_day_calculation=True,
        floor_protection=FloorProtection.NEVER_PROFITABLE,
    ),
}


def get_broker_rule(broker: Union[BrokerId, str, None]) -> BrokerMllRule:
    """Rule record for a broker, GENERIC for unknown names."""
    return BROKER_MLL_RULES.get(parse_broker(broker), BROKER_MLL_RULES[BrokerId.GENERIC])


def get_available_brokers() -> List[BrokerId]:
    return list(BROKER_MLL_RULES.keys())
