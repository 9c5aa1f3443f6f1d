# PropDesk Drawdown Defaults
"""
Default trailing drawdown (MLL) amounts and starting balances per account tier.
"""

from typing import Dict, FrozenSet, Union

from propdesk.core.models import AccountType

EVALUATION_TIERS: FrozenSet[AccountType] = frozenset({
    AccountType.EVALUATION_50K,
    AccountType.EVALUATION_100K,
    AccountType.EVALUATION_150K,
})

# 0 means "set manually in account settings"
EVALUATION_MLL_AMOUNTS: Dict[AccountType, float] = {
    AccountType.EVALUATION_50K: 2000.0,
    AccountType.EVALUATION_100K: 3000.0,
    AccountType.EVALUATION_150K: 4500.0,
    AccountType.EVALUATION: 0.0,
    AccountType.CUSTOM: 0.0,
    AccountType.LIVE_FUNDED: 0.0,  # MLL resets to $0 after first payout
}

EVALUATION_STARTING_BALANCES: Dict[AccountType, float] = {
    AccountType.EVALUATION_50K: 50000.0,
    AccountType.EVALUATION_100K: 100000.0,
    AccountType.EVALUATION_150K: 150000.0,
    AccountType.EVALUATION: 0.0,
    AccountType.CUSTOM: 0.0,
    AccountType.LIVE_FUNDED: 0.0,  # Carried over from the previous account
}


def get_drawdown_amount(account_type: Union[AccountType, str, None]) -> float:
    """Default trailing drawdown for a tier, 0.0 for unknown tiers."""
    return EVALUATION_MLL_AMOUNTS.get(AccountType.parse(account_type), 0.0)


def get_starting_balance(account_type: Union[AccountType, str, None]) -> float:
    """Default starting balance for a tier, 0.0 for unknown tiers."""
    return EVALUATION_STARTING_BALANCES.get(AccountType.parse(account_type), 0.0)
