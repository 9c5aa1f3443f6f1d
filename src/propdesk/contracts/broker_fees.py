"""
PropDesk Risk - Broker Fee Schedules
====================================

Per-broker, per-contract fee tables and broker detection.

Lookups never fail: an unknown symbol falls back to the base symbol
(expiration code stripped), then to the broker's DEFAULT row, and an unknown
broker falls back to the generic schedule.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union

from propdesk.core.logging_utils import get_logger
from propdesk.core.config import DATA_SOURCE_BROKER_HINTS, PROP_FIRM_DISPLAY_NAME
from propdesk.core.currency import add_currency, multiply_currency
from propdesk.core.models import AccountType, BrokerId
from propdesk.contracts.contract_specs import get_base_symbol

logger = get_logger(__name__)

DEFAULT_ROW = "DEFAULT"


@dataclass(frozen=True)
class BrokerFeeSchedule:
    """
    Per-contract fees. ``round_turn_fee`` is the combined entry + exit commission,
    regulatory and platform fees are charged on top per round turn.
    """
    entry_fee: float
    exit_fee: float
    round_turn_fee: float
    regulatory_fees: float = 0.0
    platform_fee: float = 0.0

    @property
    def total_round_turn(self) -> float:
        return add_currency(self.round_turn_fee, self.regulatory_fees, self.platform_fee)


@dataclass(frozen=True)
class TradeFeeBreakdown:
    """Fees for a fill of ``quantity`` contracts."""
    symbol: str
    broker: BrokerId
    quantity: float
    entry_fees: float
    exit_fees: float
    regulatory_fees: float
    platform_fees: float
    total_fees: float


def _row(entry: float, exit: float, regulatory: float = 0.0, platform: float = 0.0) -> BrokerFeeSchedule:
    return BrokerFeeSchedule(
        entry_fee=entry,
        exit_fee=exit,
        round_turn_fee=add_currency(entry, exit),
        regulatory_fees=regulatory,
        platform_fee=platform,
    )


# TopStep charges $1.34 per round turn on micros (0.67 per side)
BROKER_FEE_TABLES: Dict[BrokerId, Dict[str, BrokerFeeSchedule]] = {
    BrokerId.TOPSTEP: {
        "MNQ": _row(0.67, 0.67),
        "MES": _row(0.67, 0.67),
        "MYM": _row(0.67, 0.67),
        "NQ": _row(2.10, 2.10),
        "ES": _row(2.10, 2.10),
        "YM": _row(2.10, 2.10),
        DEFAULT_ROW: _row(0.67, 0.67),
    },
    BrokerId.APEX_TRADER_FUNDING: {
        "MNQ": _row(0.52, 0.52, regulatory=0.04),
        "MES": _row(0.52, 0.52, regulatory=0.04),
        "NQ": _row(1.54, 1.54, regulatory=0.04),
        "ES": _row(1.54, 1.54, regulatory=0.04),
        DEFAULT_ROW: _row(0.52, 0.52, regulatory=0.04),
    },
    # Tradovate direct: $1.34 per round turn on micros, matching imported statements
    BrokerId.TRADOVATE: {
        "MNQ": _row(0.67, 0.67),
        "MES": _row(0.67, 0.67),
        "MYM": _row(0.67, 0.67),
        "NQ": _row(2.10, 2.10),
        "ES": _row(2.10, 2.10),
        "YM": _row(2.10, 2.10),
        DEFAULT_ROW: _row(0.67, 0.67),
    },
    BrokerId.FTMO: {
        DEFAULT_ROW: _row(2.50, 2.50),
    },
    BrokerId.MY_FOREX_FUNDS: {
        DEFAULT_ROW: _row(3.00, 3.00),
    },
    BrokerId.GENERIC: {
        "MNQ": _row(0.50, 0.50, regulatory=0.04, platform=0.10),
        "MES": _row(0.50, 0.50, regulatory=0.04, platform=0.10),
        "NQ": _row(1.50, 1.50, regulatory=0.04, platform=0.10),
        "ES": _row(1.50, 1.50, regulatory=0.04, platform=0.10),
        DEFAULT_ROW: _row(1.00, 1.00, regulatory=0.04),
    },
}

# Every account tier currently trades through the TopStep platform.
# Kept as an explicit per-tier map so tiers can diverge later.
ACCOUNT_TYPE_BROKERS: Dict[AccountType, BrokerId] = {
    AccountType.EVALUATION_50K: BrokerId.TOPSTEP,
    AccountType.EVALUATION_100K: BrokerId.TOPSTEP,
    AccountType.EVALUATION_150K: BrokerId.TOPSTEP,
    AccountType.EVALUATION: BrokerId.TOPSTEP,
    AccountType.LIVE_FUNDED: BrokerId.TOPSTEP,
    AccountType.CUSTOM: BrokerId.TOPSTEP,
}

# Conservative assumption when nothing else matches
DEFAULT_BROKER = BrokerId.TOPSTEP


def parse_broker(value: Union[BrokerId, str, None]) -> BrokerId:
    """Coerce a stored broker string, unknown names become GENERIC."""
    if isinstance(value, BrokerId):
        return value
    try:
        return BrokerId(str(value).upper())
    except ValueError:
        return BrokerId.GENERIC


def get_broker_fees(symbol: str, broker: Union[BrokerId, str, None]) -> BrokerFeeSchedule:
    """
    Fee schedule for a symbol at a broker.

    Lookup order: exact symbol, base symbol, broker DEFAULT row.
    Unknown brokers use the generic table.
    """
    table = BROKER_FEE_TABLES.get(parse_broker(broker), BROKER_FEE_TABLES[BrokerId.GENERIC])
    key = (symbol or "").upper()

    if key in table:
        return table[key]

    base = get_base_symbol(key)
    if base in table:
        return table[base]

    return table[DEFAULT_ROW]


def calculate_trade_fees(symbol: str, broker: Union[BrokerId, str, None], quantity: float) -> TradeFeeBreakdown:
    """Fees for a round turn of ``quantity`` contracts."""
    broker_id = parse_broker(broker)
    schedule = get_broker_fees(symbol, broker_id)
    qty = abs(quantity or 0.0)

    entry_fees = multiply_currency(schedule.entry_fee, qty)
    exit_fees = multiply_currency(schedule.exit_fee, qty)
    regulatory = multiply_currency(schedule.regulatory_fees, qty)
    platform = multiply_currency(schedule.platform_fee, qty)

    return TradeFeeBreakdown(
        symbol=symbol,
        broker=broker_id,
        quantity=qty,
        entry_fees=entry_fees,
        exit_fees=exit_fees,
        regulatory_fees=regulatory,
        platform_fees=platform,
        total_fees=add_currency(entry_fees, exit_fees, regulatory, platform),
    )


def detect_broker(
    account_type: Union[AccountType, str, None] = None,
    data_source: Optional[str] = None,
) -> BrokerId:
    """
    Work out which broker an account trades through.

    1. Data source substring (e.g. "ftmo-mt5-export") wins when it matches.
    2. Otherwise infer from the account type.
    3. Otherwise assume the prop-firm default (TopStep).
    """
    if data_source:
        source = data_source.lower()
        for hint, broker_name in DATA_SOURCE_BROKER_HINTS.items():
            if hint in source:
                return BrokerId(broker_name)
        logger.debug(f"No broker hint matched data source '{data_source}'")

    if account_type is not None:
        return ACCOUNT_TYPE_BROKERS.get(AccountType.parse(account_type), DEFAULT_BROKER)

    return DEFAULT_BROKER


def get_fee_summary(broker: Union[BrokerId, str, None]) -> Dict[str, float]:
    """Round-turn totals (commission + regulatory + platform) per symbol row for a broker."""
    table = BROKER_FEE_TABLES.get(parse_broker(broker), BROKER_FEE_TABLES[BrokerId.GENERIC])
    return {symbol: schedule.total_round_turn for symbol, schedule in table.items()}


def format_broker_name(broker: BrokerId) -> str:
    """Display name. TopStep is shown generically as 'Prop Firm'."""
    if broker is BrokerId.TOPSTEP:
        return PROP_FIRM_DISPLAY_NAME
    return broker.value
