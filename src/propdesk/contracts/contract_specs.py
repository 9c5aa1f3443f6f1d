"""
PropDesk Risk - Contract Specifications
=======================================

Static specifications for the futures contracts the journal knows about,
and the point-multiplier lookup used when turning price moves into P&L.
"""

import re
from dataclasses import dataclass, replace
from typing import Dict, Optional, Union

from propdesk.core.models import MarketType


@dataclass(frozen=True)
class ContractSpecification:
    symbol: str
    name: str
    contract_type: str   # MICRO_FUTURES / STANDARD_FUTURES
    multiplier: float    # USD per point
    currency: str
    tick_size: float
    exchange: str
    description: str


CONTRACT_SPECIFICATIONS: Dict[str, ContractSpecification] = {
    # Micro E-mini Futures
    "MNQ": ContractSpecification(
        symbol="MNQ", name="Micro E-mini NASDAQ-100", contract_type="MICRO_FUTURES",
        multiplier=2.0, currency="USD", tick_size=0.25, exchange="CME",
        description="Micro E-mini NASDAQ-100 futures",
    ),
    "MNQU5": ContractSpecification(
        symbol="MNQU5", name="Micro E-mini NASDAQ-100 September 2025", contract_type="MICRO_FUTURES",
        multiplier=2.0, currency="USD", tick_size=0.25, exchange="CME",
        description="Micro E-mini NASDAQ-100 futures September 2025",
    ),
    "MES": ContractSpecification(
        symbol="MES", name="Micro E-mini S&P 500", contract_type="MICRO_FUTURES",
        multiplier=5.0, currency="USD", tick_size=0.25, exchange="CME",
        description="Micro E-mini S&P 500 futures",
    ),
    "MYM": ContractSpecification(
        symbol="MYM", name="Micro E-mini Dow", contract_type="MICRO_FUTURES",
        multiplier=0.5, currency="USD", tick_size=1.0, exchange="CME",
        description="Micro E-mini Dow futures",
    ),
    # E-mini Futures (Standard)
    "NQ": ContractSpecification(
        symbol="NQ", name="E-mini NASDAQ-100", contract_type="STANDARD_FUTURES",
        multiplier=20.0, currency="USD", tick_size=0.25, exchange="CME",
        description="E-mini NASDAQ-100 futures",
    ),
    "ES": ContractSpecification(
        symbol="ES", name="E-mini S&P 500", contract_type="STANDARD_FUTURES",
        multiplier=50.0, currency="USD", tick_size=0.25, exchange="CME",
        description="E-mini S&P 500 futures",
    ),
    "YM": ContractSpecification(
        symbol="YM", name="E-mini Dow", contract_type="STANDARD_FUTURES",
        multiplier=5.0, currency="USD", tick_size=1.0, exchange="CME",
        description="E-mini Dow futures",
    ),
}

_FUTURES_MARKETS = (MarketType.FUTURES, MarketType.MICRO_FUTURES)

# Month code + year digits at the end of a contract symbol, e.g. MNQU5 -> MNQ
_EXPIRATION_SUFFIX = re.compile(r"[FGHJKMNQUVXZ]\d+$")


def get_base_symbol(symbol: str) -> str:
    """Strip a trailing expiration code (ESZ24 -> ES). Symbols without one are returned unchanged."""
    return _EXPIRATION_SUFFIX.sub("", (symbol or "").upper())


def get_contract_spec(symbol: str) -> Optional[ContractSpecification]:
    """
    Get the contract specification for a symbol.

    Direct match first, then the base symbol with its expiration code removed.
    A base-symbol match keeps the original symbol on the returned spec.
    """
    key = (symbol or "").upper()
    if key in CONTRACT_SPECIFICATIONS:
        return CONTRACT_SPECIFICATIONS[key]

    base = get_base_symbol(key)
    if base in CONTRACT_SPECIFICATIONS:
        return replace(CONTRACT_SPECIFICATIONS[base], symbol=key)

    return None


def get_contract_multiplier(symbol: str, market: Union[MarketType, str] = MarketType.STOCK) -> float:
    """
    Point multiplier for a symbol. Known futures contracts use their spec,
    everything else (stocks, unknown contracts) is 1.0.
    """
    if MarketType.parse(market) in _FUTURES_MARKETS:
        spec = get_contract_spec(symbol)
        if spec:
            return spec.multiplier
    return 1.0


def get_contract_type(symbol: str, market: Union[MarketType, str] = MarketType.STOCK) -> str:
    if MarketType.parse(market) in _FUTURES_MARKETS:
        spec = get_contract_spec(symbol)
        if spec:
            return spec.contract_type
        return "STANDARD_FUTURES"  # Default for unknown futures
    return "STANDARD"


def is_futures_contract(symbol: str) -> bool:
    return get_contract_spec(symbol) is not None
