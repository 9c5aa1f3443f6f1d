from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union
from datetime import datetime


class TradeStatus(Enum):
    """
    Lifecycle status of a ledger entry.
    Only CLOSED trades contribute to balance math.
    """
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class MarketType(Enum):
    """Market a trade was placed in. Drives contract multiplier lookup."""
    STOCK = "STOCK"
    FUTURES = "FUTURES"
    MICRO_FUTURES = "MICRO_FUTURES"
    FOREX = "FOREX"
    CRYPTO = "CRYPTO"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: Union["MarketType", str, None]) -> "MarketType":
        """Unknown or missing markets are treated as stock (multiplier 1.0)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.STOCK


class AccountType(Enum):
    """
    Account tiers. Evaluation tiers carry fixed balances and drawdowns,
    EVALUATION and CUSTOM are configured manually.
    """
    EVALUATION_50K = "EVALUATION_50K"
    EVALUATION_100K = "EVALUATION_100K"
    EVALUATION_150K = "EVALUATION_150K"
    EVALUATION = "EVALUATION"
    LIVE_FUNDED = "LIVE_FUNDED"
    CUSTOM = "CUSTOM"

    @classmethod
    def parse(cls, value: Union["AccountType", str, None]) -> "AccountType":
        """
        Coerce stored strings into an AccountType.
        Legacy TOPSTEP_* names map onto the matching evaluation tier,
        anything unrecognized becomes CUSTOM.
        """
        if isinstance(value, cls):
            return value
        name = str(value).upper() if value is not None else ""
        if name.startswith("TOPSTEP_"):
            name = "EVALUATION_" + name[len("TOPSTEP_"):]
        try:
            return cls(name)
        except ValueError:
            return cls.CUSTOM


class BrokerId(Enum):
    """Brokers / prop firms with their own fee and MLL rules."""
    TOPSTEP = "TOPSTEP"
    FTMO = "FTMO"
    MY_FOREX_FUNDS = "MY_FOREX_FUNDS"
    APEX_TRADER_FUNDING = "APEX_TRADER_FUNDING"
    TRADOVATE = "TRADOVATE"
    GENERIC = "GENERIC"


@dataclass(frozen=True)
class Trade:
    """
    A single ledger entry as read by the risk engine. Never mutated here.
    """
    entry_date: datetime
    status: TradeStatus
    net_pnl: Optional[float] = None
    gross_pnl: Optional[float] = None
    commission: float = 0.0
    entry_fees: float = 0.0
    exit_fees: float = 0.0
    swap: float = 0.0
    symbol: str = ""
    market: MarketType = MarketType.STOCK
    quantity: float = 1.0
    entry_price: Optional[float] = None
    exit_price: Optional[float] = None
    exit_date: Optional[datetime] = None
    trade_id: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.status is TradeStatus.CLOSED

    @property
    def total_fees(self) -> float:
        """Commission + entry + exit fees (swap is tracked separately)."""
        return (self.commission or 0.0) + (self.entry_fees or 0.0) + (self.exit_fees or 0.0)


@dataclass
class AccountConfig:
    """
    Account settings. Set at account creation and changed only by explicit
    settings updates (type change, drawdown edit, live-funded/payout toggles).
    """
    account_type: AccountType
    starting_balance: Optional[float]
    account_start_date: Optional[datetime]
    trailing_drawdown_amount: Optional[float] = None
    daily_loss_limit: Optional[float] = None
    is_live_funded: bool = False
    first_payout_received: bool = False
    current_account_high: Optional[float] = None  # Persisted by the EOD job, authoritative when present
    data_source: Optional[str] = None             # e.g. "topstep-projectx", used for broker detection
    account_id: str = "default"


@dataclass(frozen=True)
class AccountMetrics:
    """
    Derived risk snapshot for an account. Consumers must treat it as read-only.
    """
    current_balance: float
    account_high: float
    calculated_trailing_limit: float
    calculated_daily_limit: Optional[float]
    display_trailing_limit: float   # Unfloored figure shown for user feedback
    trailing_drawdown_amount: float
    daily_loss_limit: Optional[float]
    trailing_buffer: float
    daily_buffer: Optional[float]
    is_within_trailing_limit: bool
    is_within_daily_limit: bool
    net_pnl_to_date: float
    daily_pnl: float
    account_type: AccountType
    broker: BrokerId
    account_start_date: Optional[datetime]
    is_live_funded: bool
    first_payout_received: bool
    warnings: Tuple[str, ...]


@dataclass(frozen=True)
class AccountMetricsWithFees(AccountMetrics):
    """
    AccountMetrics plus fee transparency figures.
    """
    total_fees_to_date: float
    daily_fees: float
    gross_pnl_to_date: float
    gross_daily_pnl: float
    fee_impact_percentage: float
    average_fee_per_trade: float
    closed_trade_count: int


@dataclass
class DailyAccountSnapshot:
    """
    End-of-day record written by the EOD job, one per account per day.
    """
    account_id: str
    date: datetime                  # Midnight UTC of the trading day
    end_of_day_balance: float
    account_high: float
    calculated_limit: float
    net_pnl_to_date: float
    daily_pnl: float
    trades_count: int = 0
