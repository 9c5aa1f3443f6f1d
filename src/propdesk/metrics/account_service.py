# PropDesk Account Metrics Service
"""
Caller-side wiring around the pure metrics functions: loads ledger and
settings from stores, caches results per account and invalidates on change.
"""

from typing import Optional, Union

from propdesk.core.logging_utils import get_logger
from propdesk.core.clock import IClock, SystemClock
from propdesk.core.models import AccountConfig, AccountMetrics, AccountMetricsWithFees, Trade
from propdesk.metrics.account_metrics import compute_account_metrics, compute_account_metrics_with_fees
from propdesk.metrics.account_store import IAccountConfigStore, ILedgerStore
from propdesk.metrics.metrics_cache import MetricsCache

logger = get_logger(__name__)

Metrics = Union[AccountMetrics, AccountMetricsWithFees]


class AccountMetricsService:
    """
    Serves account metrics with a short-lived cache.

    The cache and clock are injected; the same clock decides both cache
    expiry and which trades count as "today".
    """

    def __init__(
        self,
        ledger_store: ILedgerStore,
        config_store: IAccountConfigStore,
        cache: Optional[MetricsCache] = None,
        clock: Optional[IClock] = None,
    ) -> None:
        self.ledger_store = ledger_store
        self.config_store = config_store
        self.clock = clock or SystemClock()
        self.cache = cache if cache is not None else MetricsCache(clock=self.clock)

    @staticmethod
    def _cache_key(account_id: str, with_fees: bool) -> str:
        return f"account_metrics:{account_id}:{'fees' if with_fees else 'base'}"

    def get_metrics(
        self,
        account_id: str,
        force_refresh: bool = False,
        with_fees: bool = False,
    ) -> Optional[Metrics]:
        """
        Metrics for an account, None if it is unknown or not configured.
        """
        key = self._cache_key(account_id, with_fees)
        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        config = self.config_store.load_config(account_id)
        if config is None:
            logger.info(f"No account settings for {account_id}")
            return None

        trades = self.ledger_store.load_trades(account_id)
        compute = compute_account_metrics_with_fees if with_fees else compute_account_metrics
        metrics = compute(config, trades, self.clock.now())

        if metrics is not None:
            self.cache.set(key, metrics)
        return metrics

    def invalidate(self, account_id: str) -> None:
        """Drop every cached variant for an account."""
        for with_fees in (False, True):
            self.cache.invalidate(self._cache_key(account_id, with_fees))

    def record_trade(self, account_id: str, trade: Trade) -> None:
        """Append a trade to the ledger and invalidate cached metrics."""
        self.ledger_store.add_trade(account_id, trade)
        self.invalidate(account_id)

    def update_config(self, config: AccountConfig) -> None:
        """Save new settings and invalidate cached metrics."""
        self.config_store.save_config(config)
        self.invalidate(config.account_id)
