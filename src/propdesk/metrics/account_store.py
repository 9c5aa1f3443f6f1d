# PropDesk Account Store Module
"""
Storage protocols for ledgers, account settings and daily snapshots,
plus an in-memory implementation.
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from propdesk.core.clock import to_utc
from propdesk.core.models import AccountConfig, DailyAccountSnapshot, Trade


class ILedgerStore(Protocol):
    """
    Protocol for reading and appending an account's trades.

    Implementations can be backed by a database or held in memory.
    """

    def load_trades(self, account_id: str) -> List[Trade]:
        """Return all trades for an account, in any order."""
        ...

    def add_trade(self, account_id: str, trade: Trade) -> None:
        """Append a trade to an account ledger."""
        ...


class IAccountConfigStore(Protocol):
    """Protocol for account settings persistence."""

    def load_config(self, account_id: str) -> Optional[AccountConfig]:
        """Load settings, None for unknown accounts."""
        ...

    def save_config(self, config: AccountConfig) -> None:
        """Persist settings for ``config.account_id``."""
        ...


class ISnapshotStore(Protocol):
    """Protocol for end-of-day snapshot history."""

    def upsert_snapshot(self, snapshot: DailyAccountSnapshot) -> None:
        """Insert or replace the snapshot for (account_id, date)."""
        ...

    def list_snapshots(self, account_id: str, since: Optional[datetime] = None) -> List[DailyAccountSnapshot]:
        """Snapshots for an account on/after ``since``, ascending by date."""
        ...


class InMemoryAccountStore:
    """
    In-memory ledger, config and snapshot storage.

    Used by tests and by the report script.
    """

    def __init__(self) -> None:
        self._trades: Dict[str, List[Trade]] = {}
        self._configs: Dict[str, AccountConfig] = {}
        self._snapshots: Dict[str, Dict[datetime, DailyAccountSnapshot]] = {}

    # --- Ledger ---

    def add_trade(self, account_id: str, trade: Trade) -> None:
        self._trades.setdefault(account_id, []).append(trade)

    def load_trades(self, account_id: str) -> List[Trade]:
        return list(self._trades.get(account_id, []))

    # --- Config ---

    def load_config(self, account_id: str) -> Optional[AccountConfig]:
        config = self._configs.get(account_id)
        # Hand out copies so callers cannot mutate stored settings in place
        return replace(config) if config is not None else None

    def save_config(self, config: AccountConfig) -> None:
        self._configs[config.account_id] = replace(config)

    # --- Snapshots ---

    def upsert_snapshot(self, snapshot: DailyAccountSnapshot) -> None:
        day = to_utc(snapshot.date)
        self._snapshots.setdefault(snapshot.account_id, {})[day] = snapshot

    def list_snapshots(self, account_id: str, since: Optional[datetime] = None) -> List[DailyAccountSnapshot]:
        by_day = self._snapshots.get(account_id, {})
        since_utc = to_utc(since) if since is not None else None
        return [
            by_day[day] for day in sorted(by_day)
            if since_utc is None or day >= since_utc
        ]
