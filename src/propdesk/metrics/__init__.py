# PropDesk Metrics Module
"""
Account metrics orchestration, caching, end-of-day snapshots and audits.
"""

from .account_metrics import compute_account_metrics, compute_account_metrics_with_fees
from .account_service import AccountMetricsService
from .account_store import IAccountConfigStore, ILedgerStore, ISnapshotStore, InMemoryAccountStore
from .calculation_validator import ValidationReport, run_full_validation
from .eod_snapshot import EodResult, get_account_history, perform_eod_calculation
from .metrics_cache import MetricsCache

__all__ = [
    # Orchestrator
    "compute_account_metrics",
    "compute_account_metrics_with_fees",
    # Service & storage
    "AccountMetricsService",
    "IAccountConfigStore",
    "ILedgerStore",
    "ISnapshotStore",
    "InMemoryAccountStore",
    "MetricsCache",
    # EOD
    "EodResult",
    "get_account_history",
    "perform_eod_calculation",
    # Audit
    "ValidationReport",
    "run_full_validation",
]
