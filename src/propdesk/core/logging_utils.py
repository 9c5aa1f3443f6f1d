"""
PropDesk Risk - Logging Utilities

Provides centralized logging configuration for the entire package.
Outputs logs to both console and a file in the 'logs' directory.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from propdesk.core.config import LOG_DIR, LOG_FILE_NAME, LOG_LEVEL

# Global flag to ensure we only configure the root logger once
_LOGGER_INITIALIZED = False

def _ensure_log_dir() -> Path:
    """
    Ensures the log directory exists and returns it.
    Uses PROPDESK_LOG_DIR when set, otherwise 'logs' at the project root.
    """
    if LOG_DIR:
        log_dir = Path(LOG_DIR)
    else:
        # src/propdesk/core/logging_utils.py -> parents[3] is the project root
        project_root = Path(__file__).resolve().parents[3]
        log_dir = project_root / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir

def _resolve_level(level: Optional[int]) -> int:
    if level is not None:
        return level
    return getattr(logging, str(LOG_LEVEL).upper(), logging.INFO)

def init_logging(level: Optional[int] = None, log_to_file: bool = True) -> None:
    """
    Configures the root logger with a StreamHandler and, optionally, a FileHandler.
    This should be called once at the start of a script.
    """
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    # Clear existing handlers to avoid duplicates if re-initialized
    if root.handlers:
        root.handlers.clear()

    # 1. Stream Handler (Console)
    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    # 2. File Handler
    log_file = None
    if log_to_file:
        log_file = _ensure_log_dir() / LOG_FILE_NAME
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        root.addHandler(fh)

    _LOGGER_INITIALIZED = True

    logging.getLogger("propdesk.core.logging_utils").info(
        f"Logging initialized. Log file: {log_file if log_file else 'disabled'}"
    )

def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Returns a configured logger instance.
    Ensures logging is initialized before returning.
    """
    if not _LOGGER_INITIALIZED:
        init_logging()

    return logging.getLogger(name if name else "propdesk")
