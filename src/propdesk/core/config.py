"""
PropDesk Risk - Central Configuration

This module contains the system-wide constants, thresholds and settings
used by the risk engine. It serves as the single source of truth for
configuration.
"""

from typing import Dict
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Environment Settings ---
ENVIRONMENT = os.getenv('ENVIRONMENT', 'production')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_DIR = os.getenv('PROPDESK_LOG_DIR', '')
LOG_FILE_NAME = os.getenv('PROPDESK_LOG_FILE', 'propdesk_risk.log')

# --- Currency Settings ---
# All monetary values are rounded to cents
CURRENCY_DECIMALS: int = 2
# Two amounts closer than this are considered equal (one cent)
PNL_TOLERANCE: float = float(os.getenv('PNL_TOLERANCE', '0.01'))

# --- Trade Validation Thresholds ---
# Entry/exit move larger than this percentage of entry price raises a warning
LARGE_PRICE_MOVE_PCT: float = float(os.getenv('LARGE_PRICE_MOVE_PCT', '50'))
# Total fees above this percentage of notional value raise a warning
HIGH_FEE_PCT: float = float(os.getenv('HIGH_FEE_PCT', '10'))
# Balance below this fraction of the starting balance raises a warning
LOW_BALANCE_RATIO: float = float(os.getenv('LOW_BALANCE_RATIO', '0.5'))

# --- Metrics Cache ---
# Account metrics change often during a session, keep the TTL short
METRICS_CACHE_TTL_SECONDS: int = int(os.getenv('METRICS_CACHE_TTL_SECONDS', '120'))

# --- End-of-day History ---
DEFAULT_HISTORY_DAYS: int = int(os.getenv('DEFAULT_HISTORY_DAYS', '30'))

# --- Broker Detection ---
# Data-source substrings mapped to broker ids (lower-case match)
DATA_SOURCE_BROKER_HINTS: Dict[str, str] = {
    "topstep": "TOPSTEP",
    "projectx": "TOPSTEP",
    "ftmo": "FTMO",
    "myforexfunds": "MY_FOREX_FUNDS",
    "my_forex_funds": "MY_FOREX_FUNDS",
    "mff": "MY_FOREX_FUNDS",
    "apex": "APEX_TRADER_FUNDING",
    "tradovate": "TRADOVATE",
}

# Display label used in place of the TopStep broker id
PROP_FIRM_DISPLAY_NAME = "Prop Firm"
