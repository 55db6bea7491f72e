"""
Configuration constants and environment setup.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# DATA SOURCE
# =============================================================================

DEFAULT_DATA_SOURCE = os.environ.get(
    "ACTIVITY_DATA_SOURCE",
    "https://docs.google.com/spreadsheets/d/e/2PACX-1vQ8s1IAVtsKEpk11tlzf4wFqHOTs3R0GucbmQ52B5NowV3MrcAs9Hd-ANVsMfNqChYxObfl-TQ46SxI/pub?output=csv",
)
SHEET_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid=0"

# =============================================================================
# FETCH / CACHE
# =============================================================================

CACHE_TTL_SECONDS = float(os.environ.get("ACTIVITY_CACHE_TTL_SECONDS", "300"))
FETCH_RETRIES = int(os.environ.get("ACTIVITY_FETCH_RETRIES", "3"))
FETCH_BACKOFF_SECONDS = float(os.environ.get("ACTIVITY_FETCH_BACKOFF", "1.0"))
FETCH_TIMEOUT_SECONDS = float(os.environ.get("ACTIVITY_FETCH_TIMEOUT", "30"))
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

# =============================================================================
# NORMALIZATION
# =============================================================================

PREVIEW_ROWS = 20

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("ACTIVITY_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
