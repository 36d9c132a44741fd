"""
Configuration constants for the persisted method cache.

Environment variables are loaded from a .env file at module import time via
python-dotenv.
"""

import os

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load .env file (idempotent; does nothing if already loaded or missing)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Cache location
# ---------------------------------------------------------------------------
METHOD_CACHE_DIR: str = os.getenv("METHOD_CACHE_DIR", "output/method_cache")
METHOD_CACHE_FILE: str = "methods.jsonl"

# ---------------------------------------------------------------------------
# Encoding of parsed comments inside cache lines
# ---------------------------------------------------------------------------
COMMENT_TAG: str = "__comment__"

# Log a progress line every N records while streaming the cache
PROGRESS_LOG_INTERVAL: int = 500
