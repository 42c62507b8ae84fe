"""Static configuration for areablock.

All user-editable settings (store location, call-blocking limits, message
filter cache, logging) live in a single JSON file for quick edits without
touching Python. Area code rules and blocked numbers are policy data and
live in the store, not here.
"""

import json
import os

from dotenv import load_dotenv

from core.config import DEFAULT_BATCH_SIZE, DEFAULT_CACHE_TTL_SECONDS
from core.phone import DEFAULT_COUNTRY_CODE

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# AREABLOCK_CONFIG points at an alternative config.json.
CONFIG_PATH = os.getenv("AREABLOCK_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema; missing file means defaults."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite policy database.
_store = _CONFIG.get("store", {})
DB_PATH = _resolve_path(os.getenv("AREABLOCK_DB_PATH") or _store.get("db_path", "areablock.db"))

# Call-blocking host limits.
# - BATCH_SIZE: entries materialized at a time while streaming to the host
# - MAX_ENTRIES: host's entry budget; null means unlimited
# - COUNTRY_CODE: prefix used to build entries (1 = USA/Canada)
_call_blocking = _CONFIG.get("call_blocking", {})
BATCH_SIZE = int(_call_blocking.get("batch_size", DEFAULT_BATCH_SIZE))
_max_entries = _call_blocking.get("max_entries")
MAX_ENTRIES = int(_max_entries) if _max_entries is not None else None
COUNTRY_CODE = int(_call_blocking.get("country_code", DEFAULT_COUNTRY_CODE))

# How long the message filter trusts its cached set of text-blocked codes.
_message_filter = _CONFIG.get("message_filter", {})
CACHE_TTL_SECONDS = float(_message_filter.get("cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS))

# Default export location for `areablock export`.
EXPORT_PATH = _resolve_path(_call_blocking.get("export_path", "exports/call-directory.txt"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
