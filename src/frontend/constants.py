"""Shared constants for the Textual UI."""

from __future__ import annotations

BLOCK_RED = "#E5484D"
ALLOW_GREEN = "#46A758"
