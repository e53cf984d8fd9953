"""Timeout constants for the navigation console.

All timer and interval values used by refresh scheduling.
"""

from typing import Final

# ============================================================================
# Refresh scheduling (float, in seconds)
# ============================================================================

REFRESH_DEBOUNCE_SECONDS: Final = 0.2

__all__ = [
    "REFRESH_DEBOUNCE_SECONDS",
]
