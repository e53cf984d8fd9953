"""Limit constants for the navigation console."""

from typing import Final

# ============================================================================
# Display limits
# ============================================================================

MAX_LABEL_LENGTH: Final = 1000
ELLIPSIS: Final = "..."

__all__ = [
    "ELLIPSIS",
    "MAX_LABEL_LENGTH",
]
