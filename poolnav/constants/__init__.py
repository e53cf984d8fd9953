"""Constants module for the navigation console.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, labels with Final)
- timeouts.py: Timer values (seconds)
- limits.py: Limit values
- defaults.py: Default values for settings
"""

from poolnav.constants.defaults import (
    NAVIGATION_MODE_DEFAULT,
    THEME_DEFAULT,
)
from poolnav.constants.enums import (
    GroupingKind,
    NavigationMode,
    ObjectType,
    PowerState,
)
from poolnav.constants.limits import MAX_LABEL_LENGTH
from poolnav.constants.timeouts import REFRESH_DEBOUNCE_SECONDS
from poolnav.constants.values import (
    APP_TITLE,
    NULL_REF,
    ROOT_LABELS,
)

__all__ = [
    # Application
    "APP_TITLE",
    # Enums
    "GroupingKind",
    # Limits
    "MAX_LABEL_LENGTH",
    "NAVIGATION_MODE_DEFAULT",
    "NULL_REF",
    "NavigationMode",
    "ObjectType",
    "PowerState",
    # Timeouts
    "REFRESH_DEBOUNCE_SECONDS",
    "ROOT_LABELS",
    # Themes
    "THEME_DEFAULT",
]
