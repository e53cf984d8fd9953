"""Default values for settings.

All default values used in the settings models and validation fallback values.
"""

from typing import Final

# ============================================================================
# Tree visibility defaults
# ============================================================================

SHOW_DEFAULT_TEMPLATES_DEFAULT: Final = False
SHOW_USER_TEMPLATES_DEFAULT: Final = True
SHOW_LOCAL_STORAGE_DEFAULT: Final = True
SHOW_HIDDEN_OBJECTS_DEFAULT: Final = True

# ============================================================================
# UI defaults
# ============================================================================

THEME_DEFAULT: Final = "textual-dark"
NAVIGATION_MODE_DEFAULT: Final = "infrastructure"
SETTINGS_DIR_NAME: Final = "poolnav"
SETTINGS_FILE_NAME: Final = "settings.json"

__all__ = [
    "NAVIGATION_MODE_DEFAULT",
    "SETTINGS_DIR_NAME",
    "SETTINGS_FILE_NAME",
    "SHOW_DEFAULT_TEMPLATES_DEFAULT",
    "SHOW_HIDDEN_OBJECTS_DEFAULT",
    "SHOW_LOCAL_STORAGE_DEFAULT",
    "SHOW_USER_TEMPLATES_DEFAULT",
    "THEME_DEFAULT",
]
