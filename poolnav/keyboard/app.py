"""App-level keyboard bindings.

This module contains Textual Binding objects for app-level bindings
that work from any screen.
"""

from textual.binding import Binding

from poolnav.constants.enums import NavigationMode

# ============================================================================
# Navigation mode keys
# ============================================================================

MODE_KEYS: dict[str, NavigationMode] = {
    "1": NavigationMode.INFRASTRUCTURE,
    "2": NavigationMode.OBJECTS,
    "3": NavigationMode.TAGS,
    "4": NavigationMode.FOLDERS,
    "5": NavigationMode.CUSTOM_FIELDS,
    "6": NavigationMode.VAPPS,
}

# ============================================================================
# Textual Binding objects for app-level bindings
# ============================================================================

APP_BINDINGS: list[Binding] = [
    Binding("1", "set_mode('infrastructure')", "Infrastructure"),
    Binding("2", "set_mode('objects')", "Objects"),
    Binding("3", "set_mode('tags')", "Tags"),
    Binding("4", "set_mode('folders')", "Folders"),
    Binding("5", "set_mode('custom_fields')", "Fields", show=False),
    Binding("6", "set_mode('vapps')", "vApps", show=False),
    Binding("slash", "focus_search", "Search"),
    Binding("escape", "clear_search", "Clear search", show=False),
    Binding("t", "toggle_default_templates", "Templates", show=False),
    Binding("h", "toggle_hidden_objects", "Hidden", show=False),
    Binding("l", "toggle_local_storage", "Local SRs", show=False),
    Binding("?", "show_help", "Help"),
    Binding("r", "refresh", "Refresh"),
    Binding("q", "app.quit", "Quit"),
]

__all__ = [
    "APP_BINDINGS",
    "MODE_KEYS",
]
