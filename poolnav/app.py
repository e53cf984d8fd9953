"""Main application class for the PoolNav TUI."""

from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, Input

from poolnav.constants import APP_TITLE, ROOT_LABELS, THEME_DEFAULT, NavigationMode
from poolnav.keyboard.app import APP_BINDINGS, MODE_KEYS
from poolnav.models.connections.inventory_loader import InventoryLoadError, load_inventory
from poolnav.models.connections.registry import ConnectionRegistry
from poolnav.models.state.app_settings import NavigationSettings
from poolnav.models.state.config_manager import (
    AppSettings,
    ConfigLoadError,
    ConfigManager,
    ConfigSaveError,
)
from poolnav.navigation.controller import NavigationController
from poolnav.navigation.events import (
    ContextMenuRequested,
    NavigationEvent,
    NodeActivated,
    SelectionChanged,
)
from poolnav.widgets import NavigationTree, SelectionDetails

logger = logging.getLogger(__name__)


class PoolNavApp(App[None]):
    """Navigation console over a pool inventory."""

    TITLE = APP_TITLE
    BINDINGS: list[Binding] = APP_BINDINGS
    CSS = """
    #search-input {
        dock: top;
    }
    """

    settings: AppSettings

    def __init__(
        self,
        inventory_path: Path | None = None,
        config_manager: ConfigManager | None = None,
        registry: ConnectionRegistry | None = None,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.config_manager = config_manager or ConfigManager()
        self._load_settings()
        if inventory_path is not None:
            self.settings.inventory_path = str(inventory_path)

        self.registry = registry if registry is not None else self._load_registry()
        self.controller = NavigationController(
            self.registry,
            settings_provider=self._navigation_settings,
            timer_factory=self.set_timer,
            mode=self._initial_mode(),
        )
        self.controller.events.subscribe(self._on_navigation_event)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _load_settings(self) -> None:
        """Load application settings from persistent storage."""
        try:
            self.settings = self.config_manager.load()
        except ConfigLoadError as e:
            logger.warning("Using default settings: %s", e)
            self.settings = AppSettings()
        self._apply_theme()

    def _apply_theme(self) -> None:
        """Apply the stored theme, falling back to the default for unknown names."""
        theme_name = str(self.settings.theme or "").strip()
        if theme_name not in self.available_themes:
            theme_name = THEME_DEFAULT
        self.settings.theme = theme_name
        self.theme = theme_name

    def _load_registry(self) -> ConnectionRegistry:
        path = self.settings.inventory_path
        if not path:
            return ConnectionRegistry()
        try:
            return load_inventory(Path(path).expanduser())
        except InventoryLoadError as e:
            logger.warning("Starting without inventory: %s", e)
            return ConnectionRegistry()

    def _initial_mode(self) -> NavigationMode:
        try:
            return NavigationMode(self.settings.navigation_mode)
        except ValueError:
            logger.warning("Unknown navigation mode %r in settings", self.settings.navigation_mode)
            return NavigationMode.INFRASTRUCTURE

    def _navigation_settings(self) -> NavigationSettings:
        return self.settings.navigation

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical():
            yield Input(placeholder="Search objects", id="search-input")
            with Horizontal():
                yield NavigationTree(self.controller, id="navigation-tree")
                yield SelectionDetails(self.registry, id="selection-details")
        yield Footer()

    def on_mount(self) -> None:
        """Build the first tree and start watching for changes."""
        self.controller.watch_registry()
        self.controller.rebuild()
        self.sub_title = ROOT_LABELS[self.controller.mode]
        self.query_one(NavigationTree).focus()

    # ------------------------------------------------------------------
    # Controller events
    # ------------------------------------------------------------------

    def _on_navigation_event(self, event: NavigationEvent) -> None:
        if isinstance(event, SelectionChanged):
            with suppress(NoMatches):
                self.query_one(SelectionDetails).show(event.identity)
        elif isinstance(event, NodeActivated):
            self.notify(f"Activated {event.identity}")
        elif isinstance(event, ContextMenuRequested):
            self.notify(f"Context menu for {event.identity}", severity="information")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self.controller.set_search_text(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-input":
            self.query_one(NavigationTree).focus()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_clear_search(self) -> None:
        search = self.query_one("#search-input", Input)
        if search.value:
            search.value = ""
            self.controller.set_search_text("")
        self.query_one(NavigationTree).focus()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_set_mode(self, mode_value: str) -> None:
        """Switch the tree to another navigation mode."""
        mode = NavigationMode(mode_value)
        self.controller.set_mode(mode)
        self.settings.navigation_mode = mode.value
        self.sub_title = ROOT_LABELS[mode]

    def _update_navigation_settings(self, **changes: bool) -> None:
        self.settings.navigation = self.settings.navigation.model_copy(update=changes)
        self.controller.request_refresh()

    def action_toggle_default_templates(self) -> None:
        current = self.settings.navigation.show_default_templates
        self._update_navigation_settings(show_default_templates=not current)
        self.notify(f"Default templates {'hidden' if current else 'shown'}")

    def action_toggle_hidden_objects(self) -> None:
        current = self.settings.navigation.show_hidden_objects
        self._update_navigation_settings(show_hidden_objects=not current)
        self.notify(f"Hidden objects {'hidden' if current else 'shown'}")

    def action_toggle_local_storage(self) -> None:
        current = self.settings.navigation.show_local_storage
        self._update_navigation_settings(show_local_storage=not current)
        self.notify(f"Local storage {'hidden' if current else 'shown'}")

    def action_refresh(self) -> None:
        """Rebuild the tree right away."""
        self.controller.scheduler.cancel()
        self.controller.rebuild()

    def action_show_help(self) -> None:
        """Show help dialog."""
        modes = "\n".join(
            f"  {key}: {ROOT_LABELS[mode]}" for key, mode in MODE_KEYS.items()
        )
        self.notify(
            "Keybindings:\n"
            f"Views:\n{modes}\n"
            "Tree:\n"
            "  Enter: Activate\n"
            "  m: Context menu\n"
            "  /: Search, Esc: clear\n"
            "Settings:\n"
            "  t: Default templates\n"
            "  h: Hidden objects\n"
            "  l: Local storage\n"
            "Actions:\n"
            "  ?: Help\n"
            "  r: Refresh\n"
            "  q: Quit",
            severity="information",
            title="Help",
        )

    def on_unmount(self) -> None:
        """Save settings when app exits."""
        self.controller.close()
        try:
            self.config_manager.save(self.settings)
        except ConfigSaveError as e:
            logger.error("Failed to save settings: %s", e)


__all__ = [
    "PoolNavApp",
]
