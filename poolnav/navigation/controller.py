"""NavigationController - owns the navigation tree and its rebuild cycle.

The controller ties the pieces together: change notifications go to the
refresh scheduler, the scheduler runs ``rebuild``, and each rebuild
captures view state, builds a fresh tree and restores the view state onto
it. Everything the outside world sees is published on an EventChannel.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from poolnav.constants.enums import NavigationMode, ObjectType
from poolnav.models.cache.object_cache import ObjectCache
from poolnav.models.connections.registry import Connection, ConnectionRegistry
from poolnav.models.state.app_settings import NavigationSettings
from poolnav.models.tree.identity import NodeIdentity
from poolnav.models.tree.tree_node import TreeStore
from poolnav.models.tree.view_state import SavedViewState
from poolnav.navigation.events import (
    ContextMenuRequested,
    EventChannel,
    NodeActivated,
    RefreshResumed,
    RefreshSuspended,
    SelectionChanged,
    TreeRebuilt,
)
from poolnav.navigation.refresh_scheduler import RefreshScheduler, TimerFactory
from poolnav.navigation.search_filter import filter_store
from poolnav.navigation.state_preserver import StatePreserver
from poolnav.navigation.tree_builder import TreeBuilder

logger = logging.getLogger(__name__)

# Cache types whose changes can move, add or remove tree nodes.
TREE_OBJECT_TYPES = frozenset(
    {
        ObjectType.POOL,
        ObjectType.HOST,
        ObjectType.VM,
        ObjectType.SR,
        ObjectType.PBD,
        ObjectType.VBD,
        ObjectType.VDI,
        ObjectType.VM_APPLIANCE,
    }
)

SettingsProvider = Callable[[], NavigationSettings]


class NavigationController:
    """Navigation mode controller.

    Args:
        registry: Connections whose caches feed the tree.
        builder: Tree builder; a default one is created when omitted.
        settings_provider: Called on every rebuild for the current settings.
        timer_factory: Timer factory for the refresh scheduler.
        mode: Initial navigation mode.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        *,
        builder: TreeBuilder | None = None,
        settings_provider: SettingsProvider | None = None,
        timer_factory: TimerFactory | None = None,
        mode: NavigationMode = NavigationMode.INFRASTRUCTURE,
    ) -> None:
        self.registry = registry
        self.events = EventChannel()
        self.scheduler = RefreshScheduler(self.rebuild, timer_factory=timer_factory)
        self._builder = builder or TreeBuilder()
        self._settings_provider = settings_provider or NavigationSettings
        self._preserver = StatePreserver()
        self._mode = mode
        self._store = TreeStore()
        self._full_store = self._store
        self._selected: int | None = None
        self._generation = 0
        self._suppress_selection = False
        self._mode_states: dict[NavigationMode, SavedViewState] = {}
        self._search_text = ""
        self._search_base_state: SavedViewState | None = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._cache_unsubscribers: dict[int, Callable[[], None]] = {}
        self._threadsafe = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def mode(self) -> NavigationMode:
        return self._mode

    @property
    def store(self) -> TreeStore:
        """Tree currently shown (filtered while a search is active)."""
        return self._store

    @property
    def selected_index(self) -> int | None:
        return self._selected

    @property
    def selected_identity(self) -> NodeIdentity | None:
        if self._selected is None:
            return None
        return self._store[self._selected].identity

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def is_searching(self) -> bool:
        return bool(self._search_text)

    # =========================================================================
    # Change notifications
    # =========================================================================

    def watch_registry(
        self,
        threadsafe: bool = False,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Subscribe to the registry and to every connection's cache.

        Pass ``threadsafe=True`` when caches are written from worker threads.
        Notifications are then marshalled onto ``loop``, which defaults to
        the running loop, so this must be called from the loop's thread.
        """
        self._threadsafe = threadsafe
        if threadsafe:
            self.scheduler.bind_loop(loop or asyncio.get_running_loop())
        self._unsubscribers.append(self.registry.subscribe(self._on_connection_changed))
        for connection in self.registry:
            self._watch_cache(connection.cache)

    def close(self) -> None:
        """Drop subscriptions and any pending rebuild."""
        for unsubscribe in [*self._unsubscribers, *self._cache_unsubscribers.values()]:
            unsubscribe()
        self._unsubscribers.clear()
        self._cache_unsubscribers.clear()
        self.scheduler.cancel()

    def _watch_cache(self, cache: ObjectCache) -> None:
        if id(cache) in self._cache_unsubscribers:
            return
        self._cache_unsubscribers[id(cache)] = cache.subscribe(self.on_cache_changed)

    def _on_connection_changed(self, connection: Connection) -> None:
        if connection in self.registry.connections:
            self._watch_cache(connection.cache)
        else:
            unsubscribe = self._cache_unsubscribers.pop(id(connection.cache), None)
            if unsubscribe is not None:
                unsubscribe()
        self.request_refresh()

    def request_refresh(self) -> None:
        """Schedule a debounced rebuild."""
        if self._threadsafe:
            self.scheduler.notify_changed_threadsafe()
        else:
            self.scheduler.notify_changed()

    def on_cache_changed(self, obj_type: ObjectType, ref: str) -> None:
        """Cache listener: schedule a rebuild for types shown in the tree."""
        if obj_type not in TREE_OBJECT_TYPES:
            return
        self.request_refresh()

    # =========================================================================
    # Rebuild cycle
    # =========================================================================

    def rebuild(self) -> None:
        """Rebuild the tree now, keeping selection and expansion."""
        self._run_cycle(self._current_state(), restore_expansion=len(self._full_store) > 0)

    def set_mode(self, mode: NavigationMode) -> None:
        """Switch navigation mode, remembering expansion per mode."""
        if mode == self._mode:
            return
        current = self._current_state()
        self._mode_states[self._mode] = current
        selection = current.selection
        self._mode = mode
        logger.info("Navigation mode: %s", mode.value)

        saved = self._mode_states.get(mode)
        state = SavedViewState(selection, saved.expanded_paths if saved else ())
        if self._search_base_state is not None:
            self._search_base_state = state
        self._run_cycle(state, restore_expansion=saved is not None)

    def _current_state(self) -> SavedViewState:
        selection = self._preserver.capture(self._store, self._selected).selection
        if self._search_base_state is not None:
            # Expansion is not remembered while searching.
            return SavedViewState(selection, self._search_base_state.expanded_paths)
        return SavedViewState(
            selection, self._preserver.capture(self._full_store, None).expanded_paths
        )

    def _run_cycle(self, state: SavedViewState, *, restore_expansion: bool) -> None:
        self.events.publish(RefreshSuspended(self._mode))
        self._suppress_selection = True
        try:
            self._generation += 1
            full = self._builder.build(
                self._mode,
                self.registry,
                self._settings_provider(),
                generation=self._generation,
            )
            if restore_expansion:
                selected = self._preserver.restore(full, state)
            else:
                selected = self._select_without_collapsing(full, state)

            store = full
            if self._search_text:
                store = filter_store(full, self._search_text)
                selected = None
                if state.selection is not None:
                    match = store.find_first(state.selection)
                    selected = match.index if match else None

            self._full_store = full
            self._store = store
            self._selected = selected
            self.events.publish(TreeRebuilt(self._mode, self._generation, len(store)))
        finally:
            self._suppress_selection = False
            self.events.publish(RefreshResumed(self._mode))

        if self._selected is not None:
            self.events.publish(
                SelectionChanged(self._store[self._selected].identity, self._selected)
            )

    def _select_without_collapsing(self, store: TreeStore, state: SavedViewState) -> int | None:
        if state.selection is None:
            return None
        match = store.find_first(state.selection)
        if match is None:
            return None
        self._preserver.expand_to(store, match.index)
        return match.index

    # =========================================================================
    # User interaction
    # =========================================================================

    def select(self, index: int | None) -> None:
        """Select a node, or clear the selection with None."""
        if index is not None and not 0 <= index < len(self._store):
            logger.warning("Ignoring selection of unknown node %d", index)
            return
        if index == self._selected:
            return
        self._selected = index
        if self._suppress_selection:
            return
        identity = None if index is None else self._store[index].identity
        self.events.publish(SelectionChanged(identity, index))

    def activate(self, index: int) -> None:
        node = self._store[index]
        self.events.publish(NodeActivated(node.identity, index))

    def request_context_menu(self, index: int) -> None:
        node = self._store[index]
        self.events.publish(ContextMenuRequested(node.identity, index))

    def set_expanded(self, index: int, expanded: bool) -> None:
        """Record a user expand/collapse."""
        self._store[index].expanded = expanded

    def set_search_text(self, text: str) -> None:
        """Filter the tree to objects whose label contains ``text``."""
        text = text.strip()
        if text == self._search_text:
            return

        if not self._search_text:
            self._search_base_state = self._current_state()
            self._search_text = text
            self._run_cycle(self._search_base_state, restore_expansion=True)
            return

        if text:
            self._search_text = text
            self._run_cycle(self._current_state(), restore_expansion=True)
            return

        state = self._current_state()
        self._search_text = ""
        self._search_base_state = None
        self._run_cycle(state, restore_expansion=True)
        if self._selected is not None:
            self._preserver.expand_to(self._store, self._selected)


__all__ = [
    "TREE_OBJECT_TYPES",
    "NavigationController",
    "SettingsProvider",
]
