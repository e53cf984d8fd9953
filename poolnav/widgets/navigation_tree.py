"""NavigationTree - Textual Tree rendering a NavigationController's store.

The widget is a thin adapter. It redraws whenever the controller finishes a
rebuild, and forwards cursor moves, expand/collapse, activation and context
menu requests back to the controller.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Tree
from textual.widgets.tree import TreeNode as TextualTreeNode

from poolnav.models.tree.tree_node import ROOT_INDEX, TreeNode, TreeStore
from poolnav.navigation.controller import NavigationController
from poolnav.navigation.events import NavigationEvent, RefreshResumed, SelectionChanged
from poolnav.navigation.icons import glyph_for

logger = logging.getLogger(__name__)

# (store generation, node index); stale generations are ignored.
NodeRef = tuple[int, int]


def node_label(node: TreeNode) -> Text:
    """Rich label: icon glyph followed by the node label, dimmed when greyed."""
    label = Text(f"{glyph_for(node.icon_key)} ")
    label.append(node.label, style="dim" if node.greyed else "")
    if node.is_group:
        label.stylize("bold")
    return label


class NavigationTree(Tree[NodeRef]):
    """Tree widget bound to a NavigationController."""

    DEFAULT_CSS = """
    NavigationTree {
        height: 1fr;
        min-height: 0;
    }
    """

    BINDINGS = [
        Binding("m", "context_menu", "Menu"),
        Binding("shift+f10", "context_menu", "Menu", show=False),
    ]

    def __init__(
        self,
        controller: NavigationController,
        *,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__("", id=id, classes=classes)
        self.controller = controller
        self.show_root = True
        self._index_nodes: dict[int, TextualTreeNode[NodeRef]] = {}
        self._unsubscribe = controller.events.subscribe(self._on_navigation_event)

    def on_mount(self) -> None:
        self.render_store()

    def on_unmount(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_store(self) -> None:
        """Replace the widget's nodes with the controller's current store."""
        store = self.controller.store
        self._index_nodes.clear()
        if len(store) == 0:
            self.reset("")
            return

        with self.app.batch_update():
            root = store.root
            self.reset(node_label(root), (store.generation, ROOT_INDEX))
            self._index_nodes[ROOT_INDEX] = self.root
            self._add_children(store, ROOT_INDEX, self.root)
            if root.expanded:
                self.root.expand()
            else:
                self.root.collapse()
            self._sync_cursor()

    def _add_children(
        self,
        store: TreeStore,
        index: int,
        parent: TextualTreeNode[NodeRef],
    ) -> None:
        for child in store.children(index):
            widget_node = parent.add(
                node_label(child),
                data=(store.generation, child.index),
                expand=child.expanded,
                allow_expand=bool(child.children),
            )
            self._index_nodes[child.index] = widget_node
            self._add_children(store, child.index, widget_node)

    def _sync_cursor(self) -> None:
        selected = self.controller.selected_index
        if selected is None or selected not in self._index_nodes:
            return
        self.move_cursor(self._index_nodes[selected])

    def _on_navigation_event(self, event: NavigationEvent) -> None:
        if not self.is_mounted:
            return
        if isinstance(event, RefreshResumed):
            self.render_store()
        elif isinstance(event, SelectionChanged) and event.index is not None:
            with suppress(KeyError):
                if self.cursor_node is not self._index_nodes[event.index]:
                    self.move_cursor(self._index_nodes[event.index])

    # ------------------------------------------------------------------
    # Forwarding to the controller
    # ------------------------------------------------------------------

    def _current_index(self, widget_node: TextualTreeNode[NodeRef] | None) -> int | None:
        if widget_node is None or widget_node.data is None:
            return None
        generation, index = widget_node.data
        if generation != self.controller.store.generation:
            logger.debug("Ignoring event for stale tree generation %d", generation)
            return None
        return index

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted[NodeRef]) -> None:
        index = self._current_index(event.node)
        if index is not None:
            self.controller.select(index)

    def on_tree_node_selected(self, event: Tree.NodeSelected[NodeRef]) -> None:
        index = self._current_index(event.node)
        if index is not None:
            self.controller.activate(index)

    def on_tree_node_expanded(self, event: Tree.NodeExpanded[NodeRef]) -> None:
        index = self._current_index(event.node)
        if index is not None:
            self.controller.set_expanded(index, True)

    def on_tree_node_collapsed(self, event: Tree.NodeCollapsed[NodeRef]) -> None:
        index = self._current_index(event.node)
        if index is not None:
            self.controller.set_expanded(index, False)

    def action_context_menu(self) -> None:
        index = self._current_index(self.cursor_node)
        if index is not None:
            self.controller.request_context_menu(index)


__all__ = [
    "NavigationTree",
    "node_label",
]
