"""Carry selection and expansion across tree rebuilds."""

from __future__ import annotations

import logging

from poolnav.models.tree.identity import GroupingTag
from poolnav.models.tree.tree_node import ROOT_INDEX, TreeNode, TreeStore
from poolnav.models.tree.view_state import ExpandedPath, PathSegment, SavedViewState

logger = logging.getLogger(__name__)


class StatePreserver:
    """Captures view state from one TreeStore and replays it on the next.

    Nodes are matched by identity, level by level from the root. Group
    headers may also match by label, since a regrouped header can keep its
    name while its group value changes.
    """

    def capture(self, store: TreeStore, selected: int | None) -> SavedViewState:
        """Snapshot the selection and the path of every visible expanded node.

        Expanded nodes under a collapsed ancestor are not recorded, since
        restoring a path expands every node along it.
        """
        selection = None
        if selected is not None and 0 <= selected < len(store):
            # Group headers are never remembered as the selection.
            selection = store[selected].object_identity

        expanded_paths: list[ExpandedPath] = []
        for node in store.expanded_nodes():
            path = store.path(node.index)
            if not all(ancestor.expanded for ancestor in path[:-1]):
                continue
            expanded_paths.append(tuple(PathSegment(n.identity, n.label) for n in path))
        return SavedViewState(selection=selection, expanded_paths=tuple(expanded_paths))

    def restore(self, store: TreeStore, state: SavedViewState) -> int | None:
        """Apply a snapshot to a freshly built store.

        Returns the index of the node to select, or None.
        """
        if len(store) == 0:
            return None

        for node in store.walk():
            node.expanded = False

        for path in state.expanded_paths:
            for node in self._match_path(store, path):
                node.expanded = True

        if state.selection is None:
            return None
        match = store.find_first(state.selection)
        if match is None:
            logger.debug("Selection %s no longer in tree", state.selection)
            return None
        return match.index

    def expand_to(self, store: TreeStore, index: int) -> None:
        """Expand every ancestor of ``index`` so the node is visible."""
        for node in store.ancestors(index):
            node.expanded = True

    def _match_path(self, store: TreeStore, path: ExpandedPath) -> list[TreeNode]:
        """Nodes matching the leading segments of ``path``.

        Stops at the first segment with no match; the matched prefix is
        returned.
        """
        matched: list[TreeNode] = []
        candidates = [store[ROOT_INDEX]]
        for segment in path:
            node = self._match_segment(candidates, segment)
            if node is None:
                break
            matched.append(node)
            candidates = store.children(node.index)
        return matched

    @staticmethod
    def _match_segment(candidates: list[TreeNode], segment: PathSegment) -> TreeNode | None:
        for node in candidates:
            if node.identity == segment.identity:
                return node
        if isinstance(segment.identity, GroupingTag):
            for node in candidates:
                if node.is_group and node.label == segment.label:
                    return node
        return None


__all__ = [
    "StatePreserver",
]
