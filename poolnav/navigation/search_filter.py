"""Narrow a built tree down to objects matching a search string."""

from __future__ import annotations

from poolnav.constants.values import PLACEHOLDER_NO_MATCHES
from poolnav.models.tree.identity import GroupingTag
from poolnav.models.tree.tree_node import ROOT_INDEX, TreeNode, TreeStore
from poolnav.navigation.grouping import PlaceholderGrouping


def matches_search(node: TreeNode, text: str) -> bool:
    """Case-insensitive substring match on concrete objects only."""
    if node.object_identity is None:
        return False
    needle = text.strip().casefold()
    return bool(needle) and needle in node.label.casefold()


def filter_store(store: TreeStore, text: str) -> TreeStore:
    """Copy of ``store`` holding matching objects and their ancestors.

    Every kept node is expanded. When nothing matches, the root holds a
    single placeholder leaf.
    """
    keep: set[int] = {ROOT_INDEX}
    for node in store.walk():
        if matches_search(node, text):
            keep.add(node.index)
            keep.update(ancestor.index for ancestor in store.ancestors(node.index))

    filtered = TreeStore(store.generation)
    new_index: dict[int, int] = {}
    for node in store.walk():
        if node.index not in keep:
            continue
        new_index[node.index] = filtered.add(
            node.label,
            node.icon_key,
            node.identity,
            parent=None if node.parent is None else new_index[node.parent],
            expanded=True,
            greyed=node.greyed,
        )

    if len(filtered) == 1:
        placeholder = PlaceholderGrouping()
        filtered.add(
            PLACEHOLDER_NO_MATCHES,
            placeholder.icon(PLACEHOLDER_NO_MATCHES),
            GroupingTag(placeholder, None, PLACEHOLDER_NO_MATCHES),
            parent=ROOT_INDEX,
        )
    return filtered


__all__ = [
    "filter_store",
    "matches_search",
]
