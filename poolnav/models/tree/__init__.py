"""Navigation tree data model."""

from poolnav.models.tree.identity import GroupingTag, NodeIdentity, ObjectIdentity
from poolnav.models.tree.tree_node import ROOT_INDEX, TreeNode, TreeStore
from poolnav.models.tree.view_state import ExpandedPath, PathSegment, SavedViewState

__all__ = [
    "ROOT_INDEX",
    "ExpandedPath",
    "GroupingTag",
    "NodeIdentity",
    "ObjectIdentity",
    "PathSegment",
    "SavedViewState",
    "TreeNode",
    "TreeStore",
]
