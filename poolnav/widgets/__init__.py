"""Widgets module for the navigation console.

- navigation_tree: NavigationTree, the Textual adapter for NavigationController
- selection_details: SelectionDetails side panel
"""

from poolnav.widgets.navigation_tree import NavigationTree, node_label
from poolnav.widgets.selection_details import SelectionDetails, describe_identity

__all__ = [
    "NavigationTree",
    "SelectionDetails",
    "describe_identity",
    "node_label",
]
