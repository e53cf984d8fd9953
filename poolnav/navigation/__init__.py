"""Navigation tree engine: building, grouping, sorting and view-state handling."""

from poolnav.navigation.controller import NavigationController
from poolnav.navigation.events import (
    ContextMenuRequested,
    EventChannel,
    NodeActivated,
    RefreshResumed,
    RefreshSuspended,
    SelectionChanged,
    TreeRebuilt,
)
from poolnav.navigation.grouping import Grouping, grouping_for_mode
from poolnav.navigation.natural_sort import natural_compare, natural_sort_key
from poolnav.navigation.refresh_scheduler import RefreshScheduler
from poolnav.navigation.state_preserver import StatePreserver
from poolnav.navigation.tree_builder import TreeBuilder

__all__ = [
    "ContextMenuRequested",
    "EventChannel",
    "Grouping",
    "NavigationController",
    "NodeActivated",
    "RefreshResumed",
    "RefreshScheduler",
    "RefreshSuspended",
    "SelectionChanged",
    "StatePreserver",
    "TreeBuilder",
    "TreeRebuilt",
    "grouping_for_mode",
    "natural_compare",
    "natural_sort_key",
]
