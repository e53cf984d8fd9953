"""Navigation events and the channel that delivers them."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from poolnav.constants.enums import NavigationMode
from poolnav.models.tree.identity import NodeIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionChanged:
    """The selected node changed; ``identity`` is None when nothing is selected."""

    identity: NodeIdentity | None
    index: int | None


@dataclass(frozen=True)
class NodeActivated:
    """A node was activated (double click or Enter)."""

    identity: NodeIdentity
    index: int


@dataclass(frozen=True)
class ContextMenuRequested:
    identity: NodeIdentity
    index: int


@dataclass(frozen=True)
class RefreshSuspended:
    """View updates are suspended while the tree is rebuilt."""

    mode: NavigationMode


@dataclass(frozen=True)
class TreeRebuilt:
    mode: NavigationMode
    generation: int
    node_count: int


@dataclass(frozen=True)
class RefreshResumed:
    mode: NavigationMode


NavigationEvent = Union[
    SelectionChanged,
    NodeActivated,
    ContextMenuRequested,
    RefreshSuspended,
    TreeRebuilt,
    RefreshResumed,
]

EventHandler = Callable[[NavigationEvent], None]


class EventChannel:
    """Synchronous observer channel."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register a handler; returns a function that unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: NavigationEvent) -> None:
        """Deliver an event to every handler, in subscription order."""
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Handler %r failed on %s", handler, type(event).__name__)


__all__ = [
    "ContextMenuRequested",
    "EventChannel",
    "EventHandler",
    "NavigationEvent",
    "NodeActivated",
    "RefreshResumed",
    "RefreshSuspended",
    "SelectionChanged",
    "TreeRebuilt",
]
