"""Connection registry - the set of servers known to the console."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from poolnav.constants.values import DEFAULT_PORT
from poolnav.models.cache.object_cache import ObjectCache

logger = logging.getLogger(__name__)

RegistryListener = Callable[["Connection"], None]


@dataclass(eq=False)
class Connection:
    """A server connection and the object cache it populates."""

    hostname: str
    port: int = DEFAULT_PORT
    display_name: str = ""
    connected: bool = False
    cache: ObjectCache = field(default_factory=ObjectCache)

    @property
    def hostname_with_port(self) -> str:
        """Hostname, suffixed with the port when it is not the default."""
        if self.port == DEFAULT_PORT:
            return self.hostname
        return f"{self.hostname}:{self.port}"

    @property
    def friendly_name(self) -> str:
        """Profile display name, falling back to the hostname."""
        return self.display_name or self.hostname


class ConnectionRegistry:
    """Ordered collection of connections with change notifications.

    Listeners are notified when a connection is added, removed or changes
    its connected state.
    """

    def __init__(self, connections: list[Connection] | None = None) -> None:
        self._connections: list[Connection] = list(connections or [])
        self._listeners: list[RegistryListener] = []

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections))

    def __len__(self) -> int:
        return len(self._connections)

    @property
    def connections(self) -> list[Connection]:
        """Snapshot of all known connections, connected or not."""
        return list(self._connections)

    def find(self, hostname: str, port: int = DEFAULT_PORT) -> Connection | None:
        """Look up a connection by hostname and port."""
        for connection in self._connections:
            if connection.hostname == hostname and connection.port == port:
                return connection
        return None

    def add(self, connection: Connection) -> None:
        """Register a connection."""
        self._connections.append(connection)
        logger.debug("Connection added: %s", connection.hostname_with_port)
        self._notify(connection)

    def remove(self, connection: Connection) -> None:
        """Forget a connection."""
        if connection not in self._connections:
            logger.warning("Connection not found for removal: %s", connection.hostname_with_port)
            return
        self._connections.remove(connection)
        logger.debug("Connection removed: %s", connection.hostname_with_port)
        self._notify(connection)

    def set_connected(self, connection: Connection, connected: bool) -> None:
        """Flip the connected flag of a connection and notify listeners."""
        if connection.connected == connected:
            return
        connection.connected = connected
        logger.info(
            "Connection %s is now %s",
            connection.hostname_with_port,
            "connected" if connected else "disconnected",
        )
        self._notify(connection)

    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, connection: Connection) -> None:
        for listener in list(self._listeners):
            try:
                listener(connection)
            except Exception:
                logger.exception("Registry listener failed for %s", connection.hostname_with_port)


__all__ = [
    "Connection",
    "ConnectionRegistry",
    "RegistryListener",
]
