"""Connection registry and inventory loading."""

from poolnav.models.connections.inventory_loader import InventoryLoadError, load_inventory
from poolnav.models.connections.registry import Connection, ConnectionRegistry

__all__ = ["Connection", "ConnectionRegistry", "InventoryLoadError", "load_inventory"]
