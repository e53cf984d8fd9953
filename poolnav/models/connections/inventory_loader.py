"""Load a connection inventory from a YAML fixture.

The inventory stands in for the session layer: it describes the servers the
console knows about and the records their caches hold.

Example:
    connections:
      - hostname: xs1.lab
        display_name: Lab pool
        connected: true
        objects:
          pool:
            OpaqueRef:p1: {name_label: P1, master: OpaqueRef:h1}
          host:
            OpaqueRef:h1: {name_label: H1, enabled: true}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from poolnav.constants.enums import ObjectType
from poolnav.constants.values import DEFAULT_PORT
from poolnav.models.connections.registry import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)


class InventoryLoadError(Exception):
    """Raised when an inventory file cannot be read or validated."""


class ConnectionSpec(BaseModel):
    """One connection entry of the inventory file."""

    model_config = ConfigDict(populate_by_name=True)

    hostname: str
    port: int = DEFAULT_PORT
    display_name: str = ""
    connected: bool = True
    objects: dict[str, dict[str, dict[str, Any]]] = Field(default_factory=dict)

    @field_validator("objects")
    @classmethod
    def _known_types_only(
        cls, value: dict[str, dict[str, dict[str, Any]]]
    ) -> dict[str, dict[str, dict[str, Any]]]:
        known = {member.value for member in ObjectType}
        unknown = sorted(set(value) - known)
        if unknown:
            raise ValueError(f"unknown object types: {', '.join(unknown)}")
        return value


class InventorySpec(BaseModel):
    """Top-level inventory document."""

    connections: list[ConnectionSpec] = Field(default_factory=list)


def parse_inventory(text: str) -> InventorySpec:
    """Parse and validate inventory YAML text."""
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise InventoryLoadError(f"Invalid inventory YAML: {e}") from e

    try:
        return InventorySpec.model_validate(raw)
    except ValidationError as e:
        raise InventoryLoadError(f"Invalid inventory: {e}") from e


def build_registry(spec: InventorySpec) -> ConnectionRegistry:
    """Create a registry whose connection caches hold the inventory records."""
    registry = ConnectionRegistry()
    for entry in spec.connections:
        connection = Connection(
            hostname=entry.hostname,
            port=entry.port,
            display_name=entry.display_name,
            connected=entry.connected,
        )
        for type_name, records in entry.objects.items():
            connection.cache.update_many(ObjectType(type_name), records.items())
        logger.debug(
            "Loaded %d object types for %s",
            len(entry.objects),
            connection.hostname_with_port,
        )
        registry.add(connection)
    return registry


def load_inventory(path: Path) -> ConnectionRegistry:
    """Read an inventory file and build a registry from it."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InventoryLoadError(f"Cannot read inventory {path}: {e}") from e

    registry = build_registry(parse_inventory(text))
    logger.info("Loaded inventory %s with %d connections", path, len(registry))
    return registry


__all__ = [
    "ConnectionSpec",
    "InventoryLoadError",
    "InventorySpec",
    "build_registry",
    "load_inventory",
    "parse_inventory",
]
