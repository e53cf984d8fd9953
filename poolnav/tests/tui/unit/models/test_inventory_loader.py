"""Unit tests for the YAML inventory loader."""

from __future__ import annotations

import pytest

from poolnav.constants.enums import ObjectType
from poolnav.models.connections.inventory_loader import (
    InventoryLoadError,
    load_inventory,
    parse_inventory,
)

pytestmark = pytest.mark.unit

INVENTORY = """
connections:
  - hostname: xs1.lab
    display_name: Lab
    objects:
      pool:
        p1: {name_label: P1, master: h1}
      host:
        h1: {name_label: H1}
  - hostname: dr.lab
    port: 8443
    connected: false
"""


class TestParseInventory:
    def test_parse(self) -> None:
        spec = parse_inventory(INVENTORY)
        assert [entry.hostname for entry in spec.connections] == ["xs1.lab", "dr.lab"]
        assert spec.connections[0].connected is True
        assert spec.connections[1].port == 8443

    def test_empty_document(self) -> None:
        assert parse_inventory("").connections == []

    def test_invalid_yaml(self) -> None:
        with pytest.raises(InventoryLoadError, match="Invalid inventory YAML"):
            parse_inventory("connections: [")

    def test_unknown_object_type(self) -> None:
        text = "connections:\n  - hostname: a\n    objects:\n      widget: {}\n"
        with pytest.raises(InventoryLoadError, match="widget"):
            parse_inventory(text)

    def test_missing_hostname(self) -> None:
        with pytest.raises(InventoryLoadError):
            parse_inventory("connections:\n  - port: 1\n")


class TestLoadInventory:
    def test_load_file(self, tmp_path) -> None:
        path = tmp_path / "inventory.yaml"
        path.write_text(INVENTORY, encoding="utf-8")

        registry = load_inventory(path)

        lab = registry.find("xs1.lab")
        assert lab is not None and lab.connected
        assert lab.cache.resolve(ObjectType.HOST, "h1")["name_label"] == "H1"
        assert registry.find("dr.lab", 8443).connected is False

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(InventoryLoadError, match="Cannot read inventory"):
            load_inventory(tmp_path / "missing.yaml")

    def test_sample_inventory_loads(self, sample_inventory_path) -> None:
        registry = load_inventory(sample_inventory_path)
        assert len(registry) == 3
        assert registry.find("dr-site.example.net", 8443) is not None
