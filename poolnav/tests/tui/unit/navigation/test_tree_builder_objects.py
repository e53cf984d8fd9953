"""Unit tests for TreeBuilder in Objects mode."""

from __future__ import annotations

import pytest

from poolnav.constants.enums import NavigationMode, ObjectType
from poolnav.models.connections.registry import Connection, ConnectionRegistry
from poolnav.models.state.app_settings import NavigationSettings
from poolnav.models.tree.identity import GroupingTag, ObjectIdentity
from poolnav.navigation.grouping import TypeGrouping
from poolnav.navigation.tree_builder import TreeBuilder

pytestmark = pytest.mark.unit

OBJECTS = NavigationMode.OBJECTS


@pytest.fixture
def builder() -> TreeBuilder:
    return TreeBuilder()


@pytest.fixture
def mixed_objects(simple_objects) -> dict:
    simple_objects[ObjectType.VM].update(
        {
            "v10": {"name_label": "V10", "power_state": "Halted"},
            "v2": {"name_label": "v2", "power_state": "Halted"},
            "tpl-default": {
                "name_label": "Debian",
                "is_a_template": True,
                "other_config": {"default_template": "true"},
            },
            "tpl-user": {"name_label": "golden", "is_a_template": True},
            "snap": {"name_label": "snap", "is_a_snapshot": True, "snapshot_of": "v1"},
            "dom0": {"name_label": "dom0", "is_control_domain": True},
        }
    )
    simple_objects[ObjectType.SR] = {"sr1": {"name_label": "NFS", "shared": True, "PBDs": []}}
    return simple_objects


class TestObjectsScenario:
    def test_simple_cache(self, builder: TreeBuilder, simple_registry, outline) -> None:
        store = builder.build(OBJECTS, simple_registry)
        assert outline(store) == [
            "Objects",
            "  Pools",
            "    P1",
            "  Hosts",
            "    H1",
            "  VMs",
            "    V1",
        ]

    def test_group_tags(self, builder: TreeBuilder, simple_registry) -> None:
        store = builder.build(OBJECTS, simple_registry)
        tags = [node.identity for node in store.children(0)]
        assert tags == [
            GroupingTag(TypeGrouping(), None, "pool"),
            GroupingTag(TypeGrouping(), None, "host"),
            GroupingTag(TypeGrouping(), None, "vm"),
        ]

    def test_full_group_order(self, builder: TreeBuilder, mixed_objects, outline) -> None:
        connection = Connection(hostname="xs1", connected=True)
        for obj_type, records in mixed_objects.items():
            connection.cache.update_many(obj_type, records.items())
        registry = ConnectionRegistry([connection, Connection(hostname="offline")])

        store = builder.build(OBJECTS, registry)
        assert outline(store) == [
            "Objects",
            "  Pools",
            "    P1",
            "  Hosts",
            "    H1",
            "  VMs",
            "    V1",
            "    v2",
            "    V10",
            "  Templates",
            "    golden",
            "  Storage",
            "    NFS",
            "  Disconnected servers",
            "    offline",
        ]

    def test_templates_collapsed_by_default(
        self, builder: TreeBuilder, make_registry, mixed_objects
    ) -> None:
        store = builder.build(OBJECTS, make_registry(mixed_objects))
        expanded = {node.label: node.expanded for node in store.children(0)}
        assert expanded["Templates"] is False
        assert expanded["VMs"] is True

    def test_default_templates_setting(self, builder: TreeBuilder, make_registry, mixed_objects) -> None:
        settings = NavigationSettings(show_default_templates=True, show_user_templates=False)
        store = builder.build(OBJECTS, make_registry(mixed_objects), settings)
        templates = store.find_first(GroupingTag(TypeGrouping(), None, "template"))
        assert [node.label for node in store.children(templates.index)] == ["Debian"]

    def test_no_templates_group_when_all_filtered(
        self, builder: TreeBuilder, make_registry, mixed_objects
    ) -> None:
        settings = NavigationSettings(show_default_templates=False, show_user_templates=False)
        store = builder.build(OBJECTS, make_registry(mixed_objects), settings)
        assert store.find_first(GroupingTag(TypeGrouping(), None, "template")) is None

    def test_snapshots_and_control_domains_excluded(
        self, builder: TreeBuilder, make_registry, mixed_objects
    ) -> None:
        store = builder.build(OBJECTS, make_registry(mixed_objects))
        assert store.find_first(ObjectIdentity(ObjectType.VM, "snap")) is None
        assert store.find_first(ObjectIdentity(ObjectType.VM, "dom0")) is None

    def test_nameless_pool_not_listed(self, builder: TreeBuilder, make_registry) -> None:
        registry = make_registry(
            {
                ObjectType.POOL: {"p": {"name_label": ""}},
                ObjectType.HOST: {"h": {"name_label": "solo"}},
            }
        )
        labels = [node.label for node in builder.build(OBJECTS, registry).children(0)]
        assert labels == ["Hosts"]

    def test_empty_connected_cache(self, builder: TreeBuilder, make_registry) -> None:
        store = builder.build(OBJECTS, make_registry({}))
        assert [node.label for node in store.children(0)] == ["(No objects found)"]
