"""Unit tests for StatePreserver capture and restore."""

from __future__ import annotations

import pytest

from poolnav.constants.enums import NavigationMode, ObjectType
from poolnav.models.tree.identity import GroupingTag, ObjectIdentity
from poolnav.models.tree.tree_node import TreeStore
from poolnav.models.tree.view_state import PathSegment, SavedViewState
from poolnav.navigation.grouping import NavigationRootGrouping, TagGrouping
from poolnav.navigation.state_preserver import StatePreserver
from poolnav.navigation.tree_builder import TreeBuilder

pytestmark = pytest.mark.unit

INFRA = NavigationMode.INFRASTRUCTURE
V1 = ObjectIdentity(ObjectType.VM, "v1")


@pytest.fixture
def preserver() -> StatePreserver:
    return StatePreserver()


def _root_tag(mode: str = "infrastructure") -> GroupingTag:
    return GroupingTag(NavigationRootGrouping(), None, mode)


class TestCapture:
    def test_captures_object_selection(self, preserver: StatePreserver, simple_registry) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        selected = store.find_first(V1).index
        state = preserver.capture(store, selected)
        assert state.selection == V1

    def test_group_selection_is_not_captured(self, preserver: StatePreserver, simple_registry) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        assert preserver.capture(store, 0).selection is None

    def test_captures_expanded_paths(self, preserver: StatePreserver, simple_registry) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        state = preserver.capture(store, None)
        leaf_labels = sorted(path[-1].label for path in state.expanded_paths)
        assert leaf_labels == ["H1", "Infrastructure", "P1"]
        longest = max(state.expanded_paths, key=len)
        assert [segment.label for segment in longest] == ["Infrastructure", "P1", "H1"]

    def test_empty_state(self, preserver: StatePreserver) -> None:
        assert preserver.capture(TreeStore(), None).is_empty


class TestRestore:
    def test_round_trip_is_idempotent(self, preserver: StatePreserver, simple_registry) -> None:
        builder = TreeBuilder()
        before = builder.build(INFRA, simple_registry)
        pool = before.find_first(ObjectIdentity(ObjectType.POOL, "p1"))
        pool.expanded = False
        state = preserver.capture(before, before.find_first(V1).index)

        after = builder.build(INFRA, simple_registry)
        selected = preserver.restore(after, state)

        assert after[selected].identity == V1
        assert preserver.capture(after, selected) == state

    def test_collapses_nodes_not_in_state(self, preserver: StatePreserver, simple_registry) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        preserver.restore(store, SavedViewState())
        assert store.expanded_nodes() == []

    def test_missing_selection_is_dropped(self, preserver: StatePreserver, simple_registry) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        state = SavedViewState(selection=ObjectIdentity(ObjectType.VM, "gone"))
        assert preserver.restore(store, state) is None

    def test_partial_path_expands_matched_prefix(
        self, preserver: StatePreserver, simple_registry
    ) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        path = (
            PathSegment(_root_tag(), "Infrastructure"),
            PathSegment(ObjectIdentity(ObjectType.POOL, "p1"), "P1"),
            PathSegment(ObjectIdentity(ObjectType.HOST, "gone"), "Gone"),
            PathSegment(ObjectIdentity(ObjectType.HOST, "h1"), "H1"),
        )
        preserver.restore(store, SavedViewState(expanded_paths=(path,)))
        assert [node.label for node in store.expanded_nodes()] == ["Infrastructure", "P1"]

    def test_group_header_matches_by_label(self, preserver: StatePreserver, make_registry) -> None:
        registry = make_registry({ObjectType.VM: {"v": {"name_label": "v", "tags": ["web"]}}})
        store = TreeBuilder().build(NavigationMode.TAGS, registry)
        stale = GroupingTag(TagGrouping(), None, "renamed-value")
        path = (PathSegment(_root_tag("tags"), "Tags"), PathSegment(stale, "web"))
        preserver.restore(store, SavedViewState(expanded_paths=(path,)))
        assert [node.label for node in store.expanded_nodes()] == ["Tags", "web"]

    def test_object_segments_do_not_match_by_label(
        self, preserver: StatePreserver, simple_registry
    ) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        path = (
            PathSegment(_root_tag(), "Infrastructure"),
            PathSegment(ObjectIdentity(ObjectType.POOL, "other"), "P1"),
        )
        preserver.restore(store, SavedViewState(expanded_paths=(path,)))
        assert [node.label for node in store.expanded_nodes()] == ["Infrastructure"]

    def test_disconnect_drops_paths(self, preserver: StatePreserver, simple_registry) -> None:
        builder = TreeBuilder()
        state = preserver.capture(builder.build(INFRA, simple_registry), None)
        connection = simple_registry.connections[0]
        simple_registry.set_connected(connection, False)

        store = builder.build(INFRA, simple_registry)
        selected = preserver.restore(store, SavedViewState(V1, state.expanded_paths))
        assert selected is None
        assert [node.label for node in store.expanded_nodes()] == ["Infrastructure"]
        assert len(store) == 2

    def test_selects_first_duplicate(self, preserver: StatePreserver) -> None:
        store = TreeStore()
        store.add("root", "root", _root_tag())
        first = store.add("a", "host", ObjectIdentity(ObjectType.HOST, "a"), parent=0)
        store.add("sr", "sr", ObjectIdentity(ObjectType.SR, "s"), parent=first)
        second = store.add("b", "host", ObjectIdentity(ObjectType.HOST, "b"), parent=0)
        store.add("sr", "sr", ObjectIdentity(ObjectType.SR, "s"), parent=second)
        state = SavedViewState(selection=ObjectIdentity(ObjectType.SR, "s"))
        assert preserver.restore(store, state) == 2


class TestExpandTo:
    def test_expands_ancestors(self, preserver: StatePreserver, simple_registry) -> None:
        store = TreeBuilder().build(INFRA, simple_registry)
        for node in store.walk():
            node.expanded = False
        vm = store.find_first(V1)
        preserver.expand_to(store, vm.index)
        assert [node.label for node in store.expanded_nodes()] == ["Infrastructure", "P1", "H1"]
        assert not vm.expanded
