"""TreeBuilder - project cached objects into a navigation tree.

Building is a pure function of the connection registry, the navigation mode
and the settings passed in: it reads cache snapshots, never mutates them,
and produces a brand new TreeStore every time.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from poolnav.constants.enums import NavigationMode, ObjectType
from poolnav.constants.limits import ELLIPSIS, MAX_LABEL_LENGTH
from poolnav.constants.values import (
    CONNECTING_SUFFIX,
    PLACEHOLDER_NO_CONNECTIONS,
    PLACEHOLDER_NO_OBJECTS,
    TYPE_GROUP_ORDER,
    UNNAMED_HOST,
    UNNAMED_POOL,
    UNNAMED_SR,
    UNNAMED_VM,
)
from poolnav.models.cache.object_cache import ObjectCache
from poolnav.models.connections.registry import Connection, ConnectionRegistry
from poolnav.models.state.app_settings import NavigationSettings
from poolnav.models.tree.identity import GroupingTag, ObjectIdentity
from poolnav.models.tree.tree_node import ROOT_INDEX, TreeNode, TreeStore
from poolnav.navigation.grouping import (
    Grouping,
    NavigationRootGrouping,
    PlaceholderGrouping,
    TypeGrouping,
    grouping_for_mode,
)
from poolnav.navigation.homing import (
    is_default_template,
    is_hidden,
    is_iso_or_tools_sr,
    is_local_sr,
    sr_attached_host_refs,
    vm_home,
)
from poolnav.navigation.icons import IconClassifier, default_icon_key
from poolnav.navigation.natural_sort import natural_sort_key

logger = logging.getLogger(__name__)

# Sibling order inside a pool or host: hosts, then storage, then VMs.
_TYPE_RANK = {
    ObjectType.HOST: 0,
    ObjectType.SR: 1,
    ObjectType.VM: 2,
}

_FALLBACK_LABELS = {
    ObjectType.POOL: UNNAMED_POOL,
    ObjectType.HOST: UNNAMED_HOST,
    ObjectType.VM: UNNAMED_VM,
    ObjectType.SR: UNNAMED_SR,
}

# Record types that may appear as members of Objects and Organization views.
_MEMBER_TYPES = (
    ObjectType.POOL,
    ObjectType.HOST,
    ObjectType.VM,
    ObjectType.SR,
)


def ellipsize(label: str) -> str:
    """Trim overly long labels."""
    if len(label) <= MAX_LABEL_LENGTH:
        return label
    return label[: MAX_LABEL_LENGTH - len(ELLIPSIS)] + ELLIPSIS


def natural_node_key(node: TreeNode) -> tuple[Any, str]:
    """Order nodes by label, falling back to identity for equal labels."""
    return (natural_sort_key(node.label), str(node.identity))


def ranked_node_key(node: TreeNode) -> tuple[int, Any, str]:
    """Order nodes by type rank first, then naturally by label."""
    identity = node.object_identity
    rank = _TYPE_RANK.get(identity.type, len(_TYPE_RANK)) if identity else -1
    return (rank, *natural_node_key(node))


def disconnected_identity(connection: Connection) -> ObjectIdentity:
    """Synthetic identity of a disconnected server, stable across rebuilds."""
    return ObjectIdentity(ObjectType.DISCONNECTED_HOST, connection.hostname_with_port)


@dataclass(frozen=True)
class _Member:
    """A concrete object waiting to be placed under a group header."""

    identity: ObjectIdentity
    label: str
    icon_key: str
    greyed: bool


class TreeBuilder:
    """Builds navigation trees for every navigation mode.

    Args:
        icon_classifier: Maps (type, record) to an icon key. Supplied by the
            caller so that icon policy stays outside the builder.
    """

    def __init__(self, icon_classifier: IconClassifier = default_icon_key) -> None:
        self._icon_classifier = icon_classifier
        self._root_grouping = NavigationRootGrouping()
        self._placeholder_grouping = PlaceholderGrouping()

    # =========================================================================
    # Entry point
    # =========================================================================

    def build(
        self,
        mode: NavigationMode,
        registry: ConnectionRegistry,
        settings: NavigationSettings | None = None,
        *,
        generation: int = 0,
    ) -> TreeStore:
        """Build a fresh tree for ``mode``."""
        settings = settings or NavigationSettings()
        start = time.monotonic()

        store = TreeStore(generation)
        store.add(
            self._root_grouping.name(mode.value),
            self._root_grouping.icon(mode.value),
            GroupingTag(self._root_grouping, None, mode.value),
            expanded=True,
        )

        connections = registry.connections
        if not connections:
            self._add_placeholder(store, PLACEHOLDER_NO_CONNECTIONS)
        elif mode == NavigationMode.INFRASTRUCTURE:
            self._build_infrastructure(store, connections, settings)
        elif mode == NavigationMode.OBJECTS:
            self._build_objects(store, connections, settings)
        else:
            caches = [c.cache for c in connections if c.connected]
            grouping = grouping_for_mode(mode, caches)
            if grouping is None:
                raise ValueError(f"No grouping for navigation mode {mode}")
            self._build_organization(store, connections, grouping, settings)

        logger.debug(
            "Built %s tree: %d nodes in %.1fms",
            mode.value,
            len(store),
            (time.monotonic() - start) * 1000,
        )
        return store

    # =========================================================================
    # Shared helpers
    # =========================================================================

    def _add_placeholder(self, store: TreeStore, message: str, parent: int = ROOT_INDEX) -> int:
        grouping = self._placeholder_grouping
        return store.add(
            grouping.name(message),
            grouping.icon(message),
            GroupingTag(grouping, None, message),
            parent=parent,
        )

    def _label(self, obj_type: ObjectType, record: dict[str, Any]) -> str:
        label = record.get("name_label") or _FALLBACK_LABELS.get(obj_type, record.get("ref", ""))
        if is_hidden(record):
            label = f"({label})"
        return ellipsize(label)

    def _add_object(
        self,
        store: TreeStore,
        parent: int,
        obj_type: ObjectType,
        record: dict[str, Any],
        *,
        expanded: bool = False,
    ) -> int:
        return store.add(
            self._label(obj_type, record),
            self._icon_classifier(obj_type, record),
            ObjectIdentity(obj_type, record["ref"]),
            parent=parent,
            expanded=expanded,
            greyed=is_hidden(record),
        )

    def _member(self, obj_type: ObjectType, record: dict[str, Any]) -> _Member:
        return _Member(
            identity=ObjectIdentity(obj_type, record["ref"]),
            label=self._label(obj_type, record),
            icon_key=self._icon_classifier(obj_type, record),
            greyed=is_hidden(record),
        )

    def _disconnected_member(self, connection: Connection) -> _Member:
        return _Member(
            identity=disconnected_identity(connection),
            label=ellipsize(connection.friendly_name),
            icon_key="disconnected_host",
            greyed=False,
        )

    @staticmethod
    def is_visible(obj_type: ObjectType, record: dict[str, Any], settings: NavigationSettings) -> bool:
        """Apply the visibility settings to a record."""
        if obj_type == ObjectType.VM:
            if record.get("is_a_snapshot") or record.get("is_control_domain"):
                return False
            if record.get("is_a_template"):
                if is_default_template(record):
                    if not settings.show_default_templates:
                        return False
                elif not settings.show_user_templates:
                    return False
        if obj_type == ObjectType.SR and is_local_sr(record) and not settings.show_local_storage:
            return False
        if is_hidden(record) and not settings.show_hidden_objects:
            return False
        return True

    # =========================================================================
    # Infrastructure mode
    # =========================================================================

    def _build_infrastructure(
        self,
        store: TreeStore,
        connections: list[Connection],
        settings: NavigationSettings,
    ) -> None:
        for connection in connections:
            if not connection.connected:
                member = self._disconnected_member(connection)
                store.add(member.label, member.icon_key, member.identity, parent=ROOT_INDEX)
                continue

            pools = connection.cache.get_all_of_type(ObjectType.POOL)
            if not pools:
                store.add(
                    ellipsize(f"{connection.hostname} {CONNECTING_SUFFIX}"),
                    "connection",
                    ObjectIdentity(ObjectType.CONNECTION, connection.hostname_with_port),
                    parent=ROOT_INDEX,
                )
                continue

            for pool in pools:
                self._build_pool(store, connection.cache, pool, settings)

        store.sort_children(ROOT_INDEX, natural_node_key)

    def _build_pool(
        self,
        store: TreeStore,
        cache: ObjectCache,
        pool: dict[str, Any],
        settings: NavigationSettings,
    ) -> None:
        standalone = not pool.get("name_label")
        if standalone:
            pool_index = ROOT_INDEX
        else:
            pool_index = self._add_object(store, ROOT_INDEX, ObjectType.POOL, pool, expanded=True)

        host_nodes: dict[str, int] = {}
        for host in cache.get_all_of_type(ObjectType.HOST):
            if not self.is_visible(ObjectType.HOST, host, settings):
                continue
            host_nodes[host["ref"]] = self._add_object(
                store, pool_index, ObjectType.HOST, host, expanded=True
            )

        for sr in cache.get_all_of_type(ObjectType.SR):
            if is_iso_or_tools_sr(sr) or not self.is_visible(ObjectType.SR, sr, settings):
                continue
            for host_ref in sr_attached_host_refs(cache, sr["ref"]):
                if host_ref in host_nodes:
                    self._add_object(store, host_nodes[host_ref], ObjectType.SR, sr)

        unhomed_parent = pool_index
        if standalone:
            unhomed_parent = host_nodes.get(pool.get("master", ""), ROOT_INDEX)

        for vm in cache.get_all_of_type(ObjectType.VM):
            if vm.get("is_a_template") or not self.is_visible(ObjectType.VM, vm, settings):
                continue
            home = vm_home(cache, vm)
            parent = host_nodes.get(home, unhomed_parent) if home else unhomed_parent
            self._add_object(store, parent, ObjectType.VM, vm)

        for host_index in host_nodes.values():
            store.sort_children(host_index, ranked_node_key)
        if pool_index != ROOT_INDEX:
            store.sort_children(pool_index, ranked_node_key)

    # =========================================================================
    # Objects mode
    # =========================================================================

    def _build_objects(
        self,
        store: TreeStore,
        connections: list[Connection],
        settings: NavigationSettings,
    ) -> None:
        grouping = TypeGrouping()
        members: dict[Hashable, list[_Member]] = {}

        for connection in connections:
            if not connection.connected:
                group = grouping.classify({}, ObjectType.DISCONNECTED_HOST)
                members.setdefault(group, []).append(self._disconnected_member(connection))
                continue

            for obj_type in _MEMBER_TYPES:
                for record in connection.cache.get_all_of_type(obj_type):
                    if obj_type == ObjectType.POOL and not record.get("name_label"):
                        continue
                    if not self.is_visible(obj_type, record, settings):
                        continue
                    for group in grouping.groups_of(record, obj_type):
                        members.setdefault(group, []).append(self._member(obj_type, record))

        if not members:
            self._add_placeholder(store, PLACEHOLDER_NO_OBJECTS)
            return

        ordered_groups = [g for g in TYPE_GROUP_ORDER if g in members]
        ordered_groups += sorted(
            (g for g in members if g not in TYPE_GROUP_ORDER), key=lambda g: natural_sort_key(str(g))
        )
        for group in ordered_groups:
            header = store.add(
                grouping.name(group),
                grouping.icon(group),
                GroupingTag(grouping, None, group),
                parent=ROOT_INDEX,
                expanded=group != "template",
            )
            self._add_members(store, header, members[group])
            store.sort_children(header, natural_node_key)

    def _add_members(self, store: TreeStore, parent: int, members: list[_Member]) -> None:
        for member in members:
            store.add(
                member.label,
                member.icon_key,
                member.identity,
                parent=parent,
                greyed=member.greyed,
            )

    # =========================================================================
    # Organization modes
    # =========================================================================

    def _build_organization(
        self,
        store: TreeStore,
        connections: list[Connection],
        grouping: Grouping,
        settings: NavigationSettings,
    ) -> None:
        headers: dict[Hashable, int] = {}

        def ensure_header(group: Hashable) -> int:
            if group in headers:
                return headers[group]
            parent_group = grouping.parent_of(group)
            parent = ROOT_INDEX if parent_group is None else ensure_header(parent_group)
            headers[group] = store.add(
                ellipsize(grouping.name(group)),
                grouping.icon(group),
                GroupingTag(grouping, parent_group, group),
                parent=parent,
            )
            return headers[group]

        for connection in connections:
            if not connection.connected:
                continue
            for obj_type in _MEMBER_TYPES:
                for record in connection.cache.get_all_of_type(obj_type):
                    if not self.is_visible(obj_type, record, settings):
                        continue
                    for group in grouping.groups_of(record, obj_type):
                        member = self._member(obj_type, record)
                        store.add(
                            member.label,
                            member.icon_key,
                            member.identity,
                            parent=ensure_header(group),
                            greyed=member.greyed,
                        )

        if not headers:
            self._add_placeholder(store, PLACEHOLDER_NO_OBJECTS)
            return

        for index in [ROOT_INDEX, *headers.values()]:
            store.sort_children(index, ranked_node_key)


__all__ = [
    "TreeBuilder",
    "disconnected_identity",
    "ellipsize",
    "natural_node_key",
    "ranked_node_key",
]
