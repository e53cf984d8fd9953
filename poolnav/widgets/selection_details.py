"""SelectionDetails - side panel describing the selected tree node."""

from __future__ import annotations

from collections import Counter
from typing import Any

from rich.markup import escape
from textual.widgets import Static

from poolnav.constants.enums import GroupingKind, ObjectType
from poolnav.models.connections.registry import ConnectionRegistry
from poolnav.models.tree.identity import GroupingTag, NodeIdentity, ObjectIdentity
from poolnav.navigation.grouping import type_then_pool_grouping

# Record attributes worth showing, in display order.
_SUMMARY_FIELDS = (
    "name_label",
    "power_state",
    "resident_on",
    "affinity",
    "enabled",
    "shared",
    "content_type",
    "tags",
)

# Record types counted as group members.
_MEMBER_TYPES = (ObjectType.POOL, ObjectType.HOST, ObjectType.VM, ObjectType.SR)


def describe_identity(identity: NodeIdentity | None, registry: ConnectionRegistry) -> str:
    """Markup text summarizing a node identity."""
    if identity is None:
        return "[dim]Nothing selected[/]"

    if isinstance(identity, GroupingTag):
        return _describe_group(identity, registry)

    lines = [f"[b]{escape(identity.type.value)}[/b] {escape(identity.ref)}"]
    record = _find_record(identity, registry)
    for field in _SUMMARY_FIELDS:
        if field in record:
            lines.append(f"{field}: {escape(str(record[field]))}")
    return "\n".join(lines)


def _describe_group(tag: GroupingTag, registry: ConnectionRegistry) -> str:
    lines = [f"[b]Group[/b] {escape(tag.kind.value)}: {escape(str(tag.group))}"]
    query = tag.subquery()
    if query is None:
        return lines[0]

    members = 0
    by_pool: Counter[str] = Counter()
    for connection in registry:
        if not connection.connected:
            continue
        pools = type_then_pool_grouping(connection.cache).subgrouping(tag.group)
        for obj_type in _MEMBER_TYPES:
            for record in connection.cache.get_all_of_type(obj_type):
                if not query.match(record, obj_type):
                    continue
                members += 1
                if tag.kind == GroupingKind.TYPE and pools is not None:
                    for pool in pools.groups_of(record, obj_type):
                        by_pool[pools.name(pool)] += 1

    lines.append(f"members: {members}")
    for pool_name, count in sorted(by_pool.items()):
        lines.append(f"  {escape(pool_name)}: {count}")
    return "\n".join(lines)


def _find_record(identity: ObjectIdentity, registry: ConnectionRegistry) -> dict[str, Any]:
    for connection in registry:
        record = connection.cache.resolve(identity.type, identity.ref)
        if record:
            return record
    return {}


class SelectionDetails(Static):
    """Static panel updated on selection changes."""

    DEFAULT_CSS = """
    SelectionDetails {
        width: 40;
        padding: 0 1;
        border-left: solid $primary;
    }
    """

    def __init__(self, registry: ConnectionRegistry, *, id: str | None = None) -> None:
        super().__init__(describe_identity(None, registry), id=id)
        self.registry = registry

    def show(self, identity: NodeIdentity | None) -> None:
        self.update(describe_identity(identity, self.registry))


__all__ = [
    "SelectionDetails",
    "describe_identity",
]
