"""Grouping strategies: classify cache records into named groups.

A grouping answers, for any record, which group(s) it belongs to, and knows
how to name, decorate and query those groups. Group header nodes carry a
GroupingTag referring back to the grouping that produced them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from typing import Any, ClassVar

from poolnav.constants.enums import GroupingKind, NavigationMode, ObjectType
from poolnav.constants.values import (
    FOLDER_SEPARATOR,
    ROOT_LABELS,
    TYPE_GROUP_NAMES,
    UNKNOWN_POOL,
    UNKNOWN_SERVER,
    UNKNOWN_VAPP,
)
from poolnav.models.cache.object_cache import ObjectCache, is_null_ref
from poolnav.navigation.homing import placement_host
from poolnav.navigation.queries import (
    CustomFieldQuery,
    FolderQuery,
    HostMemberQuery,
    PoolMemberQuery,
    PropertyQuery,
    QueryFilter,
    TagQuery,
    TypePropertyQuery,
    custom_fields_of,
    folder_of,
    object_type_name,
)


class Grouping(ABC):
    """Base class for grouping strategies."""

    kind: ClassVar[GroupingKind]
    display_name: ClassVar[str] = ""

    def __init__(self, subgrouping: Grouping | None = None) -> None:
        self._subgrouping = subgrouping

    @abstractmethod
    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        """Group value(s) for a record.

        Returns a single hashable value, a list of values for records that
        belong to several groups, or None when the record is not part of
        this grouping.
        """

    def name(self, group: Hashable) -> str:
        """Header label for a group."""
        return str(group)

    def icon(self, group: Hashable) -> str:
        """Icon key for a group header."""
        return "group"

    def subgrouping(self, group: Hashable) -> Grouping | None:
        """Grouping applied inside a group when drilling down."""
        return self._subgrouping

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        """Filter reproducing the group's membership, or None if unfiltered."""
        return None

    def parent_of(self, group: Hashable) -> Hashable | None:
        """Enclosing group for nested groupings; None for top-level groups."""
        return None

    def equals(self, other: object) -> bool:
        """Groupings are interchangeable when they are of the same kind."""
        return isinstance(other, Grouping) and other.kind == self.kind

    def groups_of(self, record: dict[str, Any], obj_type: ObjectType) -> list[Hashable]:
        """``classify`` normalized to a list."""
        value = self.classify(record, obj_type)
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ============================================================================
# Structural groupings
# ============================================================================

class NavigationRootGrouping(Grouping):
    """Grouping of the tree root; the group value is the navigation mode."""

    kind = GroupingKind.ROOT

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        return None

    def name(self, group: Hashable) -> str:
        try:
            return ROOT_LABELS[NavigationMode(group)]
        except ValueError:
            return str(group)

    def icon(self, group: Hashable) -> str:
        return "root"


class PlaceholderGrouping(Grouping):
    """Explanatory leaves such as "Connect to a server"."""

    kind = GroupingKind.PLACEHOLDER

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        return None

    def icon(self, group: Hashable) -> str:
        return "placeholder"


# ============================================================================
# Object groupings
# ============================================================================

class TypeGrouping(Grouping):
    """Group by user-facing object type."""

    kind = GroupingKind.TYPE
    display_name = "Type"

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        if obj_type == ObjectType.DISCONNECTED_HOST:
            return "disconnected_host"
        if obj_type in (ObjectType.PBD, ObjectType.VBD, ObjectType.CONNECTION):
            return None
        return object_type_name(record, obj_type)

    def name(self, group: Hashable) -> str:
        return TYPE_GROUP_NAMES.get(str(group), str(group))

    def icon(self, group: Hashable) -> str:
        return {
            "vm": "vm_generic",
            "template": "template_user",
            "sr": "sr_shared",
        }.get(str(group), str(group))

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        if group is None:
            return None
        return TypePropertyQuery(str(group))


class PoolGrouping(Grouping):
    """Group by pool. One cache holds exactly one pool."""

    kind = GroupingKind.POOL
    display_name = "Pool"

    def __init__(self, cache: ObjectCache, subgrouping: Grouping | None = None) -> None:
        super().__init__(subgrouping)
        self._cache = cache

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        pool_refs = self._cache.refs(ObjectType.POOL)
        return pool_refs[0] if pool_refs else None

    def name(self, group: Hashable) -> str:
        pool = self._cache.resolve(ObjectType.POOL, str(group))
        return pool.get("name_label") or UNKNOWN_POOL

    def icon(self, group: Hashable) -> str:
        return "pool"

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        return PoolMemberQuery(self._cache, str(group))


class HostGrouping(Grouping):
    """Group by the host an object is placed under."""

    kind = GroupingKind.HOST
    display_name = "Server"

    def __init__(self, cache: ObjectCache, subgrouping: Grouping | None = None) -> None:
        super().__init__(subgrouping)
        self._cache = cache

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        return placement_host(self._cache, record, obj_type)

    def name(self, group: Hashable) -> str:
        host = self._cache.resolve(ObjectType.HOST, str(group))
        return host.get("name_label") or UNKNOWN_SERVER

    def icon(self, group: Hashable) -> str:
        return "host"

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        return HostMemberQuery(self._cache, str(group))


class TagGrouping(Grouping):
    """Group by tag; an object appears under each of its tags."""

    kind = GroupingKind.TAG
    display_name = "Tags"

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        tags = [tag for tag in record.get("tags") or [] if tag]
        return tags or None

    def icon(self, group: Hashable) -> str:
        return "tag"

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        return TagQuery(str(group))


class FolderGrouping(Grouping):
    """Group by folder path; nested folders become nested headers."""

    kind = GroupingKind.FOLDER
    display_name = "Folders"

    @staticmethod
    def _normalize(path: str) -> str:
        segments = [segment for segment in path.split(FOLDER_SEPARATOR) if segment]
        return FOLDER_SEPARATOR + FOLDER_SEPARATOR.join(segments) if segments else ""

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        return self._normalize(folder_of(record)) or None

    def name(self, group: Hashable) -> str:
        return str(group).rsplit(FOLDER_SEPARATOR, 1)[-1]

    def icon(self, group: Hashable) -> str:
        return "folder"

    def parent_of(self, group: Hashable) -> Hashable | None:
        parent = str(group).rsplit(FOLDER_SEPARATOR, 1)[0]
        return parent or None

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        return FolderQuery(str(group))


class CustomFieldGrouping(Grouping):
    """Group by custom field name, then by field value.

    Group values are tuples: ``(name,)`` for a field header and
    ``(name, value)`` for a value header nested under it.
    """

    kind = GroupingKind.CUSTOM_FIELD
    display_name = "Custom Fields"

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        fields = custom_fields_of(record)
        return [(name, value) for name, value in sorted(fields.items())] or None

    def name(self, group: Hashable) -> str:
        return str(group[-1]) if isinstance(group, tuple) else str(group)

    def icon(self, group: Hashable) -> str:
        return "custom_field"

    def parent_of(self, group: Hashable) -> Hashable | None:
        if isinstance(group, tuple) and len(group) == 2:
            return (group[0],)
        return None

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        if not isinstance(group, tuple):
            return None
        value = group[1] if len(group) == 2 else None
        return CustomFieldQuery(group[0], value)


class VAppGrouping(Grouping):
    """Group VMs by the virtual appliance they belong to."""

    kind = GroupingKind.VAPP
    display_name = "vApps"

    def __init__(self, caches: Sequence[ObjectCache], subgrouping: Grouping | None = None) -> None:
        super().__init__(subgrouping)
        self._caches = list(caches)

    def classify(self, record: dict[str, Any], obj_type: ObjectType) -> Any:
        if obj_type != ObjectType.VM:
            return None
        appliance = record.get("appliance")
        return None if is_null_ref(appliance) else appliance

    def name(self, group: Hashable) -> str:
        for cache in self._caches:
            appliance = cache.resolve(ObjectType.VM_APPLIANCE, str(group))
            if appliance:
                return appliance.get("name_label") or UNKNOWN_VAPP
        return UNKNOWN_VAPP

    def icon(self, group: Hashable) -> str:
        return "vm_appliance"

    def subquery(self, parent_group: Any, group: Hashable) -> QueryFilter | None:
        return PropertyQuery("appliance", group)


def type_then_pool_grouping(cache: ObjectCache) -> TypeGrouping:
    """Type grouping that drills down into the pool of ``cache``."""
    return TypeGrouping(subgrouping=PoolGrouping(cache))


def grouping_for_mode(mode: NavigationMode, caches: Sequence[ObjectCache]) -> Grouping | None:
    """Grouping strategy used to build the tree in ``mode``.

    Infrastructure mode places objects by topology and needs no grouping.
    """
    if mode == NavigationMode.OBJECTS:
        return TypeGrouping()
    if mode == NavigationMode.TAGS:
        return TagGrouping()
    if mode == NavigationMode.FOLDERS:
        return FolderGrouping()
    if mode == NavigationMode.CUSTOM_FIELDS:
        return CustomFieldGrouping()
    if mode == NavigationMode.VAPPS:
        return VAppGrouping(caches)
    return None


__all__ = [
    "CustomFieldGrouping",
    "FolderGrouping",
    "Grouping",
    "HostGrouping",
    "NavigationRootGrouping",
    "PlaceholderGrouping",
    "PoolGrouping",
    "TagGrouping",
    "TypeGrouping",
    "VAppGrouping",
    "grouping_for_mode",
    "type_then_pool_grouping",
]
