"""Query filters that reproduce a group's membership outside the tree.

Grouping strategies hand these out through ``subquery`` so that search and
drill-in features can list the members of a group without walking the tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from poolnav.constants.enums import ObjectType
from poolnav.constants.values import CUSTOM_FIELD_PREFIX, FOLDER_KEY, FOLDER_SEPARATOR
from poolnav.models.cache.object_cache import ObjectCache, is_null_ref
from poolnav.navigation.homing import placement_host


def object_type_name(record: dict[str, Any], obj_type: ObjectType) -> str:
    """Type name as shown to users: VMs split into vm, template and snapshot."""
    if obj_type == ObjectType.VM:
        if record.get("is_a_snapshot"):
            return "snapshot"
        if record.get("is_a_template"):
            return "template"
        return "vm"
    return obj_type.value


def folder_of(record: dict[str, Any]) -> str:
    """Folder path stored in ``other_config``, or an empty string."""
    other_config = record.get("other_config") or {}
    return str(other_config.get(FOLDER_KEY) or "")


def custom_fields_of(record: dict[str, Any]) -> dict[str, str]:
    """Custom field name to value mapping stored in ``other_config``."""
    other_config = record.get("other_config") or {}
    return {
        key[len(CUSTOM_FIELD_PREFIX):]: str(value)
        for key, value in other_config.items()
        if key.startswith(CUSTOM_FIELD_PREFIX) and value not in (None, "")
    }


class QueryFilter(ABC):
    """Predicate over cache records."""

    @abstractmethod
    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        """True when the record belongs to the filtered set."""


@dataclass(frozen=True)
class TypePropertyQuery(QueryFilter):
    """Match records by user-facing type name (vm, template, host, ...)."""

    type_name: str

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        return object_type_name(record, obj_type) == self.type_name


@dataclass(frozen=True)
class PropertyQuery(QueryFilter):
    """Match records whose attribute equals a value."""

    property_name: str
    value: Any

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        return record.get(self.property_name) == self.value


@dataclass(frozen=True)
class NullPropertyQuery(QueryFilter):
    """Match records whose reference attribute is unset."""

    property_name: str

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        return is_null_ref(record.get(self.property_name))


@dataclass(frozen=True)
class TagQuery(QueryFilter):
    """Match records carrying a tag."""

    tag: str

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        return self.tag in (record.get("tags") or [])


@dataclass(frozen=True)
class FolderQuery(QueryFilter):
    """Match records inside a folder, optionally including sub-folders."""

    path: str
    recursive: bool = True

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        folder = folder_of(record)
        if folder == self.path:
            return True
        prefix = self.path.rstrip(FOLDER_SEPARATOR) + FOLDER_SEPARATOR
        return self.recursive and folder.startswith(prefix)


@dataclass(frozen=True)
class CustomFieldQuery(QueryFilter):
    """Match records with a custom field set, optionally to a given value."""

    field_name: str
    value: str | None = None

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        fields = custom_fields_of(record)
        if self.field_name not in fields:
            return False
        return self.value is None or fields[self.field_name] == self.value


@dataclass(frozen=True)
class PoolMemberQuery(QueryFilter):
    """Match records held by the cache of one pool."""

    cache: ObjectCache = field(repr=False)
    pool_ref: str

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        if self.pool_ref not in self.cache.refs(ObjectType.POOL):
            return False
        return bool(self.cache.resolve(obj_type, record.get("ref")))


@dataclass(frozen=True)
class HostMemberQuery(QueryFilter):
    """Match hosts, VMs and local SRs placed under a host."""

    cache: ObjectCache = field(repr=False)
    host_ref: str

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        return placement_host(self.cache, record, obj_type) == self.host_ref


@dataclass(frozen=True)
class AndQuery(QueryFilter):
    """Match records accepted by every sub-filter."""

    filters: tuple[QueryFilter, ...]

    def match(self, record: dict[str, Any], obj_type: ObjectType) -> bool:
        return all(f.match(record, obj_type) for f in self.filters)


__all__ = [
    "AndQuery",
    "CustomFieldQuery",
    "FolderQuery",
    "HostMemberQuery",
    "NullPropertyQuery",
    "PoolMemberQuery",
    "PropertyQuery",
    "QueryFilter",
    "TagQuery",
    "TypePropertyQuery",
    "custom_fields_of",
    "folder_of",
    "object_type_name",
]
