"""Node identities: concrete cache objects and synthetic group headers."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Protocol, Union

from poolnav.constants.enums import GroupingKind, ObjectType


class GroupingLike(Protocol):
    """The part of a grouping strategy a GroupingTag depends on."""

    @property
    def kind(self) -> GroupingKind: ...

    def subquery(self, parent_group: Any, group: Hashable) -> Any: ...

    def subgrouping(self, group: Hashable) -> Any: ...


@dataclass(frozen=True)
class ObjectIdentity:
    """Identity of a concrete cache object."""

    type: ObjectType
    ref: str

    def __str__(self) -> str:
        return f"{self.type.value}:{self.ref}"


class GroupingTag:
    """Identity of a group header node.

    Two tags are equal when their grouping kind and group value are equal.
    The parent group is context for building subqueries and takes no part
    in equality.
    """

    __slots__ = ("grouping", "group", "parent_group")

    def __init__(self, grouping: GroupingLike, parent_group: Any, group: Hashable) -> None:
        self.grouping = grouping
        self.parent_group = parent_group
        self.group = group

    @property
    def kind(self) -> GroupingKind:
        return self.grouping.kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupingTag):
            return NotImplemented
        return self.kind == other.kind and self.group == other.group

    def __hash__(self) -> int:
        return hash((self.kind, self.group))

    def __repr__(self) -> str:
        return f"GroupingTag({self.kind.value!r}, {self.group!r})"

    def subquery(self) -> Any:
        """Filter reproducing this group's membership outside the tree."""
        return self.grouping.subquery(self.parent_group, self.group)

    def subgrouping(self) -> Any:
        """Grouping to apply when drilling into this group, if any."""
        return self.grouping.subgrouping(self.group)


NodeIdentity = Union[ObjectIdentity, GroupingTag]


__all__ = [
    "GroupingLike",
    "GroupingTag",
    "NodeIdentity",
    "ObjectIdentity",
]
