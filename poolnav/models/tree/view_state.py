"""Selection and expansion snapshot taken around a rebuild."""

from __future__ import annotations

from dataclasses import dataclass

from poolnav.models.tree.identity import NodeIdentity, ObjectIdentity


@dataclass(frozen=True)
class PathSegment:
    """One level of an expanded-node path."""

    identity: NodeIdentity
    label: str


ExpandedPath = tuple[PathSegment, ...]


@dataclass(frozen=True)
class SavedViewState:
    """What the user was looking at before the tree was torn down."""

    selection: ObjectIdentity | None = None
    expanded_paths: tuple[ExpandedPath, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.selection is None and not self.expanded_paths


__all__ = [
    "ExpandedPath",
    "PathSegment",
    "SavedViewState",
]
