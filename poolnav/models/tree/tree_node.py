"""Arena-backed tree nodes.

Every rebuild produces a new TreeStore. Nodes live in one list and refer to
their parent and children by index; nothing outlives the store.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from poolnav.models.tree.identity import GroupingTag, NodeIdentity, ObjectIdentity

ROOT_INDEX = 0


@dataclass
class TreeNode:
    """One entry of the navigation tree."""

    index: int
    label: str
    icon_key: str
    identity: NodeIdentity
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    expanded: bool = False
    greyed: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.identity, (ObjectIdentity, GroupingTag)):
            raise ValueError(
                f"Tree node {self.label!r} needs an ObjectIdentity or a GroupingTag, "
                f"got {type(self.identity).__name__}"
            )

    @property
    def is_group(self) -> bool:
        """True for synthetic group headers."""
        return isinstance(self.identity, GroupingTag)

    @property
    def object_identity(self) -> ObjectIdentity | None:
        return self.identity if isinstance(self.identity, ObjectIdentity) else None

    @property
    def grouping_tag(self) -> GroupingTag | None:
        return self.identity if isinstance(self.identity, GroupingTag) else None


class TreeStore:
    """Node arena for one rebuild generation. Index 0 is the root."""

    def __init__(self, generation: int = 0) -> None:
        self.generation = generation
        self._nodes: list[TreeNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> TreeNode:
        return self._nodes[index]

    @property
    def root(self) -> TreeNode:
        return self._nodes[ROOT_INDEX]

    def add(
        self,
        label: str,
        icon_key: str,
        identity: NodeIdentity,
        *,
        parent: int | None = None,
        expanded: bool = False,
        greyed: bool = False,
    ) -> int:
        """Append a node, linking it under ``parent``; returns its index."""
        if parent is None and self._nodes:
            raise ValueError("Only the first node of a store may be a root")
        index = len(self._nodes)
        self._nodes.append(
            TreeNode(
                index=index,
                label=label,
                icon_key=icon_key,
                identity=identity,
                parent=parent,
                expanded=expanded,
                greyed=greyed,
            )
        )
        if parent is not None:
            self._nodes[parent].children.append(index)
        return index

    def children(self, index: int) -> list[TreeNode]:
        return [self._nodes[child] for child in self._nodes[index].children]

    def sort_children(self, index: int, key: Callable[[TreeNode], Any]) -> None:
        """Reorder the children of a node (stable)."""
        node = self._nodes[index]
        node.children.sort(key=lambda child: key(self._nodes[child]))

    def walk(self, start: int = ROOT_INDEX) -> Iterator[TreeNode]:
        """Pre-order traversal from ``start``."""
        if not self._nodes:
            return
        stack = [start]
        while stack:
            node = self._nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self, index: int) -> list[TreeNode]:
        """Nodes from the root down to, but excluding, ``index``."""
        chain: list[TreeNode] = []
        parent = self._nodes[index].parent
        while parent is not None:
            chain.append(self._nodes[parent])
            parent = self._nodes[parent].parent
        chain.reverse()
        return chain

    def path(self, index: int) -> list[TreeNode]:
        """Nodes from the root down to and including ``index``."""
        return [*self.ancestors(index), self._nodes[index]]

    def find_first(self, identity: NodeIdentity) -> TreeNode | None:
        """First node in pre-order carrying ``identity``."""
        for node in self.walk():
            if node.identity == identity:
                return node
        return None

    def find_all(self, identity: NodeIdentity) -> list[TreeNode]:
        return [node for node in self.walk() if node.identity == identity]

    def expanded_nodes(self) -> list[TreeNode]:
        return [node for node in self.walk() if node.expanded]


__all__ = [
    "ROOT_INDEX",
    "TreeNode",
    "TreeStore",
]
