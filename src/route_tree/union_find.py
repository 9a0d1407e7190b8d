"""Disjoint-set forest with union by depth and path compression."""

from __future__ import annotations

from dataclasses import dataclass

from route_tree.errors import PreconditionViolated


@dataclass
class ForestNode:
    head: int
    depth: int = 0  # rank estimate, meaningful only at roots


class DisjointSetForest:
    """Partition of ``0..n-1`` into disjoint groups."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise PreconditionViolated(f"forest size must be >= 0, got {size}")
        self._nodes = [ForestNode(head=i) for i in range(size)]

    @classmethod
    def create(cls, size: int) -> DisjointSetForest:
        return cls(size)

    def __len__(self) -> int:
        return len(self._nodes)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._nodes):
            raise PreconditionViolated(
                f"index {index} out of range for forest of size {len(self._nodes)}"
            )

    def head(self, index: int) -> int:
        """Direct parent pointer of ``index`` (no compression)."""
        self._check(index)
        return self._nodes[index].head

    def find(self, index: int) -> int:
        """Return the root of ``index``'s group, compressing the path to it."""
        self._check(index)
        nodes = self._nodes

        root = index
        while nodes[root].head != root:
            root = nodes[root].head

        while nodes[index].head != root:
            nxt = nodes[index].head
            nodes[index].head = root
            index = nxt
        return root

    def same_group(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def same_group_head(self, a: int, b: int) -> tuple[int, int, bool]:
        """Return ``(root_a, root_b, root_a == root_b)``."""
        ha = self.find(a)
        hb = self.find(b)
        return ha, hb, ha == hb

    def union_head(self, ha: int, hb: int) -> int:
        """Merge two distinct roots and return the surviving root."""
        self._check(ha)
        self._check(hb)
        node_a = self._nodes[ha]
        node_b = self._nodes[hb]
        if node_a.head != ha or node_b.head != hb:
            raise PreconditionViolated(f"union_head({ha}, {hb}) called on non-root")
        if ha == hb:
            raise PreconditionViolated(f"union_head({ha}, {hb}) called on the same root")

        if node_a.depth == node_b.depth:
            node_b.head = ha
            node_a.depth += 1
            return ha
        if node_a.depth > node_b.depth:
            node_b.head = ha
            return ha
        node_a.head = hb
        return hb

    def union(self, a: int, b: int) -> None:
        ha, hb, same = self.same_group_head(a, b)
        if not same:
            self.union_head(ha, hb)

    def depth(self, index: int) -> int:
        return self._nodes[self.find(index)].depth

    def groups(self) -> dict[int, list[int]]:
        """Map each root to its members, in order of first member."""
        result: dict[int, list[int]] = {}
        for i in range(len(self._nodes)):
            result.setdefault(self.find(i), []).append(i)
        return result

    def component_count(self) -> int:
        return sum(1 for i, node in enumerate(self._nodes) if node.head == i)
