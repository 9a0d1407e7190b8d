"""Recover a net's tree topology from its unordered wire segments."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, Sequence

from route_tree.errors import DanglingStub, DisconnectedNet, MissingPin
from route_tree.geometry import Point, Segment
from route_tree.union_find import DisjointSetForest

log = logging.getLogger(__name__)


class StubPolicy(str, Enum):
    """What to do with non-pin endpoints that terminate a wire."""

    PRUNE = "prune"
    KEEP = "keep"
    ERROR = "error"


@dataclass
class TreeNode:
    point: Point
    parent: int | None
    children: list[int] = field(default_factory=list)
    pin_indices: tuple[int, ...] = ()

    @property
    def is_pin(self) -> bool:
        return bool(self.pin_indices)


@dataclass
class NetTree:
    """Arena of tree nodes addressed by index; ``root`` is an arena index."""

    nodes: list[TreeNode]
    root: int = 0

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root_point(self) -> Point:
        return self.nodes[self.root].point

    def node_for(self, point: Point) -> int | None:
        for idx, node in enumerate(self.nodes):
            if node.point == point:
                return idx
        return None

    def points(self) -> list[Point]:
        return [n.point for n in self.nodes]

    def edges(self) -> list[tuple[Point, Point]]:
        """Parent to child point pairs in breadth-first order."""
        out: list[tuple[Point, Point]] = []
        queue = deque([self.root])
        while queue:
            idx = queue.popleft()
            node = self.nodes[idx]
            for child in node.children:
                out.append((node.point, self.nodes[child].point))
                queue.append(child)
        return out

    def segments(self) -> list[Segment]:
        return [Segment(parent, child) for parent, child in self.edges()]

    def pins(self) -> list[Point]:
        return [n.point for n in self.nodes if n.is_pin]

    def pseudo_pins(self) -> list[Point]:
        return [n.point for n in self.nodes if not n.is_pin]

    def leaves(self) -> list[Point]:
        return [n.point for n in self.nodes if not n.children]

    def depth(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        best = 0
        stack = [(self.root, 0)]
        while stack:
            idx, d = stack.pop()
            best = max(best, d)
            stack.extend((c, d + 1) for c in self.nodes[idx].children)
        return best

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "nodes": [
                {
                    "x": n.point.x,
                    "y": n.point.y,
                    "parent": n.parent,
                    "children": list(n.children),
                    "pins": list(n.pin_indices),
                }
                for n in self.nodes
            ],
        }


@dataclass
class NetTopology:
    """Everything the builder learned about one net."""

    net: str | None
    tree: NetTree
    endpoints: dict[Point, int]
    retained_segments: list[Segment]
    redundant_segments: list[Segment]
    pruned_segments: list[Segment] = field(default_factory=list)
    pseudo_pins: list[Point] = field(default_factory=list)

    @property
    def tree_segments(self) -> list[Segment]:
        pruned = set(self.pruned_segments)
        return [s for s in self.retained_segments if s not in pruned]

    def to_dict(self) -> dict[str, Any]:
        return {
            "net": self.net,
            "endpoints": len(self.endpoints),
            "retained": len(self.retained_segments),
            "redundant": [str(s) for s in self.redundant_segments],
            "pruned": [str(s) for s in self.pruned_segments],
            "pseudo_pins": [[p.x, p.y] for p in self.pseudo_pins],
            "tree": self.tree.to_dict(),
        }


def index_endpoints(segments: Sequence[Segment]) -> dict[Point, int]:
    """Assign each distinct endpoint an index in first-seen order."""
    index: dict[Point, int] = {}
    for seg in segments:
        for p in seg.endpoints():
            if p not in index:
                index[p] = len(index)
    return index


def split_redundant(
    segments: Sequence[Segment],
    endpoints: dict[Point, int],
) -> tuple[list[Segment], list[Segment], DisjointSetForest]:
    """Drop segments that would close a cycle.

    Returns ``(retained, redundant, forest)``; the retained set is a spanning
    forest of the full segment graph.
    """
    forest = DisjointSetForest(len(endpoints))
    retained: list[Segment] = []
    redundant: list[Segment] = []
    for seg in segments:
        ha, hb, same = forest.same_group_head(endpoints[seg.source], endpoints[seg.target])
        if same:
            redundant.append(seg)
        else:
            retained.append(seg)
            forest.union_head(ha, hb)
    return retained, redundant, forest


def _single_node_tree(net: str | None, pins: Sequence[Point]) -> NetTopology:
    node = TreeNode(point=pins[0], parent=None, pin_indices=tuple(range(len(pins))))
    return NetTopology(
        net=net,
        tree=NetTree(nodes=[node]),
        endpoints={pins[0]: 0},
        retained_segments=[],
        redundant_segments=[],
    )


def build_net_tree(
    pins: Sequence[Point],
    segments: Sequence[Segment],
    *,
    net: str | None = None,
    stub_policy: StubPolicy | str = StubPolicy.PRUNE,
) -> NetTopology:
    """Build the tree of a net rooted at its first declared pin.

    Raises ``MissingPin`` when a pin is not a segment endpoint,
    ``DisconnectedNet`` when the segments do not form one component holding
    every pin, and ``DanglingStub`` for wire stubs under ``StubPolicy.ERROR``.
    """
    stub_policy = StubPolicy(stub_policy)
    if not pins:
        raise MissingPin("net declares no pins", net=net)

    if not segments and len(set(pins)) == 1:
        return _single_node_tree(net, pins)

    endpoints = index_endpoints(segments)
    missing = tuple(dict.fromkeys(p for p in pins if p not in endpoints))
    if missing:
        raise MissingPin(
            "pin(s) not on any segment: " + ", ".join(str(p) for p in missing),
            net=net,
            pins=missing,
        )

    retained, redundant, forest = split_redundant(segments, endpoints)
    pin_roots = {forest.find(endpoints[p]) for p in pins}
    if len(pin_roots) > 1:
        raise DisconnectedNet(
            f"pins fall into {len(pin_roots)} separate components", net=net
        )
    log.debug(
        "%s: %d endpoints, %d retained, %d redundant",
        net, len(endpoints), len(retained), len(redundant),
    )

    points = list(endpoints)
    adjacency: list[list[tuple[int, Segment]]] = [[] for _ in points]
    for seg in retained:
        a, b = endpoints[seg.source], endpoints[seg.target]
        adjacency[a].append((b, seg))
        adjacency[b].append((a, seg))

    root = endpoints[pins[0]]
    reached = _reachable(adjacency, root)
    if len(reached) != len(points):
        stray = len(points) - len(reached)
        raise DisconnectedNet(
            f"{stray} endpoint(s) not connected to pin {pins[0]}", net=net
        )

    pin_set = set(pins)
    degree = [len(adj) for adj in adjacency]
    stubs = [i for i, p in enumerate(points) if p not in pin_set and degree[i] == 1]
    alive = [True] * len(points)
    pruned: list[Segment] = []

    if stubs and stub_policy is StubPolicy.ERROR:
        stub_points = tuple(points[i] for i in stubs)
        raise DanglingStub(
            "dangling wire end(s) at " + ", ".join(str(p) for p in stub_points),
            net=net,
            points=stub_points,
        )
    if stubs and stub_policy is StubPolicy.PRUNE:
        queue = deque(stubs)
        while queue:
            idx = queue.popleft()
            if not alive[idx] or degree[idx] != 1:
                continue
            alive[idx] = False
            for nbr, seg in adjacency[idx]:
                if not alive[nbr]:
                    continue
                pruned.append(seg)
                degree[nbr] -= 1
                if degree[nbr] == 1 and points[nbr] not in pin_set:
                    queue.append(nbr)
        log.debug("%s: pruned %d stub segment(s)", net, len(pruned))

    pseudo = [p for i, p in enumerate(points) if alive[i] and p not in pin_set]

    pin_indices: dict[Point, list[int]] = {}
    for i, p in enumerate(pins):
        pin_indices.setdefault(p, []).append(i)

    tree = _assemble(points, adjacency, alive, root, pin_indices, net)
    return NetTopology(
        net=net,
        tree=tree,
        endpoints=endpoints,
        retained_segments=retained,
        redundant_segments=redundant,
        pruned_segments=pruned,
        pseudo_pins=pseudo,
    )


def _reachable(adjacency: list[list[tuple[int, Segment]]], start: int) -> list[int]:
    seen = {start}
    order = [start]
    queue = deque([start])
    while queue:
        idx = queue.popleft()
        for nbr, _ in adjacency[idx]:
            if nbr in seen:
                continue
            seen.add(nbr)
            order.append(nbr)
            queue.append(nbr)
    return order


def _assemble(
    points: list[Point],
    adjacency: list[list[tuple[int, Segment]]],
    alive: list[bool],
    root: int,
    pin_indices: dict[Point, list[int]],
    net: str | None = None,
) -> NetTree:
    arena_of: dict[int, int] = {root: 0}
    nodes = [TreeNode(point=points[root], parent=None,
                      pin_indices=tuple(pin_indices.get(points[root], ())))]
    queue = deque([root])
    while queue:
        idx = queue.popleft()
        here = arena_of[idx]
        for nbr, _ in adjacency[idx]:
            if not alive[nbr] or nbr in arena_of:
                continue
            arena_of[nbr] = len(nodes)
            nodes.append(
                TreeNode(
                    point=points[nbr],
                    parent=here,
                    pin_indices=tuple(pin_indices.get(points[nbr], ())),
                )
            )
            nodes[here].children.append(arena_of[nbr])
            queue.append(nbr)

    if len(nodes) != sum(alive):
        # Unreachable while the retained segments form one tree.
        raise DisconnectedNet(
            f"tree covers {len(nodes)} of {sum(alive)} endpoints", net=net
        )
    return NetTree(nodes=nodes, root=0)
