"""Per-net topology reconstruction over a whole design."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from typing import Any, Sequence

from route_tree.config import Config
from route_tree.design_parser import Design, Net, Route
from route_tree.errors import InvalidSegment, RouteTreeError
from route_tree.geometry import Segment
from route_tree.net_tree import NetTopology, StubPolicy, build_net_tree

log = logging.getLogger(__name__)


@dataclass
class NetOutcome:
    """Either a built topology or the failure that prevented it."""

    net: Net
    topology: NetTopology | None = None
    error: RouteTreeError | None = None

    @property
    def ok(self) -> bool:
        return self.topology is not None

    @property
    def failure_kind(self) -> str | None:
        return self.error.kind if self.error is not None else None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "net": self.net.name,
            "pins": [[p.point.x, p.point.y] for p in self.net.pins],
            "routes": len(self.net.routes),
            "vias": self.net.via_count,
        }
        if self.topology is not None:
            out["status"] = "ok"
            out.update(
                {k: v for k, v in self.topology.to_dict().items() if k != "net"}
            )
        else:
            out["status"] = "failed"
            out["error"] = {"kind": self.failure_kind, "message": self.error.message}
        return out


def route_segments(routes: Sequence[Route]) -> list[Segment]:
    """Project wire routes onto the plane; via-only routes are skipped.

    A route must change exactly one of row, column or layer. Anything else
    raises ``InvalidSegment``.
    """
    segments: list[Segment] = []
    for r in routes:
        if r.is_via:
            continue
        if r.source.layer != r.target.layer:
            raise InvalidSegment(
                f"route {r.source} -> {r.target} changes layer and position"
            )
        segments.append(Segment(r.source.to_point(), r.target.to_point()))
    return segments


def reconstruct_net(
    net: Net, stub_policy: StubPolicy | str = StubPolicy.PRUNE
) -> NetTopology:
    """Build one net's topology; raises on malformed or disconnected input."""
    try:
        segments = route_segments(net.routes)
    except RouteTreeError as exc:
        exc.net = net.name
        raise
    return build_net_tree(net.pin_points, segments, net=net.name, stub_policy=stub_policy)


def _outcome(net: Net, stub_policy: StubPolicy) -> NetOutcome:
    try:
        topology = reconstruct_net(net, stub_policy)
    except RouteTreeError as exc:
        log.warning("%s failed: %s", net.name, exc.message)
        return NetOutcome(net=net, error=exc)
    log.debug(
        "%s: %d tree nodes, %d redundant, %d pruned",
        net.name,
        len(topology.tree),
        len(topology.redundant_segments),
        len(topology.pruned_segments),
    )
    return NetOutcome(net=net, topology=topology)


def reconstruct_design(design: Design, config: Config | None = None) -> list[NetOutcome]:
    """Reconstruct every net, one outcome per net in declaration order.

    A failing net never stops the others.
    """
    config = config or Config()
    policy = config.builder.stub_policy
    workers = config.builder.workers

    log.info("Reconstructing %d nets (workers=%d)", len(design.nets), workers)
    if workers == 1 or len(design.nets) < 2:
        return [_outcome(net, policy) for net in design.nets]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda net: _outcome(net, policy), design.nets))
