"""Functions for generating an ASCII report and JSON dump of reconstructed nets."""

from __future__ import annotations

from collections import Counter
import json
from pathlib import Path
from typing import Any, Sequence

from route_tree.config import Config
from route_tree.design_parser import Design
from route_tree.reconstruct import NetOutcome


def outcomes_to_json(outcomes: Sequence[NetOutcome]) -> list[dict[str, Any]]:
    return [o.to_dict() for o in outcomes]


def write_json(outcomes: Sequence[NetOutcome], path: str | Path) -> None:
    with open(path, "w") as f:
        json.dump(outcomes_to_json(outcomes), f, indent=2)
        f.write("\n")


def _net_line(outcome: NetOutcome) -> str:
    net = outcome.net
    if outcome.topology is None:
        return f"  - {net.name}: FAILED [{outcome.failure_kind}] {outcome.error.message}"
    topo = outcome.topology
    return (
        f"  - {net.name}: {len(net.pins)} pins, {len(topo.tree)} nodes, "
        f"{len(topo.pseudo_pins)} pseudo-pins, "
        f"{len(topo.redundant_segments)} redundant, {len(topo.pruned_segments)} pruned"
    )


def generate_report(
    design: Design, outcomes: Sequence[NetOutcome], config: Config | None = None
) -> str:
    """Generates a multi-line ASCII report of the reconstruction."""
    config = config or Config()
    built = [o for o in outcomes if o.ok]
    failed = [o for o in outcomes if not o.ok]

    report_lines = [
        "--- Net Topology Report ---",
        "",
        "** Design **",
        f"  - GGrid Size (rows x cols): {design.rows} x {design.cols}",
        f"  - Layers: {len(design.layers)}",
        f"  - Master Cells: {len(design.master_cells)}",
        f"  - Cell Instances: {len(design.cells)}",
        f"  - Nets: {len(design.nets)}",
        f"  - Route Segments: {design.route_count}",
        "",
    ]

    vias = sum(o.net.via_count for o in outcomes)
    report_lines.append("** Reconstruction **")
    report_lines.append(f"  - Stub Policy: {config.builder.stub_policy.value}")
    report_lines.append(f"  - Nets Built: {len(built)}")
    report_lines.append(f"  - Nets Failed: {len(failed)}")
    report_lines.append(f"  - Via Routes (not part of 2D topology): {vias}")
    report_lines.append(
        f"  - Redundant Segments Dropped: {sum(len(o.topology.redundant_segments) for o in built)}"
    )
    report_lines.append(
        f"  - Stub Segments Pruned: {sum(len(o.topology.pruned_segments) for o in built)}"
    )
    report_lines.append(
        f"  - Pseudo-Pins: {sum(len(o.topology.pseudo_pins) for o in built)}"
    )
    report_lines.append("")

    if failed:
        report_lines.append("** Failures By Kind **")
        for kind, count in sorted(Counter(o.failure_kind for o in failed).items()):
            report_lines.append(f"  - {kind}: {count}")
        report_lines.append("")

    listed = failed if config.report.show_failures_only else list(outcomes)
    limit = config.report.max_nets_listed
    if listed and limit != 0:
        report_lines.append("** Nets **")
        for outcome in listed[:limit]:
            report_lines.append(_net_line(outcome))
        if limit is not None and len(listed) > limit:
            report_lines.append(f"  ... {len(listed) - limit} more")

    report_lines.append("\n--- End of Report ---")

    return "\n".join(report_lines)
