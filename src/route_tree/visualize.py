"""Plotly 2D visualization of reconstructed net trees."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import plotly.graph_objects as go

from route_tree.config import Config
from route_tree.design_parser import Design
from route_tree.geometry import Point, Segment
from route_tree.reconstruct import NetOutcome

NET_COLORS: list[str] = [
    "rgba(40, 120, 220, 0.85)",
    "rgba(40, 170, 90, 0.85)",
    "rgba(220, 150, 50, 0.85)",
    "rgba(210, 70, 70, 0.85)",
    "rgba(140, 80, 200, 0.85)",
    "rgba(30, 170, 180, 0.85)",
]
REDUNDANT_COLOR = "rgba(150, 150, 150, 0.70)"
PIN_COLOR = "rgba(30, 30, 30, 0.90)"
PSEUDO_PIN_COLOR = "rgba(245, 175, 80, 0.95)"
FAILED_PIN_COLOR = "rgba(220, 30, 30, 0.95)"
BOUNDARY_COLOR = "rgba(120, 120, 120, 0.8)"


def _segment_xy(segments: Sequence[Segment]) -> tuple[list[int | None], list[int | None]]:
    xs: list[int | None] = []
    ys: list[int | None] = []
    for seg in segments:
        xs.extend([seg.source.x, seg.target.x, None])
        ys.extend([seg.source.y, seg.target.y, None])
    return xs, ys


def _point_xy(points: Sequence[Point]) -> tuple[list[int], list[int]]:
    return [p.x for p in points], [p.y for p in points]


def build_figure(
    design: Design, outcomes: Sequence[NetOutcome], config: Config | None = None
) -> go.Figure:
    """Build a figure with one legend group per net."""
    config = config or Config()
    viz = config.visualizer
    fig = go.Figure()

    box = design.boundary
    fig.add_trace(
        go.Scatter(
            x=[box.left, box.right, box.right, box.left, box.left],
            y=[box.bottom, box.bottom, box.top, box.top, box.bottom],
            mode="lines",
            line=dict(color=BOUNDARY_COLOR, width=1.0, dash="dot"),
            name="GGrid Boundary",
            hoverinfo="name",
        )
    )

    shown = outcomes if viz.max_nets is None else outcomes[: viz.max_nets]
    for idx, outcome in enumerate(shown):
        name = outcome.net.name
        color = NET_COLORS[idx % len(NET_COLORS)]

        if outcome.topology is None:
            xs, ys = _point_xy(outcome.net.pin_points)
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="markers",
                    marker=dict(color=FAILED_PIN_COLOR, size=9, symbol="x"),
                    name=f"{name} ({outcome.failure_kind})",
                    legendgroup=name,
                    hovertext=str(outcome.error),
                    hoverinfo="text",
                )
            )
            continue

        topo = outcome.topology
        xs, ys = _segment_xy(topo.tree.segments())
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=dict(color=color, width=2.0),
                name=name,
                legendgroup=name,
                hoverinfo="name",
            )
        )

        if viz.show_redundant and topo.redundant_segments:
            xs, ys = _segment_xy(topo.redundant_segments)
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="lines",
                    line=dict(color=REDUNDANT_COLOR, width=1.0, dash="dash"),
                    name=f"{name} redundant",
                    legendgroup=name,
                    showlegend=False,
                    hoverinfo="name",
                    visible="legendonly",
                )
            )

        xs, ys = _point_xy(topo.tree.pins())
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="markers",
                marker=dict(color=PIN_COLOR, size=8, symbol="square"),
                name=f"{name} pins",
                legendgroup=name,
                showlegend=False,
                hovertext=[f"{name} pin {p}" for p in topo.tree.pins()],
                hoverinfo="text",
            )
        )

        if topo.pseudo_pins:
            xs, ys = _point_xy(topo.pseudo_pins)
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="markers",
                    marker=dict(color=PSEUDO_PIN_COLOR, size=6, symbol="circle"),
                    name=f"{name} pseudo-pins",
                    legendgroup=name,
                    showlegend=False,
                    hovertext=[f"{name} pseudo-pin {p}" for p in topo.pseudo_pins],
                    hoverinfo="text",
                )
            )

    fig.update_layout(
        title=f"Net Trees - {len(shown)} of {len(outcomes)} nets",
        width=viz.width,
        height=viz.height,
        legend=dict(orientation="v"),
    )
    fig.update_xaxes(title_text="GGrid Row")
    fig.update_yaxes(title_text="GGrid Column", scaleanchor="x", scaleratio=1)
    return fig


def render_trees(
    design: Design,
    outcomes: Sequence[NetOutcome],
    config: Config | None,
    output_path: str | Path,
    open_browser: bool = False,
) -> None:
    """Render net trees to a standalone HTML file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig = build_figure(design, outcomes, config)
    fig.write_html(str(output_path))
    if open_browser:
        import webbrowser

        webbrowser.open(f"file://{output_path.resolve()}")
