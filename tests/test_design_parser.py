from __future__ import annotations

import pytest

from route_tree.design_parser import parse_design, parse_design_text
from route_tree.errors import ParseError
from route_tree.geometry import Box, GridPoint, Point


def test_parse_sample(design_text):
    design = parse_design_text(design_text)

    assert design.max_cell_move == 1
    assert design.boundary == Box(top=5, bottom=1, left=1, right=5)
    assert (design.rows, design.cols) == (5, 5)
    assert [(l.name, l.direction, l.default_supply) for l in design.layers] == [
        ("M1", "H", 10),
        ("M2", "V", 8),
    ]
    adj = design.supply_adjustments[0]
    assert (adj.row, adj.col, adj.layer, adj.delta) == (2, 2, 0, -2)

    master = design.master_cells["MC1"]
    assert master.pins["P2"].layer == 1
    assert master.blockages[0].demand == 2
    assert design.extra_demands[0].kind == "sameGGrid"

    assert design.cells["C2"].location == Point(1, 4)
    assert not design.cells["C2"].movable
    assert design.route_count == 7


def test_nets(design_text):
    design = parse_design_text(design_text)
    n1, n2, n3 = design.nets

    assert n1.min_layer is None
    assert n2.min_layer == 0
    assert n1.pin_points == [Point(1, 1), Point(1, 4)]
    assert n3.pins[1].instance == "C4"
    assert n3.pins[1].layer == 0

    assert n1.via_count == 1
    assert len(n1.wire_routes) == 3
    assert n1.routes[2].source == GridPoint(1, 1, 1)
    assert n1.routes[2].is_via


def test_parse_design_from_file(design_file):
    assert len(parse_design(design_file).nets) == 3


@pytest.mark.parametrize(
    "old, new, message",
    [
        ("MaxCellMove 1", "MaxMove 1", "expected 'MaxCellMove'"),
        ("GGridBoundaryIdx 1 1", "GGridBoundaryIdx 0 1", "row begin index"),
        ("Lay M2 2 V 8", "Lay M2 2 X 8", "H or V"),
        ("Lay M2 2", "Lay M3 2", "out of order"),
        ("CellInst C3 MC1", "CellInst C3 MC9", "unknown master cell"),
        ("Pin C2/P1", "Pin C9/P1", "unknown cell instance"),
        ("Pin C2/P1", "Pin C2/P7", "has no pin"),
        ("Pin C2/P1", "Pin C2-P1", "<instance>/<pin>"),
        ("Net N2 2 M1", "Net N2 2 M7", "not declared"),
        ("3 1 1 5 5 1 N3", "3 1 1 5 5 1 N4", "undeclared net"),
        ("3 1 1 5 5 1 N3", "3 1 x 5 5 1 N3", "expected integer"),
        ("3 1 1 5 5 1 N3", "3 1 1 5 5 1 N\u00b2", "expected name"),
        ("Fixed\nNumNets", "Stuck\nNumNets", "Movable or Fixed"),
    ],
)
def test_malformed(design_text, old, new, message):
    assert old in design_text
    with pytest.raises(ParseError, match=message):
        parse_design_text(design_text.replace(old, new, 1))


def test_trailing_tokens(design_text):
    with pytest.raises(ParseError, match="trailing"):
        parse_design_text(design_text + "extra\n")


def test_truncated(design_text):
    with pytest.raises(ParseError, match="end of file"):
        parse_design_text(design_text.rsplit("\n", 2)[0])


def test_error_position(design_text):
    with pytest.raises(ParseError) as info:
        parse_design_text(design_text.replace("NumLayer", "NumLayers"))
    assert info.value.position == 7
