"""Parser for ICCAD 2020 cell-move-router design files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from route_tree.errors import ParseError
from route_tree.geometry import Box, GridPoint, Point


@dataclass
class Layer:
    name: str
    index: int  # 0-based
    direction: Literal["H", "V"]
    default_supply: int


@dataclass
class SupplyAdjustment:
    row: int
    col: int
    layer: int
    delta: int


@dataclass
class MasterPin:
    name: str
    layer: int


@dataclass
class Blockage:
    name: str
    layer: int
    demand: int


@dataclass
class MasterCell:
    name: str
    pins: dict[str, MasterPin] = field(default_factory=dict)
    blockages: list[Blockage] = field(default_factory=list)


@dataclass
class ExtraDemand:
    kind: Literal["sameGGrid", "adjHGGrid"]
    master_a: str
    master_b: str
    layer: int
    demand: int


@dataclass
class CellInstance:
    name: str
    master: str
    row: int
    col: int
    movable: bool

    @property
    def location(self) -> Point:
        return Point(self.row, self.col)


@dataclass
class NetPin:
    """A net terminal: ``<instance>/<master pin>`` placed at the instance's grid cell."""

    instance: str
    pin: str
    point: Point
    layer: int


@dataclass
class Route:
    source: GridPoint
    target: GridPoint

    @property
    def is_via(self) -> bool:
        return (
            self.source.to_point() == self.target.to_point()
            and self.source.layer != self.target.layer
        )


@dataclass
class Net:
    name: str
    index: int
    min_layer: int | None
    pins: list[NetPin] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)

    @property
    def pin_points(self) -> list[Point]:
        return [p.point for p in self.pins]

    @property
    def wire_routes(self) -> list[Route]:
        return [r for r in self.routes if not r.is_via]

    @property
    def via_count(self) -> int:
        return sum(1 for r in self.routes if r.is_via)


@dataclass
class Design:
    max_cell_move: int
    boundary: Box
    layers: list[Layer] = field(default_factory=list)
    supply_adjustments: list[SupplyAdjustment] = field(default_factory=list)
    master_cells: dict[str, MasterCell] = field(default_factory=dict)
    extra_demands: list[ExtraDemand] = field(default_factory=list)
    cells: dict[str, CellInstance] = field(default_factory=dict)
    nets: list[Net] = field(default_factory=list)

    @property
    def rows(self) -> int:
        return self.boundary.width() + 1

    @property
    def cols(self) -> int:
        return self.boundary.height() + 1

    @property
    def route_count(self) -> int:
        return sum(len(n.routes) for n in self.nets)


class _Tokens:
    """Cursor over whitespace-separated tokens."""

    def __init__(self, text: str) -> None:
        self._data = text.split()
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def has_next(self) -> bool:
        return self._pos < len(self._data)

    def peek(self) -> str | None:
        return self._data[self._pos] if self.has_next() else None

    def next(self) -> str:
        if not self.has_next():
            raise ParseError("unexpected end of file", self._pos)
        tok = self._data[self._pos]
        self._pos += 1
        return tok

    def expect(self, keyword: str) -> None:
        tok = self.next()
        if tok != keyword:
            raise ParseError(f"expected '{keyword}', got '{tok}'", self._pos - 1)

    def integer(self) -> int:
        tok = self.next()
        try:
            return int(tok)
        except ValueError:
            raise ParseError(f"expected integer, got '{tok}'", self._pos - 1) from None

    def count(self) -> int:
        value = self.integer()
        if value < 0:
            raise ParseError(f"negative count {value}", self._pos - 1)
        return value

    def name(self, prefix: str, expected_index: int | None = None) -> str:
        """Read a ``<prefix><n>`` name; optionally require ``n == expected_index + 1``."""
        tok = self.next()
        _name_index(tok, prefix, self._pos - 1, expected_index)
        return tok


def _name_index(
    token: str, prefix: str, position: int | None, expected_index: int | None = None
) -> int:
    """Convert a 1-based prefixed name to its 0-based index."""
    digits = token[len(prefix):]
    well_formed = token.startswith(prefix) and digits.isascii() and digits.isdigit()
    if not well_formed or int(digits) < 1:
        raise ParseError(f"expected name '{prefix}<n>', got '{token}'", position)
    index = int(digits) - 1
    if expected_index is not None and index != expected_index:
        raise ParseError(
            f"'{token}' out of order: expected {prefix}{expected_index + 1}", position
        )
    return index


def _layer_index(tokens: _Tokens, num_layers: int) -> int:
    pos = tokens.position
    index = _name_index(tokens.next(), "M", pos)
    if index >= num_layers:
        raise ParseError(f"layer M{index + 1} not declared", pos)
    return index


def _parse_grid(tokens: _Tokens) -> tuple[int, Box]:
    # MaxCellMove <maxMoveCount>
    tokens.expect("MaxCellMove")
    max_move = tokens.count()

    # GGridBoundaryIdx <rowBeginIdx> <colBeginIdx> <rowEndIdx> <colEndIdx>
    tokens.expect("GGridBoundaryIdx")
    for label in ("row", "column"):
        pos = tokens.position
        if tokens.integer() != 1:
            raise ParseError(f"{label} begin index must be 1", pos)
    row_end = tokens.integer()
    col_end = tokens.integer()
    try:
        # Points are (row, col), so rows span left..right and columns bottom..top.
        boundary = Box(top=col_end, bottom=1, left=1, right=row_end)
    except ValueError as exc:
        raise ParseError(f"bad grid boundary: {exc}", tokens.position) from None
    return max_move, boundary


def _parse_layers(tokens: _Tokens, design: Design) -> None:
    # NumLayer <LayerCount>
    tokens.expect("NumLayer")
    for i in range(tokens.count()):
        # Lay <layerName> <Idx> <RoutingDirection> <defaultSupplyOfOneGGrid>
        tokens.expect("Lay")
        name = tokens.name("M", i)
        pos = tokens.position
        if tokens.integer() != i + 1:
            raise ParseError(f"layer {name} index mismatch", pos)
        pos = tokens.position
        direction = tokens.next()
        if direction not in ("H", "V"):
            raise ParseError(f"routing direction must be H or V, got '{direction}'", pos)
        design.layers.append(
            Layer(name=name, index=i, direction=direction, default_supply=tokens.integer())
        )

    # NumNonDefaultSupplyGGrid <count>
    tokens.expect("NumNonDefaultSupplyGGrid")
    for _ in range(tokens.count()):
        # <rowIdx> <colIdx> <LayIdx> <incrOrDecrValue>
        row, col, lay, delta = (tokens.integer() for _ in range(4))
        if not 1 <= lay <= len(design.layers):
            raise ParseError(f"supply adjustment on undeclared layer {lay}", tokens.position)
        design.supply_adjustments.append(
            SupplyAdjustment(row=row, col=col, layer=lay - 1, delta=delta)
        )


def _parse_master_cells(tokens: _Tokens, design: Design) -> None:
    num_layers = len(design.layers)

    # NumMasterCell <masterCellCount>
    tokens.expect("NumMasterCell")
    for i in range(tokens.count()):
        # MasterCell <masterCellName> <pinCount> <blockageCount>
        tokens.expect("MasterCell")
        master = MasterCell(name=tokens.name("MC", i))
        pin_count = tokens.count()
        blkg_count = tokens.count()

        for j in range(pin_count):
            # Pin <pinName> <pinLayer>
            tokens.expect("Pin")
            pin_name = tokens.name("P", j)
            master.pins[pin_name] = MasterPin(pin_name, _layer_index(tokens, num_layers))

        for j in range(blkg_count):
            # Blkg <blockageName> <blockageLayer> <demand>
            tokens.expect("Blkg")
            blkg_name = tokens.name("B", j)
            layer = _layer_index(tokens, num_layers)
            master.blockages.append(Blockage(blkg_name, layer, tokens.integer()))

        design.master_cells[master.name] = master

    # NumNeighborCellExtraDemand <count>
    tokens.expect("NumNeighborCellExtraDemand")
    for _ in range(tokens.count()):
        pos = tokens.position
        kind = tokens.next()
        if kind not in ("sameGGrid", "adjHGGrid"):
            raise ParseError(f"unknown extra demand kind '{kind}'", pos)
        master_a = _known_master(tokens, design)
        master_b = _known_master(tokens, design)
        layer = _layer_index(tokens, num_layers)
        design.extra_demands.append(
            ExtraDemand(kind, master_a, master_b, layer, tokens.integer())
        )


def _known_master(tokens: _Tokens, design: Design) -> str:
    pos = tokens.position
    name = tokens.next()
    if name not in design.master_cells:
        raise ParseError(f"unknown master cell '{name}'", pos)
    return name


def _parse_cells(tokens: _Tokens, design: Design) -> None:
    # NumCellInst <cellInstCount>
    tokens.expect("NumCellInst")
    for i in range(tokens.count()):
        # CellInst <instName> <masterCellName> <gGridRowIdx> <gGridColIdx> <movableCstr>
        tokens.expect("CellInst")
        name = tokens.name("C", i)
        master = _known_master(tokens, design)
        row = tokens.integer()
        col = tokens.integer()
        pos = tokens.position
        movable = tokens.next()
        if movable not in ("Movable", "Fixed"):
            raise ParseError(f"expected Movable or Fixed, got '{movable}'", pos)
        design.cells[name] = CellInstance(name, master, row, col, movable == "Movable")


def _parse_nets(tokens: _Tokens, design: Design) -> None:
    num_layers = len(design.layers)

    # NumNets <netCount>
    tokens.expect("NumNets")
    for i in range(tokens.count()):
        # Net <netName> <numPins> <minRoutingLayConstraint>
        tokens.expect("Net")
        name = tokens.name("N", i)
        num_pins = tokens.count()
        if tokens.peek() == "NoCstr":
            tokens.next()
            min_layer = None
        else:
            min_layer = _layer_index(tokens, num_layers)
        net = Net(name=name, index=i, min_layer=min_layer)

        for _ in range(num_pins):
            # Pin <instName>/<masterPinName>
            tokens.expect("Pin")
            net.pins.append(_net_pin(tokens, design))
        design.nets.append(net)

    # NumRoutes <routeSegmentCount>
    tokens.expect("NumRoutes")
    for _ in range(tokens.count()):
        # <sRowIdx> <sColIdx> <sLayIdx> <eRowIdx> <eColIdx> <eLayIdx> <netName>
        source = GridPoint(tokens.integer(), tokens.integer(), tokens.integer())
        target = GridPoint(tokens.integer(), tokens.integer(), tokens.integer())
        pos = tokens.position
        net_index = _name_index(tokens.next(), "N", pos)
        if net_index >= len(design.nets):
            raise ParseError(f"route refers to undeclared net N{net_index + 1}", pos)
        design.nets[net_index].routes.append(Route(source, target))


def _net_pin(tokens: _Tokens, design: Design) -> NetPin:
    pos = tokens.position
    parts = tokens.next().split("/")
    if len(parts) != 2:
        raise ParseError("pin reference must be <instance>/<pin>", pos)
    inst_name, pin_name = parts
    cell = design.cells.get(inst_name)
    if cell is None:
        raise ParseError(f"unknown cell instance '{inst_name}'", pos)
    master_pin = design.master_cells[cell.master].pins.get(pin_name)
    if master_pin is None:
        raise ParseError(f"master cell {cell.master} has no pin '{pin_name}'", pos)
    return NetPin(inst_name, pin_name, cell.location, master_pin.layer)


def parse_design_text(text: str) -> Design:
    """Parse design file content into a ``Design``."""
    tokens = _Tokens(text)
    max_move, boundary = _parse_grid(tokens)
    design = Design(max_cell_move=max_move, boundary=boundary)
    _parse_layers(tokens, design)
    _parse_master_cells(tokens, design)
    _parse_cells(tokens, design)
    _parse_nets(tokens, design)
    if tokens.has_next():
        raise ParseError("unexpected trailing content", tokens.position)
    return design


def parse_design(path: str | Path) -> Design:
    """Parse a design file from disk."""
    path = Path(path)
    with open(path, "r") as f:
        return parse_design_text(f.read())
