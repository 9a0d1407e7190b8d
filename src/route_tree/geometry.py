"""Geometry value types for the routing grid."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from route_tree.errors import InvalidBox, InvalidSegment, PreconditionViolated


@dataclass(frozen=True, order=True)
class Point:
    """An integer grid location."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


class Direction(Enum):
    # Named after the shared coordinate: HORIZONTAL keeps x fixed.
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Segment:
    """A straight wire piece between two grid points.

    Exactly one coordinate differs between ``source`` and ``target``.
    """

    source: Point
    target: Point

    def __post_init__(self) -> None:
        same_x = self.source.x == self.target.x
        same_y = self.source.y == self.target.y
        if same_x and same_y:
            raise InvalidSegment(f"zero-length segment at {self.source}")
        if not (same_x or same_y):
            raise InvalidSegment(
                f"segment {self.source}-{self.target} is not axis-aligned"
            )

    def direction(self) -> Direction:
        if self.source.x == self.target.x:
            return Direction.HORIZONTAL
        return Direction.VERTICAL

    def x(self) -> int:
        """Shared x coordinate; only valid for horizontal segments."""
        if self.direction() is not Direction.HORIZONTAL:
            raise PreconditionViolated(f"x() called on vertical segment {self}")
        return self.source.x

    def y(self) -> int:
        """Shared y coordinate; only valid for vertical segments."""
        if self.direction() is not Direction.VERTICAL:
            raise PreconditionViolated(f"y() called on horizontal segment {self}")
        return self.source.y

    def endpoints(self) -> tuple[Point, Point]:
        return self.source, self.target

    def length(self) -> int:
        return abs(self.source.x - self.target.x) + abs(self.source.y - self.target.y)

    def normalized(self) -> Segment:
        """Same segment with the smaller point as source."""
        if self.target < self.source:
            return Segment(self.target, self.source)
        return self

    def contains(self, point: Point) -> bool:
        lo, hi = sorted((self.source, self.target))
        return lo.x <= point.x <= hi.x and lo.y <= point.y <= hi.y

    def __str__(self) -> str:
        return f"{self.source}-{self.target}"


@dataclass(frozen=True)
class Box:
    """Axis-aligned region bounded by four sides."""

    top: int
    bottom: int
    left: int
    right: int

    def __post_init__(self) -> None:
        if self.bottom > self.top:
            raise InvalidBox(f"box bottom {self.bottom} is above top {self.top}")
        if self.left > self.right:
            raise InvalidBox(f"box left {self.left} is right of right {self.right}")

    def width(self) -> int:
        return self.right - self.left

    def height(self) -> int:
        return self.top - self.bottom

    def center_x2(self) -> Point:
        """Center scaled by two so it stays on the integer grid."""
        return Point(self.left + self.right, self.top + self.bottom)

    def center(self) -> tuple[float, float]:
        c = self.center_x2()
        return c.x / 2.0, c.y / 2.0

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.bottom <= point.y <= self.top


@dataclass(frozen=True, order=True)
class GridPoint:
    """A 3D route endpoint: grid row, grid column and layer index."""

    row: int
    col: int
    layer: int

    def to_point(self) -> Point:
        return Point(self.row, self.col)
