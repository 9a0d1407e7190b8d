"""Exception types raised while reconstructing net topologies."""

from __future__ import annotations


class RouteTreeError(Exception):
    """Base class for per-net input and topology failures."""

    kind = "error"

    def __init__(self, message: str, net: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.net = net

    def __str__(self) -> str:
        if self.net:
            return f"{self.net}: {self.message}"
        return self.message


class InvalidSegment(RouteTreeError, ValueError):
    """Segment endpoints are equal or differ in both coordinates."""

    kind = "InvalidSegment"


class InvalidBox(RouteTreeError, ValueError):
    """Box bounds are inverted."""

    kind = "InvalidBox"


class MissingPin(RouteTreeError):
    """A declared pin is not an endpoint of any segment."""

    kind = "MissingPin"

    def __init__(self, message: str, net: str | None = None, pins: tuple = ()) -> None:
        super().__init__(message, net)
        self.pins = tuple(pins)


class DisconnectedNet(RouteTreeError):
    """The segments do not join every declared pin into one component."""

    kind = "DisconnectedNet"


class DanglingStub(RouteTreeError):
    """A non-pin endpoint terminates a wire (only under the ``error`` stub policy)."""

    kind = "DanglingStub"

    def __init__(self, message: str, net: str | None = None, points: tuple = ()) -> None:
        super().__init__(message, net)
        self.points = tuple(points)


class PreconditionViolated(AssertionError):
    """Internal misuse: bad index or wrong-orientation accessor."""


class ParseError(ValueError):
    """Malformed design file."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (token {position})"
        super().__init__(message)
        self.position = position
