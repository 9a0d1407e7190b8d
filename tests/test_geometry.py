from __future__ import annotations

import pytest

from route_tree.errors import InvalidBox, InvalidSegment, PreconditionViolated
from route_tree.geometry import Box, Direction, GridPoint, Point, Segment


class TestPoint:
    def test_value_identity(self):
        assert Point(1, 2) == Point(1, 2)
        assert len({Point(1, 2), Point(1, 2), Point(2, 1)}) == 2

    def test_immutable(self):
        p = Point(0, 0)
        with pytest.raises(AttributeError):
            p.x = 3


class TestSegment:
    def test_diagonal_is_invalid(self):
        with pytest.raises(InvalidSegment):
            Segment(Point(1, 1), Point(2, 2))

    def test_zero_length_is_invalid(self):
        with pytest.raises(InvalidSegment):
            Segment(Point(4, 4), Point(4, 4))

    def test_invalid_segment_is_value_error(self):
        with pytest.raises(ValueError):
            Segment(Point(0, 0), Point(1, 1))

    def test_direction_follows_shared_coordinate(self):
        assert Segment(Point(0, 0), Point(0, 5)).direction() is Direction.HORIZONTAL
        assert Segment(Point(0, 3), Point(7, 3)).direction() is Direction.VERTICAL

    def test_accessors(self):
        horizontal = Segment(Point(2, 0), Point(2, 5))
        vertical = Segment(Point(0, 3), Point(7, 3))
        assert horizontal.x() == 2
        assert vertical.y() == 3

    def test_accessor_on_wrong_orientation(self):
        with pytest.raises(PreconditionViolated):
            Segment(Point(2, 0), Point(2, 5)).y()
        with pytest.raises(PreconditionViolated):
            Segment(Point(0, 3), Point(7, 3)).x()

    def test_wrong_orientation_is_not_an_index_error(self):
        with pytest.raises(AssertionError) as info:
            Segment(Point(2, 0), Point(2, 5)).y()
        assert not isinstance(info.value, IndexError)

    def test_length_normalized_contains(self):
        seg = Segment(Point(0, 6), Point(0, 2))
        assert seg.length() == 4
        assert seg.normalized() == Segment(Point(0, 2), Point(0, 6))
        assert seg.contains(Point(0, 4))
        assert not seg.contains(Point(1, 4))


class TestBox:
    def test_dimensions(self):
        box = Box(top=10, bottom=2, left=1, right=5)
        assert box.width() == 4
        assert box.height() == 8
        assert box.center_x2() == Point(6, 12)
        assert box.center() == (3.0, 6.0)

    def test_degenerate_box_allowed(self):
        box = Box(top=3, bottom=3, left=1, right=1)
        assert box.width() == 0 and box.height() == 0

    @pytest.mark.parametrize(
        "bounds",
        [
            dict(top=1, bottom=2, left=0, right=0),
            dict(top=2, bottom=1, left=3, right=0),
        ],
    )
    def test_inverted_bounds(self, bounds):
        with pytest.raises(InvalidBox):
            Box(**bounds)

    def test_contains(self):
        box = Box(top=5, bottom=1, left=1, right=5)
        assert box.contains(Point(1, 5))
        assert not box.contains(Point(6, 1))


def test_grid_point_projection():
    assert GridPoint(3, 4, 2).to_point() == Point(3, 4)
