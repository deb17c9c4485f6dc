"""Plane geometry helpers used by port selection and path drawing."""

from __future__ import annotations

from typing import NamedTuple


class Point(NamedTuple):
    """A point on the canvas."""

    x: float
    y: float


class Bounds(NamedTuple):
    """Axis-aligned extremes of a shape."""

    top: float
    right: float
    bottom: float
    left: float


class Overlap(NamedTuple):
    """Whether two bounds share a span on each axis."""

    x: bool
    y: bool


class RelativePosition(NamedTuple):
    """Sign of the offset from an origin to a destination, per axis."""

    x: int
    y: int


def to_point(x: float, y: float) -> Point:
    """Create a point."""
    return Point(x, y)


def path_length(point_a: Point, point_b: Point) -> float:
    """Length of the shortest orthogonal path between two points."""
    return abs(point_a.y - point_b.y) + abs(point_a.x - point_b.x)


def is_in_between(value: float, low: float, high: float) -> bool:
    """Check if value lies strictly between low and high."""
    return low < value < high


def overlapped_dimensions(bounds_a: Bounds, bounds_b: Bounds) -> Overlap:
    """Check on which axes two bounds overlap each other.

    An axis overlaps when the bounds share an edge on it, or when the leading
    edge of either one lies strictly inside the span of the other.

    Returns:
        Overlap with one flag per axis
    """
    x = (
        bounds_a.left == bounds_b.left
        or bounds_a.right == bounds_b.right
        or is_in_between(bounds_b.left, bounds_a.left, bounds_a.right)
        or is_in_between(bounds_a.left, bounds_b.left, bounds_b.right)
    )
    y = (
        bounds_a.top == bounds_b.top
        or bounds_a.bottom == bounds_b.bottom
        or is_in_between(bounds_b.top, bounds_a.top, bounds_a.bottom)
        or is_in_between(bounds_a.top, bounds_b.top, bounds_b.bottom)
    )

    return Overlap(x, y)


def are_overlapped(bounds_a: Bounds, bounds_b: Bounds) -> bool:
    """Check if two bounds intersect in area."""
    x, y = overlapped_dimensions(bounds_a, bounds_b)
    return x and y


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def normalized_position(origin: Point, destination: Point) -> RelativePosition:
    """Get the normalized position of destination relative to origin.

    x is 1 when the destination lies to the right, -1 to the left and 0 on
    the same column. y is 1 when it lies below, -1 above and 0 on the same row.
    """
    return RelativePosition(
        _sign(destination.x - origin.x),
        _sign(destination.y - origin.y),
    )


def clamp(value: float, limit_a: float, limit_b: float) -> float:
    """Clamp value into the inclusive range spanned by two limits."""
    low = min(limit_a, limit_b)
    high = max(limit_a, limit_b)

    if value > high:
        return high
    if value < low:
        return low
    return value
