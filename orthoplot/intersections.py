"""Finds where a connection crosses the connections drawn before it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .drawing import segment_orientation
from .geometry import Point, is_in_between
from .ports import Orientation

if TYPE_CHECKING:
    from .canvas import Canvas
    from .models import Connection


def segment_crossing(
    segment_a: tuple[Point, Point],
    segment_b: tuple[Point, Point],
) -> Point | None:
    """Get the point where two perpendicular segments cross.

    Touching at an end point or running in parallel is not a crossing.
    """
    orientation_a = segment_orientation(*segment_a)
    orientation_b = segment_orientation(*segment_b)
    if orientation_a is orientation_b:
        return None

    if orientation_a is Orientation.X:
        horizontal, vertical = segment_a, segment_b
    else:
        horizontal, vertical = segment_b, segment_a

    (hx1, hy), (hx2, _) = horizontal
    (vx, vy1), (_, vy2) = vertical

    if (
        is_in_between(vx, min(hx1, hx2), max(hx1, hx2))
        and is_in_between(hy, min(vy1, vy2), max(vy1, vy2))
    ):
        return Point(vx, hy)
    return None


class IntersectionResolver:
    """Reports, per segment, the crossings a connection has to jump.

    A connection jumps over every connection registered on the canvas before
    it, so each crossing is drawn once.
    """

    def __init__(self, canvas: Canvas):
        self.canvas = canvas

    def __call__(self, connection: Connection) -> list[list[Point]]:
        registered = self.canvas.connections
        if connection in registered:
            previous = registered[: registered.index(connection)]
        else:
            previous = registered

        other_segments = [
            segment
            for other in previous
            if other is not connection
            for segment in other.segments
        ]

        intersections = []
        for segment in connection.segments:
            crossings = []
            for other_segment in other_segments:
                crossing = segment_crossing(segment, other_segment)
                if crossing is not None:
                    crossings.append(crossing)
            intersections.append(crossings)

        return intersections
