"""Turns connection waypoints into path commands with jump-arcs.

Where a connection crosses another line it draws a small arc ("jump") over
the crossing. Arcs closer together than one arc width are merged into a
single arc so the marks never overlap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, NamedTuple

from .errors import DiagonalSegmentError
from .geometry import Point, clamp
from .ports import Orientation
from .routing import DEFAULT_CONFIG

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .routing import RoutingConfig


def _format_number(value: float) -> str:
    value = round(float(value), 3)
    if value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class PathCommand:
    """One drawing instruction: move-to, line-to or cubic curve-to."""

    command: Literal["M", "L", "C"]
    points: tuple[Point, ...]

    def __str__(self) -> str:
        coordinates = ", ".join(
            f"{_format_number(x)} {_format_number(y)}" for x, y in self.points
        )
        return f"{self.command}{coordinates}"


class JumpArc(NamedTuple):
    """A cubic curve hopping over a crossing."""

    start: Point
    control_start: Point
    control_end: Point
    end: Point


@dataclass(frozen=True)
class ArrowTransform:
    """Placement of the arrowhead at the end of a connection."""

    position: Point
    quarter_turns: int

    @property
    def angle(self) -> int:
        return 90 * self.quarter_turns

    def translate(self) -> str:
        x, y = self.position
        return f"translate({_format_number(x)}, {_format_number(y)})"

    def rotate(self, scale: float = DEFAULT_CONFIG.arrow_scale) -> str:
        return f"scale({scale}, {scale}) rotate({self.angle})"


@dataclass
class ConnectionDrawing:
    """Everything needed to draw a connection."""

    commands: list[PathCommand] = field(default_factory=list)
    arrow: ArrowTransform | None = None

    @property
    def visible(self) -> bool:
        return bool(self.commands)

    @property
    def path_data(self) -> str:
        """SVG path data for the commands."""
        return " ".join(str(command) for command in self.commands)


def segment_orientation(start: Point, end: Point) -> Orientation:
    """Get the orientation of a segment.

    Raises:
        DiagonalSegmentError: The points share neither x nor y
    """
    if start.x == end.x:
        return Orientation.Y
    if start.y == end.y:
        return Orientation.X
    raise DiagonalSegmentError(start, end)


def segment_direction(start: Point, end: Point) -> int:
    """1 when moving right or down, -1 when moving left or up, 0 if still."""
    if start.x < end.x or start.y < end.y:
        return 1
    if start.x > end.x or start.y > end.y:
        return -1
    return 0


def jump_arcs(
    start: Point,
    end: Point,
    intersections: Sequence[Point],
    width: float = DEFAULT_CONFIG.intersection_width,
    height: float = DEFAULT_CONFIG.intersection_height,
) -> list[JumpArc]:
    """Compute the jump-arcs of a segment, in travel order.

    Each arc spans ``width`` along the segment centred on its intersection,
    never past the segment ends, and bulges ``height`` across it. An arc that
    would start before the previous one ends extends the previous arc instead.
    """
    if not intersections:
        return []

    orientation = segment_orientation(start, end)
    direction = segment_direction(start, end)

    if orientation is Orientation.X:
        def along(point: Point) -> float:
            return point.x

        def to_point(position: float, offset: float) -> Point:
            return Point(position, start.y + offset)
    else:
        def along(point: Point) -> float:
            return point.y

        def to_point(position: float, offset: float) -> Point:
            return Point(start.x + offset, position)

    ordered = sorted(intersections, key=along, reverse=direction < 0)
    half_arc = width * direction * -0.5
    arcs: list[JumpArc] = []
    last_end: float | None = None

    for intersection in ordered:
        position = along(intersection)
        initial = position + half_arc
        final = clamp(position - half_arc, along(start), along(end))

        overlaps_previous = last_end is not None and (
            (direction == 1 and initial < last_end)
            or (direction == -1 and initial > last_end)
        )

        if overlaps_previous:
            final = clamp(final, last_end, along(end))
            arcs[-1] = arcs[-1]._replace(
                control_end=to_point(final, height),
                end=to_point(final, 0),
            )
        else:
            initial = clamp(initial, along(start), along(end))
            arcs.append(JumpArc(
                to_point(initial, 0),
                to_point(initial, height),
                to_point(final, height),
                to_point(final, 0),
            ))

        last_end = final

    return arcs


def segment_commands(
    start: Point,
    end: Point,
    intersections: Sequence[Point] = (),
    config: RoutingConfig = DEFAULT_CONFIG,
) -> list[PathCommand]:
    """Drawing commands from start (exclusive) to end, jumping crossings."""
    segment_orientation(start, end)
    commands = []

    arcs = jump_arcs(
        start, end, intersections,
        width=config.intersection_width,
        height=config.intersection_height,
    )
    for arc in arcs:
        commands.append(PathCommand("L", (arc.start,)))
        commands.append(PathCommand("C", (arc.control_start, arc.control_end, arc.end)))

    commands.append(PathCommand("L", (end,)))
    return commands


def arrow_transform(points: Sequence[Point]) -> ArrowTransform:
    """Position and rotation of the arrowhead on the last segment."""
    start, end = points[-2], points[-1]
    orientation = segment_orientation(start, end)
    direction = segment_direction(start, end)

    if orientation is Orientation.X:
        quarter_turns = 2 + direction
    else:
        quarter_turns = 1 - direction

    return ArrowTransform(position=Point(*end), quarter_turns=quarter_turns)


def draw_connection(
    points: Sequence[Point],
    intersections: Sequence[Sequence[Point]] | None = None,
    config: RoutingConfig = DEFAULT_CONFIG,
) -> ConnectionDrawing:
    """Build the full drawing of a routed connection.

    Args:
        points: Waypoints, consecutive pairs axis-aligned
        intersections: Crossing points per segment (index i for the segment
            from points[i] to points[i + 1])
        config: Routing configuration with the jump-arc size

    Returns:
        ConnectionDrawing, empty when there is nothing to draw
    """
    if len(points) < 2:
        return ConnectionDrawing()

    points = [Point(*point) for point in points]
    intersections = intersections or []
    commands = [PathCommand("M", (points[0],))]

    for index in range(1, len(points)):
        crossings = intersections[index - 1] if index - 1 < len(intersections) else ()
        commands.extend(
            segment_commands(points[index - 1], points[index], crossings, config)
        )

    return ConnectionDrawing(commands=commands, arrow=arrow_transform(points))
