"""Port selection and orthogonal waypoint generation for connections."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from .geometry import Point, normalized_position, overlapped_dimensions
from .ports import Orientation, PortDescriptor, PortIndex, PortMode, priority_order

if TYPE_CHECKING:
    from .models import Shape

logger = logging.getLogger(__name__)


@dataclass
class RoutingConfig:
    """Configuration for connection routing and drawing."""

    # Connections a single port accepts
    port_capacity: int = 3
    # Ports of one shape that may be committed to the same mode
    max_ports_per_mode: int = 3
    # Straight stub leaving and entering a port
    port_margin: float = 20.0
    # Jump-arc size: width along the segment, height across it
    intersection_width: float = 10.0
    intersection_height: float = 8.0
    arrow_scale: float = 0.5


DEFAULT_CONFIG = RoutingConfig()


class PriorityPorts(NamedTuple):
    """Candidate port indexes for each end of a connection, best first."""

    orig: list[PortIndex]
    dest: list[PortIndex]


class PortSelection(NamedTuple):
    """Chosen port indexes. None means no port was available."""

    orig: PortIndex | None
    dest: PortIndex | None

    @property
    def complete(self) -> bool:
        return self.orig is not None and self.dest is not None


def port_priority_order(
    main_orientation: Orientation,
    relative_x: int,
    relative_y: int,
) -> list[PortIndex]:
    """Order port indexes by eligibility around a main orientation.

    The best port of the main orientation goes first, then every candidate
    of the cross orientation, then the remaining main candidates.

    Args:
        main_orientation: The orientation assumed as the prioritized one
        relative_x: Relative position of the destination on x
        relative_y: Relative position of the destination on y
    """
    cross_orientation = main_orientation.cross

    def relative(orientation: Orientation) -> int:
        return relative_x if orientation is Orientation.X else relative_y

    main_ports = list(priority_order(main_orientation, relative(main_orientation)))
    cross_ports = priority_order(cross_orientation, relative(cross_orientation))
    main_ports[1:1] = cross_ports

    return main_ports


def connection_priority_ports(orig_shape: Shape, dest_shape: Shape) -> PriorityPorts:
    """Get the candidate ports of both shapes, sorted by priority."""
    overlap_x, overlap_y = overlapped_dimensions(orig_shape.bounds, dest_shape.bounds)
    relative_x, relative_y = normalized_position(
        orig_shape.position, dest_shape.position
    )

    if overlap_x == overlap_y:
        if overlap_x:
            orig_ports = port_priority_order(Orientation.X, relative_x, relative_y)
            dest_ports = port_priority_order(Orientation.Y, relative_x, relative_y)
        else:
            orig_ports = port_priority_order(Orientation.Y, relative_x, relative_y)
            dest_ports = port_priority_order(Orientation.X, -relative_x, -relative_y)
    else:
        if relative_x == 0:
            orientation = Orientation.Y
        elif relative_y == 0:
            orientation = Orientation.X
        else:
            orientation = Orientation.Y if overlap_x else Orientation.X

        orig_ports = port_priority_order(orientation, relative_x, relative_y)
        dest_ports = port_priority_order(orientation, -relative_x, -relative_y)

    return PriorityPorts(orig=orig_ports, dest=dest_ports)


def connection_ports(orig_shape: Shape, dest_shape: Shape) -> PortSelection:
    """Pick the best available ports to connect two shapes.

    Returns:
        PortSelection with one index per shape, None where no port is free
    """
    candidates = connection_priority_ports(orig_shape, dest_shape)

    orig = next(
        (
            index for index in candidates.orig
            if orig_shape.has_available_port_for(index, PortMode.OUT)
        ),
        None,
    )
    dest = next(
        (
            index for index in candidates.dest
            if not (orig_shape is dest_shape and index == orig)
            and dest_shape.has_available_port_for(index, PortMode.IN)
        ),
        None,
    )

    logger.debug(
        "Ports for %s -> %s: %s -> %s",
        orig_shape.id, dest_shape.id,
        orig.name if orig is not None else None,
        dest.name if dest is not None else None,
    )
    return PortSelection(orig, dest)


def _offset(port: PortDescriptor, distance: float) -> Point:
    """Move away from a port along its outward direction."""
    x, y = port.point
    if port.orientation is Orientation.X:
        return Point(x + port.direction * distance, y)
    return Point(x, y + port.direction * distance)


def _bridge(
    orig: PortDescriptor,
    start: Point,
    dest: PortDescriptor,
    end: Point,
) -> list[Point]:
    """Corner points joining two port stubs with horizontal/vertical moves."""
    if start.x == end.x or start.y == end.y:
        return []

    if orig.orientation is dest.orientation:
        if orig.orientation is Orientation.X:
            if orig.direction == dest.direction:
                mid = max(start.x, end.x) if orig.direction > 0 else min(start.x, end.x)
            else:
                mid = (start.x + end.x) / 2
            return [Point(mid, start.y), Point(mid, end.y)]

        if orig.direction == dest.direction:
            mid = max(start.y, end.y) if orig.direction > 0 else min(start.y, end.y)
        else:
            mid = (start.y + end.y) / 2
        return [Point(start.x, mid), Point(end.x, mid)]

    # Mixed orientations: one corner, never doubling back over the origin stub
    if orig.orientation is Orientation.X:
        if (end.x - start.x) * orig.direction > 0:
            return [Point(end.x, start.y)]
        return [Point(start.x, end.y)]
    if (end.y - start.y) * orig.direction > 0:
        return [Point(start.x, end.y)]
    return [Point(end.x, start.y)]


def _collinear(a: Point, b: Point, c: Point) -> bool:
    return (a.x == b.x == c.x) or (a.y == b.y == c.y)


def simplify_orthogonal(points: list[Point]) -> list[Point]:
    """Drop repeated points and vertices that do not turn.

    Removing such vertices keeps every consecutive pair on a shared
    horizontal or vertical line.
    """
    result: list[Point] = []

    for point in points:
        if result and result[-1] == point:
            continue
        while len(result) >= 2 and _collinear(result[-2], result[-1], point):
            result.pop()
        if result and result[-1] == point:
            continue
        result.append(point)

    return result


def build_waypoints(
    orig: PortDescriptor,
    dest: PortDescriptor,
    margin: float = DEFAULT_CONFIG.port_margin,
) -> list[Point]:
    """Build the orthogonal point list from an origin port to a destination port.

    The route leaves the origin port straight for ``margin``, bridges to a
    point ``margin`` in front of the destination port with at most two
    corners, and enters the destination port straight.

    Args:
        orig: Descriptor of the origin port (exit point)
        dest: Descriptor of the destination port (entry point)
        margin: Length of the straight stubs at both ports

    Returns:
        Points from the origin exit point to the destination entry point
    """
    start = orig.point
    end = dest.point
    exit_point = _offset(orig, margin)
    entry_point = _offset(dest, margin)

    route = [
        start,
        exit_point,
        *_bridge(orig, exit_point, dest, entry_point),
        entry_point,
        end,
    ]
    waypoints = simplify_orthogonal(route)

    if len(waypoints) < 2:
        # Both ports touch each other
        return [start, end]
    return waypoints
