"""Shapes and the connections between them."""

from __future__ import annotations

import logging
import numbers
import uuid
import weakref
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, NamedTuple

from .drawing import ConnectionDrawing, draw_connection
from .errors import InvalidParameterError, SelfLoopError
from .geometry import Bounds, Point
from .ports import Port, PortDescriptor, PortIndex, PortMode
from .routing import DEFAULT_CONFIG, RoutingConfig, build_waypoints, connection_ports

if TYPE_CHECKING:
    from .canvas import Canvas

logger = logging.getLogger(__name__)

ResolverFunc = Callable[["Connection"], "list[list[Point]]"]


class ShapeKind(Enum):
    """How a shape is drawn. Routing only depends on the bounding box."""

    RECTANGLE = "rectangle"
    TRIANGLE = "triangle"


class ConnectedShapes(NamedTuple):
    """Shapes one connection away: prev feed into the shape, next are fed."""

    prev: list[Shape]
    next: list[Shape]


def _check_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"{name}(): invalid parameter {value!r}.")
    return value


def _check_size(name: str, value: Any) -> float:
    _check_number(name, value)
    if value < 0:
        raise InvalidParameterError(f"{name}(): size can't be negative, got {value!r}.")
    return value


def _check_port_index(index: Any) -> PortIndex:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidParameterError(f"Invalid port index {index!r}.")
    try:
        return PortIndex(index)
    except ValueError:
        raise InvalidParameterError(f"Invalid port index {index!r}.") from None


class Shape:
    """A rectangular area on the canvas with four connection ports.

    Position is the center of the shape. Moving or resizing a shape reroutes
    every connection attached to it.
    """

    def __init__(
        self,
        x: float = 0,
        y: float = 0,
        width: float = 80,
        height: float = 80,
        *,
        id: str | None = None,
        label: str = "",
        kind: ShapeKind | str = ShapeKind.RECTANGLE,
        config: RoutingConfig | None = None,
    ):
        self.id = id or uuid.uuid4().hex
        self.label = label
        try:
            self.kind = ShapeKind(kind)
        except ValueError:
            raise InvalidParameterError(f"Invalid shape kind {kind!r}.") from None
        self.config = config or DEFAULT_CONFIG
        self._x = 0.0
        self._y = 0.0
        self._width = 0.0
        self._height = 0.0
        self._bulk_action = False
        self._canvas: weakref.ref[Canvas] | None = None
        self._connections: weakref.WeakValueDictionary[str, Connection] = (
            weakref.WeakValueDictionary()
        )
        self.ports = tuple(
            Port(self, index, capacity=self.config.port_capacity) for index in PortIndex
        )

        self._bulk_action = True
        self.set_position(x, y)
        self.set_size(width, height)
        self._bulk_action = False

    # Geometry

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self._x = _check_number("set_x", value)
        self._shape_changed()

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        self._y = _check_number("set_y", value)
        self._shape_changed()

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float) -> None:
        self._width = _check_size("set_width", value)
        self._shape_changed()

    @property
    def height(self) -> float:
        return self._height

    @height.setter
    def height(self, value: float) -> None:
        self._height = _check_size("set_height", value)
        self._shape_changed()

    @property
    def position(self) -> Point:
        return Point(self._x, self._y)

    @property
    def size(self) -> tuple[float, float]:
        return self._width, self._height

    @property
    def bounds(self) -> Bounds:
        half_width = self._width / 2
        half_height = self._height / 2
        return Bounds(
            top=self._y - half_height,
            right=self._x + half_width,
            bottom=self._y + half_height,
            left=self._x - half_width,
        )

    def set_position(self, x: float, y: float) -> None:
        """Move the shape center, rerouting connections once."""
        _check_number("set_x", x)
        _check_number("set_y", y)
        self._x, self._y = x, y
        self._shape_changed()

    def set_size(self, width: float, height: float) -> None:
        """Resize the shape, rerouting connections once."""
        _check_size("set_width", width)
        _check_size("set_height", height)
        self._width, self._height = width, height
        self._shape_changed()

    def adjust_size(self, bounds: Bounds) -> None:
        """Fit the shape to the given bounds."""
        top, right, bottom, left = bounds
        bulk_action = self._bulk_action
        self._bulk_action = True
        try:
            self.set_position(left + (right - left) / 2, top + (bottom - top) / 2)
            self.set_size(right - left, bottom - top)
        finally:
            self._bulk_action = bulk_action
        self._shape_changed()

    # Ports

    def port(self, index: int) -> Port:
        return self.ports[_check_port_index(index)]

    def port_descriptor(self, index: int | None) -> PortDescriptor | None:
        if index is None:
            return None
        return self.port(index).descriptor()

    def port_descriptors(self) -> list[PortDescriptor]:
        return [port.descriptor() for port in self.ports]

    def has_available_port_for(self, index: int, mode: PortMode) -> bool:
        """Check if the port at index can take a connection in the given mode.

        An unused port is only available while fewer than
        ``config.max_ports_per_mode`` ports of this shape carry that mode,
        so some port is always left for the opposite direction.
        """
        port = self.port(index)

        if port.mode is None:
            committed = sum(1 for other in self.ports if other.mode is mode)
            return committed < self.config.max_ports_per_mode
        return port.is_available_for(mode)

    def assign_connection_to_port(self, connection: Connection, index: int) -> None:
        port = self.port(index)
        self._remove_from_ports(connection)
        port.add_connection(connection)
        logger.debug("Assigned %s to %s of shape %s", connection.id, port, self.id)

    def _remove_from_ports(self, connection: Connection) -> None:
        for port in self.ports:
            if port.has_connection(connection):
                port.remove_connection(connection)

    def reset_ports(self) -> None:
        for port in self.ports:
            port.clear_connections()

    # Connections

    @property
    def canvas(self) -> Canvas | None:
        return self._canvas() if self._canvas else None

    def _set_canvas(self, canvas: Canvas | None) -> None:
        self._canvas = weakref.ref(canvas) if canvas is not None else None

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections.values())

    @property
    def outgoing_connections(self) -> list[Connection]:
        return [c for c in self.connections if c.orig_shape is self]

    @property
    def incoming_connections(self) -> list[Connection]:
        return [c for c in self.connections if c.dest_shape is self]

    @property
    def connected_shapes(self) -> ConnectedShapes:
        return ConnectedShapes(
            prev=[c.orig_shape for c in self.incoming_connections],
            next=[c.dest_shape for c in self.outgoing_connections],
        )

    def add_outgoing_connection(self, connection: Connection) -> None:
        if not isinstance(connection, Connection):
            raise InvalidParameterError("add_outgoing_connection(): invalid parameter.")

        self._connections[connection.id] = connection
        if connection.orig_shape is not self:
            connection.set_orig_shape(self)

    def add_incoming_connection(self, connection: Connection) -> None:
        if not isinstance(connection, Connection):
            raise InvalidParameterError("add_incoming_connection(): invalid parameter.")

        self._connections[connection.id] = connection
        if connection.dest_shape is not self:
            connection.set_dest_shape(self)

    def is_using_connection(self, connection: Connection) -> bool:
        return self._connections.get(connection.id) is connection

    def remove_connection(self, connection: Connection) -> None:
        """Detach a connection from this shape, disconnecting it."""
        if self.is_using_connection(connection):
            del self._connections[connection.id]
            self._remove_from_ports(connection)
            if connection.is_connected_with(self):
                connection.disconnect()

    def remove_connections(self) -> None:
        for connection in self.connections:
            self.remove_connection(connection)

    def draw_connections(self) -> None:
        """Reroute every connection attached to this shape."""
        self.reset_ports()

        for connection in self.connections:
            connection.connect()

        canvas = self.canvas
        if canvas is not None:
            canvas.refresh_intersections()

    def _shape_changed(self) -> None:
        if not self._bulk_action:
            self.draw_connections()

    def __rshift__(self, other: Shape) -> Connection:
        """Connect this shape to another one (a >> b)."""
        canvas = self.canvas
        if canvas is not None:
            return canvas.connect(self, other)
        return Connection(self, other, config=self.config)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "label": self.label,
            "x": self._x,
            "y": self._y,
            "width": self._width,
            "height": self._height,
        }

    def __repr__(self) -> str:
        label = f" {self.label!r}" if self.label else ""
        return f"Shape({self.id}{label} at ({self._x}, {self._y}) {self._width}x{self._height})"


class Connection:
    """A directed, orthogonally routed line from one shape to another.

    The connection is routed as soon as both ends are set, and again every
    time one of its shapes moves or is resized. When no port is available
    on either shape the connection keeps no waypoints and draws nothing.
    """

    def __init__(
        self,
        orig_shape: Shape,
        dest_shape: Shape,
        *,
        id: str | None = None,
        config: RoutingConfig | None = None,
        intersection_resolver: ResolverFunc | None = None,
    ):
        _check_shape("Connection", orig_shape)
        _check_shape("Connection", dest_shape)
        if not Connection.is_valid(orig_shape, dest_shape):
            raise SelfLoopError("Connection(): The origin and destiny are the same.")

        self.id = id or uuid.uuid4().hex
        self.config = config or DEFAULT_CONFIG
        self.intersection_resolver = intersection_resolver
        self._orig_shape: Shape | None = None
        self._dest_shape: Shape | None = None
        self._points: list[Point] = []
        self._intersections: list[list[Point]] = []
        self._canvas: weakref.ref[Canvas] | None = None

        self.set_orig_shape(orig_shape)
        self.set_dest_shape(dest_shape)

    @staticmethod
    def is_valid(orig_shape: Shape | None, dest_shape: Shape | None) -> bool:
        return orig_shape is not dest_shape

    @property
    def orig_shape(self) -> Shape | None:
        return self._orig_shape

    @property
    def dest_shape(self) -> Shape | None:
        return self._dest_shape

    @property
    def canvas(self) -> Canvas | None:
        return self._canvas() if self._canvas else None

    def _set_canvas(self, canvas: Canvas | None) -> None:
        self._canvas = weakref.ref(canvas) if canvas is not None else None

    def set_orig_shape(self, shape: Shape) -> None:
        _check_shape("set_orig_shape", shape)
        if not Connection.is_valid(shape, self._dest_shape):
            raise SelfLoopError("set_orig_shape(): The origin and destiny are the same.")

        if shape is self._orig_shape:
            return

        old_shape = self._orig_shape
        if old_shape is not None:
            self._orig_shape = None
            old_shape.remove_connection(self)
            old_shape.draw_connections()

        self._orig_shape = shape
        shape.add_outgoing_connection(self)
        self.connect()

    def set_dest_shape(self, shape: Shape) -> None:
        _check_shape("set_dest_shape", shape)
        if not Connection.is_valid(self._orig_shape, shape):
            raise SelfLoopError("set_dest_shape(): The origin and destiny are the same.")

        if shape is self._dest_shape:
            return

        old_shape = self._dest_shape
        if old_shape is not None:
            self._dest_shape = None
            old_shape.remove_connection(self)
            old_shape.draw_connections()

        self._dest_shape = shape
        shape.add_incoming_connection(self)
        self.connect()

    def is_connected_with(self, shape: Shape) -> bool:
        return self._orig_shape is shape or self._dest_shape is shape

    # Routing

    @property
    def points(self) -> list[Point]:
        return list(self._points)

    @property
    def routed(self) -> bool:
        return bool(self._points)

    @property
    def intersections(self) -> list[list[Point]]:
        return [list(points) for points in self._intersections]

    @intersections.setter
    def intersections(self, intersections: list[list[Point]]) -> None:
        self._intersections = [
            [Point(*point) for point in points] for points in intersections
        ]

    @property
    def segments(self) -> list[tuple[Point, Point]]:
        return list(zip(self._points, self._points[1:]))

    @property
    def bbox_extreme_points(self) -> tuple[Point, Point]:
        """Top-left and bottom-right corners around the waypoints."""
        if not self._points:
            return Point(0, 0), Point(0, 0)
        xs = [point.x for point in self._points]
        ys = [point.y for point in self._points]
        return Point(min(xs), min(ys)), Point(max(xs), max(ys))

    def connect(self) -> None:
        """Pick ports on both shapes and recompute the waypoints."""
        orig_shape, dest_shape = self._orig_shape, self._dest_shape
        if orig_shape is None or dest_shape is None:
            return

        # Free the ports held so far, they are candidates again
        orig_shape._remove_from_ports(self)
        dest_shape._remove_from_ports(self)
        selection = connection_ports(orig_shape, dest_shape)

        if selection.complete:
            orig_shape.assign_connection_to_port(self, selection.orig)
            dest_shape.assign_connection_to_port(self, selection.dest)
            self._points = build_waypoints(
                orig_shape.port_descriptor(selection.orig),
                dest_shape.port_descriptor(selection.dest),
                margin=self.config.port_margin,
            )
            logger.debug("Routed %s through %d points", self.id, len(self._points))
        else:
            logger.warning(
                "No available port to connect %s to %s, connection %s is not drawn",
                orig_shape.id, dest_shape.id, self.id,
            )
            self._points = []

        self._intersections = []
        if self._points and self.intersection_resolver is not None:
            self.intersections = self.intersection_resolver(self)

    def draw(self) -> ConnectionDrawing:
        return draw_connection(self._points, self._intersections, self.config)

    def disconnect(self) -> None:
        """Detach the connection from both shapes and from its canvas.

        The ports it held are free again, so the connections left on both
        shapes are rerouted, and on a canvas every connection that found no
        port gets another try.
        """
        orig_shape, dest_shape = self._orig_shape, self._dest_shape
        self._orig_shape = None
        self._dest_shape = None

        if orig_shape is not None:
            orig_shape.remove_connection(self)
        if dest_shape is not None:
            dest_shape.remove_connection(self)

        self._points = []
        self._intersections = []

        canvas = self.canvas
        if canvas is not None:
            canvas._forget_connection(self)

        for shape in (orig_shape, dest_shape):
            if shape is not None:
                shape.draw_connections()

        if canvas is not None:
            canvas.reroute_unrouted()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orig": self._orig_shape.id if self._orig_shape else None,
            "dest": self._dest_shape.id if self._dest_shape else None,
            "points": [[point.x, point.y] for point in self._points],
        }

    def __repr__(self) -> str:
        orig = self._orig_shape.id if self._orig_shape else None
        dest = self._dest_shape.id if self._dest_shape else None
        return f"Connection({self.id}: {orig} -> {dest})"


def _check_shape(name: str, shape: Any) -> None:
    if not isinstance(shape, Shape):
        raise InvalidParameterError(f"{name}(): invalid parameter {shape!r}.")
