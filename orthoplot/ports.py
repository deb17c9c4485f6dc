"""Connection ports: the four attachment slots of every shape."""

from __future__ import annotations

import weakref
from dataclasses import dataclass
from enum import Enum, IntEnum
from functools import lru_cache
from typing import TYPE_CHECKING

from .geometry import Point

if TYPE_CHECKING:
    from .models import Connection, Shape


class Orientation(Enum):
    """Axis along which a port or segment runs its connection.

    X ports sit on the left/right sides and connections leave them moving
    along x; horizontal segments are X. Y ports sit on the top/bottom sides.
    """

    X = "x"
    Y = "y"

    @property
    def cross(self) -> Orientation:
        return Orientation.Y if self is Orientation.X else Orientation.X


class PortMode(Enum):
    """Traffic direction a port is committed to."""

    IN = "in"
    OUT = "out"


class PortIndex(IntEnum):
    """Position of each port in a shape's port array."""

    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


# index -> (orientation, outward direction)
PORT_LAYOUT: dict[PortIndex, tuple[Orientation, int]] = {
    PortIndex.TOP: (Orientation.Y, -1),
    PortIndex.RIGHT: (Orientation.X, 1),
    PortIndex.BOTTOM: (Orientation.Y, 1),
    PortIndex.LEFT: (Orientation.X, -1),
}


@lru_cache(maxsize=None)
def priority_order(orientation: Orientation, relative: int) -> tuple[PortIndex, ...]:
    """Sort all port indexes by preference for a desired orientation.

    The port of the given orientation that faces the relative position comes
    first, the two ports of the cross orientation follow, and the port of the
    given orientation facing away comes last. A relative position of 0 is
    treated as 1.

    Args:
        orientation: Preferred orientation
        relative: Normalized position of the other shape on that axis

    Returns:
        Tuple with the 4 port indexes
    """
    facing = relative or 1

    def rank(index: PortIndex) -> int:
        port_orientation, direction = PORT_LAYOUT[index]
        if port_orientation is not orientation:
            return 1
        return 0 if direction == facing else 2

    return tuple(sorted(PortIndex, key=rank))


@dataclass(frozen=True)
class PortDescriptor:
    """Snapshot of a port used to build waypoints."""

    index: PortIndex
    orientation: Orientation
    direction: int
    mode: PortMode | None
    point: Point


class Port:
    """One attachment slot of a shape.

    The port is owned by its shape and only keeps a weak reference back to
    it. Assigned connections are held weakly as well, keyed by connection id.
    """

    def __init__(self, shape: Shape, index: PortIndex, capacity: int = 3):
        self.index = PortIndex(index)
        self.orientation, self.direction = PORT_LAYOUT[self.index]
        self.capacity = capacity
        self._mode: PortMode | None = None
        self._shape = weakref.ref(shape)
        self._connections: weakref.WeakValueDictionary[str, Connection] = (
            weakref.WeakValueDictionary()
        )

    @property
    def shape(self) -> Shape | None:
        return self._shape()

    @property
    def mode(self) -> PortMode | None:
        """Committed mode, or None while no connection is assigned."""
        return self._mode if self._connections else None

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections.values())

    def __len__(self) -> int:
        return len(self._connections)

    @property
    def point(self) -> Point:
        """The point on the shape border where connections attach."""
        shape = self.shape
        bounds = shape.bounds
        if self.index is PortIndex.TOP:
            return Point(shape.x, bounds.top)
        if self.index is PortIndex.RIGHT:
            return Point(bounds.right, shape.y)
        if self.index is PortIndex.BOTTOM:
            return Point(shape.x, bounds.bottom)
        return Point(bounds.left, shape.y)

    def descriptor(self) -> PortDescriptor:
        return PortDescriptor(
            index=self.index,
            orientation=self.orientation,
            direction=self.direction,
            mode=self.mode,
            point=self.point,
        )

    def is_available_for(self, mode: PortMode) -> bool:
        """Check if the port can take one more connection in the given mode."""
        if self.mode is None:
            return True
        return self.mode is mode and len(self._connections) < self.capacity

    def add_connection(self, connection: Connection) -> None:
        """Assign a connection to this port.

        The first connection fixes the port mode: OUT when the port's shape
        is the connection origin, IN otherwise. Capacity is not checked here.
        """
        if self.mode is None:
            is_origin = connection.orig_shape is self.shape
            self._mode = PortMode.OUT if is_origin else PortMode.IN
        self._connections[connection.id] = connection

    def remove_connection(self, connection: Connection) -> None:
        if self._connections.get(connection.id) is connection:
            del self._connections[connection.id]
        if not self._connections:
            self._mode = None

    def has_connection(self, connection: Connection) -> bool:
        return self._connections.get(connection.id) is connection

    def clear_connections(self) -> None:
        self._connections.clear()
        self._mode = None

    def __repr__(self) -> str:
        mode = self.mode.value if self.mode else None
        return f"Port({self.index.name}, mode={mode}, connections={len(self)})"
