"""The canvas: owner of shapes and connections."""

from __future__ import annotations

import itertools
import logging
import uuid
from typing import TYPE_CHECKING, Any

import networkx as nx

from .errors import InvalidParameterError
from .intersections import IntersectionResolver
from .models import Connection, Shape
from .routing import DEFAULT_CONFIG, RoutingConfig

if TYPE_CHECKING:
    from .drawing import ConnectionDrawing
    from .models import ResolverFunc

logger = logging.getLogger(__name__)


class Canvas:
    """A 2-D drawing surface holding shapes and the connections between them.

    Shapes and connections are kept in a networkx MultiDiGraph: every shape
    is a node keyed by its id, every connection an edge keyed by its id.
    The graph owns them; shapes and ports only reference connections weakly.
    """

    def __init__(
        self,
        width: float = 800,
        height: float = 600,
        *,
        id: str | None = None,
        config: RoutingConfig | None = None,
        intersection_resolver: ResolverFunc | None = None,
    ):
        self.id = id or uuid.uuid4().hex
        self.width = width
        self.height = height
        self.config = config or DEFAULT_CONFIG
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self.intersection_resolver = intersection_resolver or IntersectionResolver(self)
        self._order = itertools.count()

    # Shapes

    @property
    def shapes(self) -> list[Shape]:
        return [data["shape"] for _, data in self.graph.nodes(data=True)]

    def add_shape(self, shape: Shape) -> Shape:
        if not isinstance(shape, Shape):
            raise InvalidParameterError(f"add_shape(): invalid parameter {shape!r}.")

        existing = self.graph.nodes.get(shape.id)
        if existing is not None:
            if existing["shape"] is not shape:
                raise InvalidParameterError(f"add_shape(): duplicate shape id {shape.id!r}.")
            return shape

        self.graph.add_node(shape.id, shape=shape)
        shape._set_canvas(self)
        logger.debug("Added shape %s", shape.id)
        return shape

    def has_shape(self, shape: Shape) -> bool:
        node = self.graph.nodes.get(shape.id)
        return node is not None and node["shape"] is shape

    def find_shape(self, shape: Shape | str) -> Shape | None:
        """Get a shape on this canvas by id or instance."""
        if isinstance(shape, str):
            node = self.graph.nodes.get(shape)
            return node["shape"] if node is not None else None
        if not isinstance(shape, Shape):
            raise InvalidParameterError(f"find_shape(): invalid parameter {shape!r}.")
        return shape if self.has_shape(shape) else None

    def remove_shape(self, shape: Shape | str) -> None:
        """Remove a shape and every connection touching it."""
        found = self.find_shape(shape)
        if found is None:
            return

        found.remove_connections()
        self.graph.remove_node(found.id)
        found._set_canvas(None)
        logger.debug("Removed shape %s", found.id)
        self.refresh_intersections()

    def clear_shapes(self) -> None:
        for shape in self.shapes:
            self.remove_shape(shape)

    # Connections

    @property
    def connections(self) -> list[Connection]:
        """Connections in registration order."""
        edges = sorted(
            self.graph.edges(keys=True, data=True),
            key=lambda edge: edge[3]["order"],
        )
        return [data["connection"] for _, _, _, data in edges]

    def connect(
        self,
        origin: Shape | str,
        destination: Shape | str,
        *,
        id: str | None = None,
    ) -> Connection:
        """Create a routed connection between two shapes of this canvas.

        Raises:
            InvalidParameterError: Unknown shape or invalid endpoints
            SelfLoopError: Origin and destination are the same shape
        """
        orig_shape = self._require_shape(origin)
        dest_shape = self._require_shape(destination)
        if id is not None and self.find_connection(id) is not None:
            raise InvalidParameterError(f"connect(): duplicate connection id {id!r}.")

        connection = Connection(
            orig_shape,
            dest_shape,
            id=id,
            config=self.config,
            intersection_resolver=self.intersection_resolver,
        )
        self.graph.add_edge(
            orig_shape.id,
            dest_shape.id,
            key=connection.id,
            connection=connection,
            order=next(self._order),
        )
        connection._set_canvas(self)
        logger.debug("Connected %s -> %s as %s", orig_shape.id, dest_shape.id, connection.id)

        self.refresh_intersections()
        return connection

    def find_connection(self, connection: Connection | str) -> Connection | None:
        if isinstance(connection, str):
            return next((c for c in self.connections if c.id == connection), None)
        if not isinstance(connection, Connection):
            raise InvalidParameterError(f"find_connection(): invalid parameter {connection!r}.")
        return connection if connection.canvas is self else None

    def remove_connection(self, connection: Connection | str) -> None:
        found = self.find_connection(connection)
        if found is not None:
            found.disconnect()

    def clear_connections(self) -> None:
        for connection in self.connections:
            connection.disconnect()

    def _forget_connection(self, connection: Connection) -> None:
        for orig, dest, key in list(self.graph.edges(keys=True)):
            if key == connection.id:
                self.graph.remove_edge(orig, dest, key=key)
        connection._set_canvas(None)

    def _require_shape(self, shape: Shape | str) -> Shape:
        found = self.find_shape(shape)
        if found is None:
            if isinstance(shape, Shape):
                found = self.add_shape(shape)
            else:
                raise InvalidParameterError(f"Unknown shape {shape!r}.")
        return found

    # Drawing

    def refresh_intersections(self) -> None:
        """Re-derive the crossings of every routed connection."""
        for connection in self.connections:
            if connection.routed:
                connection.intersections = self.intersection_resolver(connection)

    def reroute_unrouted(self) -> None:
        """Retry every connection that found no available port."""
        for connection in self.connections:
            if not connection.routed:
                connection.connect()
        self.refresh_intersections()

    def drawings(self) -> dict[str, ConnectionDrawing]:
        return {connection.id: connection.draw() for connection in self.connections}

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "width": self.width,
            "height": self.height,
            "shapes": [shape.to_dict() for shape in self.shapes],
            "connections": [connection.to_dict() for connection in self.connections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], config: RoutingConfig | None = None) -> Canvas:
        """Rebuild a canvas from ``to_dict`` output. Waypoints are recomputed."""
        canvas = cls(
            data.get("width", 800),
            data.get("height", 600),
            id=data.get("id"),
            config=config,
        )

        for shape_data in data.get("shapes", []):
            canvas.add_shape(Shape(
                shape_data.get("x", 0),
                shape_data.get("y", 0),
                shape_data.get("width", 80),
                shape_data.get("height", 80),
                id=shape_data.get("id"),
                label=shape_data.get("label", ""),
                kind=shape_data.get("type", "rectangle"),
                config=canvas.config,
            ))

        for connection_data in data.get("connections", []):
            canvas.connect(
                connection_data["orig"],
                connection_data["dest"],
                id=connection_data.get("id"),
            )

        return canvas

    def __repr__(self) -> str:
        return (
            f"Canvas({self.id}: {self.graph.number_of_nodes()} shapes, "
            f"{self.graph.number_of_edges()} connections)"
        )
