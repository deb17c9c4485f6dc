"""Tests for shapes and connections."""

import pytest

from orthoplot import Connection, RoutingConfig, Shape, ShapeKind
from orthoplot.errors import InvalidParameterError, SelfLoopError
from orthoplot.geometry import Bounds, Point
from orthoplot.ports import PortIndex, PortMode


class TestShape:
    """Tests for Shape geometry."""

    def test_defaults(self):
        shape = Shape()
        assert shape.position == Point(0, 0)
        assert shape.size == (80, 80)
        assert shape.kind is ShapeKind.RECTANGLE
        assert len(shape.ports) == 4
        assert shape.id

    def test_bounds(self):
        shape = Shape(100, 50, 80, 40)
        assert shape.bounds == Bounds(top=30, right=140, bottom=70, left=60)

    def test_kind_from_string(self):
        assert Shape(kind="triangle").kind is ShapeKind.TRIANGLE

    def test_unknown_kind(self):
        with pytest.raises(InvalidParameterError):
            Shape(kind="hexagon")

    def test_setters(self):
        shape = Shape()
        shape.x = 10
        shape.y = -5
        shape.width = 20
        shape.height = 30
        assert shape.position == (10, -5)
        assert shape.size == (20, 30)

    def test_adjust_size(self):
        shape = Shape()
        shape.adjust_size(Bounds(top=0, right=100, bottom=50, left=20))
        assert shape.position == (60, 25)
        assert shape.size == (80, 50)

    @pytest.mark.parametrize("value", ["10", None, True])
    def test_invalid_position(self, value):
        shape = Shape()
        with pytest.raises(InvalidParameterError):
            shape.x = value

    def test_negative_size(self):
        with pytest.raises(InvalidParameterError):
            Shape(0, 0, -1, 10)
        shape = Shape()
        with pytest.raises(InvalidParameterError):
            shape.set_size(10, -10)

    def test_to_dict(self):
        shape = Shape(1, 2, 3, 4, id="s", label="Start")
        assert shape.to_dict() == {
            "id": "s",
            "type": "rectangle",
            "label": "Start",
            "x": 1,
            "y": 2,
            "width": 3,
            "height": 4,
        }


class TestConnection:
    """Tests for Connection."""

    def test_same_row(self):
        a = Shape(0, 0, 80, 80)
        b = Shape(200, 0, 80, 80)
        connection = Connection(a, b)

        assert connection.points == [Point(40, 0), Point(160, 0)]
        assert a.port(PortIndex.RIGHT).mode is PortMode.OUT
        assert b.port(PortIndex.LEFT).mode is PortMode.IN

    def test_same_column(self):
        a = Shape(0, 0, 80, 80)
        b = Shape(0, 200, 80, 80)
        connection = Connection(a, b)

        assert connection.points == [Point(0, 40), Point(0, 160)]
        assert a.port(PortIndex.BOTTOM).mode is PortMode.OUT
        assert b.port(PortIndex.TOP).mode is PortMode.IN

    def test_self_loop_rejected(self):
        a = Shape()
        with pytest.raises(SelfLoopError):
            Connection(a, a)
        assert a.connections == []
        assert all(port.mode is None for port in a.ports)

    def test_self_loop_is_invalid_parameter(self):
        assert issubclass(SelfLoopError, InvalidParameterError)
        assert issubclass(SelfLoopError, ValueError)

    def test_invalid_shapes(self):
        with pytest.raises(InvalidParameterError):
            Connection(Shape(), "b")

    def test_is_valid(self):
        a, b = Shape(), Shape()
        assert Connection.is_valid(a, b)
        assert not Connection.is_valid(a, a)

    def test_shapes_track_connection(self):
        a = Shape(0, 0, id="a")
        b = Shape(200, 0, id="b")
        connection = Connection(a, b)

        assert a.outgoing_connections == [connection]
        assert b.incoming_connections == [connection]
        assert a.incoming_connections == []
        assert a.connected_shapes.next == [b]
        assert b.connected_shapes.prev == [a]
        assert connection.is_connected_with(a)
        assert connection.is_connected_with(b)

    def test_segments_and_extremes(self):
        a = Shape(0, 0, 80, 80)
        b = Shape(200, 100, 80, 80)
        connection = Connection(a, b)

        assert connection.points == [
            Point(40, 0), Point(100, 0), Point(100, 100), Point(160, 100),
        ]
        assert connection.segments[0] == (Point(40, 0), Point(100, 0))
        assert connection.bbox_extreme_points == (Point(40, 0), Point(160, 100))

    def test_moving_shape_reroutes(self):
        a = Shape(0, 0, 80, 80)
        b = Shape(200, 0, 80, 80)
        connection = Connection(a, b)

        b.set_position(0, 200)

        assert connection.points == [Point(0, 40), Point(0, 160)]
        assert a.port(PortIndex.RIGHT).mode is None
        assert a.port(PortIndex.BOTTOM).mode is PortMode.OUT

    def test_resizing_shape_reroutes(self):
        a = Shape(0, 0, 80, 80)
        b = Shape(200, 0, 80, 80)
        connection = Connection(a, b)

        a.width = 120

        assert connection.points == [Point(60, 0), Point(160, 0)]

    def test_set_dest_shape(self):
        a = Shape(0, 0)
        b = Shape(200, 0)
        c = Shape(0, 200)
        connection = Connection(a, b)

        connection.set_dest_shape(c)

        assert connection.dest_shape is c
        assert b.connections == []
        assert all(port.mode is None for port in b.ports)
        assert connection.points == [Point(0, 40), Point(0, 160)]

    def test_set_orig_shape_to_destination_rejected(self):
        a = Shape(0, 0)
        b = Shape(200, 0)
        connection = Connection(a, b)
        with pytest.raises(SelfLoopError):
            connection.set_orig_shape(b)

    def test_disconnect(self):
        a = Shape(0, 0)
        b = Shape(200, 0)
        connection = Connection(a, b)

        connection.disconnect()

        assert connection.orig_shape is None
        assert connection.dest_shape is None
        assert connection.points == []
        assert not connection.draw().visible
        assert a.connections == []
        assert b.connections == []

    def test_remove_connection_from_shape(self):
        a = Shape(0, 0)
        b = Shape(200, 0)
        connection = Connection(a, b)

        b.remove_connection(connection)

        assert connection.orig_shape is None
        assert a.connections == []
        assert not b.is_using_connection(connection)

    def test_rshift_without_canvas(self):
        a = Shape(0, 0)
        b = Shape(200, 0)
        connection = a >> b
        assert isinstance(connection, Connection)
        assert connection.routed

    def test_to_dict(self):
        a = Shape(0, 0, id="a")
        b = Shape(200, 0, id="b")
        connection = Connection(a, b, id="ab")
        assert connection.to_dict() == {
            "id": "ab",
            "orig": "a",
            "dest": "b",
            "points": [[40, 0], [160, 0]],
        }


class TestRerouteOnDisconnect:
    """Disconnecting frees ports for the connections left on a shape."""

    def test_shared_port_moves_to_freed_side(self):
        hub = Shape(0, 0)
        right = Shape(200, 0)
        below = Shape(0, 200)
        left = Shape(-200, 0)
        above = Shape(0, -200)
        connections = [Connection(hub, right), Connection(hub, below)]
        to_left = Connection(hub, left)
        to_above = Connection(hub, above)
        assert hub.port(PortIndex.RIGHT).has_connection(to_above)

        to_left.disconnect()

        assert hub.port(PortIndex.TOP).has_connection(to_above)
        assert not hub.port(PortIndex.RIGHT).has_connection(to_above)
        assert all(connection.routed for connection in connections)

    def test_unrouted_connection_recovers(self):
        config = RoutingConfig(port_capacity=1, max_ports_per_mode=1)
        a = Shape(0, 0, config=config)
        b = Shape(0, 200, config=config)
        c = Shape(200, 0, config=config)
        first = Connection(a, b, config=config)
        second = Connection(a, c, config=config)
        assert not second.routed

        b.remove_connection(first)

        assert second.routed
        assert second.points == [Point(40, 0), Point(160, 0)]

    def test_rehoming_frees_old_shape(self):
        config = RoutingConfig(port_capacity=1, max_ports_per_mode=1)
        a = Shape(0, 0, config=config)
        b = Shape(200, 0, config=config)
        c = Shape(200, 200, config=config)
        d = Shape(400, 0, config=config)
        first = Connection(a, b, config=config)
        second = Connection(d, b, config=config)
        assert not second.routed

        first.set_dest_shape(c)

        assert first.routed
        assert second.routed
        assert b.port(PortIndex.RIGHT).has_connection(second)


class TestPortCapacity:
    """Port capacity and mode limits."""

    def test_port_capacity(self, hub):
        _, shapes = hub
        hub_shape = shapes["hub"]
        right = shapes["right"]
        connections = [Connection(hub_shape, right) for _ in range(4)]

        for port in hub_shape.ports:
            assert len(port) <= port.capacity
        assert len(hub_shape.port(PortIndex.RIGHT)) == 3
        assert all(connection.routed for connection in connections)

    def test_one_port_left_for_incoming(self, hub):
        _, shapes = hub
        hub_shape = shapes["hub"]
        connections = [
            Connection(hub_shape, shapes["right"]),
            Connection(hub_shape, shapes["below"]),
            Connection(hub_shape, shapes["left"]),
        ]

        assert hub_shape.port(PortIndex.RIGHT).mode is PortMode.OUT
        assert hub_shape.port(PortIndex.BOTTOM).mode is PortMode.OUT
        assert hub_shape.port(PortIndex.LEFT).mode is PortMode.OUT

        fourth = Connection(hub_shape, shapes["above"])
        connections.append(fourth)

        assert fourth.routed
        assert hub_shape.port(PortIndex.TOP).mode is None
        assert hub_shape.port(PortIndex.RIGHT).has_connection(fourth)
        assert not hub_shape.has_available_port_for(PortIndex.TOP, PortMode.OUT)
        assert hub_shape.has_available_port_for(PortIndex.TOP, PortMode.IN)
        assert all(connection.routed for connection in connections)

    def test_mode_commitment_never_mixed(self, hub):
        _, shapes = hub
        hub_shape = shapes["hub"]
        connections = [
            Connection(hub_shape, shapes["right"]),
            Connection(shapes["right"], hub_shape),
            Connection(shapes["left"], hub_shape),
            Connection(hub_shape, shapes["left"]),
        ]

        for port in hub_shape.ports:
            modes = {
                PortMode.OUT if connection.orig_shape is hub_shape else PortMode.IN
                for connection in port.connections
            }
            assert len(modes) <= 1
            if modes:
                assert modes == {port.mode}
        assert all(connection.routed for connection in connections)
