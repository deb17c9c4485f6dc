"""orthoplot - Shapes on a canvas joined by orthogonal, jump-arc connections.

Example usage:
    from orthoplot import canvas, shape

    with canvas(filename="flow"):
        start = shape(0, 0, label="Start")
        check = shape(200, 0, label="Check")
        done = shape(200, 200, label="Done", kind="triangle")

        start >> check
        check >> done
"""

from .canvas import Canvas
from .drawing import (
    ArrowTransform,
    ConnectionDrawing,
    JumpArc,
    PathCommand,
    draw_connection,
    jump_arcs,
)
from .dsl import canvas, connect, shape
from .errors import (
    DiagonalSegmentError,
    InvalidParameterError,
    OrthoplotError,
    SelfLoopError,
)
from .geometry import Bounds, Point
from .intersections import IntersectionResolver
from .models import Connection, Shape, ShapeKind
from .ports import Orientation, Port, PortIndex, PortMode
from .renderer import (
    DEFAULT_THEME,
    CanvasRenderer,
    Theme,
    render_to_svg,
)
from .routing import (
    DEFAULT_CONFIG,
    RoutingConfig,
    build_waypoints,
    connection_ports,
)

__version__ = "0.1.0"

__all__ = [
    # DSL functions
    "canvas",
    "shape",
    "connect",
    # Models
    "Canvas",
    "Shape",
    "ShapeKind",
    "Connection",
    "Port",
    "PortIndex",
    "PortMode",
    "Orientation",
    "Point",
    "Bounds",
    # Routing
    "RoutingConfig",
    "DEFAULT_CONFIG",
    "connection_ports",
    "build_waypoints",
    "IntersectionResolver",
    # Drawing
    "draw_connection",
    "jump_arcs",
    "JumpArc",
    "PathCommand",
    "ArrowTransform",
    "ConnectionDrawing",
    # Rendering
    "render_to_svg",
    "CanvasRenderer",
    "Theme",
    "DEFAULT_THEME",
    # Errors
    "OrthoplotError",
    "InvalidParameterError",
    "SelfLoopError",
    "DiagonalSegmentError",
    # Version
    "__version__",
]
