"""Python DSL for building canvases."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

from .canvas import Canvas
from .models import Connection, Shape, ShapeKind
from .renderer import render_to_svg

if TYPE_CHECKING:
    from collections.abc import Generator

    from .routing import RoutingConfig

ShapeKindLiteral = Literal["rectangle", "triangle"]

# Context stack for nested canvas creation
_canvas_stack: list[Canvas] = []


def _current_canvas() -> Canvas | None:
    """Get the current canvas context."""
    return _canvas_stack[-1] if _canvas_stack else None


@contextmanager
def canvas(
        filename: str | None = None,
        width: float = 800,
        height: float = 600,
        config: RoutingConfig | None = None,
        **kwargs: Any,
) -> Generator[Canvas]:
    """Create a canvas context.

    Usage:
        with canvas(filename="flow"):
            start = shape(0, 0, label="Start")
            end = shape(200, 0, label="End")
            start >> end

    Args:
        filename: Output filename (without extension), None to skip saving
        width: Canvas width
        height: Canvas height
        config: Routing configuration
        **kwargs: Additional canvas options

    Yields:
        The Canvas object
    """
    c = Canvas(width, height, config=config, **kwargs)
    _canvas_stack.append(c)

    try:
        yield c
    finally:
        _canvas_stack.pop()

    # Render on exit
    if filename:
        render_to_svg(c, filename)


def shape(
        x: float = 0,
        y: float = 0,
        width: float = 80,
        height: float = 80,
        label: str = "",
        kind: ShapeKindLiteral | ShapeKind = "rectangle",
        **kwargs: Any,
) -> Shape:
    """Create a shape, placed on the current canvas if there is one.

    Args:
        x: Center x coordinate
        y: Center y coordinate
        width: Shape width
        height: Shape height
        label: Text drawn in the shape
        kind: "rectangle" or "triangle"
        **kwargs: Additional shape options (id)

    Returns:
        The Shape object
    """
    current = _current_canvas()
    s = Shape(
        x, y, width, height,
        label=label,
        kind=kind,
        config=current.config if current is not None else None,
        **kwargs,
    )

    if current is not None:
        current.add_shape(s)

    return s


def connect(origin: Shape, destination: Shape, **kwargs: Any) -> Connection:
    """Connect two shapes.

    Usage:
        connect(start, end)
        start >> end  # same thing

    Returns:
        The Connection object
    """
    current = _current_canvas() or origin.canvas
    if current is not None:
        return current.connect(origin, destination, **kwargs)
    return Connection(origin, destination, config=origin.config, **kwargs)
