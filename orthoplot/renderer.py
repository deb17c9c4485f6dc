"""SVG renderer using drawsvg."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import drawsvg as draw

from .models import ShapeKind

if TYPE_CHECKING:
    from .canvas import Canvas
    from .drawing import ConnectionDrawing
    from .models import Connection, Shape

logger = logging.getLogger(__name__)

# Arrowhead pointing down (+y) with its tip on the origin
ARROW_PATH = "M 0 0 L -13 -26 L 13 -26 z"


class Theme:
    """Color theme for canvases."""

    def __init__(
        self,
        background: str = "#ffffff",
        shape_fill: str = "#f8fafc",
        shape_stroke: str = "#64748b",
        text_color: str = "#1e293b",
        connection_color: str = "#000000",
        stroke_width: float = 1.5,
        font_size: float = 12,
        font_family: str = "Inter, Helvetica, Arial, sans-serif",
    ):
        self.background = background
        self.shape_fill = shape_fill
        self.shape_stroke = shape_stroke
        self.text_color = text_color
        self.connection_color = connection_color
        self.stroke_width = stroke_width
        self.font_size = font_size
        self.font_family = font_family


DEFAULT_THEME = Theme()


class CanvasRenderer:
    """Renders canvases to SVG."""

    def __init__(self, theme: Theme | None = None, padding: float = 40):
        self.theme = theme or DEFAULT_THEME
        self.padding = padding

    def _extent(self, canvas: Canvas) -> tuple[float, float, float, float]:
        """Area covering all shapes and connections, with padding."""
        if not canvas.shapes:
            return 0, 0, canvas.width, canvas.height

        min_x = min_y = float("inf")
        max_x = max_y = float("-inf")

        for shape in canvas.shapes:
            bounds = shape.bounds
            min_x = min(min_x, bounds.left)
            min_y = min(min_y, bounds.top)
            max_x = max(max_x, bounds.right)
            max_y = max(max_y, bounds.bottom)

        for connection in canvas.connections:
            if connection.routed:
                low, high = connection.bbox_extreme_points
                min_x, min_y = min(min_x, low.x), min(min_y, low.y)
                max_x, max_y = max(max_x, high.x), max(max_y, high.y)

        return (
            min_x - self.padding,
            min_y - self.padding,
            max_x + self.padding,
            max_y + self.padding,
        )

    def render(self, canvas: Canvas) -> draw.Drawing:
        """Render a canvas to an SVG Drawing object."""
        min_x, min_y, max_x, max_y = self._extent(canvas)
        width = max_x - min_x
        height = max_y - min_y

        d = draw.Drawing(width, height, origin=(min_x, min_y))
        d.append(
            draw.Rectangle(
                min_x, min_y, width, height,
                fill=self.theme.background,
            )
        )

        for shape in canvas.shapes:
            self._render_shape(d, shape)

        # Connections on top so arrowheads stay visible
        for connection in canvas.connections:
            self._render_connection(d, connection)

        return d

    def _render_shape(self, d: draw.Drawing, shape: Shape) -> None:
        bounds = shape.bounds
        style = {
            "fill": self.theme.shape_fill,
            "stroke": self.theme.shape_stroke,
            "stroke_width": self.theme.stroke_width,
        }

        if shape.kind is ShapeKind.TRIANGLE:
            d.append(
                draw.Lines(
                    bounds.left, bounds.bottom,
                    shape.x, bounds.top,
                    bounds.right, bounds.bottom,
                    close=True,
                    class_="shape",
                    **style,
                )
            )
        else:
            d.append(
                draw.Rectangle(
                    bounds.left, bounds.top, shape.width, shape.height,
                    class_="shape",
                    **style,
                )
            )

        if shape.label:
            d.append(
                draw.Text(
                    shape.label,
                    self.theme.font_size,
                    shape.x, shape.y,
                    fill=self.theme.text_color,
                    font_family=self.theme.font_family,
                    text_anchor="middle",
                    dominant_baseline="middle",
                )
            )

    def _render_connection(self, d: draw.Drawing, connection: Connection) -> None:
        drawing = connection.draw()
        if not drawing.visible:
            logger.debug("Skipping unrouted connection %s", connection.id)
            return

        group = draw.Group(class_="connection")
        group.append(self._connection_path(drawing))

        arrow = drawing.arrow
        rotation = draw.Group(transform=arrow.rotate(connection.config.arrow_scale))
        rotation.append(draw.Path(ARROW_PATH, fill=self.theme.connection_color))
        placement = draw.Group(transform=arrow.translate())
        placement.append(rotation)
        group.append(placement)

        d.append(group)

    def _connection_path(self, drawing: ConnectionDrawing) -> draw.Path:
        path = draw.Path(
            stroke=self.theme.connection_color,
            stroke_width=self.theme.stroke_width,
            fill="none",
        )

        for command in drawing.commands:
            if command.command == "M":
                path.M(*command.points[0])
            elif command.command == "L":
                path.L(*command.points[0])
            else:
                control_start, control_end, end = command.points
                path.C(*control_start, *control_end, *end)

        return path


def render_to_svg(
    canvas: Canvas,
    filename: str | None = None,
    theme: Theme | None = None,
) -> str:
    """Render a canvas to SVG.

    Args:
        canvas: The canvas to render
        filename: Optional filename to save to (without extension)
        theme: Optional color theme

    Returns:
        SVG content as string
    """
    renderer = CanvasRenderer(theme)
    drawing = renderer.render(canvas)

    if filename:
        drawing.save_svg(f"{filename}.svg")

    return drawing.as_svg()
