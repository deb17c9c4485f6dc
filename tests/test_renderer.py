"""Tests for the SVG renderer."""

import drawsvg as draw

from orthoplot import (
    Canvas,
    CanvasRenderer,
    RoutingConfig,
    Shape,
    Theme,
    render_to_svg,
)
from orthoplot.renderer import ARROW_PATH


class TestRenderToSvg:
    """Tests for render_to_svg."""

    def test_returns_svg(self, side_by_side):
        canvas, a, b = side_by_side
        canvas.connect(a, b)

        svg = render_to_svg(canvas)

        assert "<svg" in svg
        assert 'class="shape"' in svg
        assert 'class="connection"' in svg

    def test_arrow_transform(self, side_by_side):
        canvas, a, b = side_by_side
        canvas.connect(a, b)

        svg = render_to_svg(canvas)

        assert "translate(160, 0)" in svg
        assert "scale(0.5, 0.5) rotate(270)" in svg

    def test_labels(self, canvas):
        canvas.add_shape(Shape(0, 0, label="Start"))
        canvas.add_shape(Shape(200, 0, label="Done", kind="triangle"))

        svg = render_to_svg(canvas)

        assert "Start" in svg
        assert "Done" in svg

    def test_saves_file(self, side_by_side, tmp_path):
        canvas, a, b = side_by_side
        canvas.connect(a, b)
        filename = tmp_path / "flow"

        svg = render_to_svg(canvas, str(filename))

        saved = (tmp_path / "flow.svg").read_text()
        assert "<svg" in saved
        assert "translate(160, 0)" in saved
        assert "translate(160, 0)" in svg

    def test_empty_canvas(self):
        svg = render_to_svg(Canvas(300, 200))
        assert "<svg" in svg
        assert 'class="connection"' not in svg

    def test_unrouted_connection_skipped(self, canvas):
        config = RoutingConfig(port_capacity=1, max_ports_per_mode=1)
        canvas.config = config
        a = canvas.add_shape(Shape(0, 0, config=config))
        b = canvas.add_shape(Shape(200, 0, config=config))
        c = canvas.add_shape(Shape(400, 0, config=config))
        canvas.connect(a, b)
        unrouted = canvas.connect(a, c)

        svg = render_to_svg(canvas)

        assert not unrouted.routed
        assert svg.count('class="connection"') == 1


class TestCanvasRenderer:
    """Tests for CanvasRenderer."""

    def test_render_returns_drawing(self, side_by_side):
        canvas, _, _ = side_by_side
        drawing = CanvasRenderer().render(canvas)
        assert isinstance(drawing, draw.Drawing)

    def test_extent_covers_shapes(self, side_by_side):
        canvas, _, _ = side_by_side
        renderer = CanvasRenderer(padding=10)
        assert renderer._extent(canvas) == (-50, -50, 250, 50)

    def test_theme_colors(self, side_by_side):
        canvas, a, b = side_by_side
        canvas.connect(a, b)
        theme = Theme(connection_color="#ff0000", shape_fill="#00ff00")

        svg = render_to_svg(canvas, theme=theme)

        assert "#ff0000" in svg
        assert "#00ff00" in svg

    def test_arrow_path(self, side_by_side):
        canvas, a, b = side_by_side
        canvas.connect(a, b)
        svg = render_to_svg(canvas)
        assert ARROW_PATH in svg
