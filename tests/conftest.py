"""Pytest configuration and shared fixtures for orthoplot tests."""

import pytest

from orthoplot import Canvas, Shape


@pytest.fixture
def canvas():
    """Empty canvas."""
    return Canvas()


@pytest.fixture
def side_by_side(canvas):
    """Two 80x80 shapes on the same row, 200 apart."""
    a = canvas.add_shape(Shape(0, 0, 80, 80, id="a"))
    b = canvas.add_shape(Shape(200, 0, 80, 80, id="b"))
    return canvas, a, b


@pytest.fixture
def stacked(canvas):
    """Two 80x80 shapes on the same column, 200 apart."""
    a = canvas.add_shape(Shape(0, 0, 80, 80, id="a"))
    b = canvas.add_shape(Shape(0, 200, 80, 80, id="b"))
    return canvas, a, b


@pytest.fixture
def hub(canvas):
    """A center shape surrounded by one shape on each side."""
    shapes = {
        "hub": Shape(0, 0, 80, 80, id="hub"),
        "right": Shape(200, 0, 80, 80, id="right"),
        "below": Shape(0, 200, 80, 80, id="below"),
        "left": Shape(-200, 0, 80, 80, id="left"),
        "above": Shape(0, -200, 80, 80, id="above"),
    }
    for shape in shapes.values():
        canvas.add_shape(shape)
    return canvas, shapes
