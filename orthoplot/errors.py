"""Exceptions raised by orthoplot."""


class OrthoplotError(Exception):
    """Base class for all orthoplot errors."""


class InvalidParameterError(OrthoplotError, ValueError):
    """An operation was called with an argument it cannot accept."""


class SelfLoopError(InvalidParameterError):
    """A connection was given the same shape as origin and destination."""


class DiagonalSegmentError(OrthoplotError, RuntimeError):
    """Two consecutive waypoints do not share a horizontal or vertical line."""

    def __init__(self, start, end):
        super().__init__(f"Diagonal segment from {tuple(start)} to {tuple(end)}")
        self.start = start
        self.end = end
