"""
Detection failures

None of these are fatal for callers: EdgeDetector.detect turns them into
a None result and the caller uses the full image rectangle instead.
"""


class EdgeDetectionError(Exception):
    """Base class for detection failures."""


class InsufficientLinesError(EdgeDetectionError):
    """Too few usable lines or intersections to build a quadrilateral."""


class NoPlausibleQuadrilateralError(EdgeDetectionError):
    """Every candidate quadrilateral is smaller than the minimum area."""
