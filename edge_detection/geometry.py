"""
Geometry primitives for polar lines and quadrilaterals
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

Point = Tuple[float, float]


@dataclass(frozen=True)
class Line:
    """Infinite line x*cos(theta) + y*sin(theta) = rho, as emitted by cv2.HoughLines."""

    rho: float
    theta: float


@dataclass(frozen=True)
class ScoredLine(Line):
    """Line with an additive quality score and its rank inside its orientation set."""

    score: float = 0.0
    rank: int = 0


def loop_diff(a: float, b: float, lo: float = 0.0, hi: float = np.pi) -> float:
    """
    Distance between two values on a circular domain [lo, hi).

    With the default domain this is the angular difference between two
    line directions, which repeat every pi.
    """
    period = hi - lo
    difference = abs(a - b) % period
    return min(difference, period - difference)


def line_intersection(line1: Line, line2: Line, eps: float = 1e-8) -> Optional[Point]:
    """
    Intersection point of two polar lines.

    Args:
        line1: First line
        line2: Second line
        eps: Determinant magnitude below which lines are treated as parallel

    Returns:
        (x, y) or None for parallel or coincident lines
    """
    a1, b1 = math.cos(line1.theta), math.sin(line1.theta)
    a2, b2 = math.cos(line2.theta), math.sin(line2.theta)

    det = a1 * b2 - a2 * b1
    if abs(det) < eps:
        return None

    x = (b2 * line1.rho - b1 * line2.rho) / det
    y = (a1 * line2.rho - a2 * line1.rho) / det
    return (x, y)


def closest_point(line: Line, pt: Point) -> Point:
    """Orthogonal projection of a point onto a line."""
    dx = -math.sin(line.theta)
    dy = math.cos(line.theta)
    ax = line.rho * dy
    ay = -line.rho * dx
    coeff = dx * (pt[0] - ax) + dy * (pt[1] - ay)
    return (ax + dx * coeff, ay + dy * coeff)


def line_through(pt0: Point, pt1: Point) -> Line:
    """Polar line through two distinct points."""
    delta_x = pt1[0] - pt0[0]
    delta_y = pt1[1] - pt0[1]
    rho = -(delta_y * pt0[0] - delta_x * pt0[1]) / math.hypot(delta_x, delta_y)
    theta = math.atan2(delta_y, delta_x) + math.pi / 2
    return Line(rho, theta)


def shortest_distance(line: Line, pt: Point) -> float:
    return abs(pt[0] * math.cos(line.theta) + pt[1] * math.sin(line.theta) - line.rho)


def pt_distance(pt0: Point, pt1: Point) -> float:
    return math.hypot(pt0[0] - pt1[0], pt0[1] - pt1[1])


def within_bounds(pt: Point, width: float, height: float) -> bool:
    return 0 <= pt[0] < width and 0 <= pt[1] < height


def polygon_area(points: Iterable[Point]) -> float:
    """Absolute polygon area using the shoelace formula."""
    pts = list(points)
    area = 0.0
    for i, (x0, y0) in enumerate(pts):
        x1, y1 = pts[(i + 1) % len(pts)]
        area += x0 * y1 - x1 * y0
    return abs(area) / 2


def area_to_bounds(area: float, aspect_ratio: float) -> Tuple[float, float]:
    """
    Dimensions with the given pixel area and width/height ratio.

    Args:
        area: Target area in pixels
        aspect_ratio: Width divided by height

    Returns:
        Tuple (width, height), not rounded
    """
    width = math.sqrt(area * aspect_ratio)
    return width, area / width


@dataclass(frozen=True)
class Corners:
    """Quadrilateral corners in clockwise order: top-left, top-right, bottom-right, bottom-left."""

    tl: Point
    tr: Point
    br: Point
    bl: Point

    KEYS = ('tl', 'tr', 'br', 'bl')

    @classmethod
    def boundary(cls, width: float, height: float) -> 'Corners':
        """Corners of the full image rectangle."""
        return cls((0.0, 0.0), (float(width), 0.0), (float(width), float(height)), (0.0, float(height)))

    def points(self) -> List[Point]:
        return [self.tl, self.tr, self.br, self.bl]

    def as_dict(self) -> Dict[str, Point]:
        return dict(zip(self.KEYS, self.points()))

    def as_array(self) -> np.ndarray:
        """4x2 float32 array, the layout cv2 expects."""
        return np.array(self.points(), dtype=np.float32)

    def area(self) -> float:
        return polygon_area(self.points())

    def scaled(self, sx: float, sy: float) -> 'Corners':
        return Corners(*((x * sx, y * sy) for x, y in self.points()))

    def rotated(self, direction: str) -> 'Corners':
        """
        Relabel the corners so the rectified document turns by 90 degrees.

        The points stay where they are in the source image; only their
        roles change, so rectify() produces the rotated crop.

        Args:
            direction: 'left' (counter-clockwise) or 'right' (clockwise)

        Returns:
            Relabeled corners

        Raises:
            ValueError: If direction is neither 'left' nor 'right'
        """
        if direction == 'left':
            return Corners(self.tr, self.br, self.bl, self.tl)
        if direction == 'right':
            return Corners(self.bl, self.tl, self.tr, self.br)
        raise ValueError(f"direction must be 'left' or 'right', got {direction!r}")

    def center(self) -> Point:
        pts = self.points()
        return (sum(p[0] for p in pts) / 4, sum(p[1] for p in pts) / 4)

    def edge_centers(self) -> Dict[str, Point]:
        """Midpoints of the top, right, bottom and left edges."""
        pts = self.points()
        centers = {}
        for key, p0, p1 in zip(('t', 'r', 'b', 'l'), pts, pts[1:] + pts[:1]):
            centers[key] = ((p0[0] + p1[0]) / 2, (p0[1] + p1[1]) / 2)
        return centers


class CoordinateMapper:
    """
    Converts points between source image space and detection raster space.

    Each axis has its own factor, so rounding of the raster dimensions
    does not skew the result.
    """

    def __init__(self, source_size: Tuple[int, int], raster_size: Tuple[int, int]):
        """
        Args:
            source_size: Source image (width, height)
            raster_size: Detection raster (width, height)
        """
        self.source_size = source_size
        self.raster_size = raster_size
        self.scale_x = source_size[0] / raster_size[0]
        self.scale_y = source_size[1] / raster_size[1]

    def to_source(self, pt: Point) -> Point:
        return (pt[0] * self.scale_x, pt[1] * self.scale_y)

    def to_raster(self, pt: Point) -> Point:
        return (pt[0] / self.scale_x, pt[1] / self.scale_y)

    def corners_to_source(self, corners: Corners) -> Corners:
        return corners.scaled(self.scale_x, self.scale_y)

    def line_to_source(self, line: Line) -> Line:
        """
        Re-express a raster line in source coordinates.

        Non-uniform scaling changes the line angle, so the line is rebuilt
        from two of its points instead of scaling rho.
        """
        pt0 = closest_point(line, (0.0, 0.0))
        direction = (-math.sin(line.theta), math.cos(line.theta))
        pt1 = (pt0[0] + direction[0], pt0[1] + direction[1])
        src0, src1 = self.to_source(pt0), self.to_source(pt1)
        result = line_through(src0, src1)
        theta = result.theta % (2 * math.pi)
        rho = result.rho
        if theta >= math.pi:
            theta -= math.pi
            rho = -rho
        return Line(rho, theta)
