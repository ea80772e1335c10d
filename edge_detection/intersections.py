"""
Scored intersections between horizontal and vertical line candidates
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .config import DetectionConfig
from .geometry import Point, ScoredLine, line_intersection, loop_diff, within_bounds
from .lines import rank_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Intersection:
    """
    Candidate document corner.

    h_line and v_line point at the lines the corner lies on; two
    intersections are adjacent corners of a quadrilateral exactly when
    they share one of these lines (compared by identity).
    """

    pt: Point
    score: float
    h_line: ScoredLine
    v_line: ScoredLine


def angle_score(h_line: ScoredLine, v_line: ScoredLine) -> float:
    """1 for perpendicular lines, falling linearly to 0 for parallel ones."""
    angle = loop_diff(v_line.theta, h_line.theta)
    return max(1 - 2 * loop_diff(angle, np.pi / 2) / np.pi, 0.0)


def build_intersections(
    h_lines: Sequence[ScoredLine],
    v_lines: Sequence[ScoredLine],
    width: float,
    height: float,
    config: DetectionConfig
) -> List[Intersection]:
    """
    Intersect every horizontal line with every vertical line.

    Parallel pairs and points outside [0, width) x [0, height) are skipped.

    Args:
        h_lines: Scored horizontal lines
        v_lines: Scored vertical lines
        width: Detection raster width
        height: Detection raster height
        config: Detection config (weights, parallel_eps)

    Returns:
        Intersections in (h_line, v_line) enumeration order
    """
    intersections = []
    skipped = 0

    for h_line in h_lines:
        for v_line in v_lines:
            pt = line_intersection(h_line, v_line, config.parallel_eps)
            if pt is None or not within_bounds(pt, width, height):
                skipped += 1
                continue

            score = h_line.score + v_line.score
            score += config.angle_weight * angle_score(h_line, v_line)
            score += config.rank_weight * rank_score(h_line, v_line, len(h_lines), len(v_lines))

            intersections.append(Intersection(pt=pt, score=score, h_line=h_line, v_line=v_line))

    logger.debug("Built %d intersections (%d pairs skipped)", len(intersections), skipped)
    return intersections
