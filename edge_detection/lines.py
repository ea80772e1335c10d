"""
Line filtering and scoring

Turns the raw, confidence-ordered Hough output into a short list of
unique lines split by orientation, each carrying a quality score.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

from .config import DetectionConfig
from .geometry import Line, ScoredLine, loop_diff

logger = logging.getLogger(__name__)


def lines_from_hough(hough_output) -> List[Line]:
    """
    Convert cv2.HoughLines output to Line objects, keeping detector order.

    Args:
        hough_output: Array of shape (N, 1, 2) or None

    Returns:
        List of lines, strongest first
    """
    if hough_output is None or len(hough_output) == 0:
        return []
    return [Line(float(rho), float(theta)) for rho, theta in np.asarray(hough_output).reshape(-1, 2)]


def is_duplicate(line: Line, other: Line, diag: float, config: DetectionConfig) -> bool:
    return (
        abs(line.rho - other.rho) < config.rho_threshold * diag
        and loop_diff(line.theta, other.theta) < config.theta_threshold
    )


def dedupe_lines(lines: Sequence[Line], diag: float, config: DetectionConfig) -> List[Line]:
    """
    Collapse near-duplicate lines.

    Lines are visited in detector order, so the strongest line of every
    cluster of near-duplicates is the one that survives.

    Args:
        lines: Lines ordered by detector confidence
        diag: Diagonal of the detection raster
        config: Detection config (rho_threshold, theta_threshold, max_lines)

    Returns:
        Unique lines in the original order, at most config.max_lines
    """
    unique: List[Line] = []
    for line in lines:
        if len(unique) >= config.max_lines:
            break
        if not any(is_duplicate(line, kept, diag, config) for kept in unique):
            unique.append(line)

    logger.debug("Deduplicated %d lines to %d", len(lines), len(unique))
    return unique


def classify_lines(lines: Sequence[Line], config: DetectionConfig) -> Tuple[List[Line], List[Line]]:
    """
    Split lines into horizontal-like and vertical-like sets.

    A horizontal line has its normal close to pi/2, a vertical one close
    to 0. Lines tilted more than config.max_tilt belong to neither set.

    Returns:
        Tuple (h_lines, v_lines), each in input order
    """
    h_lines = [l for l in lines if loop_diff(l.theta, np.pi / 2) < config.max_tilt]
    v_lines = [l for l in lines if loop_diff(l.theta, 0.0) < config.max_tilt]
    return h_lines, v_lines


def parallelism_score(line: Line, pool: Sequence[Line]) -> float:
    """
    How close the nearest-angled other line in the pool is to parallel.

    Real document edges usually have an opposite edge with nearly the
    same angle. Returns 0 when the pool holds no other line.
    """
    best = 0.0
    for other in pool:
        if other is line:
            continue
        best = max(best, (1 - loop_diff(line.theta, other.theta) / np.pi) ** 2)
    return best


def score_lines(lines: Sequence[Line], pool: Sequence[Line], config: DetectionConfig) -> List[ScoredLine]:
    """
    Attach scores and ranks to one orientation set.

    Args:
        lines: Orientation set in confidence order
        pool: Lines the parallelism score is measured against
        config: Detection config (parallel_weight)

    Returns:
        ScoredLine per input line, rank = position in the set
    """
    return [
        ScoredLine(
            line.rho,
            line.theta,
            score=config.parallel_weight * parallelism_score(line, pool),
            rank=rank,
        )
        for rank, line in enumerate(lines)
    ]


def rank_score(h_line: ScoredLine, v_line: ScoredLine, h_count: int, v_count: int) -> float:
    """Reward for intersections built from lines the detector ranked high."""
    return 1 - (h_line.rank / h_count + v_line.rank / v_count) / 2
