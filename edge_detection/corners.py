"""
Corner selection strategies

Two ways to pick four corners out of the scored intersections:

- QUAD_SEARCH enumerates every quadrilateral whose adjacent corners share
  a detected line and keeps the best scoring one.
- OUTMOST greedily takes the intersection nearest to each image corner.
  It is used when there are too few intersections for the search, or
  when the search finds nothing plausible.
"""

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

from .config import DetectionConfig
from .errors import InsufficientLinesError, NoPlausibleQuadrilateralError
from .geometry import Corners, pt_distance
from .intersections import Intersection

logger = logging.getLogger(__name__)


class CornerStrategy(Enum):
    QUAD_SEARCH = "quad_search"
    OUTMOST = "outmost"


@dataclass(frozen=True)
class ScoredCorners:
    corners: Corners
    score: float
    area_ratio: float
    strategy: CornerStrategy
    # Number of corners taken from intersections (the rest are image corners)
    assigned: int = 4


Quad = Tuple[Intersection, Intersection, Intersection, Intersection]


def enumerate_quadrilaterals(intersections: Sequence[Intersection]) -> Iterator[Quad]:
    """
    Yield (tl, tr, br, bl) for every quadrilateral with shared-line adjacency.

    tr lies on tl's horizontal line to the right of it, bl lies on tl's
    vertical line below it, and br is the intersection of bl's horizontal
    line with tr's vertical line. Opposite corners therefore never share
    a line and adjacent corners always do.
    """
    by_lines: Dict[Tuple[int, int], Intersection] = {
        (id(i.h_line), id(i.v_line)): i for i in intersections
    }

    for tl in intersections:
        tr_candidates = [i for i in intersections if i.h_line is tl.h_line and i.pt[0] > tl.pt[0]]
        bl_candidates = [i for i in intersections if i.v_line is tl.v_line and i.pt[1] > tl.pt[1]]

        for tr in tr_candidates:
            for bl in bl_candidates:
                br = by_lines.get((id(bl.h_line), id(tr.v_line)))
                if br is not None:
                    yield tl, tr, br, bl


def search_quadrilaterals(
    intersections: Sequence[Intersection],
    width: float,
    height: float,
    config: DetectionConfig
) -> Optional[ScoredCorners]:
    """
    Best quadrilateral by corner scores plus area plausibility.

    Candidates covering less than config.min_area_ratio of the raster are
    discarded. At most config.max_quadrilaterals candidates are examined.
    Ties keep the first candidate found.

    Args:
        intersections: Scored intersections in raster space
        width: Detection raster width
        height: Detection raster height
        config: Detection config

    Returns:
        Best ScoredCorners, or None if no candidate is large enough
    """
    image_area = width * height
    best = None
    examined = 0

    candidates = itertools.islice(enumerate_quadrilaterals(intersections), config.max_quadrilaterals)
    for quad in candidates:
        examined += 1
        corners = Corners(*(i.pt for i in quad))
        area_ratio = corners.area() / image_area
        if area_ratio < config.min_area_ratio:
            continue

        score = sum(i.score for i in quad) + config.area_weight * area_ratio
        if best is None or score > best.score:
            best = ScoredCorners(corners, score, area_ratio, CornerStrategy.QUAD_SEARCH)

    if examined >= config.max_quadrilaterals:
        logger.debug("Quadrilateral search stopped at %d candidates", examined)
    logger.debug(
        "Examined %d quadrilaterals, best score %s",
        examined, None if best is None else round(best.score, 3)
    )
    return best


def select_outmost_corners(
    intersections: Sequence[Intersection],
    width: float,
    height: float,
    config: DetectionConfig
) -> Optional[ScoredCorners]:
    """
    Assign each image corner the nearest unused intersection.

    Image corners are processed tl, tr, br, bl, so earlier corners get
    first choice. When intersections run out the remaining corners stay
    on the image boundary and do not contribute to the score.

    Returns:
        ScoredCorners, or None if the result is smaller than config.min_area_ratio
    """
    remaining = list(intersections)
    points = []
    score = 0.0

    for boundary_pt in Corners.boundary(width, height).points():
        if not remaining:
            points.append(boundary_pt)
            continue
        nearest = min(range(len(remaining)), key=lambda idx: pt_distance(remaining[idx].pt, boundary_pt))
        chosen = remaining.pop(nearest)
        points.append(chosen.pt)
        score += chosen.score

    corners = Corners(*points)
    area_ratio = corners.area() / (width * height)
    if area_ratio < config.min_area_ratio:
        logger.debug("Outmost corners rejected, area ratio %.3f", area_ratio)
        return None

    assigned = min(len(intersections), 4)
    return ScoredCorners(corners, score, area_ratio, CornerStrategy.OUTMOST, assigned)


SelectFn = Callable[[Sequence[Intersection], float, float, DetectionConfig], Optional[ScoredCorners]]

STRATEGIES: Dict[CornerStrategy, SelectFn] = {
    CornerStrategy.QUAD_SEARCH: search_quadrilaterals,
    CornerStrategy.OUTMOST: select_outmost_corners,
}


def select_corners(
    intersections: Sequence[Intersection],
    width: float,
    height: float,
    config: DetectionConfig
) -> ScoredCorners:
    """
    Pick the document corners, searching first and falling back to OUTMOST.

    Raises:
        InsufficientLinesError: Too few intersections for the fallback
        NoPlausibleQuadrilateralError: No candidate reaches the minimum area
    """
    if len(intersections) > 4:
        result = STRATEGIES[CornerStrategy.QUAD_SEARCH](intersections, width, height, config)
        if result is not None:
            return result

    if len(intersections) < config.min_fallback_intersections:
        raise InsufficientLinesError(
            f"{len(intersections)} intersections, need {config.min_fallback_intersections}"
        )

    result = STRATEGIES[CornerStrategy.OUTMOST](intersections, width, height, config)
    if result is None:
        raise NoPlausibleQuadrilateralError(
            f"No quadrilateral covers {config.min_area_ratio:.0%} of the image"
        )
    return result
