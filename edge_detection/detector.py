"""
Document edge detector for images using OpenCV

Finds the four corners of a document so a crop tool can pre-place its
corner handles. The image is reduced to a small detection raster, Hough
lines are extracted from its edge map and the corner selection runs on
those lines only.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .config import DEFAULT_CONFIG, DetectionConfig
from .corners import CornerStrategy, ScoredCorners, select_corners
from .errors import EdgeDetectionError, InsufficientLinesError
from .geometry import CoordinateMapper, Corners, Line, ScoredLine, area_to_bounds
from .intersections import Intersection, build_intersections
from .lines import classify_lines, dedupe_lines, lines_from_hough, score_lines

logger = logging.getLogger(__name__)


@dataclass
class DetectionResult:
    """
    Everything one detection run produced.

    Only `corners` is part of the detector contract; the intermediate
    lines and intersections are exposed for debugging and visualization.
    Lines, intersections and `scored` are in raster space, `corners` is in
    source image space.
    """

    source_size: Tuple[int, int]
    raster_size: Tuple[int, int]
    raw_lines: List[Line] = field(default_factory=list)
    lines: List[Line] = field(default_factory=list)
    h_lines: List[ScoredLine] = field(default_factory=list)
    v_lines: List[ScoredLine] = field(default_factory=list)
    intersections: List[Intersection] = field(default_factory=list)
    scored: Optional[ScoredCorners] = None
    corners: Optional[Corners] = None
    failure: Optional[str] = None

    @property
    def strategy(self) -> Optional[CornerStrategy]:
        return self.scored.strategy if self.scored is not None else None

    @property
    def mapper(self) -> CoordinateMapper:
        return CoordinateMapper(self.source_size, self.raster_size)


def find_corners(
    lines: Sequence[Line],
    raster_size: Tuple[int, int],
    config: DetectionConfig = DEFAULT_CONFIG,
    source_size: Optional[Tuple[int, int]] = None
) -> DetectionResult:
    """
    Select document corners from detected lines.

    Args:
        lines: Hough lines in raster space, strongest first
        raster_size: Detection raster (width, height)
        config: Detection config
        source_size: Source image (width, height); defaults to raster_size

    Returns:
        DetectionResult; corners is None and failure names the reason
        when no plausible quadrilateral was found
    """
    width, height = raster_size
    result = DetectionResult(source_size=source_size or raster_size, raster_size=raster_size)
    result.raw_lines = list(lines)

    result.lines = dedupe_lines(lines, math.hypot(width, height), config)
    h_lines, v_lines = classify_lines(result.lines, config)
    result.h_lines = score_lines(h_lines, result.lines, config)
    result.v_lines = score_lines(v_lines, result.lines, config)

    # A relaxed fallback can finish a document from one line per direction
    min_lines = 2 if config.min_fallback_intersections >= 4 else 1

    try:
        if len(result.h_lines) < min_lines or len(result.v_lines) < min_lines:
            raise InsufficientLinesError(
                f"{len(result.h_lines)} horizontal and {len(result.v_lines)} vertical lines"
            )
        result.intersections = build_intersections(result.h_lines, result.v_lines, width, height, config)
        result.scored = select_corners(result.intersections, width, height, config)
    except EdgeDetectionError as e:
        logger.debug("No document found: %s: %s", type(e).__name__, e)
        result.failure = type(e).__name__
        return result

    result.corners = result.mapper.corners_to_source(result.scored.corners)
    logger.debug(
        "Document found with %s, score %.3f, area ratio %.3f",
        result.scored.strategy.value, result.scored.score, result.scored.area_ratio
    )
    return result


class EdgeDetector:
    """
    Class for document edge detection in images.

    Runs grayscale conversion, resizing, adaptive thresholding, Canny and
    the Hough transform, then selects corners from the detected lines.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        """
        Initialize the detector.

        Args:
            config: Detection config; DEFAULT_CONFIG when omitted

        Raises:
            ValueError: If the config is out of range
        """
        self.config = (config or DEFAULT_CONFIG).validate()

    def raster_size(self, width: int, height: int) -> Tuple[int, int]:
        """Detection raster dimensions for a source image, same aspect ratio."""
        raster_w, raster_h = area_to_bounds(self.config.target_area, width / height)
        return max(1, int(round(raster_w))), max(1, int(round(raster_h)))

    def _to_grayscale(self, image: np.ndarray) -> np.ndarray:
        if image.ndim == 2:
            gray = image
        elif image.shape[2] == 4:
            gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        elif image.shape[2] == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image[:, :, 0]

        if gray.dtype != np.uint8:
            gray = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
        return gray

    def prepare_edges(self, image: np.ndarray) -> np.ndarray:
        """
        Build the binary edge map lines are detected on.

        Args:
            image: Input image (grayscale, BGR or BGRA)

        Returns:
            Edge map at detection raster size
        """
        cfg = self.config
        gray = self._to_grayscale(image)

        src_h, src_w = gray.shape[:2]
        raster_w, raster_h = self.raster_size(src_w, src_h)
        interpolation = cv2.INTER_AREA if raster_w * raster_h < src_w * src_h else cv2.INTER_LINEAR
        resized = cv2.resize(gray, (raster_w, raster_h), interpolation=interpolation)

        binary = cv2.adaptiveThreshold(
            resized,
            255,
            cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY,
            cfg.adaptive_block_size,
            cfg.adaptive_c
        )
        binary = cv2.erode(binary, np.ones((cfg.erode_kernel, cfg.erode_kernel), np.uint8))

        return cv2.Canny(binary, cfg.canny_low, cfg.canny_high, apertureSize=3, L2gradient=True)

    def detect_lines(self, edges: np.ndarray) -> List[Line]:
        """Hough lines of an edge map, strongest first."""
        cfg = self.config
        hough = cv2.HoughLines(
            edges,
            cfg.hough_rho,
            cfg.hough_theta,
            cfg.hough_threshold,
            srn=0,
            stn=0,
            min_theta=0,
            max_theta=np.pi
        )
        return lines_from_hough(hough)

    def detect_with_debug(self, image: np.ndarray) -> Optional[DetectionResult]:
        """
        Detect the document and keep all intermediate results.

        Args:
            image: Input image (BGR format)

        Returns:
            DetectionResult, or None for a missing or empty image
        """
        if image is None or image.size == 0:
            return None

        src_h, src_w = image.shape[:2]
        edges = self.prepare_edges(image)
        raster_h, raster_w = edges.shape[:2]
        lines = self.detect_lines(edges)
        logger.debug("Detected %d Hough lines on %dx%d raster", len(lines), raster_w, raster_h)

        return find_corners(lines, (raster_w, raster_h), self.config, source_size=(src_w, src_h))

    def detect(self, image: np.ndarray) -> Optional[Corners]:
        """
        Detect document corners in the image.

        Args:
            image: Input image (BGR format)

        Returns:
            Corners in source image coordinates, ordered top-left,
            top-right, bottom-right, bottom-left, or None if no document
            was found. Callers should fall back to Corners.boundary().
        """
        try:
            result = self.detect_with_debug(image)
        except cv2.error as e:
            logger.debug("OpenCV failed during detection: %s", e)
            return None

        return result.corners if result is not None else None


def detect_corners(image: np.ndarray, config: Optional[DetectionConfig] = None) -> Optional[Corners]:
    """Detect document corners with a one-off EdgeDetector."""
    return EdgeDetector(config).detect(image)
