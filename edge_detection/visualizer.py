"""
Visualization of detected document edges
"""

import cv2
import numpy as np
from typing import Optional, Tuple

from .detector import DetectionResult
from .geometry import Corners, Line


class EdgeVisualizer:
    """
    Class for visualizing detected document corners.

    Draws the quadrilateral as a frame with a transparent overlay, and in
    debug mode also the detected lines and the scored intersections.
    """

    def __init__(
        self,
        border_color: Tuple[int, int, int] = (255, 100, 0),  # Blue in BGR
        border_thickness: int = 3,
        overlay_color: Tuple[int, int, int] = (255, 200, 100),  # Light blue in BGR
        overlay_alpha: float = 0.3,
        line_color: Tuple[int, int, int] = (127, 0, 255),  # Pink in BGR
        line_thickness: int = 2
    ):
        """
        Initialize the visualizer.

        Args:
            border_color: Frame color in BGR format
            border_thickness: Frame thickness in pixels
            overlay_color: Transparent overlay color in BGR format
            overlay_alpha: Overlay transparency (0.0 = transparent, 1.0 = opaque)
            line_color: Color of detected lines in debug mode
            line_thickness: Thickness of detected lines in debug mode
        """
        self.border_color = border_color
        self.border_thickness = border_thickness
        self.overlay_color = overlay_color
        self.overlay_alpha = overlay_alpha
        self.line_color = line_color
        self.line_thickness = line_thickness

    def _as_bgr(self, image: np.ndarray) -> np.ndarray:
        if image.ndim == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        if image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        return image.copy()

    def _draw_line(self, image: np.ndarray, line: Line):
        """Draw an infinite polar line across the whole image."""
        h, w = image.shape[:2]
        a, b = np.cos(line.theta), np.sin(line.theta)
        x0, y0 = a * line.rho, b * line.rho
        reach = 2 * (w + h)
        p1 = (int(round(x0 - reach * b)), int(round(y0 + reach * a)))
        p2 = (int(round(x0 + reach * b)), int(round(y0 - reach * a)))

        inside, p1, p2 = cv2.clipLine((0, 0, w, h), p1, p2)
        if inside:
            cv2.line(image, p1, p2, self.line_color, self.line_thickness)

    def _draw_handles(self, image: np.ndarray, corners: Corners):
        # Edge and center grabbers of the crop tool
        handles = list(corners.edge_centers().values()) + [corners.center()]
        for x, y in handles:
            cv2.drawMarker(
                image,
                (int(round(x)), int(round(y))),
                self.border_color,
                markerType=cv2.MARKER_SQUARE,
                markerSize=10,
                thickness=2
            )

    def visualize(
        self,
        image: np.ndarray,
        corners: Optional[Corners],
        draw_border: bool = True,
        draw_overlay: bool = True
    ) -> np.ndarray:
        """
        Visualize detected document on the image.

        Args:
            image: Input image (BGR or grayscale)
            corners: Document corners in image coordinates
            draw_border: Whether to draw blue frame
            draw_overlay: Whether to draw transparent background

        Returns:
            BGR image with visualization
        """
        if image is None:
            return None

        result = self._as_bgr(image)
        if corners is None:
            return result

        corners_int = corners.as_array().astype(np.int32)

        if draw_overlay:
            overlay = result.copy()
            cv2.fillPoly(overlay, [corners_int], self.overlay_color)
            result = cv2.addWeighted(
                overlay,
                self.overlay_alpha,
                result,
                1 - self.overlay_alpha,
                0
            )

        if draw_border:
            cv2.polylines(result, [corners_int], True, self.border_color, self.border_thickness)
            for corner in corners_int:
                cv2.circle(result, tuple(int(v) for v in corner), 5, self.border_color, -1)

        return result

    def visualize_debug(self, image: np.ndarray, result: DetectionResult) -> np.ndarray:
        """
        Draw the deduplicated lines and scored intersections of a detection run.

        Intersections are circles colored from red (lowest score) to
        green (highest score).

        Args:
            image: Source image the detection ran on
            result: Detection result from EdgeDetector.detect_with_debug

        Returns:
            BGR image with lines, intersections, the chosen corners and
            the crop handles at edge midpoints and the center
        """
        if image is None:
            return None

        output = self.visualize(image, result.corners, draw_overlay=False)
        mapper = result.mapper

        for line in result.lines:
            self._draw_line(output, mapper.line_to_source(line))

        if result.intersections:
            max_score = max(i.score for i in result.intersections) or 1.0
            radius = max(4, min(output.shape[:2]) // 60)
            for intersection in result.intersections:
                t = max(0.0, intersection.score / max_score)
                color = (127, int(255 * t), int(255 * (1 - t)))
                x, y = mapper.to_source(intersection.pt)
                cv2.circle(output, (int(x), int(y)), radius, color, 2)

        if result.corners is not None:
            self._draw_handles(output, result.corners)

        return output

    def create_side_by_side(
        self,
        original: np.ndarray,
        visualized: np.ndarray
    ) -> np.ndarray:
        """
        Create an image with original and visualized image side by side.

        Args:
            original: Original image
            visualized: Visualized image

        Returns:
            Combined image
        """
        if original is None or visualized is None:
            return original if original is not None else visualized

        original = self._as_bgr(original)

        if original.shape[0] != visualized.shape[0]:
            height = original.shape[0]
            width = int(visualized.shape[1] * height / visualized.shape[0])
            visualized = cv2.resize(visualized, (width, height))

        return np.hstack([original, visualized])
