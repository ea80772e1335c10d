"""
Configuration for document edge detection
"""

import dataclasses
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class DetectionConfig:
    """
    All tunable constants of the edge detector in one value.

    Thresholds are expressed relative to the detection raster (rho threshold
    as a fraction of the raster diagonal, areas as a fraction of the raster
    area) so the same config works for any input resolution.

    Args:
        target_area: Pixel area the source image is resized to before line detection
        rho_threshold: Max rho difference (fraction of raster diagonal) for duplicate lines
        theta_threshold: Max angle difference (radians) for duplicate lines
        max_tilt: Max deviation (radians) from horizontal/vertical for edge candidates
        max_lines: Number of unique lines kept after deduplication
        min_area_ratio: Minimum quadrilateral area as a fraction of the raster area
        parallel_weight: Weight of the per-line parallelism score
        rank_weight: Weight of the per-intersection detector rank score
        angle_weight: Weight of the per-intersection orthogonality score
        area_weight: Weight of the area ratio in quadrilateral scores
        max_quadrilaterals: Upper bound on enumerated quadrilaterals
        min_fallback_intersections: Intersections required by the nearest-corner fallback
        parallel_eps: Determinant below which two lines count as parallel
        adaptive_block_size: Block size of the adaptive threshold (odd)
        adaptive_c: Constant subtracted by the adaptive threshold
        erode_kernel: Side of the square erosion kernel
        canny_low: Lower Canny hysteresis threshold
        canny_high: Upper Canny hysteresis threshold
        hough_rho: Hough accumulator distance resolution in pixels
        hough_theta: Hough accumulator angle resolution in radians
        hough_threshold: Minimum Hough votes for a line
    """

    target_area: int = 100_000
    rho_threshold: float = 0.05
    theta_threshold: float = 4 * np.pi / 180
    max_tilt: float = 35 * np.pi / 180
    max_lines: int = 8
    min_area_ratio: float = 0.2

    parallel_weight: float = 1.0
    rank_weight: float = 0.5
    angle_weight: float = 1.0
    area_weight: float = 1.0

    max_quadrilaterals: int = 10_000
    min_fallback_intersections: int = 4
    parallel_eps: float = 1e-8

    adaptive_block_size: int = 15
    adaptive_c: float = 0
    erode_kernel: int = 5
    canny_low: float = 0
    canny_high: float = 160
    hough_rho: float = 1
    hough_theta: float = np.pi / 360
    hough_threshold: int = 50

    def validate(self) -> 'DetectionConfig':
        """
        Check that all values are in range.

        Returns:
            The config itself, so calls can be chained

        Raises:
            ValueError: If any value is out of range
        """
        if self.target_area <= 0:
            raise ValueError(f"target_area must be positive, got {self.target_area}")
        if self.rho_threshold < 0 or self.theta_threshold < 0:
            raise ValueError("Duplicate thresholds must not be negative")
        if not 0 < self.max_tilt <= np.pi / 4:
            # Above pi/4 a line could be both horizontal and vertical
            raise ValueError(f"max_tilt must be in (0, pi/4], got {self.max_tilt}")
        if self.max_lines < 1:
            raise ValueError(f"max_lines must be at least 1, got {self.max_lines}")
        if not 0 <= self.min_area_ratio <= 1:
            raise ValueError(f"min_area_ratio must be in [0, 1], got {self.min_area_ratio}")
        for name in ('parallel_weight', 'rank_weight', 'angle_weight', 'area_weight'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.max_quadrilaterals < 1:
            raise ValueError(f"max_quadrilaterals must be at least 1, got {self.max_quadrilaterals}")
        if not 1 <= self.min_fallback_intersections <= 4:
            raise ValueError(
                f"min_fallback_intersections must be in [1, 4], got {self.min_fallback_intersections}"
            )
        if self.adaptive_block_size < 3 or self.adaptive_block_size % 2 == 0:
            raise ValueError(f"adaptive_block_size must be odd and >= 3, got {self.adaptive_block_size}")
        if self.erode_kernel < 1:
            raise ValueError(f"erode_kernel must be at least 1, got {self.erode_kernel}")
        if self.hough_rho <= 0 or self.hough_theta <= 0 or self.hough_threshold < 1:
            raise ValueError("Hough resolution and threshold must be positive")
        return self

    def replace(self, **changes) -> 'DetectionConfig':
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes).validate()


DEFAULT_CONFIG = DetectionConfig()
