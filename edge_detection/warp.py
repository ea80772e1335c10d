"""
Perspective rectification of a detected (or user-adjusted) document
"""

from typing import Tuple

import cv2
import numpy as np

from .geometry import Corners, pt_distance


def output_size(corners: Corners) -> Tuple[int, int]:
    """
    Size of the rectified document.

    Width is the mean of the top and bottom edge lengths, height the mean
    of the left and right edge lengths.

    Returns:
        Tuple (width, height), at least 1 px each
    """
    width = (pt_distance(corners.tl, corners.tr) + pt_distance(corners.bl, corners.br)) / 2
    height = (pt_distance(corners.tl, corners.bl) + pt_distance(corners.tr, corners.br)) / 2
    return max(1, int(round(width))), max(1, int(round(height)))


def rectify(image: np.ndarray, corners: Corners) -> np.ndarray:
    """
    Warp the quadrilateral to an upright rectangle.

    Args:
        image: Source image
        corners: Document corners in source image coordinates

    Returns:
        Rectified image of output_size(corners)
    """
    width, height = output_size(corners)

    dst = np.array([
        [0, 0],
        [width, 0],
        [width, height],
        [0, height]
    ], dtype=np.float32)

    M = cv2.getPerspectiveTransform(corners.as_array(), dst)
    return cv2.warpPerspective(
        image,
        M,
        (width, height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0
    )
