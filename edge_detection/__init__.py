"""
Edge Detection Module

Finds the quadrilateral outline of a document in a photo so a crop tool
can place its corner handles, and rectifies the cropped document.
"""

from .config import DEFAULT_CONFIG, DetectionConfig
from .corners import CornerStrategy, ScoredCorners
from .detector import DetectionResult, EdgeDetector, detect_corners, find_corners
from .errors import EdgeDetectionError, InsufficientLinesError, NoPlausibleQuadrilateralError
from .geometry import CoordinateMapper, Corners, Line
from .visualizer import EdgeVisualizer
from .warp import rectify

__all__ = [
    'DEFAULT_CONFIG',
    'DetectionConfig',
    'CornerStrategy',
    'ScoredCorners',
    'DetectionResult',
    'EdgeDetector',
    'detect_corners',
    'find_corners',
    'EdgeDetectionError',
    'InsufficientLinesError',
    'NoPlausibleQuadrilateralError',
    'CoordinateMapper',
    'Corners',
    'Line',
    'EdgeVisualizer',
    'rectify',
]
