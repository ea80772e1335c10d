"""
Shared fixtures for edge_detection tests
"""

import numpy as np
import pytest

from edge_detection.config import DetectionConfig


@pytest.fixture
def config():
    """Default detection config"""
    return DetectionConfig()


@pytest.fixture
def rectangle_image():
    """Dark 400x300 image with a bright document from (60, 50) to (340, 250)"""
    image = np.full((300, 400, 3), 40, dtype=np.uint8)
    image[50:250, 60:340] = 220
    return image
