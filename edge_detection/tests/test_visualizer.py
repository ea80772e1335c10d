"""
Tests for EdgeVisualizer and perspective rectification
"""

import numpy as np
import pytest

from edge_detection import Corners, EdgeDetector, EdgeVisualizer, Line, rectify
from edge_detection.detector import find_corners
from edge_detection.warp import output_size


class TestEdgeVisualizer:
    """Tests for EdgeVisualizer"""

    @pytest.fixture
    def visualizer(self):
        """Create visualizer instance for tests"""
        return EdgeVisualizer()

    @pytest.fixture
    def corners(self):
        return Corners((60, 50), (340, 50), (340, 250), (60, 250))

    def test_visualizer_init(self, visualizer):
        """Test visualizer initialization"""
        assert visualizer.border_color == (255, 100, 0)
        assert visualizer.border_thickness == 3
        assert visualizer.overlay_alpha == 0.3

    def test_visualize_none_image(self, visualizer, corners):
        """Test visualization with None image"""
        assert visualizer.visualize(None, corners) is None

    def test_visualize_no_corners(self, visualizer, rectangle_image):
        """Without corners the image is returned unchanged"""
        result = visualizer.visualize(rectangle_image, None)
        assert np.array_equal(result, rectangle_image)
        assert result is not rectangle_image

    def test_visualize_with_corners(self, visualizer, rectangle_image, corners):
        """Test visualization with detected corners"""
        original = rectangle_image.copy()
        result = visualizer.visualize(rectangle_image, corners)

        assert result.shape == rectangle_image.shape
        assert not np.array_equal(result, rectangle_image)
        assert np.array_equal(rectangle_image, original)
        # Frame drawn along the top edge
        assert tuple(result[50, 200]) == visualizer.border_color

    def test_visualize_grayscale(self, visualizer, rectangle_image, corners):
        """Grayscale input gives a BGR visualization"""
        gray = rectangle_image[:, :, 0]
        result = visualizer.visualize(gray, corners)
        assert result.shape == (300, 400, 3)

    def test_visualize_debug(self, visualizer, rectangle_image):
        """Debug view draws lines and intersections"""
        result = find_corners(
            [Line(50, np.pi / 2), Line(60, 0.0), Line(250, np.pi / 2), Line(340, 0.0)],
            (400, 300)
        )
        output = visualizer.visualize_debug(rectangle_image, result)

        assert output.shape == rectangle_image.shape
        # Lines run across the whole image, outside the document too
        assert not np.array_equal(output[50, :20], rectangle_image[50, :20])

    def test_visualize_debug_failed_detection(self, visualizer):
        """Debug view works without corners"""
        image = np.zeros((300, 400, 3), dtype=np.uint8)
        result = EdgeDetector().detect_with_debug(image)
        output = visualizer.visualize_debug(image, result)
        assert np.array_equal(output, image)

    def test_draw_line_clipped(self, visualizer):
        """Lines are drawn across the image and skipped when outside it"""
        image = np.zeros((20, 100, 3), dtype=np.uint8)
        visualizer._draw_line(image, Line(10, np.pi / 2))
        assert tuple(image[10, 0]) == visualizer.line_color
        assert tuple(image[10, 99]) == visualizer.line_color

        outside = np.zeros((20, 100, 3), dtype=np.uint8)
        visualizer._draw_line(outside, Line(50, np.pi / 2))
        assert not outside.any()

    def test_debug_handles(self, visualizer, rectangle_image):
        """Debug view marks the center handle of the found document"""
        result = find_corners(
            [Line(50, np.pi / 2), Line(60, 0.0), Line(250, np.pi / 2), Line(340, 0.0)],
            (400, 300)
        )
        assert result.corners.center() == pytest.approx((200, 150))

        output = visualizer.visualize_debug(rectangle_image, result)
        assert tuple(output[145, 200]) == visualizer.border_color
        assert tuple(rectangle_image[145, 200]) != visualizer.border_color

    def test_create_side_by_side(self, visualizer, rectangle_image, corners):
        """Test side-by-side image creation"""
        visualized = visualizer.visualize(rectangle_image, corners)
        combined = visualizer.create_side_by_side(rectangle_image, visualized)

        assert combined.shape[0] == rectangle_image.shape[0]
        assert combined.shape[1] == rectangle_image.shape[1] * 2


class TestRectify:
    """Tests for perspective rectification"""

    @pytest.fixture
    def corners(self):
        return Corners((10, 20), (110, 20), (110, 70), (10, 70))

    def test_output_size(self, corners):
        """Output size is the mean of opposite edge lengths"""
        assert output_size(corners) == (100, 50)
        assert output_size(Corners((0, 0), (100, 0), (80, 60), (20, 60))) == (80, 63)

    def test_output_size_degenerate(self):
        """Collapsed corners still give a 1x1 image"""
        assert output_size(Corners((5, 5), (5, 5), (5, 5), (5, 5))) == (1, 1)

    def test_rectify(self, corners):
        """Axis-aligned corners crop the document"""
        image = np.zeros((100, 150, 3), dtype=np.uint8)
        image[20:70, 10:110] = 200

        cropped = rectify(image, corners)

        assert cropped.shape == (50, 100, 3)
        assert cropped[25, 50].tolist() == [200, 200, 200]

    def test_rotated_output_size(self, corners):
        """A quarter turn swaps width and height"""
        assert output_size(corners.rotated('left')) == (50, 100)
        assert output_size(corners.rotated('right')) == (50, 100)

    def test_rectify_rotated(self, corners):
        """Rotating left brings the right edge of the document to the top"""
        image = np.zeros((100, 150, 3), dtype=np.uint8)
        image[20:70, 10:110] = 200
        image[20:70, 100:110] = 50

        cropped = rectify(image, corners.rotated('left'))

        assert cropped.shape == (100, 50, 3)
        assert cropped[3, 25].tolist() == [50, 50, 50]
        assert cropped[50, 25].tolist() == [200, 200, 200]

    def test_rectify_grayscale(self, corners):
        """Single-channel images stay single-channel"""
        image = np.full((100, 150), 90, dtype=np.uint8)
        cropped = rectify(image, corners)
        assert cropped.shape == (50, 100)
