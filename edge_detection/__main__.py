#!/usr/bin/env python3
"""
CLI interface for the edge detection module.

Usage:
    python -m edge_detection -i photo.jpg
    python -m edge_detection -i photo.jpg -o detected.jpg --warp cropped.jpg
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from .config import DetectionConfig
from .detector import EdgeDetector
from .geometry import Corners
from .visualizer import EdgeVisualizer
from .warp import rectify

CORNER_NAMES = {'tl': 'Top-left', 'tr': 'Top-right', 'br': 'Bottom-right', 'bl': 'Bottom-left'}


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Detect document corners in a photo',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  # Print detected corners
  python -m edge_detection -i photo.jpg

  # Save visualization, debug view and the rectified document
  python -m edge_detection -i photo.jpg -o detected.jpg --debug debug.jpg --warp cropped.jpg

  # Rectify a photo taken sideways
  python -m edge_detection -i photo.jpg --warp cropped.jpg --rotate left

If no document is found the full image rectangle is used.
        """
    )

    parser.add_argument('-i', '--input', required=True, help='Input image')
    parser.add_argument('-o', '--output', help='Save image with detected corners')
    parser.add_argument('--debug', help='Save image with detected lines and intersections')
    parser.add_argument('--warp', help='Save perspective-rectified document')
    parser.add_argument(
        '--rotate',
        choices=['left', 'right'],
        action='append',
        default=[],
        help='Turn the rectified document by 90 degrees (repeatable)'
    )
    parser.add_argument(
        '--target-area',
        type=int,
        default=DetectionConfig.target_area,
        help=f'Detection raster area in pixels (default: {DetectionConfig.target_area})'
    )
    parser.add_argument(
        '--min-area',
        type=float,
        default=DetectionConfig.min_area_ratio,
        help=f'Minimum document area as image fraction (default: {DetectionConfig.min_area_ratio})'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log detection details')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main CLI function"""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    image_path = Path(args.input)
    if not image_path.exists():
        print(f"Error: Image not found: {image_path}")
        return 1

    image = cv2.imread(str(image_path))
    if image is None:
        print(f"Error: Failed to load image: {image_path}")
        return 1

    h, w = image.shape[:2]
    print(f"Image dimensions: {w}x{h} px")

    try:
        config = DetectionConfig(target_area=args.target_area, min_area_ratio=args.min_area).validate()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    detector = EdgeDetector(config)
    try:
        result = detector.detect_with_debug(image)
    except cv2.error as e:
        print(f"Error: OpenCV failed: {e}")
        return 1

    corners = result.corners
    if corners is None:
        print(f"Document was not detected ({result.failure}), using full image")
        corners = Corners.boundary(w, h)
    else:
        print(f"Document detected ({result.strategy.value}, score {result.scored.score:.2f})")

    for key, (x, y) in corners.as_dict().items():
        print(f"  {CORNER_NAMES[key]}: ({x:.1f}, {y:.1f})")

    visualizer = EdgeVisualizer()

    if args.output:
        cv2.imwrite(args.output, visualizer.visualize(image, corners))
        print(f"Saved: {args.output}")

    if args.debug:
        cv2.imwrite(args.debug, visualizer.visualize_debug(image, result))
        print(f"Saved: {args.debug}")

    if args.warp:
        for direction in args.rotate:
            corners = corners.rotated(direction)
        cv2.imwrite(args.warp, rectify(image, corners))
        print(f"Saved: {args.warp}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
