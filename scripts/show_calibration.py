#!/usr/bin/env python3
"""
Show a saved calibration.
Prints the camera matrix and distortion coefficients, and optionally writes
an undistorted copy of an image for a visual check.
"""

import argparse
import sys
from pathlib import Path

import cv2
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from camcal.calibration.result_writer import read_calibration, CalibrationFileError


def undistort_image(image_path, camera_matrix, dist_coeffs, output_path):
    """Write image and its undistorted version side by side."""
    image = cv2.imread(str(image_path))
    if image is None:
        print(f"ERROR: Could not read image {image_path}", file=sys.stderr)
        return False

    h, w = image.shape[:2]
    new_matrix, _ = cv2.getOptimalNewCameraMatrix(camera_matrix, dist_coeffs, (w, h), 0)
    undistorted = cv2.undistort(image, camera_matrix, dist_coeffs, None, new_matrix)

    cv2.imwrite(str(output_path), np.hstack([image, undistorted]))
    print(f"Undistorted comparison saved to {output_path}")
    return True


def main():
    """Print calibration and optionally undistort an image."""
    parser = argparse.ArgumentParser(description="Show a calibration file.")
    parser.add_argument("calibration", nargs="?", default="calibration.xml", help="Calibration file")
    parser.add_argument("--image", help="Image to undistort")
    parser.add_argument("--output", default="undistorted.png", help="Comparison image path")
    args = parser.parse_args()

    try:
        camera_matrix, dist_coeffs = read_calibration(args.calibration)
    except CalibrationFileError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    np.set_printoptions(precision=4, suppress=True)
    print("=" * 50)
    print(f"Calibration: {args.calibration}")
    print("=" * 50)
    print("Camera matrix:")
    print(camera_matrix)
    print("Distortion coefficients:")
    print(dist_coeffs.ravel())
    print(f"fx={camera_matrix[0, 0]:.2f} fy={camera_matrix[1, 1]:.2f} "
          f"cx={camera_matrix[0, 2]:.2f} cy={camera_matrix[1, 2]:.2f}")

    if args.image:
        if not undistort_image(args.image, camera_matrix, dist_coeffs, args.output):
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
