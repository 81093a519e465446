"""
Intrinsic calibration solve.
Thin wrapper over cv2.calibrateCameraExtended.
"""

from datetime import datetime
from typing import Sequence, Tuple

import cv2
import numpy as np

from .board import replicate_object_points
from ..utils.data_structures import CalibrationResult
from ..utils.logger import get_logger

logger = get_logger(__name__)


class CalibrationError(RuntimeError):
    """The solver could not produce a calibration from the collected views."""


def calibrate_camera(image_points: Sequence[np.ndarray], object_points: np.ndarray,
                     image_size: Tuple[int, int]) -> CalibrationResult:
    """
    Compute camera matrix and distortion coefficients.

    Args:
        image_points: Refined corners, one (N, 1, 2) array per view
        object_points: Board corner positions, (N, 3)
        image_size: Frame size (width, height) in pixels

    Returns:
        CalibrationResult

    Raises:
        CalibrationError: No views, mismatched point counts, or solver failure
    """
    if len(image_points) == 0:
        raise CalibrationError("no chessboard views were collected")

    expected = len(object_points)
    for index, corners in enumerate(image_points):
        if len(corners) != expected:
            raise CalibrationError(
                f"view {index} has {len(corners)} corners, expected {expected}"
            )

    width, height = image_size
    if width <= 0 or height <= 0:
        raise CalibrationError(f"invalid image size {width} x {height}")

    object_sets = replicate_object_points(object_points, len(image_points))
    image_sets = [np.asarray(corners, dtype=np.float32) for corners in image_points]

    logger.debug(f"Calibrating from {len(image_sets)} views of {expected} corners at {width} x {height}")

    try:
        (rms, camera_matrix, dist_coeffs, rvecs, tvecs,
         std_intrinsics, std_extrinsics, per_view_errors) = cv2.calibrateCameraExtended(
            object_sets, image_sets, (width, height), None, None
        )
    except cv2.error as e:
        raise CalibrationError(f"calibration solver failed: {e}") from e

    if not np.isfinite(rms) or not np.all(np.isfinite(camera_matrix)):
        raise CalibrationError(f"calibration solver returned a non-finite result (RMS {rms})")

    return CalibrationResult(
        camera_matrix=camera_matrix,
        dist_coeffs=dist_coeffs,
        rms=float(rms),
        frame_count=len(image_sets),
        image_size=(width, height),
        timestamp=datetime.now(),
        rvecs=list(rvecs),
        tvecs=list(tvecs),
        std_intrinsics=std_intrinsics,
        std_extrinsics=std_extrinsics,
        per_view_errors=per_view_errors,
    )
