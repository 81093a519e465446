"""
Calibration file I/O.

Results are stored with cv2.FileStorage: a comment block with the date,
frame count and RMS error, followed by the cameraMatrix and distCoeffs
fields.
"""

import os
import stat
import tempfile
import time
from pathlib import Path
from typing import Tuple

import cv2
import numpy as np

from ..utils.data_structures import CalibrationResult
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_OUTPUT_PATH = "./calibration.xml"
CAMERA_MATRIX_KEY = "cameraMatrix"
DIST_COEFFS_KEY = "distCoeffs"


class CalibrationFileError(IOError):
    """A calibration file could not be written or read."""


def format_comment(result: CalibrationResult) -> list:
    """Lines of the descriptive comment written above the fields."""
    return [
        f"Calibration date: {time.asctime(result.timestamp.timetuple())}",
        f"Number of frames: {result.frame_count}",
        f"RMS: {result.rms}",
    ]


def _write_storage(result: CalibrationResult, path: Path):
    fs = cv2.FileStorage(str(path), cv2.FILE_STORAGE_WRITE)
    if not fs.isOpened():
        raise CalibrationFileError(f"could not open {path} for writing")
    try:
        for line in format_comment(result):
            fs.writeComment(line)
        fs.write(CAMERA_MATRIX_KEY, result.camera_matrix)
        fs.write(DIST_COEFFS_KEY, result.dist_coeffs)
    finally:
        fs.release()


def _target_mode(path: Path) -> int:
    """Mode the replaced file should end up with: the existing file's, or 0666 minus umask."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_calibration(result: CalibrationResult, path=DEFAULT_OUTPUT_PATH, atomic: bool = True) -> Path:
    """
    Save a calibration result, replacing any existing file.

    Args:
        result: Calibration to save
        path: Output file; the suffix selects the format (.xml, .yml, .json)
        atomic: Write to a temporary file in the same directory and rename it
            over the target, so a crash never leaves a truncated file

    Returns:
        Path that was written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if not atomic:
        _write_storage(result, path)
        logger.info(f"Saved to {path}")
        return path

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=path.suffix, dir=path.parent)
    os.close(fd)
    try:
        _write_storage(result, Path(tmp_name))
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise

    logger.info(f"Saved to {path}")
    return path


def read_calibration(path=DEFAULT_OUTPUT_PATH) -> Tuple[np.ndarray, np.ndarray]:
    """
    Load camera matrix and distortion coefficients from a calibration file.

    Returns:
        (camera_matrix, dist_coeffs)

    Raises:
        CalibrationFileError: Missing file or missing field
    """
    path = Path(path)
    if not path.exists():
        raise CalibrationFileError(f"calibration file not found: {path}")

    fs = cv2.FileStorage(str(path), cv2.FILE_STORAGE_READ)
    if not fs.isOpened():
        raise CalibrationFileError(f"could not open {path}")
    try:
        matrices = []
        for key in (CAMERA_MATRIX_KEY, DIST_COEFFS_KEY):
            node = fs.getNode(key)
            if node.empty():
                raise CalibrationFileError(f"{path} has no {key} field")
            matrices.append(node.mat())
    finally:
        fs.release()

    camera_matrix, dist_coeffs = matrices
    return camera_matrix, dist_coeffs
