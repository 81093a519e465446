"""
Calibration module: board geometry, corner collection, solver and result file I/O.
"""

from .board import board_object_points, replicate_object_points
from .corner_collector import CornerCollector
from .solver import calibrate_camera, CalibrationError
from .result_writer import write_calibration, read_calibration, CalibrationFileError

__all__ = [
    'board_object_points', 'replicate_object_points', 'CornerCollector',
    'calibrate_camera', 'CalibrationError',
    'write_calibration', 'read_calibration', 'CalibrationFileError',
]
