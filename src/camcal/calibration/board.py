"""
Chessboard geometry.
"""

from typing import List, Tuple
import numpy as np


def board_object_points(board_size: Tuple[int, int], square_size: float) -> np.ndarray:
    """
    Build the 3D positions of the interior corners of a flat chessboard.

    Corners are listed row by row, matching the order OpenCV reports
    detected corners in. The board lies in the z = 0 plane.

    Args:
        board_size: Interior corners (columns, rows)
        square_size: Edge length of one square (mm)

    Returns:
        (columns * rows, 3) float32 array
    """
    columns, rows = board_size
    points = np.zeros((columns * rows, 3), np.float32)
    points[:, :2] = np.mgrid[0:columns, 0:rows].T.reshape(-1, 2) * square_size
    return points


def replicate_object_points(object_points: np.ndarray, count: int) -> List[np.ndarray]:
    """Repeat the board points once per collected view."""
    return [object_points for _ in range(count)]
