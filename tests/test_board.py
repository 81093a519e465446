"""
Unit tests for chessboard geometry.
"""

import unittest
from pathlib import Path
import sys

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from camcal.calibration.board import board_object_points, replicate_object_points


class TestBoardObjectPoints(unittest.TestCase):
    """Test synthetic 3D board points."""

    def test_point_count(self):
        for board_size in [(2, 2), (5, 4), (11, 7), (9, 6)]:
            points = board_object_points(board_size, 20.0)
            self.assertEqual(points.shape, (board_size[0] * board_size[1], 3))
            self.assertEqual(points.dtype, np.float32)

    def test_flat_board(self):
        points = board_object_points((11, 7), 20.0)
        self.assertTrue(np.all(points[:, 2] == 0))

    def test_grid_spacing(self):
        """Row-major raster order, x along columns, y along rows."""
        points = board_object_points((5, 4), 25.0)
        self.assertTrue(np.allclose(points[0], [0, 0, 0]))
        self.assertTrue(np.allclose(points[1], [25, 0, 0]))
        self.assertTrue(np.allclose(points[4], [100, 0, 0]))
        self.assertTrue(np.allclose(points[5], [0, 25, 0]))
        self.assertTrue(np.allclose(points[-1], [100, 75, 0]))

        xs = points[:, 0].reshape(4, 5)
        ys = points[:, 1].reshape(4, 5)
        self.assertTrue(np.allclose(np.diff(xs, axis=1), 25.0))
        self.assertTrue(np.allclose(np.diff(ys, axis=0), 25.0))

    def test_replicate(self):
        points = board_object_points((5, 4), 25.0)
        replicated = replicate_object_points(points, 3)
        self.assertEqual(len(replicated), 3)
        for copy in replicated:
            self.assertTrue(np.array_equal(copy, points))

    def test_replicate_zero(self):
        self.assertEqual(replicate_object_points(board_object_points((3, 3), 1.0), 0), [])


if __name__ == "__main__":
    unittest.main()
