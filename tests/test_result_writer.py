"""
Unit tests for calibration file I/O.
"""

import os
import stat
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
import sys

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from camcal.calibration.result_writer import (
    CalibrationFileError, format_comment, read_calibration, write_calibration,
)
from camcal.utils.data_structures import CalibrationResult


def make_result():
    camera_matrix = np.array([[812.5, 0.0, 321.0],
                              [0.0, 810.25, 239.5],
                              [0.0, 0.0, 1.0]])
    dist_coeffs = np.array([[-0.12, 0.05, 0.001, -0.002, 0.01]])
    return CalibrationResult(
        camera_matrix=camera_matrix,
        dist_coeffs=dist_coeffs,
        rms=0.234,
        frame_count=3,
        image_size=(640, 480),
        timestamp=datetime(2024, 3, 1, 12, 30, 0),
    )


class TestWriteCalibration(unittest.TestCase):
    """Test writing and reading calibration files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "calibration.xml"

    def tearDown(self):
        self.tmp.cleanup()

    def test_round_trip_shapes(self):
        result = make_result()
        write_calibration(result, self.path)

        camera_matrix, dist_coeffs = read_calibration(self.path)
        self.assertEqual(camera_matrix.shape, (3, 3))
        self.assertEqual(dist_coeffs.shape, (1, 5))
        self.assertTrue(np.allclose(camera_matrix, result.camera_matrix))
        self.assertTrue(np.allclose(dist_coeffs, result.dist_coeffs))

    def test_single_field_each(self):
        write_calibration(make_result(), self.path)
        text = self.path.read_text()
        self.assertEqual(text.count("<cameraMatrix"), 1)
        self.assertEqual(text.count("<distCoeffs"), 1)

    def test_comment_block(self):
        write_calibration(make_result(), self.path)
        text = self.path.read_text()
        self.assertIn("Calibration date: Fri Mar  1 12:30:00 2024", text)
        self.assertIn("Number of frames: 3", text)
        self.assertIn("RMS: 0.234", text)
        self.assertLess(text.index("Number of frames"), text.index("<cameraMatrix"))

    def test_comment_lines(self):
        lines = format_comment(make_result())
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("Calibration date: "))

    def test_overwrites_existing_file(self):
        self.path.write_text("stale contents")
        write_calibration(make_result(), self.path)
        self.assertNotIn("stale contents", self.path.read_text())
        read_calibration(self.path)

    def test_atomic_write_leaves_no_temp_files(self):
        write_calibration(make_result(), self.path, atomic=True)
        self.assertEqual(os.listdir(self.tmp.name), ["calibration.xml"])

    @unittest.skipIf(os.name == 'nt', "POSIX file modes only")
    def test_atomic_and_plain_writes_share_mode(self):
        """Atomic writes get the same umask-based mode as a plain write."""
        plain = Path(self.tmp.name) / "plain.xml"
        old_umask = os.umask(0o022)
        try:
            write_calibration(make_result(), self.path, atomic=True)
            write_calibration(make_result(), plain, atomic=False)
        finally:
            os.umask(old_umask)

        atomic_mode = stat.S_IMODE(self.path.stat().st_mode)
        plain_mode = stat.S_IMODE(plain.stat().st_mode)
        self.assertEqual(atomic_mode, plain_mode)
        self.assertEqual(atomic_mode, 0o644)

    @unittest.skipIf(os.name == 'nt', "POSIX file modes only")
    def test_atomic_write_keeps_existing_mode(self):
        self.path.write_text("old")
        os.chmod(self.path, 0o640)
        write_calibration(make_result(), self.path, atomic=True)
        self.assertEqual(stat.S_IMODE(self.path.stat().st_mode), 0o640)

    def test_non_atomic_write(self):
        write_calibration(make_result(), self.path, atomic=False)
        camera_matrix, _ = read_calibration(self.path)
        self.assertEqual(camera_matrix.shape, (3, 3))

    def test_creates_parent_directory(self):
        path = Path(self.tmp.name) / "out" / "calibration.xml"
        write_calibration(make_result(), path)
        self.assertTrue(path.exists())

    def test_read_missing_file(self):
        with self.assertRaises(CalibrationFileError):
            read_calibration(Path(self.tmp.name) / "missing.xml")

    def test_read_missing_field(self):
        self.path.write_text('<?xml version="1.0"?>\n<opencv_storage>\n<other>1</other>\n</opencv_storage>\n')
        with self.assertRaises(CalibrationFileError):
            read_calibration(self.path)


if __name__ == "__main__":
    unittest.main()
