"""
Unit tests for the preview window (OpenCV GUI calls are mocked).
"""

import unittest
from pathlib import Path
from unittest import mock
import sys

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from camcal.camera import preview
from camcal.camera.preview import PreviewWindow


class TestPreviewWindow(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.multiple(
            preview.cv2,
            namedWindow=mock.DEFAULT, imshow=mock.DEFAULT, resizeWindow=mock.DEFAULT,
            waitKey=mock.DEFAULT, destroyWindow=mock.DEFAULT,
        )
        self.gui = patcher.start()
        self.addCleanup(patcher.stop)

    def test_defaults(self):
        window = PreviewWindow()
        self.assertEqual(window.window_name, 'Camera')
        self.assertEqual(window.size, (600, 600))

    def test_show_without_corners(self):
        window = PreviewWindow()
        image = np.zeros((48, 64), np.uint8)
        window.show(image, (5, 4), None)

        self.gui['namedWindow'].assert_called_once_with('Camera', preview.cv2.WINDOW_NORMAL)
        self.assertIs(self.gui['imshow'].call_args[0][1], image)
        self.gui['resizeWindow'].assert_called_once_with('Camera', 600, 600)
        self.gui['waitKey'].assert_called_once_with(1)

    def test_corner_overlay_drawn_on_copy(self):
        window = PreviewWindow(config={'preview': {'window_name': 'Test', 'width': 300, 'height': 200}})
        image = np.full((48, 64), 200, np.uint8)
        corners = np.array([[[10.0 + 8 * c, 10.0 + 8 * r]] for r in range(2) for c in range(2)], np.float32)

        window.show(image, (2, 2), corners)

        shown = self.gui['imshow'].call_args[0][1]
        self.assertEqual(shown.shape, (48, 64, 3))
        self.assertTrue(np.all(image == 200))
        self.gui['resizeWindow'].assert_called_once_with('Test', 300, 200)

    def test_window_created_once(self):
        window = PreviewWindow()
        image = np.zeros((10, 10), np.uint8)
        window.show(image)
        window.show(image)
        self.gui['namedWindow'].assert_called_once()

    def test_close(self):
        window = PreviewWindow()
        window.close()
        self.gui['destroyWindow'].assert_not_called()
        window.show(np.zeros((10, 10), np.uint8))
        window.close()
        self.gui['destroyWindow'].assert_called_once_with('Camera')


if __name__ == "__main__":
    unittest.main()
