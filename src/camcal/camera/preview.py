"""
Live preview window for the collection loop.
"""

import cv2
import numpy as np


class PreviewWindow:
    """Resizable OpenCV window showing the latest frame with detected corners."""

    def __init__(self, config=None):
        """
        Args:
            config: Settings dictionary with a 'preview' section
        """
        preview_config = (config or {}).get('preview', {})
        self.window_name = preview_config.get('window_name', 'Camera')
        self.size = (int(preview_config.get('width', 600)), int(preview_config.get('height', 600)))
        self.created = False

    def show(self, image: np.ndarray, board_size=None, corners=None):
        """Draw corner markers on a copy of image and display it."""
        if not self.created:
            cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
            self.created = True

        if corners is not None:
            display = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR) if image.ndim == 2 else image.copy()
            cv2.drawChessboardCorners(display, board_size, corners, True)
        else:
            display = image

        cv2.imshow(self.window_name, display)
        cv2.resizeWindow(self.window_name, *self.size)
        cv2.waitKey(1)

    def close(self):
        if self.created:
            cv2.destroyWindow(self.window_name)
            self.created = False
