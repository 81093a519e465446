"""
Chessboard corner collection.
Detects and refines corners frame by frame until enough views are gathered.
"""

from typing import List, Optional, Tuple

import cv2
import numpy as np

from .board import board_object_points
from ..utils.data_structures import GrabbedFrame
from ..utils.logger import get_logger

logger = get_logger(__name__)

SUBPIX_WINDOW = (11, 11)
SUBPIX_ZERO_ZONE = (-1, -1)
SUBPIX_CRITERIA = (cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_MAX_ITER, 30, 0.1)


class CornerCollector:
    """Accumulates refined chessboard corners from a frame stream."""

    def __init__(self, config, preview=None):
        """
        Initialize collector.

        Args:
            config: CalibrationConfig (board size, square size, frame target)
            preview: Optional PreviewWindow used to display each frame
        """
        self.config = config
        self.board_size = tuple(config.board_size)
        self.target = config.num_frames
        self.preview = preview

        self.object_points = board_object_points(self.board_size, config.square_size)
        self.samples: List[np.ndarray] = []
        self.image_size: Optional[Tuple[int, int]] = None

    @property
    def count(self) -> int:
        return len(self.samples)

    @property
    def is_complete(self) -> bool:
        return len(self.samples) >= self.target

    def detect(self, image: np.ndarray) -> Optional[np.ndarray]:
        """
        Find and refine the interior corners of the board in image.

        Returns:
            (columns * rows, 1, 2) float32 corners, or None if the board
            was not found in full
        """
        found, corners = cv2.findChessboardCorners(image, self.board_size, None, cv2.CALIB_CB_FAST_CHECK)
        if not found or corners is None:
            return None

        return cv2.cornerSubPix(image, corners, SUBPIX_WINDOW, SUBPIX_ZERO_ZONE, SUBPIX_CRITERIA)

    def add_sample(self, corners: np.ndarray) -> bool:
        """Append one view; ignored once the target is reached."""
        if self.is_complete:
            return False
        self.samples.append(corners)
        return True

    def process_frame(self, frame: GrabbedFrame) -> bool:
        """
        Handle one retrieved frame.

        Returns:
            True if the frame contributed a new sample
        """
        if not frame.succeeded or frame.image is None:
            return False

        image = frame.image
        self.image_size = (frame.width, frame.height)

        corners = self.detect(image)
        added = corners is not None and self.add_sample(corners)
        if added:
            logger.info(f"Found frame, total : {self.count}")

        if self.preview is not None:
            self.preview.show(image, self.board_size, corners)

        return added

    def collect(self, camera) -> List[np.ndarray]:
        """
        Pull frames until the target is reached or the camera stops grabbing.

        Args:
            camera: Object with is_grabbing() and retrieve() (BaslerCamera)

        Returns:
            Collected corner sets
        """
        while camera.is_grabbing() and not self.is_complete:
            self.process_frame(camera.retrieve())

        if not self.is_complete:
            logger.warning(f"Camera stopped grabbing after {self.count} of {self.target} frames")

        return self.samples
