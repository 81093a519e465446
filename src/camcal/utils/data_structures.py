"""
Data structures shared by the camera and calibration modules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple, Optional
import numpy as np


@dataclass
class GrabbedFrame:
    """One unit retrieved from the camera stream."""
    succeeded: bool
    image: Optional[np.ndarray] = None  # Single channel 8-bit image
    error_code: int = 0
    error_description: str = ""

    @property
    def width(self) -> int:
        return 0 if self.image is None else int(self.image.shape[1])

    @property
    def height(self) -> int:
        return 0 if self.image is None else int(self.image.shape[0])


@dataclass(frozen=True, eq=False)
class CalibrationResult:
    """Intrinsic calibration computed from the collected chessboard views."""
    camera_matrix: np.ndarray  # 3x3
    dist_coeffs: np.ndarray  # 1xN (k1, k2, p1, p2, k3)
    rms: float  # RMS reprojection error (pixels)
    frame_count: int
    image_size: Tuple[int, int]  # (width, height)
    timestamp: datetime = field(default_factory=datetime.now)
    rvecs: List[np.ndarray] = field(default_factory=list)
    tvecs: List[np.ndarray] = field(default_factory=list)
    std_intrinsics: Optional[np.ndarray] = None
    std_extrinsics: Optional[np.ndarray] = None
    per_view_errors: Optional[np.ndarray] = None

    @property
    def fx(self) -> float:
        """Focal length in X (pixels)."""
        return float(self.camera_matrix[0, 0])

    @property
    def fy(self) -> float:
        """Focal length in Y (pixels)."""
        return float(self.camera_matrix[1, 1])

    @property
    def cx(self) -> float:
        """Principal point X (pixels)."""
        return float(self.camera_matrix[0, 2])

    @property
    def cy(self) -> float:
        """Principal point Y (pixels)."""
        return float(self.camera_matrix[1, 2])
