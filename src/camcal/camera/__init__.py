"""
Camera module for Basler pylon devices.
Handles device selection, acquisition settings and the live preview.
"""

from .basler_camera import BaslerCamera, CameraError, CameraNotFoundError, FrameTimeoutError
from .preview import PreviewWindow

__all__ = ['BaslerCamera', 'CameraError', 'CameraNotFoundError', 'FrameTimeoutError', 'PreviewWindow']
