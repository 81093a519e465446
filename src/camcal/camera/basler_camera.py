"""
Basler camera session using pypylon.
Selects one device by friendly name, configures it for monochrome capture
at a capped frame rate and exposes a pull-based frame stream.
"""

from pathlib import Path

import yaml
from pypylon import genicam, pylon

from ..utils.data_structures import GrabbedFrame
from ..utils.logger import get_logger

logger = get_logger(__name__)


class CameraError(RuntimeError):
    """Fault reported by the camera SDK."""


class CameraNotFoundError(CameraError):
    """No device with the configured friendly name is attached."""


class FrameTimeoutError(CameraError):
    """No frame arrived within the retrieve timeout."""


class BaslerCamera:
    """Single Basler camera selected by friendly name."""

    def __init__(self, config=None, config_path=None):
        """
        Initialize camera session (no device access yet).

        Args:
            config: Settings dictionary with a 'camera' section
            config_path: Path to a settings YAML file (used when config is None)
        """
        if config is None:
            config = {}
            if config_path is not None:
                with open(Path(config_path), 'r') as f:
                    config = yaml.safe_load(f) or {}

        self.config = config
        camera_config = config.get('camera', {})

        self.friendly_name = camera_config.get('friendly_name', 'CameraLeft (40022599)')
        self.pixel_format = camera_config.get('pixel_format', 'Mono8')
        self.center_roi = camera_config.get('center_roi', True)
        self.frame_rate = float(camera_config.get('frame_rate', 5.0))
        self.grab_timeout_ms = int(camera_config.get('grab_timeout_ms', 5000))

        self.camera = None
        self._pylon_initialized = False

    def __enter__(self):
        try:
            self.open()
            self.configure()
            self.start()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def _find_device(self, tl_factory):
        devices = tl_factory.EnumerateDevices()
        for device_info in devices:
            if device_info.GetFriendlyName() == self.friendly_name:
                return device_info

        available = ", ".join(d.GetFriendlyName() for d in devices) or "none"
        raise CameraNotFoundError(
            f"No camera named '{self.friendly_name}' found (available: {available})"
        )

    def open(self):
        """Initialize pylon and attach to the configured device."""
        if self.camera is not None:
            return

        pylon.PylonInitialize()
        self._pylon_initialized = True

        try:
            tl_factory = pylon.TlFactory.GetInstance()
            device_info = self._find_device(tl_factory)
            self.camera = pylon.InstantCamera(tl_factory.CreateDevice(device_info))
        except genicam.GenericException as e:
            raise CameraError(f"Failed to attach to '{self.friendly_name}': {e}") from e

        logger.info(f"Using device {self.camera.GetDeviceInfo().GetModelName()}")

    def configure(self):
        """Apply pixel format, centered ROI and frame-rate cap."""
        if self.camera is None:
            raise CameraError("Camera is not open")

        try:
            self.camera.Open()
            self.camera.PixelFormat.SetValue(self.pixel_format)
            if self.center_roi:
                self.camera.CenterX.SetValue(True)
                self.camera.CenterY.SetValue(True)
            self.camera.AcquisitionFrameRateEnable.SetValue(True)
            self.camera.AcquisitionFrameRate.SetValue(self.frame_rate)
            self.camera.Close()
        except genicam.GenericException as e:
            raise CameraError(f"Failed to configure camera: {e}") from e

        logger.debug(f"Configured {self.pixel_format} at {self.frame_rate} fps")

    def start(self):
        """Start grabbing, keeping only the newest frame."""
        try:
            self.camera.StartGrabbing(pylon.GrabStrategy_LatestImageOnly)
        except genicam.GenericException as e:
            raise CameraError(f"Failed to start grabbing: {e}") from e

    def is_grabbing(self) -> bool:
        return self.camera is not None and self.camera.IsGrabbing()

    def retrieve(self, timeout_ms=None) -> GrabbedFrame:
        """
        Block until the next frame is available.

        Args:
            timeout_ms: Timeout in milliseconds (default from settings)

        Returns:
            GrabbedFrame; a failed grab is reported with succeeded=False

        Raises:
            FrameTimeoutError: No frame within the timeout
            CameraError: Any other SDK fault
        """
        if timeout_ms is None:
            timeout_ms = self.grab_timeout_ms

        try:
            grab_result = self.camera.RetrieveResult(timeout_ms, pylon.TimeoutHandling_ThrowException)
        except genicam.TimeoutException as e:
            raise FrameTimeoutError(f"No frame within {timeout_ms} ms") from e
        except genicam.GenericException as e:
            raise CameraError(f"Failed to retrieve frame: {e}") from e

        try:
            if grab_result.GrabSucceeded():
                return GrabbedFrame(succeeded=True, image=grab_result.GetArray().copy())

            logger.warning(f"Grab failed: {grab_result.GetErrorCode()} - {grab_result.GetErrorDescription()}")
            return GrabbedFrame(
                succeeded=False,
                error_code=grab_result.GetErrorCode(),
                error_description=grab_result.GetErrorDescription(),
            )
        finally:
            grab_result.Release()

    def close(self):
        """Stop grabbing, detach from the device and release pylon."""
        if self.camera is not None:
            try:
                if self.camera.IsGrabbing():
                    self.camera.StopGrabbing()
                if self.camera.IsOpen():
                    self.camera.Close()
                self.camera.DestroyDevice()
            except genicam.GenericException as e:
                logger.warning(f"Error while closing camera: {e}")
            self.camera = None

        if self._pylon_initialized:
            pylon.PylonTerminate()
            self._pylon_initialized = False
