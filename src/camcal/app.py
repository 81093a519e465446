"""
Calibration application.
Wires the camera session, corner collector, solver and result writer, and
maps failures to process exit codes.
"""

import sys
from pathlib import Path

from .config import ConfigError, format_usage, load_settings, parse_args
from .camera.basler_camera import BaslerCamera, CameraError
from .camera.preview import PreviewWindow
from .calibration.corner_collector import CornerCollector
from .calibration.result_writer import CalibrationFileError, write_calibration
from .calibration.solver import CalibrationError, calibrate_camera
from .utils.logger import setup_logger

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_CAMERA = 2
EXIT_CALIBRATION = 3
EXIT_OUTPUT = 4
EXIT_INTERRUPTED = 130


class CalibrationApp:
    """Runs one capture-and-calibrate session."""

    def __init__(self, config, settings=None):
        """
        Initialize application.

        Args:
            config: CalibrationConfig from the command line
            settings: Settings dictionary (camera, preview, output, logging)
        """
        self.config = config
        self.settings = settings if settings is not None else load_settings(config.settings_path)

        logging_config = self.settings.get('logging', {})
        self.logger = setup_logger(
            "camcal",
            log_file=logging_config.get('log_file'),
            level=logging_config.get('level', 'INFO'),
        )

        output_config = self.settings.get('output', {})
        self.output_path = Path(output_config.get('path', './calibration.xml'))
        self.atomic_write = output_config.get('atomic', True)

        self.preview = None
        if self.settings.get('preview', {}).get('enabled', True):
            self.preview = PreviewWindow(config=self.settings)

        self.collector = CornerCollector(config, preview=self.preview)
        self.result = None

    def collect(self):
        """Open the camera and gather chessboard views."""
        columns, rows = self.config.board_size
        self.logger.info(f"Square Size: {self.config.square_size} mm")
        self.logger.info(f"Board Size: {columns} x {rows}")
        self.logger.info(f"Calibration frames: {self.config.num_frames}")

        try:
            with BaslerCamera(config=self.settings) as camera:
                self.collector.collect(camera)
        finally:
            if self.preview is not None:
                self.preview.close()

        self.logger.info("Done collecting points")
        return self.collector.samples

    def calibrate(self):
        """Solve for intrinsics from the collected views."""
        self.logger.info("Calibrating ...")
        self.result = calibrate_camera(
            self.collector.samples,
            self.collector.object_points,
            self.collector.image_size or (0, 0),
        )
        self.logger.info(f"Calibration done, RMS: {self.result.rms}")
        return self.result

    def save(self):
        return write_calibration(self.result, self.output_path, atomic=self.atomic_write)

    def run(self):
        """Collect, calibrate and save. Returns the CalibrationResult."""
        self.collect()
        self.calibrate()
        self.save()
        return self.result


def main(argv=None):
    """Entry point. Returns the process exit code."""
    if argv is None:
        argv = sys.argv[1:]
    prog = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "camcal"

    try:
        config = parse_args(argv, prog=prog)
    except ConfigError as e:
        print(f"{prog}: {e}", file=sys.stderr)
        return EXIT_USAGE

    if config is None:
        print(format_usage(prog), file=sys.stderr)
        return EXIT_OK

    try:
        app = CalibrationApp(config)
    except ConfigError as e:
        print(f"{prog}: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        app.run()
    except KeyboardInterrupt:
        app.logger.info("Interrupted, no calibration written")
        return EXIT_INTERRUPTED
    except CameraError as e:
        app.logger.error(f"Camera error: {e}")
        return EXIT_CAMERA
    except CalibrationError as e:
        app.logger.error(f"Calibration failed: {e}")
        return EXIT_CALIBRATION
    except (CalibrationFileError, OSError) as e:
        app.logger.error(f"Could not save calibration: {e}")
        return EXIT_OUTPUT

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
