"""
Command line parsing and settings for the calibration tool.

Flags describe the chessboard and how many views to collect. Device and
output settings come from a read-only YAML file (config/camera_config.yaml
by default) merged over the defaults below.
"""

import argparse
import copy
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

import yaml

DEFAULT_SQUARE_SIZE = 20.0  # mm
DEFAULT_BOARD_SIZE = (11, 7)  # interior corners (columns, rows)
DEFAULT_NUM_FRAMES = 50

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "camera_config.yaml"

DEFAULT_SETTINGS = {
    'camera': {
        'friendly_name': 'CameraLeft (40022599)',
        'pixel_format': 'Mono8',
        'center_roi': True,
        'frame_rate': 5.0,
        'grab_timeout_ms': 5000,
    },
    'preview': {
        'enabled': True,
        'window_name': 'Camera',
        'width': 600,
        'height': 600,
    },
    'output': {
        'path': './calibration.xml',
        'atomic': True,
    },
    'logging': {
        'level': 'INFO',
        'log_file': None,
    },
}

_INT_PREFIX = re.compile(r'\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


class ConfigError(ValueError):
    """Invalid command line or settings file."""


@dataclass(frozen=True)
class CalibrationConfig:
    """Chessboard geometry and collection target for one calibration run."""
    square_size: float = DEFAULT_SQUARE_SIZE
    board_size: Tuple[int, int] = DEFAULT_BOARD_SIZE
    num_frames: int = DEFAULT_NUM_FRAMES
    settings_path: Optional[str] = None

    @property
    def corner_count(self) -> int:
        return self.board_size[0] * self.board_size[1]

    def validate(self):
        """Raise ConfigError if the board or frame target cannot be used."""
        columns, rows = self.board_size
        if columns < 2 or rows < 2:
            raise ConfigError(f"board size must be at least 2 x 2 interior corners, got {columns} x {rows}")
        if self.num_frames < 1:
            raise ConfigError(f"frame count must be positive, got {self.num_frames}")
        if not self.square_size > 0:
            raise ConfigError(f"square size must be positive, got {self.square_size}")
        return self


def lenient_int(text: str) -> int:
    """Parse the leading integer of text the way atoi does; 0 if there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def lenient_float(text: str) -> float:
    """Parse the leading number of text the way atof does; 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        raise ConfigError(message)


def build_parser(prog: str = "camcal") -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=prog, add_help=False)
    parser.add_argument('-s', dest='square_size', type=lenient_float, default=DEFAULT_SQUARE_SIZE)
    parser.add_argument('-x', dest='columns', type=lenient_int, default=DEFAULT_BOARD_SIZE[0])
    parser.add_argument('-y', dest='rows', type=lenient_int, default=DEFAULT_BOARD_SIZE[1])
    parser.add_argument('-f', dest='num_frames', type=lenient_int, default=DEFAULT_NUM_FRAMES)
    parser.add_argument('-c', dest='settings_path', default=None)
    parser.add_argument('-h', dest='help', action='store_true')
    return parser


def format_usage(prog: str = "camcal") -> str:
    """Usage text printed for -h."""
    lines = [
        f"usage: {prog} [options]",
        "Options:",
        f"{' -s':<10} size of square in mm",
        f"{' -x':<10} chessboard columns",
        f"{' -y':<10} chessboard rows",
        f"{' -f':<10} calibration frames",
        f"{' -c':<10} camera settings file (YAML)",
        f"{' -h':<10} show this help",
    ]
    return "\n".join(lines)


_VALUE_FLAGS = ('-s', '-x', '-y', '-f', '-c')


def _help_requested(argv: Sequence[str]) -> bool:
    """
    True if -h appears before the first token that would fail to parse.

    Tokens are walked in order like getopt: a value flag without an attached
    value consumes the next token, and scanning stops at an unknown option,
    a positional argument or "--".
    """
    tokens = iter(argv)
    for token in tokens:
        if token == '-h':
            return True
        if token in _VALUE_FLAGS:
            if next(tokens, None) is None:
                return False
            continue
        if token[:2] in _VALUE_FLAGS:
            continue
        return False
    return False


def parse_args(argv: Sequence[str], prog: str = "camcal") -> Optional[CalibrationConfig]:
    """
    Parse command line flags.

    Args:
        argv: Arguments without the program name
        prog: Program name shown in usage text

    Returns:
        CalibrationConfig, or None when help was requested

    Raises:
        ConfigError: Unknown flag, missing flag value, or unusable values
    """
    argv = list(argv)
    if _help_requested(argv):
        return None

    args = build_parser(prog).parse_args(argv)
    if args.help:
        return None

    config = CalibrationConfig(
        square_size=args.square_size,
        board_size=(args.columns, args.rows),
        num_frames=args.num_frames,
        settings_path=args.settings_path,
    )
    return config.validate()


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_path=None) -> dict:
    """
    Load camera/preview/output/logging settings.

    Args:
        settings_path: YAML file to read. None reads the default file if it
            exists and otherwise falls back to built-in defaults.

    Returns:
        Settings dictionary with every section present
    """
    if settings_path is None:
        path = DEFAULT_SETTINGS_PATH
        if not path.exists():
            return copy.deepcopy(DEFAULT_SETTINGS)
    else:
        path = Path(settings_path)
        if not path.exists():
            raise ConfigError(f"settings file not found: {path}")

    try:
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse settings file {path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"settings file {path} must contain a mapping")

    return _merge(DEFAULT_SETTINGS, loaded)
