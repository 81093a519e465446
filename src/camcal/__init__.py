"""
camcal: chessboard intrinsic calibration for a Basler camera.
"""

__version__ = "0.1.0"
