#!/usr/bin/env python3
"""
Main entry point for chessboard camera calibration.
Captures chessboard views from the Basler camera and writes calibration.xml.
"""

import sys
from pathlib import Path

# Add src to path so the tool runs from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from camcal.app import main


if __name__ == "__main__":
    sys.exit(main())
