"""Pytest configuration: makes the project root importable."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
