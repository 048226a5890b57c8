#!/usr/bin/env python3
"""
hashwatch Runner Script.

Runs the watcher from a source checkout without installing it.
Requires Python 3.11+.

Usage:
    python scripts/watch.py --root /path/to/project [build arguments...]
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from cli.main import main


if __name__ == "__main__":
    main()
