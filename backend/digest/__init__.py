"""
hashwatch Digest Package.

Content-digest based change detection.
Requires Python 3.11+.
"""

from digest.hash_calculator import HashCalculator
from digest.change_detector import ChangeDetector

__all__ = [
    "HashCalculator",
    "ChangeDetector",
]
