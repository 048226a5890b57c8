"""
hashwatch Builder Package.

Invocation of the external build command.
Requires Python 3.11+.
"""

from builder.rebuild import Rebuilder

__all__ = ["Rebuilder"]
