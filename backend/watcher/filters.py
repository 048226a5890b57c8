"""
hashwatch Path Filter.

Decides which notifications are worth hashing at all.
Requires Python 3.11+.
"""

import os
from pathlib import Path

from utils.config import get_settings


class PathFilter:
    """
    Ignores hidden files and files without the source extension.

    Editor swap files, temp files and non-source assets are dropped
    before any digest is computed. The decision depends only on the
    path string; the filesystem is never touched.
    """

    def __init__(
        self,
        extension: str | None = None,
        hidden_prefix: str | None = None,
    ) -> None:
        """
        Initialize the filter.

        Args:
            extension: Source file extension including the dot, e.g. ".go"
            hidden_prefix: Base names starting with this are hidden
        """
        settings = get_settings().watcher
        extension = extension or settings.extension
        self._extension = extension if extension.startswith(".") else f".{extension}"
        self._hidden_prefix = hidden_prefix or settings.hidden_prefix

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def hidden_prefix(self) -> str:
        return self._hidden_prefix

    def is_hidden(self, path: Path | str) -> bool:
        """Check if the final path segment is hidden."""
        return os.path.basename(os.fspath(path)).startswith(self._hidden_prefix)

    def is_source_file(self, path: Path | str) -> bool:
        """Check if path has the configured source extension."""
        return os.path.splitext(os.fspath(path))[1] == self._extension

    def should_ignore(self, path: Path | str) -> bool:
        """Check if a notification for this path should be dropped."""
        return self.is_hidden(path) or not self.is_source_file(path)
