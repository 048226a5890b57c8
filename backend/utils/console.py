"""
hashwatch Console Reporter.

User-facing terminal notices: detected changes, rebuild progress,
and failures (which ring the terminal bell).
Requires Python 3.11+.
"""

import sys
from pathlib import Path
from typing import TextIO

from structlog.dev import CYAN, GREEN, RED, RESET_ALL


class ConsoleReporter:
    """
    Writes formatted notices to a terminal stream.

    Every failure, recoverable or fatal, goes through report_failure
    so the user hears a bell and sees the same red ERROR prefix.
    """

    def __init__(self, stream: TextIO | None = None, colors: bool | None = None) -> None:
        """
        Initialize the reporter.

        Args:
            stream: Output stream, stdout by default
            colors: Force colors on or off; auto-detected from the stream if None
        """
        self._stream = stream if stream is not None else sys.stdout
        if colors is None:
            colors = self._stream.isatty()
        self._colors = colors

    def _paint(self, color: str, text: str) -> str:
        if not self._colors:
            return text
        return f"{color}{text}{RESET_ALL}"

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def report_failure(self, message: str) -> None:
        """Ring the bell and print an error message."""
        self._write("\a" + self._paint(RED, f"ERROR: {message}") + "\n")

    def fatal(self, message: str) -> None:
        """Report a startup failure."""
        self.report_failure(message)

    def notice_change(self, path: Path | str) -> None:
        self._write(self._paint(GREEN, f"CHANGE: {path}") + "\n")

    def notice_rebuilding(self) -> None:
        self._write("Recompiling...\n")

    def notice_watching(self, directory_count: int | None = None) -> None:
        """Announce that the steady watching state was entered."""
        suffix = f" ({directory_count} directories)" if directory_count is not None else ""
        self._write(self._paint(CYAN, f"Watching for changes...{suffix}") + "\n")
