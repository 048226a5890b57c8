"""
hashwatch Error Types.

Startup failures abort the run; digest and rebuild failures are
reported by the dispatcher and monitoring continues.
Requires Python 3.11+.
"""

from pathlib import Path


class HashWatchError(Exception):
    """Base class for all hashwatch errors."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class StartupError(HashWatchError):
    """Raised when the watch could not be set up. Always fatal."""


class DigestError(HashWatchError):
    """A file exists but could not be read for hashing."""

    @classmethod
    def from_os_error(cls, path: Path, error: OSError) -> "DigestError":
        reason = error.strerror or str(error)
        return cls(f"cannot hash {path}: {reason}", path=path)


class RebuildError(HashWatchError):
    """
    The rebuild command failed or printed output.

    ``output`` holds the combined stdout/stderr text verbatim, and is
    also the message whenever the build printed anything.
    """

    def __init__(
        self,
        message: str,
        output: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode
