"""
hashwatch Hash Calculator.

Fast content digests for change detection.
Requires Python 3.11+.
"""

import hashlib
from pathlib import Path

from utils.logger import LoggerMixin

DIGEST_SIZE = 8
CHUNK_SIZE = 64 * 1024


class HashCalculator(LoggerMixin):
    """
    Calculates fixed-size digests of file contents.

    Uses BLAKE2b truncated to 8 bytes. The digest is only compared
    for equality, so collision resistance for typical source files
    is what matters, not cryptographic strength.
    """

    def __init__(self, digest_size: int = DIGEST_SIZE, chunk_size: int = CHUNK_SIZE) -> None:
        """
        Initialize the hash calculator.

        Args:
            digest_size: Digest length in bytes (1-64)
            chunk_size: Read buffer size in bytes
        """
        if not 1 <= digest_size <= hashlib.blake2b.MAX_DIGEST_SIZE:
            raise ValueError(f"digest_size must be between 1 and 64, got {digest_size}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._digest_size = digest_size
        self._chunk_size = chunk_size

    @property
    def digest_size(self) -> int:
        return self._digest_size

    def hash_bytes(self, data: bytes) -> bytes:
        """Digest an in-memory buffer."""
        return hashlib.blake2b(data, digest_size=self._digest_size).digest()

    def hash_file(self, path: Path) -> bytes | None:
        """
        Digest the full contents of a file.

        Args:
            path: File to read

        Returns:
            The digest, or None if the file does not exist

        Raises:
            OSError: The file exists but could not be opened or read
        """
        hasher = hashlib.blake2b(digest_size=self._digest_size)
        try:
            with open(path, "rb") as f:
                while chunk := f.read(self._chunk_size):
                    hasher.update(chunk)
        except (FileNotFoundError, NotADirectoryError):
            # NotADirectoryError: a parent component was replaced by a file
            return None
        return hasher.digest()
