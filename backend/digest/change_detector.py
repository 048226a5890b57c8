"""
hashwatch Change Detector.

Decides whether a file notification is a real content change.
Requires Python 3.11+.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from digest.hash_calculator import HashCalculator
from utils.errors import DigestError
from utils.logger import LoggerMixin


class ChangeDetector(LoggerMixin):
    """
    Detects content changes by comparing file digests.

    Editors that save atomically (write a temp file, then rename it)
    produce several notifications for one save. Remembering the last
    digest per path lets every notification after the first one for
    the same content be discarded.

    The digest cache is owned by this instance and is not locked:
    did_change must only be called from a single task. Parallel
    callers would need per-path exclusion to keep the first-sighting
    rule intact.
    """

    def __init__(self, hasher: HashCalculator | None = None) -> None:
        """
        Initialize the change detector.

        Args:
            hasher: Digest calculator, a default HashCalculator if None
        """
        self._hasher = hasher or HashCalculator()
        # Cache: absolute path -> digest of the last contents seen
        self._hash_cache: dict[Path, bytes] = {}

    @staticmethod
    def _key(path: Path | str) -> Path:
        return Path(path).absolute()

    def did_change(self, path: Path | str) -> bool:
        """
        Check whether a file's content changed since it was last seen.

        A path never seen before always counts as changed. A tracked
        path that no longer exists counts as changed once and is then
        forgotten; an untracked missing path is not a change.

        Args:
            path: Path named by the notification

        Returns:
            True if the notification should trigger a rebuild

        Raises:
            DigestError: The file exists but could not be read. The
                cache is left untouched.
        """
        key = self._key(path)

        try:
            new_hash = self._hasher.hash_file(key)
        except OSError as e:
            self.log.warning("digest_failed", path=str(key), error=str(e))
            raise DigestError.from_os_error(key, e) from e

        if new_hash is None:
            if self._hash_cache.pop(key, None) is None:
                return False
            self.log.info("file_deleted", path=str(key))
            return True

        old_hash = self._hash_cache.get(key)
        if old_hash == new_hash:
            self.log.debug("duplicate_notification", path=str(key))
            return False

        self._hash_cache[key] = new_hash
        self.log.info(
            "change_detected",
            path=str(key),
            first_sighting=old_hash is None,
        )
        return True

    def seed(self, paths: Iterable[Path | str]) -> int:
        """
        Record current digests without reporting changes.

        Used at startup so the first edit of each existing file is
        compared against its real contents instead of counting as a
        first sighting.

        Args:
            paths: Files to hash

        Returns:
            Number of files recorded
        """
        seeded = 0
        for path in paths:
            key = self._key(path)
            try:
                digest = self._hasher.hash_file(key)
            except OSError as e:
                self.log.warning("seed_failed", path=str(key), error=str(e))
                continue
            if digest is None:
                continue
            self._hash_cache[key] = digest
            seeded += 1

        self.log.info("cache_seeded", file_count=seeded)
        return seeded

    def forget(self, path: Path | str) -> None:
        """Drop the stored digest for a path, if any."""
        self._hash_cache.pop(self._key(path), None)

    def get_digest(self, path: Path | str) -> bytes | None:
        """Get the stored digest for a path."""
        return self._hash_cache.get(self._key(path))

    def clear_cache(self) -> None:
        """Clear all cached digests."""
        self._hash_cache.clear()
        self.log.info("cache_cleared")

    def get_cache_stats(self) -> dict[str, Any]:
        """Get statistics about the cache."""
        return {
            "cached_files": len(self._hash_cache),
            "digest_size": self._hasher.digest_size,
        }

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self._key(path) in self._hash_cache

    def __len__(self) -> int:
        return len(self._hash_cache)
