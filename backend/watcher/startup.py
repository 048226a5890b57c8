"""
hashwatch Startup.

Locates the root, collects the directories to watch and registers
them. Any failure here is fatal and is returned, not raised.
Requires Python 3.11+.
"""

import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from utils.config import get_settings
from utils.errors import StartupError
from utils.logger import get_logger
from watcher.event_source import EventSource
from watcher.filters import PathFilter

logger = get_logger("startup")


@dataclass
class StartupResult:
    """Outcome of the startup sequence."""

    root: Path | None = None
    directories: list[Path] = field(default_factory=list)
    source: EventSource | None = None
    error: StartupError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.source is not None


def resolve_root(root: Path | str | None = None) -> Path:
    """
    Determine the directory to watch.

    Args:
        root: Explicit root, or None for the current working directory

    Raises:
        StartupError: The working directory could not be determined
    """
    if root is not None:
        return Path(root).absolute()
    try:
        return Path(os.getcwd())
    except OSError as e:
        raise StartupError(f"cannot determine working directory: {e.strerror or e}") from e


def enumerate_watch_directories(
    root: Path,
    hidden_prefix: str | None = None,
) -> list[Path]:
    """
    Recursively list the directories to watch under root.

    Directories whose name starts with the hidden marker are skipped
    and not descended into. The root itself is always included.

    Args:
        root: Directory to start from
        hidden_prefix: Hidden-name marker, from settings if None

    Returns:
        Root first, then subdirectories in walk order

    Raises:
        StartupError: The root is not a directory or the walk failed
    """
    hidden_prefix = hidden_prefix or get_settings().watcher.hidden_prefix

    if not root.is_dir():
        raise StartupError(f"not a directory: {root}", path=root)

    def _raise(error: OSError) -> None:
        raise StartupError(
            f"cannot read directory {error.filename}: {error.strerror or error}",
            path=Path(error.filename) if error.filename else None,
        ) from error

    directories: list[Path] = []
    for dirpath, dirnames, _ in os.walk(root, onerror=_raise):
        # Prune in place so os.walk does not descend into hidden dirs
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(hidden_prefix))
        directories.append(Path(dirpath))

    return directories


def iter_source_files(
    directories: Iterable[Path],
    path_filter: PathFilter,
) -> Iterator[Path]:
    """Yield files directly inside the watch set that pass the filter."""
    for directory in directories:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.warning("directory_unreadable", path=str(directory), error=str(e))
            continue
        for entry in entries:
            if entry.is_file() and not path_filter.should_ignore(entry):
                yield entry


def start_watching(
    root: Path | str | None = None,
    hidden_prefix: str | None = None,
    source_factory: Callable[[], EventSource] = EventSource,
) -> StartupResult:
    """
    Run the startup sequence.

    Must be called from a running event loop. On failure the event
    source, if created, is closed again and no directory stays
    watched.

    Args:
        root: Directory to watch, the working directory if None
        hidden_prefix: Hidden-name marker, from settings if None
        source_factory: Creates the event source

    Returns:
        StartupResult holding either the running source or the error
    """
    try:
        resolved = resolve_root(root)
        directories = enumerate_watch_directories(resolved, hidden_prefix)
    except StartupError as e:
        logger.error("startup_failed", stage="enumerate", error=str(e))
        return StartupResult(error=e)

    source = source_factory()
    try:
        source.start()
        for directory in directories:
            source.watch(directory)
    except (OSError, RuntimeError) as e:
        source.close()
        error = StartupError(f"cannot watch {resolved}: {e}", path=resolved)
        error.__cause__ = e
        logger.error("startup_failed", stage="watch", error=str(e))
        return StartupResult(root=resolved, directories=directories, error=error)

    logger.info("watching", root=str(resolved), directories=len(directories))
    return StartupResult(root=resolved, directories=directories, source=source)
