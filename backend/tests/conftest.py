"""
hashwatch Test Configuration.

Pytest fixtures and test doubles.
Requires Python 3.11+.
"""

from collections.abc import AsyncIterator, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest

from digest.change_detector import ChangeDetector
from utils.config import get_settings
from utils.errors import RebuildError
from watcher.dispatcher import Dispatcher
from watcher.event_source import Notification
from watcher.filters import PathFilter


class RecordingReporter:
    """Reporter that remembers everything it was told."""

    def __init__(self) -> None:
        self.failures: list[str] = []
        self.changes: list[Any] = []
        self.rebuilding = 0
        self.watching: list[int | None] = []
        self.fatals: list[str] = []

    def report_failure(self, message: str) -> None:
        self.failures.append(message)

    def fatal(self, message: str) -> None:
        self.fatals.append(message)

    def notice_change(self, path: Any) -> None:
        self.changes.append(path)

    def notice_rebuilding(self) -> None:
        self.rebuilding += 1

    def notice_watching(self, directory_count: int | None = None) -> None:
        self.watching.append(directory_count)


class FakeRebuilder:
    """Rebuilder that records calls instead of running a process."""

    def __init__(self, error: RebuildError | None = None) -> None:
        self.calls: list[list[str]] = []
        self.error = error

    async def rebuild(self, extra_args: Sequence[str] = ()) -> None:
        self.calls.append(list(extra_args))
        if self.error is not None:
            raise self.error


class FakeSource:
    """Event source replaying fixed notification and error lists."""

    def __init__(
        self,
        notifications: Sequence[Notification] = (),
        errors: Sequence[Exception] = (),
    ) -> None:
        self._notifications = list(notifications)
        self._errors = list(errors)

    async def notifications(self) -> AsyncIterator[Notification]:
        for notification in self._notifications:
            yield notification

    async def errors(self) -> AsyncIterator[Exception]:
        for error in self._errors:
            yield error


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def rebuilder() -> FakeRebuilder:
    return FakeRebuilder()


@pytest.fixture
def detector() -> ChangeDetector:
    return ChangeDetector()


@pytest.fixture
def path_filter() -> PathFilter:
    return PathFilter(extension=".go", hidden_prefix=".")


@pytest.fixture
def dispatcher(
    detector: ChangeDetector,
    rebuilder: FakeRebuilder,
    reporter: RecordingReporter,
    path_filter: PathFilter,
) -> Dispatcher:
    return Dispatcher(
        detector=detector,
        rebuilder=rebuilder,
        reporter=reporter,
        path_filter=path_filter,
        build_args=["-m"],
    )


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small source tree with hidden and non-source entries."""
    root = tmp_path / "project"
    root.mkdir()

    (root / "a.go").write_text("x")
    (root / "b.txt").write_text("notes")
    (root / ".a.go.swp").write_text("swap")

    sub = root / "pkg"
    sub.mkdir()
    (sub / "util.go").write_text("package pkg\n")

    deeper = sub / "internal"
    deeper.mkdir()
    (deeper / "impl.go").write_text("package internal\n")

    hidden = root / ".git"
    hidden.mkdir()
    (hidden / "objects").mkdir()
    (hidden / "config.go").write_text("not source")

    return root
