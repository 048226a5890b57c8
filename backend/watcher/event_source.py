"""
hashwatch Event Source.

Cross-platform file system notifications using watchdog, delivered
as two asyncio streams: notifications and watch errors.
Requires Python 3.11+.
"""

import asyncio
import os
import threading
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileCreatedEvent,
    FileModifiedEvent,
    FileDeletedEvent,
    FileMovedEvent,
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
)
from watchdog.observers import Observer
from watchdog.observers.api import EventEmitter

from utils.logger import LoggerMixin


class ChangeKind(str, Enum):
    """Kind of raw file system notification."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


@dataclass(frozen=True)
class Notification:
    """A raw path-level change notification."""

    path: Path
    kind: ChangeKind


class NotificationHandler(FileSystemEventHandler, LoggerMixin):
    """
    Translates watchdog events into Notifications.

    Runs on the observer thread and only enqueues; all filtering and
    hashing happens on the consuming task. Directory events are
    skipped. Errors raised while translating an event are sent to the
    error stream instead of killing the observer thread.
    """

    def __init__(self, source: "EventSource") -> None:
        super().__init__()
        self._source = source

    def _emit(self, path: str | bytes, kind: ChangeKind) -> None:
        self._source.put_notification(Notification(Path(os.fsdecode(path)), kind))

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            super().dispatch(event)
        except Exception as e:
            self._source.put_error(e)

    def on_created(self, event: FileCreatedEvent | DirCreatedEvent) -> None:
        if isinstance(event, DirCreatedEvent):
            return
        self._emit(event.src_path, ChangeKind.CREATED)

    def on_modified(self, event: FileModifiedEvent | DirModifiedEvent) -> None:
        if isinstance(event, DirModifiedEvent):
            return
        self._emit(event.src_path, ChangeKind.MODIFIED)

    def on_deleted(self, event: FileDeletedEvent | DirDeletedEvent) -> None:
        if isinstance(event, DirDeletedEvent):
            return
        self._emit(event.src_path, ChangeKind.DELETED)

    def on_moved(self, event: FileMovedEvent | DirMovedEvent) -> None:
        if isinstance(event, DirMovedEvent):
            return
        # An atomic save lands here: temp file renamed onto the source file
        self._emit(event.src_path, ChangeKind.MOVED)
        self._emit(event.dest_path, ChangeKind.MOVED)


class EventSource(LoggerMixin):
    """
    Watches a set of directories for file changes.

    Each directory is registered non-recursively; the caller decides
    which directories make up the watch set. Notifications and errors
    are queued without limit and in arrival order until consumed.
    """

    def __init__(self) -> None:
        """Initialize the event source."""
        self._handler = NotificationHandler(self)
        self._observer: Any = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._notifications: asyncio.Queue[Notification | None] = asyncio.Queue()
        self._errors: asyncio.Queue[Exception | None] = asyncio.Queue()
        self._watched: list[Path] = []
        self._running = False
        self._previous_excepthook: Any = None

    def start(self) -> None:
        """
        Start the observer.

        Must be called from a running event loop; notifications are
        delivered to that loop.
        """
        if self._running:
            return

        self._loop = asyncio.get_running_loop()
        self._observer = Observer()
        # watchdog threads do not catch their own errors; a dying
        # emitter would otherwise stop its watch without a word
        self._previous_excepthook = threading.excepthook
        threading.excepthook = self._thread_excepthook
        self._observer.start()
        self._running = True
        self.log.debug("event_source_started")

    def watch(self, directory: Path) -> None:
        """
        Register one directory.

        Args:
            directory: Directory whose direct children are watched

        Raises:
            RuntimeError: start() has not been called
            OSError: The directory could not be registered
        """
        if not self._running:
            raise RuntimeError("EventSource.start() must be called before watch()")

        self._observer.schedule(self._handler, str(directory), recursive=False)
        self._watched.append(directory)
        self.log.debug("directory_watched", path=str(directory))

    def close(self) -> None:
        """Release all watches and end both streams."""
        if not self._running:
            return

        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
        self._running = False
        if threading.excepthook == self._thread_excepthook:
            threading.excepthook = self._previous_excepthook

        self._enqueue(self._notifications, None)
        self._enqueue(self._errors, None)
        self.log.info("event_source_closed", watched=len(self._watched))

    def put_notification(self, notification: Notification) -> None:
        """Queue a notification. Safe to call from any thread."""
        self._enqueue(self._notifications, notification)

    def put_error(self, error: Exception) -> None:
        """Queue a watch error. Safe to call from any thread."""
        self._enqueue(self._errors, error)

    def _thread_excepthook(self, args: Any) -> None:
        """Send deaths of watchdog threads to the error stream."""
        thread = args.thread
        if isinstance(thread, EventEmitter) or (
            thread is not None and thread is self._observer
        ):
            if isinstance(args.exc_value, Exception):
                self.log.error("watch_thread_died", thread=thread.name, error=str(args.exc_value))
                self.put_error(args.exc_value)
                return
        self._previous_excepthook(args)

    def _enqueue(self, queue: asyncio.Queue[Any], item: Any) -> None:
        if self._loop is None or self._loop.is_closed():
            self.log.warning("event_dropped_no_loop", item=repr(item))
            return
        self._loop.call_soon_threadsafe(queue.put_nowait, item)

    async def notifications(self) -> AsyncIterator[Notification]:
        """Yield notifications until the source is closed."""
        while True:
            item = await self._notifications.get()
            if item is None:
                return
            yield item

    async def errors(self) -> AsyncIterator[Exception]:
        """Yield watch errors until the source is closed."""
        while True:
            item = await self._errors.get()
            if item is None:
                return
            yield item

    @property
    def is_running(self) -> bool:
        """Check if the observer is running."""
        return self._running

    @property
    def watched_directories(self) -> list[Path]:
        return list(self._watched)

    def __enter__(self) -> "EventSource":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
