"""
hashwatch Dispatcher.

The watch loop: filters notifications, asks the change detector
whether anything really changed, and runs the rebuild.
Requires Python 3.11+.
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Any, Protocol

from builder.rebuild import Rebuilder
from digest.change_detector import ChangeDetector
from utils.errors import DigestError, RebuildError
from utils.logger import LoggerMixin
from watcher.event_source import Notification
from watcher.filters import PathFilter


class Reporter(Protocol):
    """Where user-visible notices and failures go."""

    def report_failure(self, message: str) -> None: ...

    def notice_change(self, path: Any) -> None: ...

    def notice_rebuilding(self) -> None: ...


class NotificationStream(Protocol):
    """Anything that yields notifications and watch errors."""

    def notifications(self) -> AsyncIterator[Notification]: ...

    def errors(self) -> AsyncIterator[Exception]: ...


_STREAM_END = object()


class Dispatcher(LoggerMixin):
    """
    Turns confirmed changes into rebuilds.

    Notifications are handled one at a time in arrival order, so the
    change detector is only ever used from this one task. Per-event
    failures are reported and never stop the loop.
    """

    def __init__(
        self,
        detector: ChangeDetector,
        rebuilder: Rebuilder,
        reporter: Reporter,
        path_filter: PathFilter | None = None,
        build_args: Sequence[str] = (),
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            detector: Change detector owning the digest cache
            rebuilder: Runs the build on a confirmed change
            reporter: Receives change notices and failure messages
            path_filter: Ignore filter, built from settings if None
            build_args: Extra arguments passed to every build
        """
        self._detector = detector
        self._rebuilder = rebuilder
        self._reporter = reporter
        self._filter = path_filter or PathFilter()
        self._build_args = list(build_args)
        self._rebuild_count = 0

    @property
    def rebuild_count(self) -> int:
        """Number of rebuilds triggered so far."""
        return self._rebuild_count

    async def handle_notification(self, notification: Notification) -> bool:
        """
        Process a single notification.

        Args:
            notification: Raw notification from the event source

        Returns:
            True if a rebuild was run
        """
        path = notification.path

        if self._filter.should_ignore(path):
            return False

        try:
            changed = self._detector.did_change(path)
        except DigestError as e:
            self._reporter.report_failure(str(e))
            return False

        if not changed:
            self.log.debug("notification_discarded", path=str(path), kind=notification.kind.value)
            return False

        self._reporter.notice_change(path)
        self._reporter.notice_rebuilding()
        self._rebuild_count += 1
        try:
            await self._rebuilder.rebuild(self._build_args)
        except RebuildError as e:
            self.log.info("rebuild_failed", path=str(path), returncode=e.returncode)
            self._reporter.report_failure(str(e))
        return True

    def handle_error(self, error: BaseException) -> None:
        """Report an error from the event source."""
        self.log.warning("watch_error", error=str(error))
        self._reporter.report_failure(str(error))

    async def _pump(self, stream: AsyncIterator[Any], inbox: asyncio.Queue[Any]) -> None:
        try:
            async for item in stream:
                await inbox.put(item)
        except Exception as e:
            inbox.put_nowait(e)
        finally:
            inbox.put_nowait(_STREAM_END)

    async def run(self, source: NotificationStream) -> None:
        """
        Drain a source until both of its streams end.

        Notifications and errors are merged into one queue in arrival
        order so neither stream can starve the other.

        Args:
            source: Event source to consume
        """
        inbox: asyncio.Queue[Any] = asyncio.Queue()
        pumps = [
            asyncio.create_task(self._pump(source.notifications(), inbox)),
            asyncio.create_task(self._pump(source.errors(), inbox)),
        ]
        open_streams = len(pumps)
        self.log.info("dispatcher_started")

        try:
            while open_streams:
                item = await inbox.get()
                if item is _STREAM_END:
                    open_streams -= 1
                    continue
                try:
                    if isinstance(item, Notification):
                        await self.handle_notification(item)
                    else:
                        self.handle_error(item)
                except Exception as e:
                    self.log.exception("dispatch_failed", error=str(e))
                    self._reporter.report_failure(str(e))
        finally:
            for pump in pumps:
                pump.cancel()
            await asyncio.gather(*pumps, return_exceptions=True)
            self.log.info("dispatcher_stopped", rebuilds=self._rebuild_count)
