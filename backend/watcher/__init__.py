"""
hashwatch Watcher Package.

File system notifications, filtering and the dispatch loop.
Requires Python 3.11+.
"""

from watcher.event_source import ChangeKind, EventSource, Notification
from watcher.filters import PathFilter
from watcher.dispatcher import Dispatcher
from watcher.startup import StartupResult, enumerate_watch_directories, start_watching

__all__ = [
    "ChangeKind",
    "EventSource",
    "Notification",
    "PathFilter",
    "Dispatcher",
    "StartupResult",
    "enumerate_watch_directories",
    "start_watching",
]
