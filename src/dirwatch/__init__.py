"""
Directory Watcher Package

Watches a directory and its existing subdirectories for changes and
reports them to listeners from a background event pump.

Features:
- Registration of the root and its immediate subdirectories
- Create, modify, delete and overflow callbacks
- Start/stop/close lifecycle that is safe to drive from any thread
- Listener failures isolated from the event pump
"""

from .models import EventKind, WatchEvent

from .config import DirWatcherConfig

from .exceptions import (
    DirWatchError,
    InvalidArgumentError,
    InitializationError,
    IllegalStateError,
    WatcherAlreadyStartedError,
    WatcherClosedError,
    WatcherCloseError,
    WatchServiceError,
    ClosedWatchServiceError,
    WatchInterruptedError,
)

from .service import WatchService, WatchKey, list_subdirectories
from .listeners import DirListener, ListenerRegistry
from .watcher import DirWatcher


__all__ = [
    # Models
    "EventKind",
    "WatchEvent",
    # Config
    "DirWatcherConfig",
    # Exceptions
    "DirWatchError",
    "InvalidArgumentError",
    "InitializationError",
    "IllegalStateError",
    "WatcherAlreadyStartedError",
    "WatcherClosedError",
    "WatcherCloseError",
    "WatchServiceError",
    "ClosedWatchServiceError",
    "WatchInterruptedError",
    # Components
    "WatchService",
    "WatchKey",
    "list_subdirectories",
    "DirListener",
    "ListenerRegistry",
    # Watcher
    "DirWatcher",
]

__version__ = "0.1.0"
