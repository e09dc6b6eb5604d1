"""Blocking watch service built on the watchdog library."""

import logging
import os
import queue
import threading
from pathlib import Path
from typing import Dict, List, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .config import DirWatcherConfig
from .exceptions import (
    ClosedWatchServiceError,
    WatchInterruptedError,
    WatchServiceError,
)
from .models import EventKind, WatchEvent

logger = logging.getLogger(__name__)

# Markers placed on the ready queue next to signalled keys.
_WAKEUP = object()
_CLOSED = object()


class WatchKey:
    """
    Registration of a single directory with a WatchService.

    A key is queued on its service once when the first event arrives.
    Later events pile up in the same batch until the batch is drained
    with poll_events() and the key is re-armed with reset().
    """

    def __init__(self, service: "WatchService", path: Path):
        self.path = path
        self.watch = None
        self._service = service
        self._events: List[WatchEvent] = []
        self._signalled = False
        self._valid = True

    @property
    def is_valid(self) -> bool:
        """Check if the registration is still active."""
        return self._valid

    def signal_event(
        self,
        kind: EventKind,
        context: Optional[Path] = None,
        is_directory: bool = False,
    ) -> None:
        """
        Append an event to the pending batch and queue the key.

        Once the batch holds max_pending_events entries, further events
        are folded into a single trailing OVERFLOW event.

        Args:
            kind: Kind of change
            context: Entry name relative to the registered directory
            is_directory: Whether the entry is a directory
        """
        limit = self._service.config.max_pending_events

        with self._service._lock:
            if not self._valid:
                return

            last = self._events[-1] if self._events else None
            if last is not None and last.kind is EventKind.OVERFLOW:
                self._events[-1] = last.with_count(last.count + 1)
            elif kind is EventKind.OVERFLOW or len(self._events) >= limit:
                self._events.append(WatchEvent(EventKind.OVERFLOW, directory=self.path))
            else:
                self._events.append(
                    WatchEvent(kind, context, self.path, is_directory=is_directory)
                )

            self._signal_locked()

    def poll_events(self) -> List[WatchEvent]:
        """
        Drain the pending batch.

        Returns:
            Events in the order they were received
        """
        with self._service._lock:
            events, self._events = self._events, []
            return events

    def reset(self) -> bool:
        """
        Re-arm the key after its batch was drained.

        Returns:
            True if the key is still valid
        """
        with self._service._lock:
            if not self._valid:
                return False
            if self._signalled:
                if self._events:
                    self._service._ready.put(self)
                else:
                    self._signalled = False
            return True

    def cancel(self) -> None:
        """Drop the registration. Pending events are discarded."""
        with self._service._lock:
            self._valid = False
            self._events = []
        self._service._unregister(self)

    def _invalidate(self) -> None:
        """Mark the key invalid and wake a waiter so it sees the change."""
        with self._service._lock:
            if not self._valid:
                return
            self._valid = False
            self._signal_locked()

    def _signal_locked(self) -> None:
        if not self._signalled:
            self._signalled = True
            self._service._ready.put(self)

    def __repr__(self) -> str:
        return f"WatchKey({str(self.path)!r}, valid={self._valid})"


class _KeyEventHandler(FileSystemEventHandler):
    """Handler that converts watchdog events into events on a WatchKey."""

    def __init__(self, key: WatchKey, config: DirWatcherConfig):
        super().__init__()
        self.key = key
        self.config = config

    def _entry_name(self, path) -> Optional[Path]:
        """Name of path inside the registered directory, or None if outside."""
        path = Path(os.fsdecode(path))
        if path.parent != self.key.path:
            return None
        if self.config.should_ignore(path):
            return None
        return Path(path.name)

    def _emit(self, kind: EventKind, src_path, is_directory: bool):
        name = self._entry_name(src_path)
        if name is not None:
            self.key.signal_event(kind, name, is_directory=is_directory)

    def on_created(self, event):
        self._emit(EventKind.CREATE, event.src_path, event.is_directory)

    def on_modified(self, event):
        self._emit(EventKind.MODIFY, event.src_path, event.is_directory)

    def on_deleted(self, event):
        if Path(os.fsdecode(event.src_path)) == self.key.path:
            logger.debug(f"Registered directory removed: {self.key.path}")
            self.key._invalidate()
            return
        self._emit(EventKind.DELETE, event.src_path, event.is_directory)

    def on_moved(self, event):
        self._emit(EventKind.DELETE, event.src_path, event.is_directory)
        self._emit(EventKind.CREATE, event.dest_path, event.is_directory)


class WatchService:
    """
    Blocking source of directory change events.

    Directories are registered individually (non-recursively). Consumers
    block in take() for the next key with pending events, drain it and
    re-arm it with WatchKey.reset().
    """

    def __init__(self, config: Optional[DirWatcherConfig] = None):
        """
        Initialize and start the watch service.

        Args:
            config: Watcher configuration

        Raises:
            WatchServiceError: If the underlying observer cannot be started
        """
        self.config = config or DirWatcherConfig()
        self._lock = threading.RLock()
        self._ready: "queue.Queue" = queue.Queue()
        self._keys: Dict[Path, WatchKey] = {}
        self._closed = False

        try:
            if self.config.use_polling:
                self._observer = PollingObserver(timeout=self.config.polling_interval)
            else:
                self._observer = Observer()
            self._observer.start()
        except (OSError, RuntimeError) as e:
            raise WatchServiceError(f"could not start observer: {e}") from e

    @property
    def closed(self) -> bool:
        """Check if the service has been closed."""
        return self._closed

    def register(self, path: Path) -> WatchKey:
        """
        Register a directory for create, modify and delete events.

        Registering the same directory twice returns the existing key.

        Args:
            path: Directory to register

        Returns:
            The WatchKey for the directory

        Raises:
            ClosedWatchServiceError: If the service is closed
            WatchServiceError: If the directory cannot be watched
        """
        path = Path(path).resolve()

        with self._lock:
            self._check_open()
            existing = self._keys.get(path)
            if existing is not None and existing.is_valid:
                return existing

        if not path.is_dir():
            raise WatchServiceError(f"Not a directory: {path}")

        key = WatchKey(self, path)
        handler = _KeyEventHandler(key, self.config)

        # Scheduling takes the observer's lock, which its dispatch thread
        # holds while calling handlers that need ours.
        try:
            key.watch = self._observer.schedule(handler, str(path), recursive=False)
        except (OSError, RuntimeError) as e:
            raise WatchServiceError(f"Could not register {path}: {e}") from e

        with self._lock:
            if not self._closed:
                self._keys[path] = key
                logger.debug(f"Registered {path}")
                return key

        self._unschedule(key)
        raise ClosedWatchServiceError("Watch service closed during registration")

    def take(self, cancel: Optional[threading.Event] = None) -> WatchKey:
        """
        Block until a key has pending events.

        Args:
            cancel: Event that, once set and followed by wakeup(), interrupts the wait

        Returns:
            The next signalled key

        Raises:
            WatchInterruptedError: If cancel is set
            ClosedWatchServiceError: If the service is closed
        """
        return self._next_key(cancel, None)

    def poll(
        self,
        timeout: float,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[WatchKey]:
        """
        Wait up to timeout seconds for a key with pending events.

        Returns:
            The next signalled key, or None if the timeout elapsed
        """
        try:
            return self._next_key(cancel, timeout)
        except queue.Empty:
            return None

    def wakeup(self) -> None:
        """Wake a thread blocked in take() so it re-checks its cancel event."""
        self._ready.put(_WAKEUP)

    def close(self) -> None:
        """
        Close the service, cancelling every registration.

        Threads blocked in take() raise ClosedWatchServiceError.
        Closing an already closed service does nothing.

        Raises:
            WatchServiceError: If the observer fails to stop
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for key in self._keys.values():
                key._valid = False
            self._keys.clear()

        self._ready.put(_CLOSED)

        try:
            self._observer.unschedule_all()
            self._observer.stop()
            self._observer.join()
        except (OSError, RuntimeError) as e:
            raise WatchServiceError(f"Error stopping observer: {e}") from e

        logger.debug("Watch service closed")

    def _next_key(self, cancel: Optional[threading.Event], timeout: Optional[float]) -> WatchKey:
        while True:
            self._check_open()
            if cancel is not None and cancel.is_set():
                raise WatchInterruptedError("Wait for events was interrupted")

            item = self._ready.get(timeout=timeout)

            if item is _CLOSED:
                # Leave the marker for other waiters
                self._ready.put(_CLOSED)
                raise ClosedWatchServiceError("Watch service is closed")
            if item is _WAKEUP:
                continue
            return item

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedWatchServiceError("Watch service is closed")

    def _unregister(self, key: WatchKey) -> None:
        with self._lock:
            if self._keys.get(key.path) is key:
                del self._keys[key.path]
        self._unschedule(key)

    def _unschedule(self, key: WatchKey) -> None:
        if key.watch is None or self._closed:
            return
        try:
            self._observer.unschedule(key.watch)
        except KeyError:
            pass
        key.watch = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def list_subdirectories(path: Path, follow_symlinks: bool = False) -> List[Path]:
    """
    List the directories directly inside path.

    Args:
        path: Directory to scan
        follow_symlinks: Whether to include symlinks that point to directories

    Returns:
        Sorted list of subdirectory paths

    Raises:
        OSError: If the directory cannot be read
    """
    subdirs = []
    for entry in Path(path).iterdir():
        if entry.is_symlink() and not follow_symlinks:
            continue
        if entry.is_dir():
            subdirs.append(entry)
    return sorted(subdirs)
