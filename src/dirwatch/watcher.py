"""Directory watcher with a background event pump."""

import logging
import threading
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Union

from .config import DirWatcherConfig
from .exceptions import (
    ClosedWatchServiceError,
    InitializationError,
    InvalidArgumentError,
    WatchInterruptedError,
    WatchServiceError,
    WatcherAlreadyStartedError,
    WatcherCloseError,
    WatcherClosedError,
)
from .listeners import DirListener, ListenerRegistry
from .models import EventKind, WatchEvent
from .service import WatchKey, WatchService, list_subdirectories

logger = logging.getLogger(__name__)


class DirWatcher:
    """
    Watches a directory and its existing subdirectories for changes.

    The root and every subdirectory present at construction time are
    registered once. Subdirectories created later are not watched.
    Events are pumped on a single background thread and dispatched to
    listeners in registration order.
    """

    def __init__(
        self,
        path: Union[str, Path],
        config: Optional[DirWatcherConfig] = None,
    ):
        """
        Initialize the watcher and register the directories.

        Args:
            path: Root directory to watch
            config: Watcher configuration

        Raises:
            InvalidArgumentError: If path is not an existing directory
            InitializationError: If the watch service cannot be set up
        """
        if path is None:
            raise InvalidArgumentError("Path must not be None")

        root = Path(path)
        if not root.exists() or not root.is_dir():
            raise InvalidArgumentError(f"Directory does not exist or is not a directory: {path}")

        self.config = config or DirWatcherConfig()
        self.config.validate()

        self._root = root.resolve()
        self._listeners = ListenerRegistry()
        self._keys: Dict[WatchKey, Path] = {}
        self._registered: FrozenSet[Path] = frozenset()

        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._closed = False

        try:
            self._service = WatchService(self.config)
        except (WatchServiceError, OSError) as e:
            raise InitializationError("could not create watch service") from e

        try:
            self._register_directories()
        except InitializationError:
            self._release_service()
            raise

        logger.info(f"Watching {self._root} ({len(self._keys)} directories)")

    def _register_directories(self) -> None:
        """Register the root and its immediate subdirectories."""
        try:
            subdirs = list_subdirectories(self._root, self.config.follow_symlinks)
        except OSError as e:
            raise InitializationError("could not enumerate subdirectories") from e

        directories = [self._root] + subdirs
        for directory in directories:
            try:
                key = self._service.register(directory)
            except (WatchServiceError, OSError) as e:
                raise InitializationError("could not register with watch service") from e
            self._keys[key] = directory

        self._registered = frozenset(directories)

    def _release_service(self) -> None:
        """Close the service after a failed construction."""
        try:
            self._service.close()
        except WatchServiceError as e:
            logger.warning(f"Error releasing watch service: {e}")

    @property
    def root(self) -> Path:
        """The watched root directory."""
        return self._root

    @property
    def registered_directories(self) -> FrozenSet[Path]:
        """Directories registered at construction time."""
        return self._registered

    def add_listener(self, listener: DirListener) -> None:
        """
        Add a listener. Adding a registered listener again does nothing.

        Raises:
            InvalidArgumentError: If listener is None
        """
        self._listeners.add(listener)

    def remove_listener(self, listener: DirListener) -> bool:
        """
        Remove a listener.

        Returns:
            True if the listener was removed, False if it was not registered

        Raises:
            InvalidArgumentError: If listener is None
        """
        return self._listeners.remove(listener)

    def start_watch(self) -> None:
        """
        Start pumping events on a background thread.

        Returns once the thread is started.

        Raises:
            WatcherClosedError: If the watcher is closed
            WatcherAlreadyStartedError: If already started
        """
        with self._lock:
            if self._closed:
                raise WatcherClosedError("closed")
            if self.is_started():
                raise WatcherAlreadyStartedError("already started")

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._pump_loop,
                args=(stop_event,),
                name=self.config.thread_name,
                daemon=self.config.daemon,
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()

        logger.debug(f"Started watching {self._root}")

    def stop_watch(self) -> None:
        """
        Stop the pump thread and wait for it to exit.

        Registrations are kept, so the watcher can be started again.
        Stopping a watcher that is not started does nothing.

        Raises:
            WatcherClosedError: If the watcher is closed
        """
        with self._lock:
            if self._closed:
                raise WatcherClosedError("closed")
            thread = self._request_stop_locked()

        self._join(thread)

    def _request_stop_locked(self) -> Optional[threading.Thread]:
        """Signal the pump thread to stop and return it, if it is running."""
        thread = self._thread
        if thread is None or not thread.is_alive():
            return None

        self._stop_event.set()
        self._service.wakeup()
        return thread

    def _join(self, thread: Optional[threading.Thread]) -> None:
        # A listener may stop the watcher from the pump thread itself
        if thread is None or thread is threading.current_thread():
            return
        thread.join()
        logger.debug(f"Stopped watching {self._root}")

    def close(self) -> None:
        """
        Stop the pump thread and release the watch service.

        The watcher is closed even when releasing the service fails.
        Closing a closed watcher does nothing.

        Raises:
            WatcherCloseError: If the watch service fails to close
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._request_stop_locked()

        self._join(thread)

        try:
            self._service.close()
        except WatchServiceError as e:
            raise WatcherCloseError("error closing service") from e

        logger.info(f"Closed watcher for {self._root}")

    def is_started(self) -> bool:
        """Check if the pump thread is running."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    def is_closed(self) -> bool:
        """Check if the watcher has been closed."""
        return self._closed

    def _pump_loop(self, stop_event: threading.Event) -> None:
        """Worker loop that waits for signalled keys and dispatches their events."""
        logger.debug("Pump loop started")

        while self._keys and not stop_event.is_set():
            try:
                key = self._service.take(stop_event)
            except (WatchInterruptedError, ClosedWatchServiceError):
                break

            directory = self._keys.get(key, key.path)

            for event in key.poll_events():
                if stop_event.is_set():
                    break
                self._dispatch(event)

            if not key.reset():
                self._keys.pop(key, None)
                key.cancel()
                logger.info(f"Registration no longer valid: {directory}")

        logger.debug("Pump loop exited")

    def _dispatch(self, event: WatchEvent) -> None:
        """Translate one raw event into listener callbacks."""
        if event.kind is EventKind.OVERFLOW:
            logger.warning(f"Event overflow, {event.count} event(s) dropped")
            self._notify("on_overflow", event)
        elif event.kind is EventKind.CREATE:
            self._notify("on_create", event)
        elif event.kind is EventKind.MODIFY:
            self._notify("on_modify", event)
        elif event.kind is EventKind.DELETE:
            self._notify("on_delete", event, self._was_directory(event))

    def _was_directory(self, event: WatchEvent) -> bool:
        """Decide whether a deleted entry was a directory."""
        return event.is_directory or event.path in self._registered

    def _notify(self, callback: str, *args) -> None:
        """Call a listener method on every listener, isolating failures."""
        for listener in self._listeners.snapshot():
            try:
                getattr(listener, callback)(*args)
            except Exception:
                logger.exception(f"Listener {listener!r} failed in {callback}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"DirWatcher({str(self._root)!r}, started={self.is_started()}, closed={self._closed})"
