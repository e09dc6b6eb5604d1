"""Listener interface and thread-safe listener registry."""

import threading
from abc import ABC, abstractmethod
from typing import List, Tuple

from .exceptions import InvalidArgumentError
from .models import WatchEvent


class DirListener(ABC):
    """
    Receiver of directory change callbacks.

    Callbacks run synchronously on the watcher's pump thread, so slow
    work should be handed off elsewhere.
    """

    @abstractmethod
    def on_create(self, event: WatchEvent) -> None:
        """An entry was created in a registered directory."""
        pass

    @abstractmethod
    def on_modify(self, event: WatchEvent) -> None:
        """
        An entry was modified.

        A single write may be reported more than once.
        """
        pass

    @abstractmethod
    def on_delete(self, event: WatchEvent, is_directory: bool) -> None:
        """
        An entry was deleted.

        Args:
            event: The delete event
            is_directory: Whether the deleted entry was a directory
        """
        pass

    @abstractmethod
    def on_overflow(self, event: WatchEvent) -> None:
        """Events were dropped because the pending buffer was full."""
        pass


class ListenerRegistry:
    """
    Thread-safe, insertion-ordered set of listeners.

    Listeners are compared by identity, so two equal but distinct
    listener objects are both kept.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._listeners: List[DirListener] = []
        self._lock = threading.Lock()

    def add(self, listener: DirListener) -> bool:
        """
        Add a listener at the end of the dispatch order.

        Args:
            listener: Listener to add

        Returns:
            True if the listener was added, False if already registered

        Raises:
            InvalidArgumentError: If listener is None
        """
        if listener is None:
            raise InvalidArgumentError("Listener must not be None")

        with self._lock:
            if any(existing is listener for existing in self._listeners):
                return False
            self._listeners.append(listener)
            return True

    def remove(self, listener: DirListener) -> bool:
        """
        Remove a listener.

        Args:
            listener: Listener to remove

        Returns:
            True if the listener was removed, False if not found

        Raises:
            InvalidArgumentError: If listener is None
        """
        if listener is None:
            raise InvalidArgumentError("Listener must not be None")

        with self._lock:
            for i, existing in enumerate(self._listeners):
                if existing is listener:
                    del self._listeners[i]
                    return True
            return False

    def snapshot(self) -> Tuple[DirListener, ...]:
        """
        Get the current listeners in dispatch order.

        Returns:
            Tuple of listeners
        """
        with self._lock:
            return tuple(self._listeners)

    def clear(self) -> int:
        """
        Remove all listeners.

        Returns:
            Number of listeners removed
        """
        with self._lock:
            count = len(self._listeners)
            self._listeners.clear()
            return count

    def __len__(self) -> int:
        """Return the number of registered listeners."""
        with self._lock:
            return len(self._listeners)

    def __contains__(self, listener: DirListener) -> bool:
        """Check if a listener is registered."""
        with self._lock:
            return any(existing is listener for existing in self._listeners)
