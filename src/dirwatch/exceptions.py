"""Custom exceptions for the dirwatch package."""


class DirWatchError(Exception):
    """Base exception for all dirwatch errors."""
    pass


class InvalidArgumentError(DirWatchError, ValueError):
    """Bad directory path or missing listener."""
    pass


class InitializationError(DirWatchError):
    """Watcher could not be set up against the watch service."""
    pass


class IllegalStateError(DirWatchError, RuntimeError):
    """Operation is not allowed in the watcher's current state."""
    pass


class WatcherAlreadyStartedError(IllegalStateError):
    """Watcher is already pumping events."""
    pass


class WatcherClosedError(IllegalStateError):
    """Watcher has been closed."""
    pass


class WatcherCloseError(IllegalStateError):
    """Watch service reported an error while being released."""
    pass


class WatchServiceError(DirWatchError):
    """Error reported by the underlying watch service."""
    pass


class ClosedWatchServiceError(WatchServiceError):
    """Watch service has been closed."""
    pass


class WatchInterruptedError(WatchServiceError):
    """A blocking wait on the watch service was interrupted."""
    pass
