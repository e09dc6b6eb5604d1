"""Configuration for the dirwatch package."""

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .exceptions import InvalidArgumentError


@dataclass
class DirWatcherConfig:
    """
    Configuration options for a directory watcher.
    
    Attributes:
        max_pending_events: Events buffered per registration before overflow
        follow_symlinks: Whether symlinked subdirectories are registered
        use_polling: Use the polling observer instead of the native one
        polling_interval: Seconds between scans when polling
        thread_name: Name of the event pump thread
        daemon: Whether the event pump thread is a daemon thread
        ignore_patterns: Glob patterns for entries to ignore
    """
    max_pending_events: int = 512
    follow_symlinks: bool = False
    use_polling: bool = False
    polling_interval: float = 1.0
    thread_name: str = "DirWatcher"
    daemon: bool = True
    ignore_patterns: List[str] = field(default_factory=list)

    def validate(self) -> None:
        """
        Check that the configured values are usable.
        
        Raises:
            InvalidArgumentError: If a size or interval is not positive,
                the thread name is empty or daemon is not a bool
        """
        if self.max_pending_events < 1:
            raise InvalidArgumentError(
                f"max_pending_events must be positive: {self.max_pending_events}"
            )
        if self.polling_interval <= 0:
            raise InvalidArgumentError(
                f"polling_interval must be positive: {self.polling_interval}"
            )
        if not isinstance(self.thread_name, str) or not self.thread_name:
            raise InvalidArgumentError(
                f"thread_name must be a non-empty string: {self.thread_name!r}"
            )
        if not isinstance(self.daemon, bool):
            raise InvalidArgumentError(f"daemon must be a bool: {self.daemon!r}")

    def should_ignore(self, path: Path) -> bool:
        """
        Check if a path should be ignored based on ignore patterns.
        
        Args:
            path: Path to check
            
        Returns:
            True if the path should be ignored
        """
        path_str = str(path)
        name = path.name
        
        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(name, pattern):
                return True
            if fnmatch.fnmatch(path_str, f"*/{pattern}"):
                return True
        
        return False
