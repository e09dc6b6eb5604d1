"""Data models for directory watch events."""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class EventKind(str, Enum):
    """Kinds of events delivered to listeners."""
    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"
    OVERFLOW = "overflow"


@dataclass(frozen=True)
class WatchEvent:
    """
    A single change reported for a registered directory.
    
    Attributes:
        kind: The kind of change
        context: Entry name relative to the registered directory (None for overflow)
        directory: The registered directory the event was delivered on
        is_directory: Whether the platform reported the entry as a directory
        count: Number of occurrences folded into this event
        timestamp: Unix timestamp when the event was received
    """
    kind: EventKind
    context: Optional[Path] = None
    directory: Optional[Path] = None
    is_directory: bool = False
    count: int = 1
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.kind is not EventKind.OVERFLOW and self.context is None:
            raise ValueError(f"{self.kind.value} event requires a context path")
        if self.context is not None and self.context.is_absolute():
            raise ValueError(f"context must be relative: {self.context}")

    @property
    def path(self) -> Optional[Path]:
        """Full path of the changed entry, if the event carries one."""
        if self.context is None or self.directory is None:
            return self.context
        return self.directory / self.context

    def with_count(self, count: int) -> "WatchEvent":
        """Return a copy of this event with a different occurrence count."""
        return WatchEvent(
            kind=self.kind,
            context=self.context,
            directory=self.directory,
            is_directory=self.is_directory,
            count=count,
            timestamp=self.timestamp,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "context": str(self.context) if self.context else None,
            "directory": str(self.directory) if self.directory else None,
            "is_directory": self.is_directory,
            "count": self.count,
            "timestamp": self.timestamp,
        }
