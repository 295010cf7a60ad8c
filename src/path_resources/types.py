"""Shared data types for path resources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

__all__ = ["ChangeKind", "ResourceEvent", "ResourceKind"]


class ResourceKind(str, Enum):
    """What a path currently denotes on disk."""

    FILE = "file"
    DIRECTORY = "directory"
    UNKNOWN = "unknown"


class ChangeKind(str, Enum):
    """Kind of change reported by a resource monitor."""

    CREATED = "created"
    DELETED = "deleted"
    MODIFIED = "modified"


@dataclass(frozen=True)
class ResourceEvent:
    """A change observed under a monitored resource.

    Attributes:
        kind: What happened to the path.
        path: Path that changed.
    """

    kind: ChangeKind
    path: Path

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not isinstance(self.kind, ChangeKind):
            raise ValueError(f"Unknown change kind: {self.kind!r}")
