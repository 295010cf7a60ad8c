"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the collaborators
a PathResource depends on:
- FileSystem: single-path primitives every tree operation is built from
- ResourceFactory: wraps raw paths as resources (parents, children, renames)
- WatchService / ResourceMonitor: file-change monitoring

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

from path_resources.types import ResourceEvent

if TYPE_CHECKING:
    from path_resources.resource import PathResource

ResourceFilter = Callable[["PathResource"], bool]
ResourceListener = Callable[[ResourceEvent], None]


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem primitives.

    Abstracts filesystem access to enable testing without real I/O.
    Every method acts on exactly one path and raises OSError subclasses
    on failure.
    """

    def exists(self, path: Path) -> bool:
        """Check if a path exists.

        Args:
            path: Path to check.

        Returns:
            True if path exists (dangling symlinks included), False otherwise.
        """
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory.

        Args:
            path: Path to check.

        Returns:
            True if path is a directory, False otherwise.
        """
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        ...

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        ...

    def stat(self, path: Path) -> os.stat_result:
        """Stat a path, following symlinks.

        Raises:
            FileNotFoundError: If path does not exist.
        """
        ...

    def lstat(self, path: Path) -> os.stat_result:
        """Stat a path without following symlinks."""
        ...

    def access(self, path: Path, mode: int) -> bool:
        """Probe permissions.

        Args:
            path: Path to probe.
            mode: os.R_OK, os.W_OK or os.X_OK.

        Returns:
            Result of the platform permission check.
        """
        ...

    def set_mtime_ns(self, path: Path, mtime_ns: int) -> None:
        """Set the modification time in nanoseconds.

        Args:
            path: Existing path.
            mtime_ns: New modification time.
        """
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory.

        Args:
            path: Path to create.
            parents: Create parent directories if needed.
            exist_ok: Don't raise if directory exists.
        """
        ...

    def create_file(self, path: Path) -> None:
        """Create an empty file exclusively.

        Raises:
            FileExistsError: If path already exists.
        """
        ...

    def create_temp_file(
        self, prefix: str = "", suffix: str = "", directory: Path | None = None
    ) -> Path:
        """Create a uniquely named empty file.

        Args:
            prefix: File name prefix.
            suffix: File name suffix.
            directory: Target directory, platform default if None.

        Returns:
            Path of the new file.
        """
        ...

    def unlink(self, path: Path) -> None:
        """Remove a file or symlink."""
        ...

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory."""
        ...

    def rename(self, src: Path, dst: Path) -> None:
        """Rename atomically without overwriting.

        Args:
            src: Existing path.
            dst: Target path, must not exist.
        """
        ...

    def scandir(self, path: Path) -> list[Path]:
        """List directory entries in filesystem order.

        Args:
            path: Directory to scan.

        Returns:
            Full paths of the immediate children.
        """
        ...

    def open_read(self, path: Path) -> BinaryIO:
        """Open a file for binary reading."""
        ...

    def open_write(self, path: Path) -> BinaryIO:
        """Open a file for binary writing, truncating existing content."""
        ...


@runtime_checkable
class ResourceFactory(Protocol):
    """Protocol for wrapping paths as resources.

    PathResource uses the factory for its parent, its children, rename
    targets and temp resources, so that callers control which instances
    are handed out.
    """

    filesystem: FileSystem

    def create(self, path: Path | str) -> PathResource:
        """Wrap a path as a resource.

        Args:
            path: Absolute or relative path; it need not exist.

        Returns:
            PathResource over the path.
        """
        ...

    def create_temp(self) -> PathResource:
        """Create a new empty temp file and wrap it.

        Returns:
            PathResource over the new file.
        """
        ...

    def monitor(
        self, resource: PathResource, resource_filter: ResourceFilter | None = None
    ) -> ResourceMonitor:
        """Start monitoring a resource.

        Args:
            resource: Resource to monitor.
            resource_filter: Optional predicate selecting reported resources.

        Returns:
            Monitor handle.
        """
        ...


@runtime_checkable
class ResourceMonitor(Protocol):
    """Protocol for a file-change monitor handle.

    Monitors never start threads; events are produced by ``poll()`` and
    delivered synchronously to registered listeners.
    """

    @property
    def resource(self) -> PathResource:
        """The monitored resource."""
        ...

    @property
    def cancelled(self) -> bool:
        """True once ``cancel()`` was called."""
        ...

    def add_listener(self, listener: ResourceListener) -> None:
        """Register a callback invoked for each reported event."""
        ...

    def remove_listener(self, listener: ResourceListener) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        ...

    def poll(self) -> list[ResourceEvent]:
        """Report changes since the previous poll.

        Returns:
            Events in delivery order.
        """
        ...

    def cancel(self) -> None:
        """Stop monitoring; later polls report nothing."""
        ...


@runtime_checkable
class WatchService(Protocol):
    """Protocol for services that create resource monitors."""

    def watch(
        self,
        resource: PathResource,
        resource_filter: ResourceFilter | None = None,
        wrap: Callable[[Path], PathResource] | None = None,
    ) -> ResourceMonitor:
        """Create a monitor for a resource.

        Args:
            resource: Resource to monitor.
            resource_filter: Optional predicate applied to event resources.
            wrap: Turns event paths into resources for the filter.

        Returns:
            Monitor handle.
        """
        ...
