"""Path resources: one type for files and directories.

A PathResource wraps a single filesystem path. It tracks the last known
modification time so callers can detect changes made elsewhere, caches
directory listings until they go stale, and composes tree operations
(recursive delete, mkdirs, rename, content replace) out of the
single-path primitives of a FileSystem.

Example usage::

    from path_resources import PathResourceFactory

    factory = PathResourceFactory.create_default()
    resource = factory.create("/tmp/demo/notes.txt")
    resource.set_contents("hello")
    assert resource.get_contents() == "hello"
    resource.get_parent().delete(recursive=True)
"""

from __future__ import annotations

import atexit
import io
import logging
import os
import stat
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from path_resources.errors import IOFailure, PreconditionViolation
from path_resources.types import ResourceKind

if TYPE_CHECKING:
    from path_resources.protocols import (
        FileSystem,
        ResourceFactory,
        ResourceFilter,
        ResourceMonitor,
    )

__all__ = ["PathResource"]

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 64 * 1024


class PathResource:
    """A file, directory or not-yet-existing entry at one path.

    Boolean results are reserved for expected negative outcomes (already
    exists, already absent, missing parent); every other failure of the
    underlying filesystem raises IOFailure.

    Instances are not meant to be shared between threads for mutation, but
    cache rebuilds and location changes are serialised by a per-instance lock.
    """

    def __init__(
        self,
        factory: ResourceFactory,
        path: Path | str,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize a resource.

        Construction never fails for a missing path; existence is checked
        when an operation needs it.

        Args:
            factory: Factory used to wrap parents, children and rename results.
            path: Path to wrap.
            encoding: Default text encoding for content operations.

        Note:
            Prefer ``factory.create(path)`` for construction.
        """
        self._factory = factory
        self._fs: FileSystem = factory.filesystem
        self._path = Path(path)
        self._encoding = encoding
        self._lock = threading.RLock()
        self._children: list[PathResource] | None = None
        self._last_modified_ns: int | None = self._current_mtime_ns()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def location(self) -> Path:
        """The wrapped path."""
        return self._path

    @property
    def name(self) -> str:
        """Final component of the path."""
        return self._path.name

    @property
    def factory(self) -> ResourceFactory:
        """Factory this resource wraps related paths with."""
        return self._factory

    @property
    def kind(self) -> ResourceKind:
        """Live kind of the entry at the path."""
        try:
            mode = self._fs.lstat(self._path).st_mode
        except FileNotFoundError:
            return ResourceKind.UNKNOWN
        except OSError as e:
            raise IOFailure("stat", self._path, e) from e
        if stat.S_ISLNK(mode):
            # Classify links by their target, matching is_directory().
            if self._fs.is_dir(self._path):
                return ResourceKind.DIRECTORY
            if self._fs.is_file(self._path):
                return ResourceKind.FILE
            return ResourceKind.UNKNOWN
        if stat.S_ISDIR(mode):
            return ResourceKind.DIRECTORY
        if stat.S_ISREG(mode):
            return ResourceKind.FILE
        return ResourceKind.UNKNOWN

    def __fspath__(self) -> str:
        return os.fspath(self._path)

    def __eq__(self, other: object) -> bool:
        """Compare by current location; a rename changes equality."""
        if not isinstance(other, PathResource):
            return NotImplemented
        return self._path == other._path

    # The location is mutable, so resources are not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PathResource({str(self._path)!r})"

    def __str__(self) -> str:
        return str(self._path)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        """Check if the path exists right now."""
        return self._fs.exists(self._path)

    def is_directory(self) -> bool:
        """Check if the path is a directory right now."""
        return self._fs.is_dir(self._path)

    def is_file(self) -> bool:
        """Check if the path is a regular file right now."""
        return self._fs.is_file(self._path)

    def get_size(self) -> int:
        """Return the size in bytes reported by stat.

        Raises:
            IOFailure: If the entry cannot be stat'ed.
        """
        return self._stat("size").st_size

    def is_readable(self) -> bool:
        """Check read permission for the current process."""
        return self._fs.access(self._path, os.R_OK)

    def is_writable(self) -> bool:
        """Check write permission for the current process."""
        return self._fs.access(self._path, os.W_OK)

    def is_executable(self) -> bool:
        """Check execute permission for the current process."""
        return self._fs.access(self._path, os.X_OK)

    def get_last_modified(self) -> datetime:
        """Return the live modification time as an aware UTC datetime.

        Raises:
            IOFailure: If the entry cannot be stat'ed.
        """
        mtime_ns = self._stat("get_last_modified").st_mtime_ns
        return datetime.fromtimestamp(mtime_ns / 1_000_000_000, tz=timezone.utc)

    def set_last_modified(self, when: datetime) -> None:
        """Set the modification time of the entry.

        Naive datetimes are interpreted as local time.

        Args:
            when: New modification time.

        Raises:
            IOFailure: If the path is missing or the platform refuses.
        """
        mtime_ns = int(when.timestamp() * 1_000_000) * 1000
        try:
            self._fs.set_mtime_ns(self._path, mtime_ns)
        except OSError as e:
            raise IOFailure("set_last_modified", self._path, e) from e
        self._sync_timestamp()

    def refresh(self) -> None:
        """Record the live modification time, clearing staleness.

        A cached listing taken before the change is dropped, so the next
        list_resources() call sees the current entries.

        Raises:
            IOFailure: If the entry cannot be stat'ed.
        """
        with self._lock:
            live = self._stat("refresh").st_mtime_ns
            if live != self._last_modified_ns:
                self._children = None
            self._last_modified_ns = live

    def is_stale(self) -> bool:
        """Check whether the entry changed since the last refresh.

        Raises:
            IOFailure: If the entry cannot be stat'ed.
        """
        live = self._stat("is_stale").st_mtime_ns
        return live != self._last_modified_ns

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def get_parent(self) -> PathResource | None:
        """Return the resource of the containing directory.

        Returns:
            Parent resource, or None when the path is a filesystem root.
        """
        parent = self._path.parent
        if parent == self._path:
            return None
        return self._factory.create(parent)

    def get_child(self, name: str) -> PathResource:
        """Wrap a path inside this one; it need not exist."""
        return self._factory.create(self._path / name)

    def create_from(self, path: Path | str) -> PathResource:
        """Wrap an arbitrary path with this resource's factory."""
        return self._factory.create(path)

    def list_resources(self) -> list[PathResource]:
        """List the immediate children of a directory.

        The listing is cached until the directory is found stale. Entries
        keep the order the filesystem reports. Non-directories list as empty.

        Raises:
            IOFailure: If the directory cannot be scanned.
        """
        if not self.is_directory():
            return []

        with self._lock:
            if self._children is not None and self.is_stale():
                logger.debug("Discarding stale listing of %s", self._path)
                self._children = None

            if self._children is None:
                try:
                    entries = self._fs.scandir(self._path)
                except OSError as e:
                    raise IOFailure("list", self._path, e) from e
                self._children = [self._factory.create(entry) for entry in entries]
                logger.debug("Listed %d entries in %s", len(self._children), self._path)

            return list(self._children)

    def invalidate(self) -> None:
        """Drop the cached listing."""
        with self._lock:
            self._children = None

    def monitor(self, resource_filter: ResourceFilter | None = None) -> ResourceMonitor:
        """Start monitoring this resource for changes.

        Args:
            resource_filter: Optional predicate selecting which changed
                resources are reported.

        Returns:
            Monitor handle from the factory's watch service.
        """
        return self._factory.monitor(self, resource_filter)

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------

    def mkdir(self) -> bool:
        """Create this directory; parents must already exist.

        Returns:
            True if created, False if the path exists or a parent is missing.

        Raises:
            IOFailure: On any other OS error.
        """
        try:
            self._fs.mkdir(self._path)
        except (FileExistsError, FileNotFoundError) as e:
            logger.debug("mkdir %s refused: %s", self._path, e)
            return False
        except OSError as e:
            raise IOFailure("mkdir", self._path, e) from e
        self._after_create()
        return True

    def mkdirs(self) -> bool:
        """Create this directory and every missing parent.

        Returns:
            True if the directory exists afterwards, False if a non-directory
            occupies the path or one of its ancestors.

        Raises:
            IOFailure: On any other OS error.
        """
        try:
            self._fs.mkdir(self._path, parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as e:
            logger.debug("mkdirs %s refused: %s", self._path, e)
            return False
        except OSError as e:
            raise IOFailure("mkdirs", self._path, e) from e
        self._after_create()
        return True

    def create_new_file(self) -> bool:
        """Create an empty file, creating missing parents first.

        Returns:
            True if created, False if the path already existed.

        Raises:
            IOFailure: If the parents cannot be created, another process
                creates the file concurrently, or the create fails.
        """
        if self.exists():
            return False

        parent = self.get_parent()
        if parent is not None and not parent.mkdirs():
            raise IOFailure("create_new_file", self._path, NotADirectoryError(str(parent)))

        try:
            self._fs.create_file(self._path)
        except OSError as e:
            raise IOFailure("create_new_file", self._path, e) from e
        self._after_create()
        return True

    def create_temp_resource(self) -> PathResource:
        """Create a new, uniquely named empty file in the temp location.

        Raises:
            IOFailure: If the file cannot be created.
        """
        return self._factory.create_temp()

    def delete(self, recursive: bool = False) -> bool:
        """Delete the entry.

        Without ``recursive`` only files, symlinks and empty directories can
        be removed. With ``recursive`` directories are removed depth first,
        each after all of its descendants. The first failing removal aborts
        the traversal; entries removed before it stay removed.

        Args:
            recursive: Remove directory contents too.

        Returns:
            True if removed, False if the path did not exist.

        Raises:
            IOFailure: If any removal fails.
        """
        if not self.exists():
            return False

        with self._lock:
            if recursive:
                self._delete_tree(self._path)
            else:
                self._delete_one(self._path)
            self._children = None
            self._last_modified_ns = None
        logger.debug("Deleted %s (recursive=%s)", self._path, recursive)
        return True

    def delete_on_exit(self) -> None:
        """Delete this entry recursively when the interpreter exits."""
        atexit.register(self._delete_at_exit, self._path)

    def rename_to(self, target: str | PathResource) -> bool:
        """Move the entry and point this resource at its new location.

        A string is resolved against the parent directory, so a bare name
        renames within the same directory. A PathResource moves the entry to
        exactly that resource's path and resets its cached state. Existing
        targets are never overwritten and moves are never emulated by copy.

        Args:
            target: New sibling name or destination resource.

        Returns:
            True once the move succeeded.

        Raises:
            PreconditionViolation: If the name is empty.
            IOFailure: If the source is missing, the target exists, or the
                platform cannot rename atomically (e.g. across devices).
        """
        if isinstance(target, PathResource):
            destination = target.location
        else:
            if not target:
                raise PreconditionViolation("Rename target name must not be empty")
            destination = self._path.parent / target

        with self._lock:
            try:
                self._fs.rename(self._path, destination)
            except OSError as e:
                raise IOFailure("rename", self._path, e) from e
            logger.debug("Renamed %s to %s", self._path, destination)
            self._path = destination
            self._children = None
            self._sync_timestamp()

        if isinstance(target, PathResource):
            target._reset_cached_state()
        return True

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def get_content_input_stream(self) -> BinaryIO:
        """Open the file for binary reading; the caller closes the stream.

        Raises:
            IOFailure: If the path is missing or not a readable file.
        """
        try:
            return self._fs.open_read(self._path)
        except OSError as e:
            raise IOFailure("open", self._path, e) from e

    def get_bytes(self) -> bytes:
        """Read the whole file as bytes."""
        with self.get_content_input_stream() as stream:
            try:
                return stream.read()
            except OSError as e:
                raise IOFailure("read", self._path, e) from e

    def get_contents(self, encoding: str | None = None) -> str:
        """Read the whole file as text.

        Args:
            encoding: Text encoding, the resource default if None.
        """
        return self.get_bytes().decode(encoding or self._encoding)

    def set_contents(
        self,
        data: str | bytes | BinaryIO,
        encoding: str | None = None,
    ) -> PathResource:
        """Replace the file content, creating the file and parents if needed.

        Both the source stream and the output stream are closed on every exit
        path; the output is flushed before it is released.

        Args:
            data: Text, bytes, or a binary stream to copy from.
            encoding: Encoding for text data, the resource default if None.

        Returns:
            This resource.

        Raises:
            PreconditionViolation: If data is None.
            IOFailure: If the file cannot be created or written.
        """
        if data is None:
            raise PreconditionViolation("Content must not be None")
        if isinstance(data, str):
            source: BinaryIO = io.BytesIO(data.encode(encoding or self._encoding))
        elif isinstance(data, (bytes, bytearray)):
            source = io.BytesIO(bytes(data))
        else:
            source = data

        try:
            if not self.exists():
                self.create_new_file()
            try:
                out = self._fs.open_write(self._path)
            except OSError as e:
                raise IOFailure("set_contents", self._path, e) from e
            try:
                self._copy(source, out)
                out.flush()
            finally:
                out.close()
        finally:
            source.close()

        self._sync_timestamp()
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stat(self, operation: str) -> os.stat_result:
        try:
            return self._fs.stat(self._path)
        except OSError as e:
            raise IOFailure(operation, self._path, e) from e

    def _current_mtime_ns(self) -> int | None:
        try:
            return self._fs.stat(self._path).st_mtime_ns
        except OSError:
            return None

    def _sync_timestamp(self) -> None:
        self._last_modified_ns = self._current_mtime_ns()

    def _after_create(self) -> None:
        with self._lock:
            self._children = None
            self._sync_timestamp()

    def _reset_cached_state(self) -> None:
        with self._lock:
            self._children = None
            self._sync_timestamp()

    def _copy(self, source: BinaryIO, out: BinaryIO) -> None:
        while True:
            try:
                chunk = source.read(_COPY_CHUNK_SIZE)
            except OSError as e:
                raise IOFailure("read", self._path, e) from e
            if not chunk:
                return
            try:
                out.write(chunk)
            except OSError as e:
                raise IOFailure("write", self._path, e) from e

    def _delete_one(self, path: Path) -> None:
        try:
            if self._fs.is_dir(path) and not self._fs.is_symlink(path):
                self._fs.rmdir(path)
            else:
                self._fs.unlink(path)
        except OSError as e:
            raise IOFailure("delete", path, e) from e

    def _delete_tree(self, path: Path) -> None:
        """Remove path and everything below it, post-order."""
        if self._fs.is_dir(path) and not self._fs.is_symlink(path):
            try:
                entries = self._fs.scandir(path)
            except OSError as e:
                raise IOFailure("list", path, e) from e
            for entry in entries:
                self._delete_tree(entry)
        self._delete_one(path)

    def _delete_at_exit(self, path: Path) -> None:
        if self._fs.exists(path):
            self._delete_tree(path)
