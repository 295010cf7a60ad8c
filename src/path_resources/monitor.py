"""Resource monitors.

Monitors compare cheap stat signatures of a resource and its descendants
between polls. They never start threads: callers drive them by calling
``poll()``, and listeners are invoked synchronously from that call.

Delivery semantics of PollingResourceMonitor:
- events are ordered DELETED, then CREATED, then MODIFIED, each group
  sorted by path
- a change that is undone before the next poll is not reported
- MODIFIED means the mtime, size or mode of an entry changed
"""

from __future__ import annotations

import logging
import stat
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from path_resources.errors import IOFailure
from path_resources.types import ChangeKind, ResourceEvent

if TYPE_CHECKING:
    from path_resources.protocols import FileSystem, ResourceFilter, ResourceListener
    from path_resources.resource import PathResource

logger = logging.getLogger(__name__)

StatSignature = tuple[int, int, int]


class NullResourceMonitor:
    """Monitor that never reports changes."""

    def __init__(self, resource: PathResource) -> None:
        self._resource = resource
        self._listeners: list[ResourceListener] = []
        self._cancelled = False

    @property
    def resource(self) -> PathResource:
        return self._resource

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_listener(self, listener: ResourceListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ResourceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def poll(self) -> list[ResourceEvent]:
        return []

    def cancel(self) -> None:
        self._cancelled = True


class NullWatchService:
    """Watch service handing out monitors that never report changes."""

    def watch(
        self,
        resource: PathResource,
        resource_filter: ResourceFilter | None = None,
        wrap: Callable[[Path], PathResource] | None = None,
    ) -> NullResourceMonitor:
        return NullResourceMonitor(resource)


def _path_stat_signature(fs: FileSystem, path: Path) -> StatSignature | None:
    """Return an (mtime_ns, size, mode) tuple, or None if path is gone.

    Raises:
        IOFailure: If the entry exists but cannot be stat'ed.
    """
    try:
        st = fs.lstat(path)
    except FileNotFoundError:
        return None
    except OSError as e:
        raise IOFailure("monitor", path, e) from e
    return (st.st_mtime_ns, st.st_size, st.st_mode)


class PollingResourceMonitor:
    """Monitor that diffs stat snapshots on every poll."""

    def __init__(
        self,
        resource: PathResource,
        resource_filter: ResourceFilter | None = None,
        wrap: Callable[[Path], PathResource] | None = None,
        recursive: bool = True,
    ) -> None:
        """Initialize the monitor and take the baseline snapshot.

        Args:
            resource: Resource to monitor.
            resource_filter: Optional predicate; events whose resource it
                rejects are dropped.
            wrap: Turns event paths into resources for the filter.
            recursive: Watch all descendants instead of direct children.

        Raises:
            IOFailure: If the baseline snapshot cannot be taken.
        """
        self._resource = resource
        self._fs: FileSystem = resource.factory.filesystem
        self._filter = resource_filter
        self._wrap = wrap or resource.create_from
        self._recursive = recursive
        self._listeners: list[ResourceListener] = []
        self._cancelled = False
        self._snapshot = self._take_snapshot()

    @property
    def resource(self) -> PathResource:
        """The monitored resource."""
        return self._resource

    @property
    def cancelled(self) -> bool:
        """True once ``cancel()`` was called."""
        return self._cancelled

    def add_listener(self, listener: ResourceListener) -> None:
        """Register a callback invoked for each reported event."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ResourceListener) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def poll(self) -> list[ResourceEvent]:
        """Report changes since the previous poll and notify listeners.

        Raises:
            IOFailure: If an entry under the resource cannot be read. The
                previous snapshot is kept, so a later poll can recover.
        """
        if self._cancelled:
            return []

        current = self._take_snapshot()
        events = self._diff(self._snapshot, current)
        self._snapshot = current

        if self._filter is not None:
            events = [e for e in events if self._filter(self._wrap(e.path))]

        for event in events:
            for listener in list(self._listeners):
                listener(event)
        if events:
            logger.debug("%d change(s) under %s", len(events), self._resource.location)
        return events

    def cancel(self) -> None:
        """Stop monitoring and drop listeners."""
        self._cancelled = True
        self._listeners.clear()
        self._snapshot = {}

    def _take_snapshot(self) -> dict[Path, StatSignature]:
        snapshot: dict[Path, StatSignature] = {}
        root = self._resource.location
        pending = [(root, 0)]
        while pending:
            path, depth = pending.pop()
            signature = _path_stat_signature(self._fs, path)
            if signature is None:
                continue
            snapshot[path] = signature
            if not stat.S_ISDIR(signature[2]):
                continue
            if depth > 0 and not self._recursive:
                continue
            try:
                entries = self._fs.scandir(path)
            except (FileNotFoundError, NotADirectoryError):
                continue
            except OSError as e:
                raise IOFailure("monitor", path, e) from e
            pending.extend((entry, depth + 1) for entry in entries)
        return snapshot

    @staticmethod
    def _diff(
        before: dict[Path, StatSignature], after: dict[Path, StatSignature]
    ) -> list[ResourceEvent]:
        deleted = sorted(before.keys() - after.keys())
        created = sorted(after.keys() - before.keys())
        modified = sorted(p for p in before.keys() & after.keys() if before[p] != after[p])
        return (
            [ResourceEvent(ChangeKind.DELETED, p) for p in deleted]
            + [ResourceEvent(ChangeKind.CREATED, p) for p in created]
            + [ResourceEvent(ChangeKind.MODIFIED, p) for p in modified]
        )


class PollingWatchService:
    """Watch service producing PollingResourceMonitor instances."""

    def __init__(self, recursive: bool = True) -> None:
        """Initialize the service.

        Args:
            recursive: Whether monitors watch all descendants.
        """
        self.recursive = recursive

    def watch(
        self,
        resource: PathResource,
        resource_filter: ResourceFilter | None = None,
        wrap: Callable[[Path], PathResource] | None = None,
    ) -> PollingResourceMonitor:
        """Create a polling monitor with its baseline snapshot."""
        return PollingResourceMonitor(
            resource, resource_filter, wrap=wrap, recursive=self.recursive
        )
