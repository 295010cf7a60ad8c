"""Default resource factory."""

from __future__ import annotations

import logging
from pathlib import Path

from path_resources.config import ResourceSettings
from path_resources.errors import IOFailure
from path_resources.filesystem import RealFileSystem
from path_resources.monitor import NullWatchService
from path_resources.protocols import (
    FileSystem,
    ResourceFilter,
    ResourceMonitor,
    WatchService,
)
from path_resources.resource import PathResource

logger = logging.getLogger(__name__)


class PathResourceFactory:
    """Wraps paths as PathResource instances.

    Every call returns a fresh instance; instances are not deduplicated.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create_default()` for production instantiation.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        settings: ResourceSettings,
        watch_service: WatchService,
    ) -> None:
        """Initialize the factory with required dependencies.

        Args:
            filesystem: Filesystem primitives shared by all resources.
            settings: Temp file and encoding settings.
            watch_service: Service backing ``PathResource.monitor()``.
        """
        self.filesystem = filesystem
        self.settings = settings
        self.watch_service = watch_service

    @classmethod
    def create_default(
        cls,
        settings: ResourceSettings | None = None,
        filesystem: FileSystem | None = None,
        watch_service: WatchService | None = None,
    ) -> PathResourceFactory:
        """Factory method for production instantiation.

        Args:
            settings: Optional settings (defaults if not provided).
            filesystem: Optional filesystem (RealFileSystem if not provided).
            watch_service: Optional watch service (no-op if not provided).

        Returns:
            Configured PathResourceFactory instance.
        """
        return cls(
            filesystem=filesystem or RealFileSystem(),
            settings=settings or ResourceSettings(),
            watch_service=watch_service or NullWatchService(),
        )

    def create(self, path: Path | str) -> PathResource:
        """Wrap a path as a resource."""
        return PathResource(self, path, encoding=self.settings.encoding)

    def create_temp(self) -> PathResource:
        """Create a new empty temp file and wrap it.

        Raises:
            IOFailure: If the platform cannot create the file.
        """
        directory = self.settings.temp_dir
        try:
            path = self.filesystem.create_temp_file(
                prefix=self.settings.temp_prefix,
                suffix=self.settings.temp_suffix,
                directory=directory,
            )
        except OSError as e:
            raise IOFailure("create_temp", directory or "<tempdir>", e) from e
        logger.debug("Created temp resource %s", path)
        return self.create(path)

    def monitor(
        self, resource: PathResource, resource_filter: ResourceFilter | None = None
    ) -> ResourceMonitor:
        """Start monitoring a resource through the watch service."""
        return self.watch_service.watch(resource, resource_filter, wrap=self.create)
