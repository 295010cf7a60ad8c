"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.

Dependencies are typed using Protocols (abstract interfaces) rather than
concrete implementations, so test doubles can be injected without
inheritance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from path_resources.config import ResourceSettings, load_settings
from path_resources.factory import PathResourceFactory
from path_resources.protocols import FileSystem, ResourceFactory, WatchService


def _default_filesystem() -> FileSystem:
    """Create the default filesystem implementation."""
    from path_resources.filesystem import RealFileSystem
    return RealFileSystem()


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by CLI commands.
    """

    settings: ResourceSettings
    factory: ResourceFactory
    watch_service: WatchService
    filesystem: FileSystem = field(default_factory=_default_filesystem)


def create_context(config_path: Path | None = None) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        config_path: Settings file to load instead of the default location.

    Returns:
        Configured AppContext with all dependencies.
    """
    from path_resources.filesystem import RealFileSystem
    from path_resources.monitor import PollingWatchService

    settings = load_settings(config_path)
    filesystem = RealFileSystem()
    watch_service = PollingWatchService(recursive=settings.monitor_recursive)
    factory = PathResourceFactory.create_default(
        settings=settings,
        filesystem=filesystem,
        watch_service=watch_service,
    )

    return AppContext(
        settings=settings,
        factory=factory,
        watch_service=watch_service,
        filesystem=filesystem,
    )
