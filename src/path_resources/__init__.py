"""Filesystem paths as cached, staleness-aware resources."""

__version__ = "0.1.0"

from path_resources.errors import IOFailure, PreconditionViolation, ResourceError
from path_resources.factory import PathResourceFactory
from path_resources.monitor import (
    NullWatchService,
    PollingResourceMonitor,
    PollingWatchService,
)

# Export protocol interfaces for type hints and dependency injection
from path_resources.protocols import (
    FileSystem,
    ResourceFactory,
    ResourceMonitor,
    WatchService,
)
from path_resources.resource import PathResource
from path_resources.types import ChangeKind, ResourceEvent, ResourceKind

__all__ = [
    "__version__",
    "ChangeKind",
    "FileSystem",
    "IOFailure",
    "NullWatchService",
    "PathResource",
    "PathResourceFactory",
    "PollingResourceMonitor",
    "PollingWatchService",
    "PreconditionViolation",
    "ResourceError",
    "ResourceEvent",
    "ResourceFactory",
    "ResourceKind",
    "ResourceMonitor",
    "WatchService",
]
