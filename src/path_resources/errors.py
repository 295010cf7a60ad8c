"""Error types raised by path resources."""

from __future__ import annotations

from pathlib import Path

__all__ = ["IOFailure", "PreconditionViolation", "ResourceError"]


class ResourceError(Exception):
    """Base class for resource errors."""

    pass


class IOFailure(ResourceError):
    """An underlying filesystem operation failed.

    Attributes:
        path: Path the operation was applied to.
        operation: Name of the failing operation (e.g. "delete", "stat").
        cause: The originating OS-level error, if any.
    """

    def __init__(
        self,
        operation: str,
        path: Path | str,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize the failure.

        Args:
            operation: Name of the failing operation.
            path: Path the operation was applied to.
            cause: Originating exception.
        """
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} failed for {self.path}{detail}")


class PreconditionViolation(ResourceError, ValueError):
    """A caller-supplied argument or state precondition was not met."""

    pass
