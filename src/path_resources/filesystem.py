"""Filesystem primitives for path resources.

This module provides the single-path operations that every resource and
tree operation is composed from. The RealFileSystem implementation
wraps standard library os, pathlib and tempfile calls; tests substitute
a mock through the FileSystem protocol.
"""

from __future__ import annotations

import errno
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

# Hard links are refused by these filesystems or policies; rename falls back.
_LINK_UNSUPPORTED = frozenset(
    {errno.EPERM, errno.EOPNOTSUPP, errno.ENOTSUP, errno.EMLINK, errno.ENOSYS}
)


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library os, Path and tempfile operations.
    Satisfies the FileSystem protocol structurally. Errors propagate as
    OSError subclasses; translating them is the caller's concern.
    """

    def exists(self, path: Path) -> bool:
        """Check if a path exists, counting dangling symlinks."""
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        return path.is_file()

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        return path.is_symlink()

    def stat(self, path: Path) -> os.stat_result:
        """Stat a path, following symlinks."""
        return path.stat()

    def lstat(self, path: Path) -> os.stat_result:
        """Stat a path without following symlinks."""
        return path.lstat()

    def access(self, path: Path, mode: int) -> bool:
        """Probe permissions with os.access."""
        return os.access(path, mode)

    def set_mtime_ns(self, path: Path, mtime_ns: int) -> None:
        """Set the modification time, keeping the access time."""
        st = path.stat()
        os.utime(path, ns=(st.st_atime_ns, mtime_ns))

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def create_file(self, path: Path) -> None:
        """Create an empty file, failing if it already exists."""
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
        os.close(fd)

    def create_temp_file(
        self, prefix: str = "", suffix: str = "", directory: Path | None = None
    ) -> Path:
        """Create a uniquely named empty file and return its path."""
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
        os.close(fd)
        return Path(name)

    def unlink(self, path: Path) -> None:
        """Remove a file or symlink."""
        path.unlink()

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory."""
        path.rmdir()

    def rename(self, src: Path, dst: Path) -> None:
        """Rename src to dst without replacing an existing dst.

        Files and symlinks are hard-linked to dst and then unlinked, so the
        existence check and the move are one step. Directories, and
        filesystems without hard links, use a check followed by os.rename;
        an entry created at dst between the two can still be replaced.

        Raises:
            FileExistsError: If dst already exists.
            OSError: If the platform cannot rename (e.g. across devices).
        """
        if not os.path.isdir(src) or os.path.islink(src):
            try:
                if os.link in os.supports_follow_symlinks:
                    os.link(src, dst, follow_symlinks=False)
                else:
                    os.link(src, dst)
            except OSError as e:
                if e.errno not in _LINK_UNSUPPORTED:
                    raise
            else:
                os.unlink(src)
                return
        if os.path.lexists(dst):
            raise FileExistsError(f"Target already exists: {dst}")
        os.rename(src, dst)

    def scandir(self, path: Path) -> list[Path]:
        """List the entries of a directory in the order the OS reports them."""
        with os.scandir(path) as entries:
            return [path / entry.name for entry in entries]

    def open_read(self, path: Path) -> BinaryIO:
        """Open a file for binary reading."""
        return path.open("rb")

    def open_write(self, path: Path) -> BinaryIO:
        """Open a file for binary writing, truncating it."""
        return path.open("wb")
