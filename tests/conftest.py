"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from path_resources.config import ResourceSettings
from path_resources.factory import PathResourceFactory
from path_resources.filesystem import RealFileSystem
from path_resources.monitor import NullWatchService, PollingWatchService


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def settings(tmp_path: Path) -> ResourceSettings:
    """Settings with temp files kept under tmp_path."""
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    return ResourceSettings(temp_dir=temp_dir, temp_prefix="test")


@pytest.fixture
def factory(settings: ResourceSettings) -> PathResourceFactory:
    """Factory over the real filesystem with a no-op watch service."""
    return PathResourceFactory(
        filesystem=RealFileSystem(),
        settings=settings,
        watch_service=NullWatchService(),
    )


@pytest.fixture
def polling_factory(settings: ResourceSettings) -> PathResourceFactory:
    """Factory whose resources are monitored by polling."""
    return PathResourceFactory(
        filesystem=RealFileSystem(),
        settings=settings,
        watch_service=PollingWatchService(),
    )


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small directory tree.

    Layout::

        tree/
            a.txt        "alpha"
            sub/
                b.txt    "beta"
                deeper/
                    c.txt
            empty/
    """
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("alpha")
    (root / "sub" / "b.txt").write_text("beta")
    (root / "sub" / "deeper" / "c.txt").write_text("")
    return root


def _bump_mtime(path: Path, seconds: int = 10) -> None:
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 1_000_000_000))


@pytest.fixture
def bump_mtime():
    """Move the modification time of a path forward, independent of any resource.

    Filesystem timestamp granularity makes back-to-back writes unreliable
    for staleness checks, so tests shift mtimes explicitly.
    """
    return _bump_mtime


# ============================================================================
# Mock FileSystem Fixture
# ============================================================================


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    Every path looks missing until a test says otherwise.
    """
    fs = MagicMock()
    fs.exists.return_value = False
    fs.is_dir.return_value = False
    fs.is_file.return_value = False
    fs.is_symlink.return_value = False
    fs.stat.side_effect = FileNotFoundError("missing")
    fs.scandir.return_value = []
    return fs


@pytest.fixture
def mock_factory(mock_filesystem: MagicMock) -> PathResourceFactory:
    """Factory wired to the mock filesystem."""
    return PathResourceFactory(
        filesystem=mock_filesystem,
        settings=ResourceSettings(),
        watch_service=NullWatchService(),
    )
