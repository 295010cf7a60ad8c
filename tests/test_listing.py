"""Tests for the directory listing cache."""

from __future__ import annotations

import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from path_resources.errors import IOFailure
from path_resources.factory import PathResourceFactory
from path_resources.resource import PathResource


class TestListing:
    """Tests for list_resources."""

    def test_lists_immediate_children(
        self, factory: PathResourceFactory, sample_tree: Path
    ) -> None:
        """Test children are wrapped resources of the direct entries."""
        children = factory.create(sample_tree).list_resources()

        assert sorted(child.name for child in children) == ["a.txt", "empty", "sub"]
        assert all(child.get_parent().location == sample_tree for child in children)

    def test_non_directory_lists_empty(
        self, factory: PathResourceFactory, sample_tree: Path
    ) -> None:
        """Test files and missing paths have no children."""
        assert factory.create(sample_tree / "a.txt").list_resources() == []
        assert factory.create(sample_tree / "missing").list_resources() == []

    def test_non_directory_does_not_scan(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test no directory scan happens for non-directories."""
        mock_factory.create(Path("/file")).list_resources()

        mock_filesystem.scandir.assert_not_called()

    def test_preserves_filesystem_order(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test entries are not re-sorted."""
        root = Path("/dir")
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.scandir.return_value = [root / "z", root / "a", root / "m"]

        children = mock_factory.create(root).list_resources()

        assert [child.name for child in children] == ["z", "a", "m"]

    def test_children_are_created_by_factory(
        self, mock_filesystem: MagicMock
    ) -> None:
        """Test each entry is wrapped through the factory."""
        root = Path("/dir")
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.scandir.return_value = [root / "x"]
        factory = MagicMock()
        factory.filesystem = mock_filesystem

        resource = PathResource(factory, root)
        children = resource.list_resources()

        factory.create.assert_called_once_with(root / "x")
        assert children == [factory.create.return_value]

    def test_returns_copy(self, factory: PathResourceFactory, sample_tree: Path) -> None:
        """Test callers cannot mutate the cache."""
        resource = factory.create(sample_tree)

        resource.list_resources().clear()

        assert len(resource.list_resources()) == 3

    def test_scan_failure_raises(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test a failing scan is reported."""
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.scandir.side_effect = PermissionError("denied")

        with pytest.raises(IOFailure) as exc_info:
            mock_factory.create(Path("/dir")).list_resources()

        assert exc_info.value.operation == "list"


class TestListingCache:
    """Tests for cache population and invalidation."""

    def test_cached_until_stale(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test a fresh directory is scanned once."""
        root = Path("/dir")
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.stat.side_effect = None
        mock_filesystem.stat.return_value.st_mtime_ns = 100
        mock_filesystem.scandir.return_value = [root / "x"]
        resource = mock_factory.create(root)

        resource.list_resources()
        resource.list_resources()

        assert mock_filesystem.scandir.call_count == 1

    def test_rescanned_when_stale(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test a changed mtime discards the cached listing."""
        root = Path("/dir")
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.stat.side_effect = None
        mock_filesystem.stat.return_value.st_mtime_ns = 100
        mock_filesystem.scandir.return_value = [root / "x"]
        resource = mock_factory.create(root)
        resource.list_resources()

        mock_filesystem.stat.return_value.st_mtime_ns = 200
        mock_filesystem.scandir.return_value = [root / "x", root / "y"]

        assert [c.name for c in resource.list_resources()] == ["x", "y"]
        assert mock_filesystem.scandir.call_count == 2

    def test_new_file_appears_after_refresh(
        self, factory: PathResourceFactory, sample_tree: Path, bump_mtime
    ) -> None:
        """Test an externally added entry shows up once staleness is seen."""
        resource = factory.create(sample_tree)
        assert len(resource.list_resources()) == 3

        (sample_tree / "added.txt").write_text("new")
        bump_mtime(sample_tree)

        assert "added.txt" in [c.name for c in resource.list_resources()]
        resource.refresh()
        assert "added.txt" in [c.name for c in resource.list_resources()]

    def test_refresh_before_listing_drops_old_cache(
        self, factory: PathResourceFactory, sample_tree: Path, bump_mtime
    ) -> None:
        """Test an entry added and then refreshed is listed."""
        resource = factory.create(sample_tree)
        assert len(resource.list_resources()) == 3

        (sample_tree / "added.txt").write_text("new")
        bump_mtime(sample_tree)
        resource.refresh()

        assert not resource.is_stale()
        assert "added.txt" in [c.name for c in resource.list_resources()]

    def test_refresh_without_change_keeps_cache(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test refresh on an unchanged directory does not force a rescan."""
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.stat.side_effect = None
        mock_filesystem.stat.return_value.st_mtime_ns = 100
        resource = mock_factory.create(Path("/dir"))
        resource.list_resources()

        resource.refresh()
        resource.list_resources()

        assert mock_filesystem.scandir.call_count == 1

    def test_invalidate_forces_rescan(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test invalidate drops the cache without staleness."""
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.stat.side_effect = None
        mock_filesystem.stat.return_value.st_mtime_ns = 100
        resource = mock_factory.create(Path("/dir"))
        resource.list_resources()

        resource.invalidate()
        resource.list_resources()

        assert mock_filesystem.scandir.call_count == 2

    def test_concurrent_listing_scans_once(
        self, mock_factory: PathResourceFactory, mock_filesystem: MagicMock
    ) -> None:
        """Test parallel readers share one population of the cache."""
        root = Path("/dir")
        mock_filesystem.is_dir.return_value = True
        mock_filesystem.stat.side_effect = None
        mock_filesystem.stat.return_value.st_mtime_ns = 100
        mock_filesystem.scandir.return_value = [root / "x"]
        resource = mock_factory.create(root)
        results: list[int] = []

        def reader() -> None:
            results.append(len(resource.list_resources()))

        threads = [threading.Thread(target=reader) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [1] * 8
        assert mock_filesystem.scandir.call_count == 1
