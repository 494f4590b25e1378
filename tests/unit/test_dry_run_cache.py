"""Tests for the dry-run cache."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from docwright.cache import (
    DryRunCache,
    DryRunCacheEntry,
    DryRunCacheManager,
    find_entry,
    is_expired,
    project_hash,
)


def _entry(api_id: str = "Lib.Calculator.Add", text: str = "<summary>Adds.</summary>", **kwargs) -> DryRunCacheEntry:
    return DryRunCacheEntry(
        api_symbol_id=api_id,
        generated_text=text,
        provider=kwargs.pop("provider", "anthropic"),
        model=kwargs.pop("model", "claude-sonnet-4-5"),
        **kwargs,
    )


@pytest.fixture
def manager(tmp_path: Path) -> DryRunCacheManager:
    return DryRunCacheManager(tmp_path / "cache")


@pytest.fixture
def project(tmp_path: Path) -> str:
    root = tmp_path / "project"
    root.mkdir()
    return str(root)


class TestCachePath:
    """Tests for cache file locations."""

    def test_path_is_deterministic(self, manager: DryRunCacheManager, project: str) -> None:
        """Test that the same project always maps to the same file."""
        assert manager.path_for(project) == manager.path_for(project)

    def test_path_layout(self, manager: DryRunCacheManager, project: str) -> None:
        """Test the <root>/<hash>/dry-run-cache.json layout."""
        path = manager.path_for(project)

        assert path.name == "dry-run-cache.json"
        assert path.parent.name == project_hash(project)
        assert path.parent.parent == manager.cache_dir
        assert len(project_hash(project)) == 16

    def test_equivalent_paths_share_a_cache(self, manager: DryRunCacheManager, project: str) -> None:
        """Different spellings of one directory hash identically."""
        assert manager.path_for(project) == manager.path_for(project + "/.")

    def test_different_projects_differ(self, manager: DryRunCacheManager, tmp_path: Path) -> None:
        assert manager.path_for(str(tmp_path / "a")) != manager.path_for(str(tmp_path / "b"))


class TestSaveAndLoad:
    """Tests for persisting entries."""

    def test_load_missing_cache(self, manager: DryRunCacheManager, project: str) -> None:
        """Test that a project without a cache loads as None."""
        assert manager.load(project) is None

    def test_save_then_load(self, manager: DryRunCacheManager, project: str) -> None:
        """Test a saved entry comes back intact."""
        manager.save(project, _entry())

        cache = manager.load(project)

        assert cache is not None
        assert cache.project_hash == project_hash(project)
        assert len(cache.entries) == 1
        assert cache.entries[0].generated_text == "<summary>Adds.</summary>"
        assert cache.entries[0].provider == "anthropic"

    def test_save_replaces_same_api(self, manager: DryRunCacheManager, project: str) -> None:
        """A second save for the same API overwrites the first."""
        manager.save(project, _entry(text="<summary>Old.</summary>"))
        manager.save(project, _entry(text="<summary>New.</summary>"))
        manager.save(project, _entry(api_id="Lib.Calculator.Reset"))

        cache = manager.load(project)

        assert [e.api_symbol_id for e in cache.entries] == [
            "Lib.Calculator.Add",
            "Lib.Calculator.Reset",
        ]
        assert cache.entries[0].generated_text == "<summary>New.</summary>"

    def test_file_uses_camel_case_keys(self, manager: DryRunCacheManager, project: str) -> None:
        """Test the on-disk field names."""
        manager.save(project, _entry())

        data = json.loads(manager.path_for(project).read_text())

        assert set(data) == {"projectHash", "entries", "createdAt"}
        assert set(data["entries"][0]) == {
            "apiSymbolId",
            "generatedText",
            "cachedAt",
            "provider",
            "model",
        }

    def test_no_temp_files_left_behind(self, manager: DryRunCacheManager, project: str) -> None:
        """Test that the atomic write cleans up after itself."""
        manager.save(project, _entry())
        manager.save(project, _entry(api_id="Lib.Other"))

        files = list(manager.path_for(project).parent.iterdir())

        assert [f.name for f in files] == ["dry-run-cache.json"]

    def test_corrupt_cache_treated_as_absent(self, manager: DryRunCacheManager, project: str) -> None:
        """A malformed file never breaks the pipeline."""
        path = manager.path_for(project)
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        assert manager.load(project) is None

    def test_save_over_corrupt_cache(self, manager: DryRunCacheManager, project: str) -> None:
        """Saving replaces a corrupt file with a fresh cache."""
        path = manager.path_for(project)
        path.parent.mkdir(parents=True)
        path.write_text("[]")

        manager.save(project, _entry())

        assert len(manager.load(project).entries) == 1

    def test_clear(self, manager: DryRunCacheManager, project: str) -> None:
        """Test deleting a project's cache."""
        manager.save(project, _entry())

        assert manager.clear(project) is True
        assert manager.load(project) is None
        assert manager.clear(project) is False


class TestExpiry:
    """Tests for the 24 hour expiry window."""

    def test_fresh_entry(self) -> None:
        assert is_expired(datetime.now(UTC) - timedelta(hours=1)) is False

    def test_old_entry(self) -> None:
        assert is_expired(datetime.now(UTC) - timedelta(hours=25)) is True

    def test_exactly_24_hours_is_not_expired(self) -> None:
        """The window is exclusive: only strictly older entries expire."""
        now = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

        assert is_expired(now - timedelta(hours=24), now=now) is False
        assert is_expired(now - timedelta(hours=24, seconds=1), now=now) is True

    def test_naive_timestamps_are_utc(self) -> None:
        now = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

        assert is_expired(datetime(2025, 2, 27, 12, 0), now=now) is True

    def test_find_entry_ignores_expired(self) -> None:
        """Expired entries stay on disk but count as misses."""
        cache = DryRunCache(
            project_hash="abc",
            entries=[
                _entry(cached_at=datetime.now(UTC) - timedelta(hours=30)),
                _entry(api_id="Lib.Fresh"),
            ],
        )

        assert find_entry(cache, "Lib.Calculator.Add") is None
        assert find_entry(cache, "Lib.Fresh") is not None
        assert find_entry(cache, "Lib.Unknown") is None
        assert find_entry(None, "Lib.Fresh") is None
