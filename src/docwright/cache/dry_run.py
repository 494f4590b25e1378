"""Per-project cache of documentation generated during dry runs.

A dry run stores every accepted draft so that the follow-up write run can
reuse it instead of paying for the same LLM call twice. Entries expire after
24 hours. Cache problems are never fatal: an unreadable cache behaves like
an empty one.
"""

from __future__ import annotations

import hashlib
import os
import shutil
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

import logfire
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

CACHE_FILE_NAME = "dry-run-cache.json"
CACHE_EXPIRY = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(timestamp: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp


class _CacheModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DryRunCacheEntry(_CacheModel):
    """One accepted draft."""

    api_symbol_id: str
    generated_text: str
    cached_at: datetime = Field(default_factory=_utcnow)
    provider: str
    model: str


class DryRunCache(_CacheModel):
    """All cached drafts of one project."""

    project_hash: str
    entries: list[DryRunCacheEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)


def project_hash(project_id: str) -> str:
    """Stable short hash of a project's identity (its resolved path)."""
    identity = str(Path(project_id).expanduser().resolve())
    return hashlib.sha256(identity.encode("utf-8")).hexdigest()[:16]


def is_expired(cached_at: datetime, now: datetime | None = None) -> bool:
    """True when more than 24 hours have passed since `cached_at`."""
    now = _as_utc(now) if now is not None else _utcnow()
    return now - _as_utc(cached_at) > CACHE_EXPIRY


def find_entry(cache: DryRunCache | None, api_symbol_id: str) -> DryRunCacheEntry | None:
    """Look up a live entry; expired entries count as absent."""
    if cache is None:
        return None
    for entry in cache.entries:
        if entry.api_symbol_id == api_symbol_id:
            return None if is_expired(entry.cached_at) else entry
    return None


class DryRunCacheManager:
    """Stores dry-run caches under a per-user cache root."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir).expanduser()

    def path_for(self, project_id: str) -> Path:
        return self.cache_dir / project_hash(project_id) / CACHE_FILE_NAME

    def load(self, project_id: str) -> DryRunCache | None:
        """Load a project's cache, or None if it is missing or unreadable."""
        path = self.path_for(project_id)
        if not path.exists():
            logfire.debug("No dry-run cache", project=project_id)
            return None

        try:
            cache = DryRunCache.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError, ValueError) as e:
            logfire.warn("Dry-run cache unreadable, ignoring it", path=str(path), error=str(e))
            return None

        logfire.debug("Loaded dry-run cache", project=project_id, entries=len(cache.entries))
        return cache

    def save(self, project_id: str, entry: DryRunCacheEntry) -> None:
        """Insert or replace `entry` in the project's cache.

        The whole cache is written to a temporary file next to the target
        and renamed over it, so readers never observe a partial file.
        """
        path = self.path_for(project_id)
        cache = self.load(project_id) or DryRunCache(project_hash=project_hash(project_id))

        for i, existing in enumerate(cache.entries):
            if existing.api_symbol_id == entry.api_symbol_id:
                cache.entries[i] = entry
                break
        else:
            cache.entries.append(entry)

        payload = cache.model_dump_json(by_alias=True, indent=2)
        tmp_path: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{CACHE_FILE_NAME}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
            os.replace(tmp_path, path)
        except OSError as e:
            logfire.warn("Failed to save dry-run cache", path=str(path), error=str(e))
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            return

        logfire.debug("Saved dry-run cache entry", project=project_id, api=entry.api_symbol_id)

    def clear(self, project_id: str) -> bool:
        """Delete the project's cache directory. Returns whether one existed."""
        directory = self.path_for(project_id).parent
        if not directory.exists():
            return False
        try:
            shutil.rmtree(directory)
        except OSError as e:
            logfire.warn("Failed to clear dry-run cache", path=str(directory), error=str(e))
            return False
        logfire.info("Cleared dry-run cache", project=project_id)
        return True

    def is_expired(self, cached_at: datetime) -> bool:
        return is_expired(cached_at)

    def find_entry(self, cache: DryRunCache | None, api_symbol_id: str) -> DryRunCacheEntry | None:
        return find_entry(cache, api_symbol_id)
