"""Dry-run cache."""

from docwright.cache.dry_run import (
    CACHE_EXPIRY,
    DryRunCache,
    DryRunCacheEntry,
    DryRunCacheManager,
    find_entry,
    is_expired,
    project_hash,
)

__all__ = [
    "CACHE_EXPIRY",
    "DryRunCache",
    "DryRunCacheEntry",
    "DryRunCacheManager",
    "find_entry",
    "is_expired",
    "project_hash",
]
