#!/usr/bin/env python3
"""TTL-bounded file metadata cache for tagr.

Evaluating several virtual tags against the same file would otherwise stat
it once per tag. The cache keeps one snapshot per path:
- Snapshots younger than the TTL are served without touching the disk
- Expired snapshots are refetched on the next ``get``
- ``cleanup()`` drops expired entries, ``clear()`` drops everything
- Expiry is checked on access only; nothing runs in the background

Files changed on disk within the TTL window keep their cached snapshot until
it expires.

The cache is not synchronised. Give each worker thread its own instance.

Creation time comes from ``st_birthtime``, which ``os.stat`` does not report
on Linux even where the filesystem records one. On Linux ``created`` is
always None, so ``created:`` virtual tags fail there with ENOTSUP.

Example:
    >>> cache = MetadataCache(ttl_seconds=300)
    >>> meta = cache.get("/etc/hostname")
    >>> meta.is_file
    True
"""

import os
import stat
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Callable, Dict, Optional, Union

from tagr.core.constants import Limits
from tagr.infrastructure.logger import Logger

PathLike = Union[str, PurePath]


@dataclass(frozen=True)
class FileMetadata:
    """Snapshot of a file's metadata.

    Timestamps are seconds since the epoch. ``created`` and ``accessed`` are
    None where the platform or filesystem does not record them.
    """

    size: int
    modified: float
    created: Optional[float]
    accessed: Optional[float]
    is_file: bool
    is_dir: bool
    is_symlink: bool
    mode: int  # Permission bits only

    @classmethod
    def from_stat(cls, st: os.stat_result, is_symlink: bool = False) -> "FileMetadata":
        """Build a snapshot from a stat result."""
        return cls(
            size=st.st_size,
            modified=st.st_mtime,
            created=getattr(st, "st_birthtime", None),
            accessed=st.st_atime,
            is_file=stat.S_ISREG(st.st_mode),
            is_dir=stat.S_ISDIR(st.st_mode),
            is_symlink=is_symlink,
            mode=stat.S_IMODE(st.st_mode),
        )


def fetch_metadata(path: PathLike) -> FileMetadata:
    """Read metadata for ``path``, following symlinks.

    Raises:
        OSError: If the path cannot be stat'ed
    """
    link_st = os.lstat(path)
    is_symlink = stat.S_ISLNK(link_st.st_mode)
    st = os.stat(path) if is_symlink else link_st
    return FileMetadata.from_stat(st, is_symlink=is_symlink)


@dataclass
class CacheEntry:
    """Cached snapshot and the clock reading it was captured at."""

    metadata: FileMetadata
    captured_at: float

    def is_expired(self, ttl: float, now: float) -> bool:
        """Check if the entry is strictly older than ``ttl``."""
        return now - self.captured_at > ttl


class MetadataCache:
    """Path → FileMetadata cache with a fixed time-to-live."""

    def __init__(
        self,
        ttl_seconds: float = Limits.DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
        logger: Optional[Logger] = None,
    ):
        """Initialize metadata cache.

        Args:
            ttl_seconds: Age after which an entry is no longer served
            clock: Monotonic time source, injectable for tests
            enabled: When False every ``get`` reads the filesystem
            logger: Optional logger (a ``tagr.cache`` logger by default)
        """
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must not be negative: {ttl_seconds}")

        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._logger = logger or Logger("tagr.cache")

        # Statistics
        self._hits = 0
        self._misses = 0
        self._expirations = 0

    @staticmethod
    def _key(path: PathLike) -> str:
        return os.fspath(path)

    def get(self, path: PathLike) -> FileMetadata:
        """Get metadata for a path, from cache when fresh.

        Args:
            path: File path

        Returns:
            Metadata snapshot

        Raises:
            OSError: If the metadata has to be read and cannot be
        """
        key = self._key(path)
        now = self._clock()

        if self.enabled:
            entry = self._entries.get(key)
            if entry is not None:
                if not entry.is_expired(self.ttl_seconds, now):
                    self._hits += 1
                    self._logger.debug("Metadata cache hit", path=key)
                    return entry.metadata
                del self._entries[key]
                self._expirations += 1
                self._logger.debug("Metadata expired", path=key)

        self._misses += 1
        metadata = fetch_metadata(path)
        if self.enabled:
            self._entries[key] = CacheEntry(metadata, now)
        self._logger.debug("Metadata fetched", path=key)
        return metadata

    def invalidate(self, path: PathLike) -> bool:
        """Drop the entry for one path.

        Returns:
            True if an entry was removed
        """
        return self._entries.pop(self._key(path), None) is not None

    def cleanup(self) -> int:
        """Remove every entry older than the TTL.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items()
            if entry.is_expired(self.ttl_seconds, now)
        ]
        for key in expired:
            del self._entries[key]

        self._expirations += len(expired)
        if expired:
            self._logger.debug("Cache cleanup", removed=len(expired), remaining=len(self._entries))
        return len(expired)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Entry count, hits, misses, hit rate and expirations
        """
        total_requests = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total_requests if total_requests > 0 else 0,
            "expirations": self._expirations,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: PathLike) -> bool:
        return self._key(path) in self._entries
