#!/usr/bin/env python3
"""Virtual tag evaluator.

Checks parsed virtual tags against files on disk. Metadata reads go through a
``MetadataCache`` so evaluating several tags against one path stats it once
per TTL window.

Time windows are computed from the local wall clock at each call. Path-only
tags (ext, ext-type, dir, path, depth) never touch the filesystem.

Example:
    >>> evaluator = VirtualTagEvaluator()
    >>> evaluator.matches("/usr/bin/env", PermissionTag(PermissionCondition.EXECUTABLE))
    True
"""

import errno
import os
from datetime import date, datetime, time, timedelta
from pathlib import PurePath
from typing import Callable, Dict, Optional, Union

from tagr.infrastructure.cache_manager import FileMetadata, MetadataCache
from tagr.infrastructure.logger import Logger
from tagr.vtags.config import VirtualTagConfig, normalize_extension
from tagr.vtags.types import (
    AccessedTag,
    CreatedTag,
    DepthTag,
    DirectoryTag,
    ExtensionTag,
    ExtensionTypeTag,
    GitTag,
    LinesTag,
    ModifiedTag,
    PathTag,
    PermissionCondition,
    PermissionTag,
    SizeCategory,
    SizeCondition,
    SizeKind,
    SizeTag,
    TimeCondition,
    TimeKind,
    VirtualTag,
)

PathLike = Union[str, PurePath]

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Used when a configured threshold does not parse
FALLBACK_SIZE_THRESHOLDS: Dict[SizeCategory, int] = {
    SizeCategory.TINY: 1024,
    SizeCategory.SMALL: 102400,
    SizeCategory.MEDIUM: 1048576,
    SizeCategory.LARGE: 10485760,
}

# Lower bound of each category's bin; the upper bound is the category's own threshold
_LOWER_BOUND = {
    SizeCategory.SMALL: SizeCategory.TINY,
    SizeCategory.MEDIUM: SizeCategory.SMALL,
    SizeCategory.LARGE: SizeCategory.MEDIUM,
    SizeCategory.HUGE: SizeCategory.LARGE,
}

PERMISSION_MASKS = {
    PermissionCondition.EXECUTABLE: 0o111,
    PermissionCondition.READABLE: 0o444,
    PermissionCondition.WRITABLE: 0o222,
}


def _day_start(day: date, now: datetime) -> float:
    """Epoch seconds of midnight starting ``day`` in ``now``'s timezone."""
    return datetime.combine(day, time.min, tzinfo=now.tzinfo).timestamp()


def time_condition_matches(file_time: float, condition: TimeCondition, now: datetime) -> bool:
    """Check an epoch timestamp against a time window.

    Args:
        file_time: Timestamp to test, in seconds since the epoch
        condition: Time window
        now: Current time; naive values are taken as local time

    Returns:
        True if the timestamp falls inside the window
    """
    kind = condition.kind
    today = now.date()

    if kind == TimeKind.TODAY:
        return _day_start(today, now) <= file_time <= now.timestamp()
    if kind == TimeKind.YESTERDAY:
        return _day_start(today - timedelta(days=1), now) <= file_time < _day_start(today, now)
    if kind == TimeKind.THIS_WEEK:
        return file_time >= _day_start(today - timedelta(days=today.weekday()), now)
    if kind == TimeKind.THIS_MONTH:
        return file_time >= _day_start(today.replace(day=1), now)
    if kind == TimeKind.THIS_YEAR:
        return file_time >= _day_start(today.replace(month=1, day=1), now)
    if kind == TimeKind.LAST_N_DAYS:
        return file_time >= now.timestamp() - condition.amount * SECONDS_PER_DAY
    if kind == TimeKind.LAST_N_HOURS:
        return file_time >= now.timestamp() - condition.amount * SECONDS_PER_HOUR
    if kind == TimeKind.AFTER:
        return file_time >= condition.start.timestamp()
    if kind == TimeKind.BEFORE:
        return file_time < condition.end.timestamp()
    if kind == TimeKind.BETWEEN:
        return condition.start.timestamp() <= file_time < condition.end.timestamp()
    raise ValueError(f"Unknown time condition: {kind}")


def count_lines(path: PathLike) -> int:
    """Count newline-delimited lines; an unterminated last line counts."""
    with open(path, "rb") as f:
        return sum(1 for _ in f)


def path_depth(path: PathLike) -> int:
    """Count the components of a path.

    Interior ``.`` components and repeated separators are ignored, but a
    leading ``.`` counts as a component, so ``./a/b`` has depth 3. ``PurePath``
    values have already dropped any leading ``.``.
    """
    depth = len(PurePath(path).parts)
    if isinstance(path, str) and (path == "." or path.startswith(("./", "." + os.sep))):
        depth += 1
    return depth


class VirtualTagEvaluator:
    """Evaluates virtual tags against filesystem paths."""

    def __init__(
        self,
        config: Optional[VirtualTagConfig] = None,
        cache: Optional[MetadataCache] = None,
        clock: Callable[[], datetime] = datetime.now,
        logger: Optional[Logger] = None,
    ):
        """Initialize evaluator.

        Args:
            config: Virtual tag configuration (defaults if omitted)
            cache: Metadata cache; one is built from ``config`` if omitted
            clock: Wall-clock source for time windows, injectable for tests
            logger: Optional logger (a ``tagr.vtags`` logger by default)
        """
        self.config = config or VirtualTagConfig()
        self.cache = cache if cache is not None else MetadataCache(
            ttl_seconds=self.config.cache_ttl_seconds,
            enabled=self.config.cache_metadata,
        )
        self._clock = clock
        self._logger = logger or Logger("tagr.vtags")

    def matches(self, path: PathLike, vtag: VirtualTag) -> bool:
        """Check whether a path satisfies a virtual tag.

        Args:
            path: Candidate file path
            vtag: Parsed virtual tag

        Returns:
            True if the path matches

        Raises:
            OSError: If metadata or contents needed for the check cannot be
                read, including ENOTSUP for unavailable timestamps
            TypeError: If ``vtag`` is not a known virtual tag type
        """
        try:
            result = self._evaluate(path, vtag)
        except OSError as e:
            self._logger.debug("Virtual tag evaluation failed", tag=str(vtag), path=str(path), error=str(e))
            raise

        self._logger.debug("Evaluated virtual tag", tag=str(vtag), path=str(path), result=result)
        return result

    def _evaluate(self, path: PathLike, vtag: VirtualTag) -> bool:
        if isinstance(vtag, ModifiedTag):
            return time_condition_matches(self._metadata(path).modified, vtag.condition, self._clock())
        if isinstance(vtag, CreatedTag):
            created = self._metadata(path).created
            if created is None:
                raise OSError(errno.ENOTSUP, "Created time not available", str(path))
            return time_condition_matches(created, vtag.condition, self._clock())
        if isinstance(vtag, AccessedTag):
            accessed = self._metadata(path).accessed
            if accessed is None:
                raise OSError(errno.ENOTSUP, "Accessed time not available", str(path))
            return time_condition_matches(accessed, vtag.condition, self._clock())
        if isinstance(vtag, SizeTag):
            return self._check_size(self._metadata(path).size, vtag.condition)
        if isinstance(vtag, ExtensionTag):
            suffix = PurePath(path).suffix
            return bool(suffix) and suffix == normalize_extension(vtag.extension)
        if isinstance(vtag, ExtensionTypeTag):
            return self._check_extension_type(path, vtag)
        if isinstance(vtag, DirectoryTag):
            return self._check_directory(path, vtag.directory)
        if isinstance(vtag, PathTag):
            return vtag.pattern.matches(str(path))
        if isinstance(vtag, DepthTag):
            return vtag.condition.contains(path_depth(path))
        if isinstance(vtag, PermissionTag):
            return self._check_permission(self._metadata(path).mode, vtag.condition)
        if isinstance(vtag, LinesTag):
            if not self._metadata(path).is_file:
                return False
            return vtag.condition.contains(count_lines(path))
        if isinstance(vtag, GitTag):
            # No VCS integration yet
            return False
        raise TypeError(f"Unsupported virtual tag: {type(vtag).__name__}")

    def _metadata(self, path: PathLike) -> FileMetadata:
        return self.cache.get(path)

    def size_threshold(self, category: SizeCategory) -> int:
        """Configured threshold for a category, or the built-in fallback."""
        threshold = self.config.get_size_threshold(category)
        if threshold is None:
            return FALLBACK_SIZE_THRESHOLDS[category]
        return threshold

    def _check_size(self, size: int, condition: SizeCondition) -> bool:
        kind = condition.kind

        if kind == SizeKind.EMPTY:
            return size == 0
        if kind == SizeKind.CATEGORY:
            category = condition.category
            lower = self.size_threshold(_LOWER_BOUND[category]) if category in _LOWER_BOUND else 0
            if category == SizeCategory.HUGE:
                return size >= lower
            return lower <= size < self.size_threshold(category)
        if kind == SizeKind.GREATER_THAN:
            return size > condition.value
        if kind == SizeKind.LESS_THAN:
            return size < condition.value
        if kind == SizeKind.EQUALS:
            return size == condition.value
        if kind == SizeKind.RANGE:
            return condition.minimum <= size <= condition.maximum
        raise ValueError(f"Unknown size condition: {kind}")

    def _check_extension_type(self, path: PathLike, vtag: ExtensionTypeTag) -> bool:
        suffix = PurePath(path).suffix
        if not suffix:
            return False
        extensions = self.config.extensions_for(vtag.category.value)
        return extensions is not None and suffix in extensions

    @staticmethod
    def _check_directory(path: PathLike, directory: PurePath) -> bool:
        parent = PurePath(path).parent
        if parent == directory:
            return True
        wanted = directory.parts
        return bool(wanted) and parent.parts[-len(wanted):] == wanted

    @staticmethod
    def _check_permission(mode: int, condition: PermissionCondition) -> bool:
        if condition == PermissionCondition.READ_ONLY:
            return mode & 0o222 == 0
        return mode & PERMISSION_MASKS[condition] != 0
