"""
tagr Virtual Tags: type definitions.

Virtual tags are computed from filesystem metadata instead of being stored.
Each ``VirtualTag`` subclass is one ``prefix:value`` kind; the condition
types below carry the parsed value.

Example:
    >>> tag = SizeTag(SizeCondition.greater_than(1_000_000))
    >>> str(tag)
    'size:>1000000'
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import ClassVar, Optional

from tagr.patterns.glob_pattern import GlobPattern


class SizeCategory(Enum):
    """Named size classes, bounded by configured thresholds."""

    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"


class ExtTypeCategory(Enum):
    """Extension families, resolved through the configured extension table."""

    SOURCE = "source"
    DOCUMENT = "document"
    IMAGE = "image"
    ARCHIVE = "archive"
    CONFIG = "config"


class PermissionCondition(Enum):
    """POSIX permission checks."""

    EXECUTABLE = "executable"  # Any execute bit
    READABLE = "readable"  # Any read bit
    WRITABLE = "writable"  # Any write bit
    READ_ONLY = "readonly"  # No write bit


class GitCondition(Enum):
    """Version control states."""

    TRACKED = "tracked"
    UNTRACKED = "untracked"
    MODIFIED = "modified"
    STAGED = "staged"
    IGNORED = "ignored"
    COMMITTED_TODAY = "committed-today"
    NEVER_COMMITTED = "never-committed"
    STALE = "stale"


class TimeKind(Enum):
    """Kinds of time window."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    THIS_YEAR = "this-year"
    LAST_N_DAYS = "last-days"
    LAST_N_HOURS = "last-hours"
    AFTER = "after"
    BEFORE = "before"
    BETWEEN = "between"


# Kinds that need no value
TIME_KEYWORDS = {
    TimeKind.TODAY.value: TimeKind.TODAY,
    TimeKind.YESTERDAY.value: TimeKind.YESTERDAY,
    TimeKind.THIS_WEEK.value: TimeKind.THIS_WEEK,
    TimeKind.THIS_MONTH.value: TimeKind.THIS_MONTH,
    TimeKind.THIS_YEAR.value: TimeKind.THIS_YEAR,
}


def _local_date(instant: datetime) -> str:
    return instant.astimezone().date().isoformat()


@dataclass(frozen=True)
class TimeCondition:
    """A time window.

    ``amount`` is set for the LAST_N_* kinds. ``start`` is set for AFTER and
    BETWEEN, ``end`` for BEFORE and BETWEEN. Instants are timezone-aware.
    """

    kind: TimeKind
    amount: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def keyword(cls, kind: TimeKind) -> "TimeCondition":
        return cls(kind)

    @classmethod
    def today(cls) -> "TimeCondition":
        return cls(TimeKind.TODAY)

    @classmethod
    def yesterday(cls) -> "TimeCondition":
        return cls(TimeKind.YESTERDAY)

    @classmethod
    def last_n_days(cls, days: int) -> "TimeCondition":
        return cls(TimeKind.LAST_N_DAYS, amount=days)

    @classmethod
    def last_n_hours(cls, hours: int) -> "TimeCondition":
        return cls(TimeKind.LAST_N_HOURS, amount=hours)

    @classmethod
    def after(cls, instant: datetime) -> "TimeCondition":
        return cls(TimeKind.AFTER, start=instant)

    @classmethod
    def before(cls, instant: datetime) -> "TimeCondition":
        return cls(TimeKind.BEFORE, end=instant)

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "TimeCondition":
        return cls(TimeKind.BETWEEN, start=start, end=end)

    def __str__(self) -> str:
        if self.kind == TimeKind.LAST_N_DAYS:
            return f"last-{self.amount}-days"
        if self.kind == TimeKind.LAST_N_HOURS:
            return f"last-{self.amount}-hours"
        if self.kind == TimeKind.AFTER:
            return f"after-{_local_date(self.start)}"
        if self.kind == TimeKind.BEFORE:
            return f"before-{_local_date(self.end)}"
        if self.kind == TimeKind.BETWEEN:
            return f"between-{_local_date(self.start)}-{_local_date(self.end)}"
        return self.kind.value


class SizeKind(Enum):
    """Kinds of size condition."""

    EMPTY = "empty"
    CATEGORY = "category"
    GREATER_THAN = ">"
    LESS_THAN = "<"
    EQUALS = "="
    RANGE = "-"


@dataclass(frozen=True)
class SizeCondition:
    """A file size test, in bytes."""

    kind: SizeKind
    category: Optional[SizeCategory] = None
    value: Optional[int] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    @classmethod
    def empty(cls) -> "SizeCondition":
        return cls(SizeKind.EMPTY)

    @classmethod
    def of_category(cls, category: SizeCategory) -> "SizeCondition":
        return cls(SizeKind.CATEGORY, category=category)

    @classmethod
    def greater_than(cls, size: int) -> "SizeCondition":
        return cls(SizeKind.GREATER_THAN, value=size)

    @classmethod
    def less_than(cls, size: int) -> "SizeCondition":
        return cls(SizeKind.LESS_THAN, value=size)

    @classmethod
    def equals(cls, size: int) -> "SizeCondition":
        return cls(SizeKind.EQUALS, value=size)

    @classmethod
    def between(cls, minimum: int, maximum: int) -> "SizeCondition":
        return cls(SizeKind.RANGE, minimum=minimum, maximum=maximum)

    def __str__(self) -> str:
        if self.kind == SizeKind.EMPTY:
            return "empty"
        if self.kind == SizeKind.CATEGORY:
            return self.category.value
        if self.kind == SizeKind.RANGE:
            return f"{self.minimum}-{self.maximum}"
        return f"{self.kind.value}{self.value}"


class RangeKind(Enum):
    """Kinds of count comparison."""

    EQUALS = "="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    RANGE = "-"


@dataclass(frozen=True)
class RangeCondition:
    """A comparison over a non-negative count (depth, lines)."""

    kind: RangeKind
    value: Optional[int] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    @classmethod
    def equals(cls, value: int) -> "RangeCondition":
        return cls(RangeKind.EQUALS, value=value)

    @classmethod
    def greater_than(cls, value: int) -> "RangeCondition":
        return cls(RangeKind.GREATER_THAN, value=value)

    @classmethod
    def less_than(cls, value: int) -> "RangeCondition":
        return cls(RangeKind.LESS_THAN, value=value)

    @classmethod
    def between(cls, minimum: int, maximum: int) -> "RangeCondition":
        return cls(RangeKind.RANGE, minimum=minimum, maximum=maximum)

    def contains(self, count: int) -> bool:
        """Check a count against this condition (RANGE is inclusive)."""
        if self.kind == RangeKind.EQUALS:
            return count == self.value
        if self.kind == RangeKind.GREATER_THAN:
            return count > self.value
        if self.kind == RangeKind.LESS_THAN:
            return count < self.value
        if self.kind == RangeKind.RANGE:
            return self.minimum <= count <= self.maximum
        raise ValueError(f"Unknown range kind: {self.kind}")

    def __str__(self) -> str:
        if self.kind == RangeKind.EQUALS:
            return str(self.value)
        if self.kind == RangeKind.RANGE:
            return f"{self.minimum}-{self.maximum}"
        return f"{self.kind.value}{self.value}"


@dataclass(frozen=True)
class VirtualTag:
    """Base class for virtual tags. ``prefix`` is the text before the colon."""

    prefix: ClassVar[str] = ""

    def value_text(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return f"{self.prefix}:{self.value_text()}"


@dataclass(frozen=True)
class TimeTag(VirtualTag):
    """Shared shape of the three timestamp tags."""

    condition: TimeCondition

    def value_text(self) -> str:
        return str(self.condition)


@dataclass(frozen=True)
class ModifiedTag(TimeTag):
    prefix: ClassVar[str] = "modified"


@dataclass(frozen=True)
class CreatedTag(TimeTag):
    prefix: ClassVar[str] = "created"


@dataclass(frozen=True)
class AccessedTag(TimeTag):
    prefix: ClassVar[str] = "accessed"


@dataclass(frozen=True)
class SizeTag(VirtualTag):
    prefix: ClassVar[str] = "size"

    condition: SizeCondition

    def value_text(self) -> str:
        return str(self.condition)


@dataclass(frozen=True)
class ExtensionTag(VirtualTag):
    """File suffix, stored with its leading dot."""

    prefix: ClassVar[str] = "ext"

    extension: str

    def value_text(self) -> str:
        return self.extension


@dataclass(frozen=True)
class ExtensionTypeTag(VirtualTag):
    prefix: ClassVar[str] = "ext-type"

    category: ExtTypeCategory

    def value_text(self) -> str:
        return self.category.value


@dataclass(frozen=True)
class DirectoryTag(VirtualTag):
    prefix: ClassVar[str] = "dir"

    directory: PurePath

    def value_text(self) -> str:
        return str(self.directory)


@dataclass(frozen=True)
class PathTag(VirtualTag):
    prefix: ClassVar[str] = "path"

    pattern: GlobPattern

    def value_text(self) -> str:
        return self.pattern.pattern


@dataclass(frozen=True)
class DepthTag(VirtualTag):
    prefix: ClassVar[str] = "depth"

    condition: RangeCondition

    def value_text(self) -> str:
        return str(self.condition)


@dataclass(frozen=True)
class PermissionTag(VirtualTag):
    prefix: ClassVar[str] = "perm"

    condition: PermissionCondition

    def value_text(self) -> str:
        return self.condition.value


@dataclass(frozen=True)
class LinesTag(VirtualTag):
    prefix: ClassVar[str] = "lines"

    condition: RangeCondition

    def value_text(self) -> str:
        return str(self.condition)


@dataclass(frozen=True)
class GitTag(VirtualTag):
    prefix: ClassVar[str] = "git"

    condition: GitCondition

    def value_text(self) -> str:
        return self.condition.value
