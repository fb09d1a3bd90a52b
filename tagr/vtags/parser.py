#!/usr/bin/env python3
"""Virtual tag parser.

Turns ``prefix:value`` strings into typed ``VirtualTag`` values. Parsing is
pure: the only input besides the string is the ``VirtualTagConfig`` the
parser was built with.

Supported prefixes:
- modified, created, accessed: time windows and dates
- size: empty, a size category, >SIZE, <SIZE, =SIZE, MIN-MAX
- ext, ext-type: file suffix or extension family
- dir, path: parent directory or glob over the whole path
- depth, lines: N, >N, <N, MIN-MAX
- perm, git: permission and version control keywords

Example:
    >>> parser = VirtualTagParser(VirtualTagConfig())
    >>> str(parser.parse("size:>1MB"))
    'size:>1000000'
"""

import re
from datetime import date, datetime, timedelta, timezone
from pathlib import PurePath
from typing import Callable, Dict, Iterable, List, Optional

from tagr.core.constants import ErrorCode
from tagr.infrastructure.logger import Logger
from tagr.patterns.glob_pattern import GlobPattern, GlobSyntaxError
from tagr.vtags.config import VirtualTagConfig, normalize_extension
from tagr.vtags.types import (
    TIME_KEYWORDS,
    AccessedTag,
    CreatedTag,
    DepthTag,
    DirectoryTag,
    ExtensionTag,
    ExtensionTypeTag,
    ExtTypeCategory,
    GitCondition,
    GitTag,
    LinesTag,
    ModifiedTag,
    PathTag,
    PermissionCondition,
    PermissionTag,
    RangeCondition,
    SizeCategory,
    SizeCondition,
    SizeTag,
    TimeCondition,
    VirtualTag,
)

_COUNT_RE = re.compile(r"[0-9]+")
_LAST_N_RE = re.compile(r"last-([0-9]+)-(days|hours)")
DATE_FORMAT = "%Y-%m-%d"


class ParseError(Exception):
    """Base class for virtual tag parse errors."""

    label = "Parse error"

    def __init__(self, value: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.value = value
        self.message = f"{self.label}: {value}"
        self.error_code = error_code
        super().__init__(self.message)


class InvalidFormatError(ParseError):
    """Input has no ``prefix:value`` separator."""

    label = "Invalid virtual tag format"


class UnknownPrefixError(ParseError):
    label = "Unknown virtual tag prefix"

    def __init__(self, value: str):
        super().__init__(value, ErrorCode.NOT_FOUND)


class InvalidValueError(ParseError):
    label = "Invalid value"


class InvalidSizeError(ParseError):
    label = "Invalid size"


class InvalidDateError(ParseError):
    label = "Invalid date"


class InvalidRangeError(ParseError):
    label = "Invalid range"


class InvalidPatternError(ParseError):
    label = "Invalid pattern"


class VirtualTagParser:
    """Parses virtual tag strings against a fixed configuration."""

    def __init__(self, config: VirtualTagConfig, logger: Optional[Logger] = None):
        """Initialize parser.

        Args:
            config: Virtual tag configuration
            logger: Optional logger (a ``tagr.vtags`` logger by default)
        """
        self.config = config
        self._logger = logger or Logger("tagr.vtags")
        self._handlers: Dict[str, Callable[[str], VirtualTag]] = {
            ModifiedTag.prefix: lambda v: ModifiedTag(self._parse_time(v)),
            CreatedTag.prefix: lambda v: CreatedTag(self._parse_time(v)),
            AccessedTag.prefix: lambda v: AccessedTag(self._parse_time(v)),
            SizeTag.prefix: lambda v: SizeTag(self._parse_size(v)),
            ExtensionTag.prefix: lambda v: ExtensionTag(self._parse_extension(v)),
            ExtensionTypeTag.prefix: lambda v: ExtensionTypeTag(
                self._parse_keyword(ExtTypeCategory, v)
            ),
            DirectoryTag.prefix: lambda v: DirectoryTag(self._parse_directory(v)),
            PathTag.prefix: lambda v: PathTag(self._parse_glob(v)),
            DepthTag.prefix: lambda v: DepthTag(self._parse_range(v)),
            PermissionTag.prefix: lambda v: PermissionTag(
                self._parse_keyword(PermissionCondition, v)
            ),
            LinesTag.prefix: lambda v: LinesTag(self._parse_range(v)),
            GitTag.prefix: lambda v: GitTag(self._parse_keyword(GitCondition, v)),
        }

    @property
    def prefixes(self) -> List[str]:
        """Recognised prefixes, in documentation order."""
        return list(self._handlers)

    def parse(self, text: str) -> VirtualTag:
        """Parse one virtual tag.

        Args:
            text: Input of the form ``prefix:value``

        Returns:
            Parsed virtual tag

        Raises:
            ParseError: Subclass describing what was wrong with the input
        """
        try:
            prefix, separator, value = text.partition(":")
            if not separator:
                raise InvalidFormatError(text)

            handler = self._handlers.get(prefix)
            if handler is None:
                raise UnknownPrefixError(prefix)

            return handler(value)
        except ParseError as e:
            self._logger.debug("Virtual tag rejected", input=text, error=e.message)
            raise

    def _parse_time(self, value: str) -> TimeCondition:
        kind = TIME_KEYWORDS.get(value)
        if kind is not None:
            return TimeCondition.keyword(kind)

        if value.startswith("last-") and value.endswith(("-days", "-hours")):
            match = _LAST_N_RE.fullmatch(value)
            if not match:
                raise InvalidValueError(value)
            amount = int(match.group(1))
            if match.group(2) == "days":
                return TimeCondition.last_n_days(amount)
            return TimeCondition.last_n_hours(amount)

        if value.startswith("after-"):
            return TimeCondition.after(self._parse_date(value[len("after-"):]))

        if value.startswith("before-"):
            return TimeCondition.before(self._parse_date(value[len("before-"):]))

        if value.startswith("between-"):
            parts = value[len("between-"):].split("-")
            if len(parts) != 6:
                raise InvalidDateError(value)
            start = self._parse_date("-".join(parts[:3]))
            end = self._parse_date("-".join(parts[3:]))
            return TimeCondition.between(start, end)

        # Bare date: 24 hours from local midnight
        start = self._parse_date(value)
        try:
            end = start + timedelta(days=1)
        except OverflowError:
            raise InvalidDateError(value) from None
        return TimeCondition.between(start, end)

    def _parse_day(self, text: str) -> date:
        try:
            return datetime.strptime(text, DATE_FORMAT).date()
        except ValueError:
            raise InvalidDateError(text) from None

    def _parse_date(self, text: str) -> datetime:
        day = self._parse_day(text)
        try:
            return _local_midnight(day)
        except (OverflowError, ValueError):
            # Local midnight falls outside the representable range
            raise InvalidDateError(text) from None

    def _parse_size(self, value: str) -> SizeCondition:
        if value == "empty":
            return SizeCondition.empty()

        for category in SizeCategory:
            if value == category.value:
                return SizeCondition.of_category(category)

        if value[:1] in (">", "<", "="):
            size = self.config.parse_size(value[1:])
            if size is None:
                raise InvalidSizeError(value)
            if value[0] == ">":
                return SizeCondition.greater_than(size)
            if value[0] == "<":
                return SizeCondition.less_than(size)
            return SizeCondition.equals(size)

        if "-" in value:
            parts = value.split("-")
            if len(parts) != 2:
                raise InvalidSizeError(value)
            minimum = self.config.parse_size(parts[0])
            maximum = self.config.parse_size(parts[1])
            if minimum is None or maximum is None:
                raise InvalidSizeError(value)
            return SizeCondition.between(minimum, maximum)

        raise InvalidSizeError(value)

    def _parse_extension(self, value: str) -> str:
        if not value.lstrip("."):
            raise InvalidValueError(value)
        return normalize_extension(value)

    def _parse_directory(self, value: str) -> PurePath:
        if not value:
            raise InvalidValueError(value)
        return PurePath(value)

    def _parse_glob(self, value: str) -> GlobPattern:
        try:
            return GlobPattern(value)
        except GlobSyntaxError:
            raise InvalidPatternError(value) from None

    def _parse_range(self, value: str) -> RangeCondition:
        if value[:1] in (">", "<"):
            count = _parse_count(value[1:], value)
            if value[0] == ">":
                return RangeCondition.greater_than(count)
            return RangeCondition.less_than(count)

        if "-" in value:
            parts = value.split("-")
            if len(parts) != 2:
                raise InvalidRangeError(value)
            return RangeCondition.between(
                _parse_count(parts[0], value), _parse_count(parts[1], value)
            )

        return RangeCondition.equals(_parse_count(value, value))

    def _parse_keyword(self, enum_type, value: str):
        try:
            return enum_type(value)
        except ValueError:
            raise InvalidValueError(value) from None


def _parse_count(text: str, original: str) -> int:
    if not _COUNT_RE.fullmatch(text):
        raise InvalidRangeError(original)
    return int(text)


def _local_midnight(day: date) -> datetime:
    """Local midnight at the start of ``day``, as an aware UTC datetime."""
    return datetime(day.year, day.month, day.day).astimezone().astimezone(timezone.utc)


def parse_virtual_tag(text: str, config: Optional[VirtualTagConfig] = None) -> VirtualTag:
    """Parse a single virtual tag with a default or given configuration."""
    return VirtualTagParser(config or VirtualTagConfig()).parse(text)


def parse_virtual_tags(
    texts: Iterable[str], config: Optional[VirtualTagConfig] = None
) -> List[VirtualTag]:
    """Parse several virtual tags, failing on the first invalid one.

    Raises:
        ParseError: For the first input that does not parse
    """
    parser = VirtualTagParser(config or VirtualTagConfig())
    return [parser.parse(text) for text in texts]
