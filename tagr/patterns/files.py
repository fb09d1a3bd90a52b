"""File patterns and file queries.

A file pattern is a literal path, a regular expression searched in the path
text, or a glob matched against the whole path text. As with tags, equality
is decided by variant and source text alone.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Pattern, Sequence, Tuple, Union

from tagr.core.constants import Limits, SearchMode
from tagr.patterns.errors import (
    IncompatibleConversionError,
    InvalidEmptyError,
    InvalidGlobError,
    InvalidRegexError,
    PatternKind,
    TooManyPatternsError,
)
from tagr.patterns.glob_pattern import GlobPattern, GlobSyntaxError

PathLike = Union[str, PurePath]


class FilePattern:
    """Base class for file patterns."""

    @staticmethod
    def literal(path: PathLike) -> "LiteralFile":
        """Construct a literal file pattern.

        Raises:
            InvalidEmptyError: If the path renders as an empty string
        """
        text = str(path) if isinstance(path, PurePath) else path
        if not text:
            raise InvalidEmptyError(PatternKind.FILE)
        return LiteralFile(text)

    @staticmethod
    def regex(text: str) -> "RegexFile":
        """Construct a regex file pattern.

        Raises:
            InvalidEmptyError: If ``text`` is empty
            InvalidRegexError: If the regex does not compile
        """
        if not text:
            raise InvalidEmptyError(PatternKind.FILE)
        try:
            compiled = re.compile(text)
        except re.error as e:
            raise InvalidRegexError(text, str(e)) from e
        return RegexFile(text, compiled)

    @staticmethod
    def glob(text: str) -> "GlobFile":
        """Construct a glob file pattern.

        Raises:
            InvalidEmptyError: If ``text`` is empty
            InvalidGlobError: If the glob is malformed
        """
        if not text:
            raise InvalidEmptyError(PatternKind.FILE)
        try:
            compiled = GlobPattern(text)
        except GlobSyntaxError as e:
            raise InvalidGlobError(text, e.reason) from e
        return GlobFile(text, compiled)

    @property
    def is_regex(self) -> bool:
        return isinstance(self, RegexFile)

    @property
    def is_glob(self) -> bool:
        return isinstance(self, GlobFile)

    def original(self) -> str:
        raise NotImplementedError

    def matches(self, path: PathLike) -> bool:
        raise NotImplementedError

    def as_regex(self) -> Pattern[str]:
        raise IncompatibleConversionError(
            f"file pattern '{self.original()}' is not a regex pattern"
        )

    def as_glob(self) -> GlobPattern:
        raise IncompatibleConversionError(
            f"file pattern '{self.original()}' is not a glob pattern"
        )


@dataclass(frozen=True)
class LiteralFile(FilePattern):
    """A single path, kept exactly as typed."""

    text: str

    @property
    def path(self) -> Path:
        return Path(self.text)

    def original(self) -> str:
        return self.text

    def matches(self, path: PathLike) -> bool:
        return PurePath(path) == PurePath(self.text)


@dataclass(frozen=True)
class RegexFile(FilePattern):
    """Regular expression searched within the path text."""

    source: str
    compiled: Pattern[str] = field(compare=False, repr=False)

    def original(self) -> str:
        return self.source

    def matches(self, path: PathLike) -> bool:
        return self.compiled.search(str(path)) is not None

    def as_regex(self) -> Pattern[str]:
        return self.compiled


@dataclass(frozen=True)
class GlobFile(FilePattern):
    """Glob matched against the whole path text."""

    source: str
    compiled: GlobPattern = field(compare=False, repr=False)

    def original(self) -> str:
        return self.source

    def matches(self, path: PathLike) -> bool:
        return self.compiled.matches(path)

    def as_glob(self) -> GlobPattern:
        return self.compiled


@dataclass(frozen=True)
class FileQuery:
    """File patterns plus the mode the caller combines them with."""

    patterns: Tuple[FilePattern, ...]
    mode: SearchMode

    @classmethod
    def new(
        cls,
        patterns: Sequence[FilePattern],
        mode: SearchMode,
        max_patterns: int = Limits.MAX_PATTERNS,
    ) -> "FileQuery":
        """Create a query, enforcing the pattern limit.

        Raises:
            TooManyPatternsError: If more than ``max_patterns`` are given
        """
        if len(patterns) > max_patterns:
            raise TooManyPatternsError(len(patterns), max_patterns)
        return cls(tuple(patterns), mode)

    def __len__(self) -> int:
        return len(self.patterns)
