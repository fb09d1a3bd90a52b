"""Tag patterns and tag queries.

A tag pattern is either a literal tag name or a regular expression. Two
patterns are equal when they are the same variant built from the same source
text; compiled regexes never take part in comparisons.
"""

import re
from dataclasses import dataclass, field
from typing import Pattern, Sequence, Tuple

from tagr.core.constants import Limits, SearchMode
from tagr.patterns.errors import (
    IncompatibleConversionError,
    InvalidEmptyError,
    InvalidRegexError,
    PatternKind,
    TooManyPatternsError,
)


class TagPattern:
    """Base class for tag patterns."""

    @staticmethod
    def literal(text: str) -> "LiteralTag":
        """Construct a literal tag pattern.

        Raises:
            InvalidEmptyError: If ``text`` is empty
        """
        if not text:
            raise InvalidEmptyError(PatternKind.TAG)
        return LiteralTag(text)

    @staticmethod
    def regex(text: str) -> "RegexTag":
        """Construct a regex tag pattern.

        Raises:
            InvalidEmptyError: If ``text`` is empty
            InvalidRegexError: If the regex does not compile
        """
        if not text:
            raise InvalidEmptyError(PatternKind.TAG)
        try:
            compiled = re.compile(text)
        except re.error as e:
            raise InvalidRegexError(text, str(e)) from e
        return RegexTag(text, compiled)

    @property
    def is_regex(self) -> bool:
        return isinstance(self, RegexTag)

    def original(self) -> str:
        raise NotImplementedError

    def matches(self, tag: str) -> bool:
        raise NotImplementedError

    def as_regex(self) -> Pattern[str]:
        raise IncompatibleConversionError(
            f"tag pattern '{self.original()}' is not a regex pattern"
        )


@dataclass(frozen=True)
class LiteralTag(TagPattern):
    """Exact tag name."""

    value: str

    def original(self) -> str:
        return self.value

    def matches(self, tag: str) -> bool:
        return tag == self.value


@dataclass(frozen=True)
class RegexTag(TagPattern):
    """Regular expression searched within tag names."""

    source: str
    compiled: Pattern[str] = field(compare=False, repr=False)

    def original(self) -> str:
        return self.source

    def matches(self, tag: str) -> bool:
        return self.compiled.search(tag) is not None

    def as_regex(self) -> Pattern[str]:
        return self.compiled


@dataclass(frozen=True)
class TagQuery:
    """Tag patterns plus the mode the caller combines them with."""

    patterns: Tuple[TagPattern, ...]
    mode: SearchMode

    @classmethod
    def new(
        cls,
        patterns: Sequence[TagPattern],
        mode: SearchMode,
        max_patterns: int = Limits.MAX_PATTERNS,
    ) -> "TagQuery":
        """Create a query, enforcing the pattern limit.

        Raises:
            TooManyPatternsError: If more than ``max_patterns`` are given
        """
        if len(patterns) > max_patterns:
            raise TooManyPatternsError(len(patterns), max_patterns)
        return cls(tuple(patterns), mode)

    def __len__(self) -> int:
        return len(self.patterns)
