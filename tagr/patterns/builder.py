#!/usr/bin/env python3
"""Pattern builder: turns raw tag and file tokens into typed queries.

Tokens arrive from the command layer together with the flags the user gave.
The builder decides, per token, which pattern variant to compile:

- Tags are literal unless ``regex_tags`` is set. A glob-looking tag without
  that flag is rejected instead of silently matching nothing.
- Files are regex when ``regex_files`` is set, glob when ``glob_files_flag``
  is set or when a bulk command receives a glob-looking token, literal
  otherwise.

Example:
    >>> builder = PatternBuilder(PatternContext.BULK_FILES)
    >>> builder.add_tag_token("rust")
    >>> builder.add_file_token("src/**/*.rs")
    >>> tags, files = builder.build(SearchMode.ALL, SearchMode.ALL)
    >>> files.patterns[0].is_glob
    True
"""

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from tagr.core.constants import GLOB_METACHARACTERS, Limits, SearchMode, Token
from tagr.infrastructure.logger import Logger
from tagr.patterns.errors import MixedPatternMisuseError
from tagr.patterns.files import FilePattern, FileQuery
from tagr.patterns.tags import TagPattern, TagQuery


class PatternContext(Enum):
    """Command context file tokens are interpreted in."""

    BULK_FILES = "bulk"  # Bulk tag/untag: bare globs are accepted
    SEARCH_FILES = "search"  # Search/browse: globs need an explicit flag


def is_glob_token(token: str) -> bool:
    """Check whether a token contains glob metacharacters."""
    return any(char in token for char in GLOB_METACHARACTERS)


def build_tag_query(
    patterns: Sequence[TagPattern],
    mode: SearchMode,
    max_patterns: int = Limits.MAX_PATTERNS,
) -> TagQuery:
    """Build a TagQuery, enforcing the pattern limit."""
    return TagQuery.new(patterns, mode, max_patterns)


def build_file_query(
    patterns: Sequence[FilePattern],
    mode: SearchMode,
    max_patterns: int = Limits.MAX_PATTERNS,
) -> FileQuery:
    """Build a FileQuery, enforcing the pattern limit."""
    return FileQuery.new(patterns, mode, max_patterns)


class PatternBuilder:
    """Collects raw tokens and flags, then compiles typed queries."""

    def __init__(
        self,
        context: PatternContext,
        max_patterns: int = Limits.MAX_PATTERNS,
        logger: Optional[Logger] = None,
    ):
        """Initialize builder.

        Args:
            context: Command context file tokens are interpreted in
            max_patterns: Maximum patterns per query
            logger: Optional logger (a ``tagr.patterns`` logger by default)
        """
        self.context = context
        self.max_patterns = max_patterns
        self._tag_tokens: List[Token] = []
        self._file_tokens: List[Token] = []
        self._regex_tags = False
        self._regex_files = False
        self._glob_files_flag = False
        self._logger = logger or Logger("tagr.patterns")

    def regex_tags(self, enabled: bool) -> "PatternBuilder":
        """Interpret tag tokens as regular expressions."""
        self._regex_tags = enabled
        return self

    def regex_files(self, enabled: bool) -> "PatternBuilder":
        """Interpret file tokens as regular expressions."""
        self._regex_files = enabled
        return self

    def glob_files_flag(self, enabled: bool) -> "PatternBuilder":
        """Interpret file tokens as globs regardless of context."""
        self._glob_files_flag = enabled
        return self

    def add_tag_token(self, token: Token) -> None:
        """Queue a tag token; it is classified when ``build`` runs."""
        self._tag_tokens.append(token)

    def add_file_token(self, token: Token) -> None:
        """Queue a file token; ``build`` classifies it by flags and context."""
        self._file_tokens.append(token)

    def add_tag_tokens(self, tokens: Iterable[Token]) -> None:
        """Queue several tag tokens in order."""
        self._tag_tokens.extend(tokens)

    def add_file_tokens(self, tokens: Iterable[Token]) -> None:
        """Queue several file tokens in order."""
        self._file_tokens.extend(tokens)

    def _compile_tag(self, token: Token) -> TagPattern:
        if self._regex_tags:
            return TagPattern.regex(token)
        if is_glob_token(token):
            raise MixedPatternMisuseError(
                f"Glob-like token '{token}' supplied as tag. Use --regex-tag to match "
                f"tags by pattern, --glob-files for file patterns, or remove the wildcards."
            )
        return TagPattern.literal(token)

    def _compile_file(self, token: Token) -> FilePattern:
        if self._regex_files:
            return FilePattern.regex(token)
        implicit_glob = self.context == PatternContext.BULK_FILES and is_glob_token(token)
        if self._glob_files_flag or implicit_glob:
            return FilePattern.glob(token)
        return FilePattern.literal(token)

    def build(self, tag_mode: SearchMode, file_mode: SearchMode) -> Tuple[TagQuery, FileQuery]:
        """Compile all collected tokens.

        Args:
            tag_mode: How the caller combines tag pattern results
            file_mode: How the caller combines file pattern results

        Returns:
            Tuple of (TagQuery, FileQuery)

        Raises:
            MixedPatternMisuseError: If a glob-like tag is given without ``regex_tags``
            InvalidEmptyError: If any token is empty
            InvalidRegexError: If a regex token does not compile
            InvalidGlobError: If a glob token is malformed
            TooManyPatternsError: If either query exceeds ``max_patterns``
        """
        tag_patterns = [self._compile_tag(token) for token in self._tag_tokens]
        file_patterns = [self._compile_file(token) for token in self._file_tokens]

        tag_query = build_tag_query(tag_patterns, tag_mode, self.max_patterns)
        file_query = build_file_query(file_patterns, file_mode, self.max_patterns)

        self._logger.debug(
            "Built pattern queries",
            pattern_context=self.context.value,
            tags=len(tag_query),
            files=len(file_query),
            globs=sum(1 for p in file_query.patterns if p.is_glob),
        )
        return tag_query, file_query
