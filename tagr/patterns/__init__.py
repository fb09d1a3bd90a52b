"""tagr pattern system.

Typed representations for tag and file patterns:
- TagPattern: literal or regex tag matchers
- FilePattern: literal, regex or glob file matchers
- PatternBuilder: classifies raw tokens into typed queries

Which pattern results must match (all or any) is decided by the caller.
"""

from .builder import (
    PatternBuilder,
    PatternContext,
    build_file_query,
    build_tag_query,
    is_glob_token,
)
from .errors import (
    IncompatibleConversionError,
    InvalidEmptyError,
    InvalidGlobError,
    InvalidRegexError,
    MixedPatternMisuseError,
    PatternError,
    PatternKind,
    TooManyPatternsError,
    UnsupportedFeatureError,
)
from .files import FilePattern, FileQuery, GlobFile, LiteralFile, RegexFile
from .glob_pattern import GlobPattern, GlobSyntaxError
from .tags import LiteralTag, RegexTag, TagPattern, TagQuery

__all__ = [
    # Builder
    "PatternBuilder",
    "PatternContext",
    "build_tag_query",
    "build_file_query",
    "is_glob_token",
    # Errors
    "PatternKind",
    "PatternError",
    "InvalidEmptyError",
    "InvalidRegexError",
    "InvalidGlobError",
    "MixedPatternMisuseError",
    "TooManyPatternsError",
    "UnsupportedFeatureError",
    "IncompatibleConversionError",
    # Tag patterns
    "TagPattern",
    "LiteralTag",
    "RegexTag",
    "TagQuery",
    # File patterns
    "FilePattern",
    "LiteralFile",
    "RegexFile",
    "GlobFile",
    "FileQuery",
    # Globs
    "GlobPattern",
    "GlobSyntaxError",
]
