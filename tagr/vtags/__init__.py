"""tagr virtual tags.

Virtual tags are ``prefix:value`` predicates computed from file metadata
rather than stored, such as ``size:>1MB`` or ``modified:today``.

- VirtualTagParser: strings to typed ``VirtualTag`` values
- VirtualTagEvaluator: typed tags against files on disk
- VirtualTagConfig: size thresholds, extension tables and cache settings
"""

from .config import (
    GitConfig,
    SizeCategoryConfig,
    TimeConfig,
    VirtualTagConfig,
    normalize_extension,
    parse_size,
)
from .evaluator import VirtualTagEvaluator, count_lines, path_depth, time_condition_matches
from .parser import (
    InvalidDateError,
    InvalidFormatError,
    InvalidPatternError,
    InvalidRangeError,
    InvalidSizeError,
    InvalidValueError,
    ParseError,
    UnknownPrefixError,
    VirtualTagParser,
    parse_virtual_tag,
    parse_virtual_tags,
)
from .types import (
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
    RangeKind,
    SizeCategory,
    SizeCondition,
    SizeKind,
    SizeTag,
    TimeCondition,
    TimeKind,
    TimeTag,
    VirtualTag,
)

__all__ = [
    # Parsing
    "VirtualTagParser",
    "parse_virtual_tag",
    "parse_virtual_tags",
    "ParseError",
    "InvalidFormatError",
    "UnknownPrefixError",
    "InvalidValueError",
    "InvalidSizeError",
    "InvalidDateError",
    "InvalidRangeError",
    "InvalidPatternError",
    # Evaluation
    "VirtualTagEvaluator",
    "time_condition_matches",
    "count_lines",
    "path_depth",
    # Configuration
    "VirtualTagConfig",
    "SizeCategoryConfig",
    "TimeConfig",
    "GitConfig",
    "parse_size",
    "normalize_extension",
    # Tags
    "VirtualTag",
    "TimeTag",
    "ModifiedTag",
    "CreatedTag",
    "AccessedTag",
    "SizeTag",
    "ExtensionTag",
    "ExtensionTypeTag",
    "DirectoryTag",
    "PathTag",
    "DepthTag",
    "PermissionTag",
    "LinesTag",
    "GitTag",
    # Conditions
    "TimeKind",
    "TimeCondition",
    "SizeKind",
    "SizeCategory",
    "SizeCondition",
    "RangeKind",
    "RangeCondition",
    "PermissionCondition",
    "ExtTypeCategory",
    "GitCondition",
]
