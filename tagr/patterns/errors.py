"""Errors raised while compiling tag and file patterns."""

from enum import Enum

from tagr.core.constants import ErrorCode


class PatternKind(Enum):
    """Which side of a query a pattern belongs to."""

    TAG = "tag"
    FILE = "file"


class PatternError(Exception):
    """Base class for pattern compilation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class InvalidEmptyError(PatternError):
    """An empty token was supplied."""

    def __init__(self, kind: PatternKind):
        super().__init__(f"Empty {kind.value} pattern provided")
        self.kind = kind


class InvalidRegexError(PatternError):
    """A regex token failed to compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class InvalidGlobError(PatternError):
    """A glob token failed to parse."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class MixedPatternMisuseError(PatternError):
    """A token was used in a context where its pattern kind is not allowed."""

    def __init__(self, detail: str):
        super().__init__(f"Mixed pattern misuse: {detail}", ErrorCode.CONFLICT)
        self.detail = detail


class TooManyPatternsError(PatternError):
    """A query was given more patterns than its limit."""

    def __init__(self, provided: int, max: int):
        super().__init__(f"Too many patterns provided: {provided} (max {max})")
        self.provided = provided
        self.max = max


class UnsupportedFeatureError(PatternError):
    """A pattern feature is recognised but not supported."""

    def __init__(self, feature: str):
        super().__init__(f"Unsupported feature: {feature}", ErrorCode.UNSUPPORTED)
        self.feature = feature


class IncompatibleConversionError(PatternError):
    """A pattern was asked for a matcher its variant does not have."""

    def __init__(self, detail: str):
        super().__init__(f"Incompatible conversion: {detail}")
        self.detail = detail
