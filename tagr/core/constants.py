"""
tagr Core: Constants and Type Definitions

This module provides system-wide constants, error codes, and shared enums
used by the pattern compiler and the virtual tag engine.
"""
from enum import Enum, IntEnum
from typing import TypeAlias

# Version information
TAGR_VERSION = "0.9.0"


class ErrorCode(IntEnum):
    """Standardized error codes for tagr operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad token, pattern or configuration value
    NOT_FOUND = 2  # File or resource doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Conflicting flags or patterns
    DEPENDENCY_ERROR = 5  # Missing optional integration
    INTERNAL_ERROR = 6  # Bug in tagr
    UNSUPPORTED = 7  # Feature or metadata not available


class SearchMode(Enum):
    """How per-pattern results are combined by the caller."""

    ALL = "all"  # Every pattern must match
    ANY = "any"  # At least one pattern must match


# Type aliases for clarity
Token: TypeAlias = str


class Limits:
    """Engine limits and default values."""

    # Pattern compilation
    MAX_PATTERNS = 1000

    # Metadata cache
    DEFAULT_CACHE_TTL_SECONDS = 300

    # Time thresholds (days)
    DEFAULT_RECENT_DAYS = 7
    DEFAULT_STALE_DAYS = 180


# Characters that make a token look like a shell glob
GLOB_METACHARACTERS = ("*", "?", "[")


class ConfigKey:
    """Configuration key constants."""

    ROOT = "tagr"
    VIRTUAL_TAGS = "virtual_tags"
    LOGGING = "logging"

    # Virtual tag section
    ENABLED = "enabled"
    CACHE_METADATA = "cache_metadata"
    CACHE_TTL = "cache_ttl_seconds"
    SIZE_CATEGORIES = "size_categories"
    EXTENSION_TYPES = "extension_types"
    TIME = "time"
    GIT = "git"


DEFAULT_SIZE_CATEGORIES = {
    "tiny": "1KB",
    "small": "100KB",
    "medium": "1MB",
    "large": "10MB",
    "huge": "100MB",
}

DEFAULT_EXTENSION_TYPES = {
    "source": [".rs", ".py", ".js", ".go", ".cpp", ".c", ".java", ".ts"],
    "document": [".md", ".txt", ".pdf", ".doc", ".docx", ".org"],
    "config": [".toml", ".yaml", ".yml", ".json", ".ini", ".conf"],
    "image": [".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"],
    "archive": [".zip", ".tar", ".gz", ".7z", ".rar", ".bz2"],
}

# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        ConfigKey.VIRTUAL_TAGS: {
            ConfigKey.ENABLED: True,
            ConfigKey.CACHE_METADATA: True,
            ConfigKey.CACHE_TTL: Limits.DEFAULT_CACHE_TTL_SECONDS,
            ConfigKey.SIZE_CATEGORIES: dict(DEFAULT_SIZE_CATEGORIES),
            ConfigKey.EXTENSION_TYPES: {k: list(v) for k, v in DEFAULT_EXTENSION_TYPES.items()},
            ConfigKey.TIME: {
                "recent": Limits.DEFAULT_RECENT_DAYS,
                "stale": Limits.DEFAULT_STALE_DAYS,
            },
            ConfigKey.GIT: {
                "enabled": True,
                "detect_repo": True,
            },
        },
        ConfigKey.LOGGING: {
            "level": "INFO",
            "file": None,
        },
    }
}
