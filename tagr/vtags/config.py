"""
tagr Virtual Tags: configuration.

Size thresholds and extension tables are data, not code: the parser and the
evaluator receive a ``VirtualTagConfig`` explicitly and never read global
state. Configs are immutable once built.

Example:
    >>> config = VirtualTagConfig.from_dict({"size_categories": {"tiny": "4KiB"}})
    >>> config.get_size_threshold(SizeCategory.TINY)
    4096
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from tagr.core.constants import (
    DEFAULT_EXTENSION_TYPES,
    DEFAULT_SIZE_CATEGORIES,
    ConfigKey,
    Limits,
)
from tagr.infrastructure.config_manager import ConfigError, ConfigManager
from tagr.vtags.types import SizeCategory

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)

# Decimal units are powers of 1000, binary (…iB) units powers of 1024
SIZE_UNITS: Dict[str, int] = {
    "": 1,
    "b": 1,
    "k": 1000,
    "kb": 1000,
    "m": 1000**2,
    "mb": 1000**2,
    "g": 1000**3,
    "gb": 1000**3,
    "t": 1000**4,
    "tb": 1000**4,
    "p": 1000**5,
    "pb": 1000**5,
    "kib": 1024,
    "mib": 1024**2,
    "gib": 1024**3,
    "tib": 1024**4,
    "pib": 1024**5,
}


def parse_size(text: str) -> Optional[int]:
    """Parse a human size literal into bytes.

    Accepts an integer or decimal number with an optional, case-insensitive
    unit. Fractional byte counts are truncated.

    Args:
        text: Size literal such as "500", "1MB", "1.5 GiB"

    Returns:
        Size in bytes, or None if the literal is not understood

    Example:
        >>> parse_size("1MB"), parse_size("1MiB"), parse_size("500")
        (1000000, 1048576, 500)
    """
    match = _SIZE_RE.match(text)
    if not match:
        return None

    number, unit = match.groups()
    multiplier = SIZE_UNITS.get(unit.lower())
    if multiplier is None:
        return None

    return int(Decimal(number) * multiplier)


def normalize_extension(extension: str) -> str:
    """Return ``extension`` with exactly one leading dot."""
    return extension if extension.startswith(".") else f".{extension}"


@dataclass(frozen=True)
class SizeCategoryConfig:
    """Upper threshold of each size category, as size literals."""

    tiny: str = DEFAULT_SIZE_CATEGORIES["tiny"]
    small: str = DEFAULT_SIZE_CATEGORIES["small"]
    medium: str = DEFAULT_SIZE_CATEGORIES["medium"]
    large: str = DEFAULT_SIZE_CATEGORIES["large"]
    huge: str = DEFAULT_SIZE_CATEGORIES["huge"]

    def threshold(self, category: SizeCategory) -> str:
        return getattr(self, category.value)


@dataclass(frozen=True)
class TimeConfig:
    """Day counts for "recent" and "stale"."""

    recent: int = Limits.DEFAULT_RECENT_DAYS
    stale: int = Limits.DEFAULT_STALE_DAYS


@dataclass(frozen=True)
class GitConfig:
    enabled: bool = True
    detect_repo: bool = True


def _default_extension_types() -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({k: tuple(v) for k, v in DEFAULT_EXTENSION_TYPES.items()})


@dataclass(frozen=True)
class VirtualTagConfig:
    """Settings shared by the virtual tag parser and evaluator."""

    enabled: bool = True
    cache_metadata: bool = True
    cache_ttl_seconds: int = Limits.DEFAULT_CACHE_TTL_SECONDS
    size_categories: SizeCategoryConfig = field(default_factory=SizeCategoryConfig)
    extension_types: Mapping[str, Tuple[str, ...]] = field(
        default_factory=_default_extension_types, hash=False
    )
    time: TimeConfig = field(default_factory=TimeConfig)
    git: GitConfig = field(default_factory=GitConfig)

    def parse_size(self, text: str) -> Optional[int]:
        """Parse a size literal (see module-level ``parse_size``)."""
        return parse_size(text)

    def get_size_threshold(self, category: SizeCategory) -> Optional[int]:
        """Resolve a category's configured threshold to bytes, if parseable."""
        return parse_size(self.size_categories.threshold(category))

    def extensions_for(self, category_name: str) -> Optional[Tuple[str, ...]]:
        """Get the dot-normalised extensions configured for a category."""
        return self.extension_types.get(category_name)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "VirtualTagConfig":
        """Build a config from a ``virtual_tags`` mapping.

        Missing keys take their defaults.

        Args:
            data: Mapping shaped like the ``tagr.virtual_tags`` config section

        Returns:
            Validated configuration

        Raises:
            ConfigError: If a value has the wrong type or cannot be parsed
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"virtual_tags must be a mapping, got {type(data).__name__}")

        enabled = _require_bool(data, ConfigKey.ENABLED, True)
        cache_metadata = _require_bool(data, ConfigKey.CACHE_METADATA, True)

        ttl = data.get(ConfigKey.CACHE_TTL, Limits.DEFAULT_CACHE_TTL_SECONDS)
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise ConfigError(f"{ConfigKey.CACHE_TTL} must be a positive integer: {ttl!r}")

        sizes = _section(data, ConfigKey.SIZE_CATEGORIES)
        unknown = set(sizes) - {c.value for c in SizeCategory}
        if unknown:
            raise ConfigError(f"Unknown size categories: {', '.join(sorted(unknown))}")
        for name, literal in sizes.items():
            if not isinstance(literal, (str, int)) or parse_size(str(literal)) is None:
                raise ConfigError(f"Invalid size threshold for {name}: {literal!r}")
        size_categories = SizeCategoryConfig(**{k: str(v) for k, v in sizes.items()})

        ext_section = data.get(ConfigKey.EXTENSION_TYPES)
        if ext_section is None:
            extension_types = _default_extension_types()
        else:
            if not isinstance(ext_section, Mapping):
                raise ConfigError(f"{ConfigKey.EXTENSION_TYPES} must be a mapping")
            table: Dict[str, Tuple[str, ...]] = {}
            for name, extensions in ext_section.items():
                if not isinstance(extensions, (list, tuple)) or not all(
                    isinstance(e, str) and e for e in extensions
                ):
                    raise ConfigError(f"Extensions for {name} must be a list of strings")
                table[str(name)] = tuple(normalize_extension(e) for e in extensions)
            extension_types = MappingProxyType(table)

        time_section = _section(data, ConfigKey.TIME)
        time_config = TimeConfig(
            recent=_require_int(time_section, "recent", Limits.DEFAULT_RECENT_DAYS),
            stale=_require_int(time_section, "stale", Limits.DEFAULT_STALE_DAYS),
        )

        git_section = _section(data, ConfigKey.GIT)
        git_config = GitConfig(
            enabled=_require_bool(git_section, "enabled", True),
            detect_repo=_require_bool(git_section, "detect_repo", True),
        )

        return cls(
            enabled=enabled,
            cache_metadata=cache_metadata,
            cache_ttl_seconds=ttl,
            size_categories=size_categories,
            extension_types=extension_types,
            time=time_config,
            git=git_config,
        )

    @classmethod
    def from_config_manager(cls, manager: ConfigManager) -> "VirtualTagConfig":
        """Build a config from the merged ``tagr.virtual_tags`` section."""
        return cls.from_dict(manager.get(f"{ConfigKey.ROOT}.{ConfigKey.VIRTUAL_TAGS}", {}))


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"{key} must be a mapping, got {type(section).__name__}")
    return section


def _require_bool(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be a boolean: {value!r}")
    return value


def _require_int(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key} must be a non-negative integer: {value!r}")
    return value
