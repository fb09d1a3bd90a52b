"""tagr Infrastructure Layer.

Services used by the pattern and virtual tag engines:
- Logger: Structured logging system
- ConfigManager: Layered YAML/environment configuration
- MetadataCache: TTL-bounded file metadata cache
"""

from .cache_manager import CacheEntry, FileMetadata, MetadataCache, fetch_metadata
from .config_manager import ConfigError, ConfigManager, ConfigSource
from .logger import Logger, LogLevel

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    # Config exports
    "ConfigManager",
    "ConfigSource",
    "ConfigError",
    # Cache exports
    "FileMetadata",
    "CacheEntry",
    "MetadataCache",
    "fetch_metadata",
]
