"""Shared pytest fixtures for tagr tests."""
import os
import tempfile
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from tagr.infrastructure.cache_manager import MetadataCache
from tagr.vtags.config import VirtualTagConfig


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a source directory with test files."""
    source = temp_dir / "source"
    source.mkdir()

    (source / "file.txt").write_text("Hello World")
    (source / "README.md").write_text("# Test README\n\nTest content\n")
    (source / "script.py").write_text("#!/usr/bin/env python\nprint('test')")
    (source / "empty.txt").write_text("")

    (source / "subdir").mkdir()
    (source / "subdir" / "nested.txt").write_text("Nested content\n")

    (source / "docs").mkdir()
    (source / "docs" / "api.md").write_text("# API Documentation\n")

    (source / ".hidden").write_text("Hidden file")
    (source / "build").mkdir()
    (source / "build" / "output.o").write_bytes(b"\x00" * 2048)

    os.chmod(source / "file.txt", 0o644)
    os.chmod(source / "script.py", 0o755)

    return source


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample tagr configuration."""
    return {
        "tagr": {
            "virtual_tags": {
                "enabled": True,
                "cache_metadata": True,
                "cache_ttl_seconds": 60,
                "size_categories": {
                    "tiny": "1KiB",
                    "small": "100KiB",
                },
                "extension_types": {
                    "source": ["py", ".rs"],
                    "notes": [".org"],
                },
                "time": {"recent": 3, "stale": 90},
                "git": {"enabled": False},
            },
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "tagr.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def vtag_config() -> VirtualTagConfig:
    """Default virtual tag configuration."""
    return VirtualTagConfig()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Monotonic clock the test advances by hand."""
    return FakeClock()


@pytest.fixture
def metadata_cache(fake_clock: FakeClock) -> MetadataCache:
    """Metadata cache with a 300 second TTL on the fake clock."""
    return MetadataCache(ttl_seconds=300, clock=fake_clock)


@pytest.fixture
def fixed_now() -> datetime:
    """A naive local wall-clock instant in the middle of a Wednesday."""
    return datetime(2024, 6, 12, 14, 30, 0)


@pytest.fixture(autouse=True)
def clear_tagr_env(monkeypatch):
    """Keep TAGR_* variables from the host out of config tests."""
    for key in list(os.environ):
        if key.startswith("TAGR_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def utc_timezone() -> Generator[None, None, None]:
    """Run the test with the process local timezone set to UTC."""
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()
