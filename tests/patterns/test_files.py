"""Tests for file patterns and file queries."""
from pathlib import Path, PurePath

import pytest

from tagr.core.constants import Limits, SearchMode
from tagr.patterns.errors import (
    IncompatibleConversionError,
    InvalidEmptyError,
    InvalidGlobError,
    InvalidRegexError,
    PatternKind,
    TooManyPatternsError,
)
from tagr.patterns.files import FilePattern, FileQuery, GlobFile, LiteralFile, RegexFile
from tagr.patterns.glob_pattern import GlobPattern


class TestLiteralFile:
    """Tests for literal file patterns."""

    def test_keeps_exact_text(self):
        pattern = FilePattern.literal("./src//main.rs")
        assert pattern.original() == "./src//main.rs"
        assert pattern == LiteralFile("./src//main.rs")

    def test_path_property(self):
        assert FilePattern.literal("src/main.rs").path == Path("src/main.rs")

    def test_accepts_path_objects(self):
        assert FilePattern.literal(PurePath("a/b.txt")).original() == "a/b.txt"

    def test_normalised_match(self):
        pattern = FilePattern.literal("src//main.rs")
        assert pattern.matches("src/main.rs")
        assert pattern.matches(Path("src/main.rs"))
        assert not pattern.matches("src/lib.rs")

    def test_wildcards_are_literal(self):
        pattern = FilePattern.literal("*.rs")
        assert pattern.matches("*.rs")
        assert not pattern.matches("main.rs")

    def test_flags(self):
        pattern = FilePattern.literal("a")
        assert not pattern.is_regex
        assert not pattern.is_glob

    def test_empty_rejected(self):
        with pytest.raises(InvalidEmptyError) as exc_info:
            FilePattern.literal("")
        assert exc_info.value.kind == PatternKind.FILE

    def test_conversions_incompatible(self):
        pattern = FilePattern.literal("a.txt")
        with pytest.raises(IncompatibleConversionError):
            pattern.as_regex()
        with pytest.raises(IncompatibleConversionError, match="not a glob"):
            pattern.as_glob()


class TestRegexFile:
    """Tests for regex file patterns."""

    def test_search_over_path_text(self):
        pattern = FilePattern.regex(r"\.rs$")
        assert pattern.is_regex
        assert pattern.matches("src/main.rs")
        assert pattern.matches(PurePath("lib.rs"))
        assert not pattern.matches("main.rs.bak")

    def test_invalid_regex(self):
        with pytest.raises(InvalidRegexError):
            FilePattern.regex("[")

    def test_as_glob_incompatible(self):
        with pytest.raises(IncompatibleConversionError):
            FilePattern.regex("x").as_glob()

    def test_as_regex(self):
        assert FilePattern.regex("x").as_regex().pattern == "x"


class TestGlobFile:
    """Tests for glob file patterns."""

    def test_full_match(self):
        pattern = FilePattern.glob("src/**/*.rs")
        assert pattern.is_glob
        assert pattern.matches("src/vtags/parser.rs")
        assert not pattern.matches("tests/parser.rs")

    def test_original(self):
        assert FilePattern.glob("*.md").original() == "*.md"

    def test_as_glob(self):
        assert FilePattern.glob("*.md").as_glob() == GlobPattern("*.md")

    def test_invalid_glob(self):
        with pytest.raises(InvalidGlobError) as exc_info:
            FilePattern.glob("***")
        assert exc_info.value.pattern == "***"
        assert "Invalid glob pattern '***'" in str(exc_info.value)

    def test_unclosed_class(self):
        with pytest.raises(InvalidGlobError):
            FilePattern.glob("file[")

    def test_empty_rejected(self):
        with pytest.raises(InvalidEmptyError):
            FilePattern.glob("")

    def test_equality_by_variant_and_text(self):
        assert FilePattern.glob("*.md") == GlobFile("*.md", GlobPattern("*.md"))
        assert FilePattern.glob("*.md") != FilePattern.literal("*.md")
        assert FilePattern.regex("a") == RegexFile("a", FilePattern.regex("a").as_regex())


class TestFileQuery:
    """Tests for FileQuery."""

    def test_new(self):
        patterns = [FilePattern.literal("a"), FilePattern.glob("*.b")]
        query = FileQuery.new(patterns, SearchMode.ALL)
        assert len(query) == 2
        assert query.mode == SearchMode.ALL

    def test_over_limit(self):
        patterns = [FilePattern.literal(f"f{i}") for i in range(Limits.MAX_PATTERNS + 1)]
        with pytest.raises(TooManyPatternsError) as exc_info:
            FileQuery.new(patterns, SearchMode.ANY)
        assert exc_info.value.provided == Limits.MAX_PATTERNS + 1

    def test_hashable(self):
        query = FileQuery.new([FilePattern.glob("*.md")], SearchMode.ANY)
        assert query in {query}
