"""Tests for tag patterns and tag queries."""
import re

import pytest

from tagr.core.constants import ErrorCode, Limits, SearchMode
from tagr.patterns.errors import (
    IncompatibleConversionError,
    InvalidEmptyError,
    InvalidRegexError,
    PatternKind,
    TooManyPatternsError,
)
from tagr.patterns.tags import LiteralTag, RegexTag, TagPattern, TagQuery


class TestLiteralTag:
    """Tests for literal tag patterns."""

    @pytest.mark.parametrize("token", ["rust", "work-in-progress", "2024", "ünïcode"])
    def test_round_trip(self, token):
        pattern = TagPattern.literal(token)
        assert pattern == LiteralTag(token)
        assert pattern.original() == token
        assert not pattern.is_regex

    def test_exact_match_only(self):
        pattern = TagPattern.literal("rust")
        assert pattern.matches("rust")
        assert not pattern.matches("rustacean")
        assert not pattern.matches("Rust")

    def test_empty_rejected(self):
        with pytest.raises(InvalidEmptyError) as exc_info:
            TagPattern.literal("")
        assert exc_info.value.kind == PatternKind.TAG
        assert str(exc_info.value) == "Empty tag pattern provided"

    def test_as_regex_incompatible(self):
        with pytest.raises(IncompatibleConversionError, match="'rust' is not a regex"):
            TagPattern.literal("rust").as_regex()


class TestRegexTag:
    """Tests for regex tag patterns."""

    def test_search_semantics(self):
        pattern = TagPattern.regex("^proj-")
        assert pattern.is_regex
        assert pattern.matches("proj-alpha")
        assert not pattern.matches("old-proj-alpha")

    def test_unanchored_search(self):
        assert TagPattern.regex("draft").matches("final-draft-2")

    def test_original_is_source(self):
        assert TagPattern.regex("a.*b").original() == "a.*b"

    def test_as_regex(self):
        compiled = TagPattern.regex("v[0-9]+").as_regex()
        assert isinstance(compiled, re.Pattern)
        assert compiled.pattern == "v[0-9]+"

    def test_invalid_regex(self):
        with pytest.raises(InvalidRegexError) as exc_info:
            TagPattern.regex("(unclosed")
        assert exc_info.value.pattern == "(unclosed"
        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT
        assert "Invalid regex pattern '(unclosed'" in str(exc_info.value)

    def test_empty_rejected(self):
        with pytest.raises(InvalidEmptyError):
            TagPattern.regex("")

    def test_equality_ignores_compiled(self):
        first = TagPattern.regex("x+")
        second = RegexTag("x+", re.compile("x+", re.IGNORECASE))
        assert first == second
        assert hash(first) == hash(second)

    def test_variants_never_equal(self):
        assert TagPattern.literal("rust") != TagPattern.regex("rust")


class TestTagQuery:
    """Tests for TagQuery."""

    def test_new(self):
        patterns = [TagPattern.literal("a"), TagPattern.regex("b+")]
        query = TagQuery.new(patterns, SearchMode.ANY)
        assert query.patterns == tuple(patterns)
        assert query.mode == SearchMode.ANY
        assert len(query) == 2

    def test_at_limit(self):
        patterns = [TagPattern.literal(f"t{i}") for i in range(Limits.MAX_PATTERNS)]
        assert len(TagQuery.new(patterns, SearchMode.ALL)) == Limits.MAX_PATTERNS

    def test_over_limit(self):
        patterns = [TagPattern.literal(f"t{i}") for i in range(Limits.MAX_PATTERNS + 1)]
        with pytest.raises(TooManyPatternsError) as exc_info:
            TagQuery.new(patterns, SearchMode.ALL)
        assert exc_info.value.provided == Limits.MAX_PATTERNS + 1
        assert exc_info.value.max == Limits.MAX_PATTERNS

    def test_custom_limit(self):
        patterns = [TagPattern.literal("a"), TagPattern.literal("b")]
        with pytest.raises(TooManyPatternsError, match="Too many patterns provided: 2 \\(max 1\\)"):
            TagQuery.new(patterns, SearchMode.ALL, max_patterns=1)

    def test_immutable(self):
        query = TagQuery.new([TagPattern.literal("a")], SearchMode.ALL)
        with pytest.raises(AttributeError):
            query.mode = SearchMode.ANY
