#!/usr/bin/env python3
r"""Glob compilation for file paths.

Globs are validated up front and compiled to a regular expression once:
- ``?`` matches any single character
- ``*`` matches any run of characters, path separators included
- ``**`` matches any run of path components and must form a whole component
- ``[abc]``, ``[a-z]`` and ``[!abc]`` match character classes

Example:
    >>> pattern = GlobPattern("src/**/*.rs")
    >>> pattern.matches("src/vtags/parser.rs")
    True
"""

import re
from pathlib import PurePath
from typing import List, Pattern, Tuple, Union


class GlobSyntaxError(ValueError):
    """Raised when a glob pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"{reason} in '{pattern}'")
        self.pattern = pattern
        self.reason = reason


def _translate_class(pattern: str, start: int) -> Tuple[str, int]:
    """Translate a ``[...]`` class beginning at ``start``.

    Returns:
        The regex class and the index just past the closing bracket
    """
    i = start + 1
    n = len(pattern)
    negate = False
    if i < n and pattern[i] == "!":
        negate = True
        i += 1

    members: List[str] = []
    first = True
    while i < n and (first or pattern[i] != "]"):
        first = False
        char = pattern[i]
        # a-z range, unless the dash is the last member
        if i + 2 < n and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            low, high = char, pattern[i + 2]
            if low > high:
                raise GlobSyntaxError(pattern, "invalid range pattern")
            members.append(f"{re.escape(low)}-{re.escape(high)}")
            i += 3
        else:
            members.append(re.escape(char))
            i += 1

    if i >= n:
        raise GlobSyntaxError(pattern, "invalid range pattern")

    body = "".join(members)
    return ("[^" if negate else "[") + body + "]", i + 1


def translate(pattern: str) -> str:
    """Translate a glob into an anchored regular expression.

    Args:
        pattern: Glob pattern text

    Returns:
        Regex source matching the whole input

    Raises:
        GlobSyntaxError: If the glob is malformed
    """
    parts: List[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        char = pattern[i]
        if char == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            run = j - i
            if run > 2:
                raise GlobSyntaxError(pattern, "wildcards are either regular `*` or recursive `**`")
            if run == 2:
                starts_component = i == 0 or pattern[i - 1] == "/"
                ends_component = j == n or pattern[j] == "/"
                if not (starts_component and ends_component):
                    raise GlobSyntaxError(
                        pattern, "recursive wildcards must form a single path component"
                    )
                if j < n:
                    # "**/" also matches zero directories
                    parts.append("(?:.*/)?")
                    j += 1
                else:
                    parts.append(".*")
            else:
                parts.append(".*")
            i = j
        elif char == "?":
            parts.append(".")
            i += 1
        elif char == "[":
            class_regex, i = _translate_class(pattern, i)
            parts.append(class_regex)
        else:
            parts.append(re.escape(char))
            i += 1

    return "(?s:" + "".join(parts) + r")\Z"


class GlobPattern:
    """A compiled, validated glob.

    Equality and hashing use the source text only.
    """

    __slots__ = ("pattern", "_compiled")

    def __init__(self, pattern: str):
        """Compile a glob.

        Args:
            pattern: Glob pattern text

        Raises:
            GlobSyntaxError: If the glob is malformed
        """
        self.pattern = pattern
        try:
            self._compiled: Pattern[str] = re.compile(translate(pattern))
        except re.error as e:
            raise GlobSyntaxError(pattern, str(e)) from e

    @property
    def regex(self) -> Pattern[str]:
        """Compiled regular expression backing this glob."""
        return self._compiled

    def matches(self, path: Union[str, PurePath]) -> bool:
        """Check whether the whole path text matches the glob."""
        return self._compiled.match(str(path)) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GlobPattern):
            return NotImplemented
        return self.pattern == other.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"

    def __str__(self) -> str:
        return self.pattern
