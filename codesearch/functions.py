"""Heuristic function-name extraction from single source lines.

Each :class:`DialectPattern` targets the declaration syntax of one language
family. Patterns are tried in table order against the stripped line and the
first match wins, so a line that several dialects accept is attributed to the
earliest one. The name is always the *last* group of the winning pattern,
which lets a pattern carry optional modifier groups (receivers, visibility,
``static``) ahead of the identifier.

No grammar is involved. The C-style catch-all in particular labels lines such
as ``return compute(x);`` with ``compute``; that noise is part of the
heuristic and callers must not rely on labels being real declarations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

_FLAGS = re.ASCII


@dataclass(frozen=True)
class DialectPattern:
    """One entry of the ordered function-name table."""

    dialect: str
    regex: re.Pattern[str]
    # Literal fragments the regex cannot match without; lets long lines skip
    # patterns early.
    requires: tuple[str, ...] = ()

    def match(self, line: str) -> str | None:
        for fragment in self.requires:
            if fragment not in line:
                return None
        found = self.regex.search(line)
        if found is None:
            return None
        return found.group(self.regex.groups) or ""


def _pattern(dialect: str, expression: str, *requires: str) -> DialectPattern:
    return DialectPattern(dialect=dialect, regex=re.compile(expression, _FLAGS), requires=requires)


FUNCTION_PATTERNS: tuple[DialectPattern, ...] = (
    _pattern("go", r"^\s*func\s+(\([^)]+\)\s*)?(\w+)\s*\(", "func", "("),
    _pattern("python", r"^\s*def\s+(\w+)\s*\(", "def", "("),
    _pattern("javascript", r"^\s*function\s+(\w+)\s*\(", "function", "("),
    _pattern("javascript-arrow", r"^\s*(?:const|let|var)\s+(\w+)\s*=\s*\(.*?\)\s*=>", "=>"),
    _pattern("javascript-expression", r"^\s*(\w+)\s*=\s*function\s*\(", "function", "("),
    _pattern("php", r"^\s*(public|private|protected)?\s*function\s+(\w+)\s*\(", "function", "("),
    _pattern(
        "java",
        r"^\s*(public|private|protected)?\s*(static\s+)?[\w<>]+\s+(\w+)\s*\(",
        "(",
    ),
    # Accepts the same lines and names as r"^\s*[\w\*\s]+\s+(\w+)\s*\(.*\)\s*\{?":
    # the prefix is two or more class characters ending in whitespace. Only a
    # single \s follows the prefix, so backtracking over whitespace runs stays
    # linear.
    _pattern("c", r"^[\w\*\s]+\s(\w+)\s*\(.*\)\s*\{?", "(", ")"),
    _pattern("ruby", r"^\s*def\s+(\w+)", "def"),
    _pattern("rust", r"^\s*fn\s+(\w+)", "fn"),
    _pattern("swift", r"^\s*func\s+(\w+)", "func"),
    _pattern("scala", r"^\s*def\s+(\w+)\s*\(", "def", "("),
)


def match_dialect(
    line: str, patterns: Sequence[DialectPattern] = FUNCTION_PATTERNS
) -> tuple[str, str] | None:
    """Return ``(dialect, name)`` for the first pattern accepting *line*."""
    trimmed = line.strip()
    if not trimmed:
        return None
    for pattern in patterns:
        name = pattern.match(trimmed)
        if name is not None:
            return pattern.dialect, name
    return None


def extract_function_name(line: str, patterns: Sequence[DialectPattern] = FUNCTION_PATTERNS) -> str:
    """Return the function name declared on *line*, or an empty string."""
    matched = match_dialect(line, patterns)
    if matched is None:
        return ""
    return matched[1]


__all__ = ["DialectPattern", "FUNCTION_PATTERNS", "extract_function_name", "match_dialect"]
