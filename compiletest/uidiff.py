"""Checking whether compiler output matches what is expected."""

from __future__ import annotations

from itertools import zip_longest


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and any ``\\r``."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def lines_match(expected: str, actual: str) -> bool:
    """Match a line against an expected line where ``[..]`` is a wildcard."""
    for index, part in enumerate(expected.split("[..]")):
        position = actual.find(part)
        if position == -1:
            return False
        if index == 0 and position != 0:
            return False
        actual = actual[position + len(part):]
    return not actual or expected.endswith("[..]")


def diff_lines(actual: str, expected: str) -> list[str]:
    """Return a description of every line that differs, by line number."""
    differences = []
    pairs = zip_longest(_lines(actual), _lines(expected))
    for number, (got, want) in enumerate(pairs):
        if got is not None and want is not None:
            if not lines_match(want, got):
                differences.append(f"{number:3} - |{want}|\n    + |{got}|\n")
        elif got is not None:
            differences.append(f"{number:3} -\n    + |{got}|\n")
        else:
            differences.append(f"{number:3} - |{want}|\n    +\n")
    return differences