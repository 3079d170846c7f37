"""Matching the diagnostics a compiler reported against those a test expects."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(Enum):
    """The kind of a compiler diagnostic."""

    HELP = "help"
    ERROR = "error"
    NOTE = "note"
    SUGGESTION = "suggestion"
    WARNING = "warning"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """One diagnostic: the line it refers to, its kind (if known) and its message."""

    line_num: int
    kind: ErrorKind | None
    msg: str

    def describe_kind(self) -> str:
        return "message" if self.kind is None else str(self.kind)


@dataclass
class ErrorMatch:
    """The outcome of matching actual diagnostics against expected ones."""

    unexpected: list[Diagnostic] = field(default_factory=list)
    not_found: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.unexpected and not self.not_found


def is_unexpected_compiler_message(
    kind: ErrorKind | None, expect_help: bool, expect_note: bool
) -> bool:
    """Return whether an unmatched diagnostic of ``kind`` should be reported.

    Errors and warnings must always be listed; helps and notes only when the
    test lists at least one of that kind.
    """
    if kind is ErrorKind.HELP:
        return expect_help
    if kind is ErrorKind.NOTE:
        return expect_note
    return kind in (ErrorKind.ERROR, ErrorKind.WARNING)


def _matches(expected: Diagnostic, actual: Diagnostic) -> bool:
    return (
        actual.line_num == expected.line_num
        and (expected.kind is None or actual.kind == expected.kind)
        and expected.msg in actual.msg
    )


def match_expected_errors(
    expected: Sequence[Diagnostic], actual: Iterable[Diagnostic]
) -> ErrorMatch:
    """Pair each actual diagnostic with the first unmatched expected one it fits."""
    expect_help = any(error.kind is ErrorKind.HELP for error in expected)
    expect_note = any(error.kind is ErrorKind.NOTE for error in expected)
    found = [False] * len(expected)
    result = ErrorMatch()

    for actual_error in actual:
        index = next(
            (
                position
                for position, expected_error in enumerate(expected)
                if not found[position] and _matches(expected_error, actual_error)
            ),
            None,
        )
        if index is not None:
            found[index] = True
        elif is_unexpected_compiler_message(actual_error.kind, expect_help, expect_note):
            result.unexpected.append(actual_error)

    result.not_found = [error for error, seen in zip(expected, found) if not seen]
    return result


def describe_mismatches(file_name: str, result: ErrorMatch) -> list[str]:
    """Return one message per mismatch, then a summary line if there were any."""
    file_name = file_name.replace("\\", "/")
    messages = [
        f"{file_name}:{error.line_num}: unexpected {error.describe_kind()}: '{error.msg}'"
        for error in result.unexpected
    ]
    messages.extend(
        f"{file_name}:{error.line_num}: expected {error.describe_kind()} not found: {error.msg}"
        for error in result.not_found
    )
    if not result.ok:
        messages.append(
            f"{len(result.unexpected)} unexpected errors found, "
            f"{len(result.not_found)} expected errors not found"
        )
    return messages