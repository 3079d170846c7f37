"""Checks applied to the output of a compiler or test run."""

from __future__ import annotations

from collections.abc import Sequence

from compiletest.process import TestFailure

_ICE_MARKER = "error: internal compiler error"
# The value the runtime returns on failure.
_RUST_ERR = 1


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and any ``\\r``."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def get_output(stdout: str, stderr: str, check_stdout: bool) -> str:
    """Return the output that error patterns are checked against."""
    return stdout + stderr if check_stdout else stderr


def missing_error_patterns(output: str, patterns: Sequence[str]) -> list[str]:
    """Return the patterns not found, in order, one line after another."""
    if not patterns:
        return []
    index = 0
    for line in _lines(output):
        if patterns[index].strip() in line:
            index += 1
            if index == len(patterns):
                return []
    return list(patterns[index:])


def has_compiler_crash(stderr: str) -> bool:
    """Return whether the compiler reported an internal error."""
    return any(_ICE_MARKER in line for line in _lines(stderr))


def forbidden_patterns_found(output: str, patterns: Sequence[str]) -> list[str]:
    """Return the forbidden patterns that appear in ``output``."""
    return [pattern for pattern in patterns if pattern in output]


def _status(returncode: int) -> str:
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit status: {returncode}"


def check_correct_failure_status(returncode: int) -> None:
    """Raise :class:`TestFailure` unless the process failed the expected way."""
    if returncode != _RUST_ERR:
        raise TestFailure(f"failure produced the wrong error: {_status(returncode)}")