"""Checking MIR dumps against the expectations written after a test's source."""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from compiletest.process import TestFailure

_END_SOURCE = "// END RUST SOURCE"
_START = "// START "
_END = "// END"
_END_NAME = "// END "


@dataclass(frozen=True)
class ExpectedLine:
    """An expected MIR line, or an elision (``text is None``) matching any lines."""

    text: str | None = None

    @classmethod
    def elision(cls) -> ExpectedLine:
        return cls(None)

    @property
    def is_elision(self) -> bool:
        return self.text is None

    def __repr__(self) -> str:
        if self.text is None:
            return '"..." (Elision)'
        return _quoted(self.text)


def _quoted(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and any ``\\r``."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def nocomment_mir_line(line: str) -> str:
    """Strip a trailing ``//`` comment (and the whitespace before it)."""
    position = line.find("//")
    if position == -1:
        return line
    return line[:position].rstrip()


def normalize_mir_line(line: str) -> str:
    """Strip the comment and remove all whitespace."""
    return "".join(nocomment_mir_line(line).split())


def parse_mir_expectations(text: str) -> list[tuple[str, list[ExpectedLine]]]:
    """Return ``(dump file name, expected lines)`` for each block after the source.

    Each block's expected lines begin with an elision.
    """
    position = text.find(_END_SOURCE)
    if position == -1:
        return []
    tests: list[tuple[str, list[ExpectedLine]]] = []
    current: str | None = None
    contents = [ExpectedLine.elision()]
    for line in _lines(text[position + len(_END_SOURCE):]):
        if line.startswith(_START):
            current = line[len(_START):]
        elif line.startswith(_END):
            name = line[len(_END_NAME):]
            if current is None or name != current:
                raise TestFailure("mismatched START END test name")
            tests.append((current, contents))
            current = None
            contents = [ExpectedLine.elision()]
        elif not line:
            continue
        elif line.startswith("//") and line[2:].strip() == "...":
            contents.append(ExpectedLine.elision())
        elif line.startswith("// "):
            contents.append(ExpectedLine(line[3:]))
    return tests


def _lines_equal(expected: str, dumped: str) -> bool:
    return normalize_mir_line(expected) == normalize_mir_line(dumped)


def compare_mir_output(dumped: str, expected: Sequence[ExpectedLine]) -> int:
    """Check a MIR dump against expected lines and return how many were matched.

    Consecutive expected lines must appear consecutively; an elision between
    them lets any number of dumped lines pass. Raises :class:`TestFailure`
    when an expected line is not found.
    """

    def fail(expected_line: str, extra: str) -> TestFailure:
        actual_all = "\n".join(
            line for line in map(nocomment_mir_line, _lines(dumped)) if line
        )
        expected_all = "\n".join(
            "... (elided)" if item.is_elision else item.text for item in expected
        )
        return TestFailure(
            f"Did not find expected line, error: {extra}\n"
            f"Actual Line: {_quoted(expected_line)}\n"
            f"Expected:\n{expected_all}\n"
            f"Actual:\n{actual_all}"
        )

    dumped_lines: Iterable[str] = iter([line for line in _lines(dumped) if line])
    pending = deque(item for item in expected if item.is_elision or item.text)
    start_block_line: str | None = None
    matched = 0

    for dumped_line in dumped_lines:
        if not pending:
            continue
        item = pending.popleft()
        if item.text is not None:
            if ":{" in normalize_mir_line(item.text):
                start_block_line = item.text
            if not _lines_equal(item.text, dumped_line):
                raise fail(
                    item.text,
                    f"Mismatch in lines\nCurrnt block: {start_block_line or 'None'}\n"
                    f"Expected Line: {_quoted(dumped_line)}",
                )
            matched += 1
            continue

        while pending and pending[0].is_elision:
            pending.popleft()
        if not pending:
            continue
        target = pending.popleft().text
        assert target is not None
        found = _lines_equal(target, dumped_line)
        if not found:
            found = any(_lines_equal(target, line) for line in dumped_lines)
        if not found:
            raise fail(target, "ran out of mir dump to match against")
        matched += 1
    return matched