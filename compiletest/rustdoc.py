"""Checking that every documentation code block was run as a doc test."""

from __future__ import annotations

import bisect
import re
from collections.abc import Mapping, Sequence

from compiletest.process import TestFailure

_LINE_NUMBER = re.compile(r"\+?[0-9]+")


def doc_test_lines(content: str) -> tuple[list[int], list[str]]:
    """Return the 1-based lines that open doc code blocks, and declared modules.

    Modules are those named by ``mod name;`` or ``pub mod name;`` lines.
    """
    lines: list[int] = []
    modules: list[str] = []
    inside = False
    for number, line in enumerate(_split_lines(content), start=1):
        stripped = line.lstrip()
        if (stripped.startswith("pub mod ") or stripped.startswith("mod ")) and line.endswith(";"):
            modules.append(line.rsplit("mod ", 1)[-1].replace(";", ""))
            continue
        text = line.split("///")[-1].lstrip()
        if text.startswith("```"):
            if inside:
                inside = False
            else:
                inside = True
                lines.append(number)
    return lines, modules


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _line_of(description: str) -> int:
    pieces = description.split("(line ")
    rest = pieces[1] if len(pieces) > 1 else ")"
    number = rest.split(")")[0]
    return int(number) if _LINE_NUMBER.fullmatch(number) else 0


def check_doc_test_output(stdout: str, files: Mapping[str, Sequence[int]]) -> int:
    """Check doc test output against the expected lines of each file.

    Returns the number of tests seen; raises :class:`TestFailure` when a test
    has no expected block, no test was found, or a block was not tested.
    """
    remaining = {path: sorted(lines) for path, lines in files.items()}
    tested = 0
    for entry in stdout.split("\n"):
        if not entry.startswith("test "):
            continue
        pieces = entry.split(" - ")
        if len(pieces) != 2:
            continue
        path = pieces[0].rsplit("test ", 1)[-1]
        lines = remaining.get(path.replace("\\", "/"))
        if lines is None:
            continue
        tested += 1
        line = _line_of(pieces[1])
        position = bisect.bisect_left(lines, line)
        if position < len(lines) and lines[position] == line:
            del lines[position]
        else:
            raise TestFailure(f'Not found doc test: "{entry}" in "{path}":{lines}')

    if tested == 0:
        raise TestFailure(f"No test has been found... {remaining}")
    for path, lines in remaining.items():
        if lines:
            plural = "s" if len(lines) > 1 else ""
            raise TestFailure(f'Not found test at line{plural} "{path}":{lines}')
    return tested