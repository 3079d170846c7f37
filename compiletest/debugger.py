"""Reading debugger directives from test sources and checking debugger output."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

_BREAK_MARKER = "#break"
_WILDCARD = "[...]"


@dataclass
class DebuggerCommands:
    """Commands, expected output lines and breakpoint lines of a debuginfo test."""

    commands: list[str] = field(default_factory=list)
    check_lines: list[str] = field(default_factory=list)
    breakpoint_lines: list[int] = field(default_factory=list)


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and any ``\\r``."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def parse_name_value_directive(line: str, directive: str) -> str | None:
    """Return the text after ``<directive>:`` in ``line``, or ``None``."""
    key = f"{directive}:"
    position = line.find(key)
    if position == -1:
        return None
    return line[position + len(key):]


def parse_debugger_commands(lines: Iterable[str], prefixes: Sequence[str]) -> DebuggerCommands:
    """Collect ``<prefix>-command`` and ``<prefix>-check`` directives and breakpoints.

    Breakpoint lines are the 1-based numbers of lines containing ``#break``.
    """
    directives = [(f"{prefix}-command", f"{prefix}-check") for prefix in prefixes]
    result = DebuggerCommands()
    for number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\n")
        if line.endswith("\r"):
            line = line[:-1]
        if _BREAK_MARKER in line:
            result.breakpoint_lines.append(number)
        for command_directive, check_directive in directives:
            command = parse_name_value_directive(line, command_directive)
            if command is not None:
                result.commands.append(command)
            check = parse_name_value_directive(line, check_directive)
            if check is not None:
                result.check_lines.append(check)
    return result


def check_single_line(line: str, check_line: str) -> bool:
    """Match an output line against a check line where ``[...]`` is a wildcard."""
    line = line.strip()
    check_line = check_line.strip()
    can_start_anywhere = check_line.startswith(_WILDCARD)
    can_end_anywhere = check_line.endswith(_WILDCARD)

    fragments = [fragment for fragment in check_line.split(_WILDCARD) if fragment]
    if not fragments:
        return True

    rest = line
    if can_start_anywhere:
        position = rest.find(fragments[0])
        if position == -1:
            return False
        rest = rest[position + len(fragments[0]):]
        fragments = fragments[1:]

    for fragment in fragments:
        position = rest.find(fragment)
        if position == -1:
            return False
        rest = rest[position + len(fragment):]

    return can_end_anywhere or not rest


def first_missing_check_line(stdout: str, check_lines: Sequence[str]) -> str | None:
    """Return the first check line not matched, in order, by the output, if any."""
    index = 0
    for line in _lines(stdout):
        if index >= len(check_lines):
            break
        if check_single_line(line, check_lines[index]):
            index += 1
    if check_lines and index != len(check_lines):
        return check_lines[index]
    return None