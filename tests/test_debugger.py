import pytest

from compiletest.debugger import (
    DebuggerCommands,
    check_single_line,
    first_missing_check_line,
    parse_debugger_commands,
    parse_name_value_directive,
)


SOURCE = [
    "// gdb-command:run",
    "// gdb-command:print x",
    "// gdbr-check:$1 = 5",
    "// gdbg-check:$1 = int 5",
    "fn main() {",
    "    let x = 5;",
    "    zzz(); // #break",
    "}",
]


def test_parse_name_value_directive_returns_rest_of_line():
    assert parse_name_value_directive("// gdb-command:run", "gdb-command") == "run"


def test_parse_name_value_directive_missing():
    assert parse_name_value_directive("// gdb-check:x", "gdb-command") is None


def test_parse_name_value_directive_requires_colon():
    assert parse_name_value_directive("// gdb-command run", "gdb-command") is None


def test_parse_debugger_commands_with_native_prefixes():
    result = parse_debugger_commands(SOURCE, ["gdb", "gdbr"])
    assert result == DebuggerCommands(
        commands=["run", "print x"],
        check_lines=["$1 = 5"],
        breakpoint_lines=[7],
    )


def test_parse_debugger_commands_with_generic_prefixes():
    result = parse_debugger_commands(SOURCE, ["gdb", "gdbg"])
    assert result.check_lines == ["$1 = int 5"]
    assert result.commands == ["run", "print x"]


def test_parse_debugger_commands_strips_line_endings():
    lines = [line + "\r\n" for line in SOURCE]
    result = parse_debugger_commands(lines, ["gdb"])
    assert result.commands == ["run", "print x"]
    assert result.breakpoint_lines == [7]


def test_parse_debugger_commands_empty():
    assert parse_debugger_commands([], ["lldb"]) == DebuggerCommands()


def test_check_single_line_exact():
    assert check_single_line("  $1 = 5 ", "$1 = 5")
    assert not check_single_line("$1 = 6", "$1 = 5")


def test_check_single_line_trailing_text_rejected_without_wildcard():
    assert not check_single_line("$1 = 5 extra", "$1 = 5")
    assert check_single_line("$1 = 5 extra", "$1 = 5[...]")


def test_check_single_line_middle_wildcard():
    assert check_single_line("Some(a, junk, b)", "Some(a, [...], b)")
    assert not check_single_line("Some(a, junk, c)", "Some(a, [...], b)")


def test_check_single_line_only_wildcards_matches_anything():
    assert check_single_line("anything", "[...]")


def test_first_missing_check_line_all_found_in_order():
    stdout = "noise\n$1 = 5\nmore\n$2 = 6\n"
    assert first_missing_check_line(stdout, ["$1 = 5", "$2 = 6"]) is None


def test_first_missing_check_line_reports_first_missing():
    stdout = "$1 = 5\n$3 = 7\n"
    assert first_missing_check_line(stdout, ["$1 = 5", "$2 = 6", "$3 = 7"]) == "$2 = 6"


def test_first_missing_check_line_order_matters():
    stdout = "$2 = 6\n$1 = 5\n"
    assert first_missing_check_line(stdout, ["$1 = 5", "$2 = 6"]) == "$2 = 6"


@pytest.mark.parametrize("stdout", ["", "whatever\n"])
def test_first_missing_check_line_no_checks(stdout):
    assert first_missing_check_line(stdout, []) is None