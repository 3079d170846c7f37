import pytest

from compiletest.normalize import (
    compare_output,
    is_json_output,
    normalize_output,
    render_diff,
)
from compiletest.process import TestFailure


@pytest.mark.parametrize(
    "flags, result",
    [
        (["--error-format", "json"], True),
        (["--error-format=pretty-json"], True),
        (["--output-format=json"], True),
        (["--error-format=human"], False),
        ([], False),
    ],
)
def test_is_json_output(flags, result):
    assert is_json_output(flags) is result


def test_parent_dir_replaced(tmp_path):
    parent = tmp_path / "suite"
    text = f"error at {parent}/foo.rs:3"
    out = normalize_output(text, parent, tmp_path / "build")
    assert out == "error at $DIR/foo.rs:3"


def test_build_and_src_dirs_replaced(tmp_path):
    build = tmp_path / "build"
    src = tmp_path / "src"
    text = f"{build}/x and {src}/y"
    out = normalize_output(text, tmp_path / "other", build, src_dir=src)
    assert out == "$TEST_BUILD_DIR/x and $SRC_DIR/y"


def test_line_endings_tabs_and_backslashes():
    out = normalize_output("a\\b\tc\r\nd", "/nowhere", "/nobuild")
    assert out == "a/b\\tc\nd"


def test_json_escaped_newlines_become_real():
    out = normalize_output("one\\ntwo", "/nowhere", "/nobuild", ["--error-format=json"])
    assert out.split("\n") == ["one", "two"]


def test_without_json_escaped_newlines_stay():
    out = normalize_output("one\\ntwo", "/nowhere", "/nobuild")
    assert "\n" not in out


def test_custom_rule_with_group_reference():
    rules = [(r"line (\d+)", "L$1"), (r"(?P<w>x+)", "${w}!")]
    out = normalize_output("line 42 xx", "/nowhere", "/nobuild", custom_rules=rules)
    assert out == "L42 xx!"


def test_custom_rule_dollar_escape():
    out = normalize_output("cost", "/nowhere", "/nobuild", custom_rules=[("cost", "$$5")])
    assert out == "$5"


def test_bad_custom_rule_raises():
    with pytest.raises(TestFailure):
        normalize_output("x", "/nowhere", "/nobuild", custom_rules=[("(", "y")])


def test_render_diff_marks_changes():
    text = render_diff("stderr", "keep\nold\n", "keep\nnew\n")
    lines = text.splitlines()
    assert lines[0] == "diff of stderr:"
    assert " keep" in lines
    assert "-old" in lines
    assert "+new" in lines
    assert lines.index("-old") < lines.index("+new")


def test_render_diff_without_expected_shows_actual():
    text = render_diff("stdout", "", "hello")
    assert text == "normalized stdout:\nhello\n"


def test_compare_equal_writes_nothing(tmp_path):
    target = tmp_path / "out.stderr"
    assert compare_output("stderr", "same", "same", [target]) == 0
    assert not target.exists()


def test_compare_difference_saves_actual(tmp_path, capsys):
    target = tmp_path / "out.stderr"
    assert compare_output("stderr", "new text", "old text", [target]) == 1
    assert target.read_text() == "new text"
    assert f"Actual stderr saved to {target}" in capsys.readouterr().out


def test_compare_bless_counts_no_error(tmp_path):
    targets = [tmp_path / "a.stderr", tmp_path / "b.stderr"]
    assert compare_output("stderr", "fresh", "stale", targets, bless=True) == 0
    assert [t.read_text() for t in targets] == ["fresh", "fresh"]


def test_compare_empty_actual_deletes(tmp_path):
    target = tmp_path / "out.stdout"
    target.write_text("leftover")
    assert compare_output("stdout", "", "expected", [target]) == 1
    assert not target.exists()


def test_compare_unwritable_raises(tmp_path):
    target = tmp_path / "missing_dir" / "out.stderr"
    with pytest.raises(TestFailure):
        compare_output("stderr", "a", "b", [target])