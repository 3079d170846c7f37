from pathlib import Path

import pytest

from compiletest.args import (
    aux_crate_type,
    aux_output_dir_name,
    cleanup_debug_info_options,
    exe_name,
    has_custom_target,
    make_run_args,
    output_base_name,
    split_maybe_args,
)
from compiletest.process import TestFailure


def test_split_maybe_args_none():
    assert split_maybe_args(None) == []


def test_split_maybe_args_drops_blank_pieces():
    assert split_maybe_args("-L target/debug  -L target/debug/deps") == [
        "-L",
        "target/debug",
        "-L",
        "target/debug/deps",
    ]


def test_split_maybe_args_drops_whitespace_only_pieces():
    assert split_maybe_args("  \t  x") == ["x"]


def test_cleanup_debug_info_options_none():
    assert cleanup_debug_info_options(None) is None


def test_cleanup_debug_info_options_removes_flags():
    assert cleanup_debug_info_options("-O -g --debuginfo -C opt") == "-C opt"


def test_cleanup_keeps_everything_else():
    options = "-L a -L b"
    assert cleanup_debug_info_options(options) == options


@pytest.mark.parametrize(
    "flags, expected",
    [
        (["--target=x86_64-unknown-linux-gnu"], True),
        (["--crate-type", "rlib", "--target", "wasm32-unknown-unknown"], True),
        (["--crate-type", "rlib"], False),
        ([], False),
    ],
)
def test_has_custom_target(flags, expected):
    assert has_custom_target(flags) is expected


@pytest.mark.parametrize(
    "target, suffix",
    [
        ("asmjs-unknown-emscripten", ".js"),
        ("spirv-unknown-vulkan", ".spv"),
        ("wasm32-unknown-unknown", ".wasm"),
    ],
)
def test_exe_name_special_targets(target, suffix):
    base = Path("build") / "ui" / "foo.stage1"
    assert exe_name(base, target, "") == base.with_name("foo.stage1" + suffix)


def test_exe_name_host_suffix():
    base = Path("build") / "foo.stage1"
    assert exe_name(base, "x86_64-pc-windows-msvc", ".exe") == Path("build") / "foo.stage1.exe"
    assert exe_name(base, "x86_64-unknown-linux-gnu", "") == base


def test_output_base_name():
    result = output_base_name("build", "ui/foo", "tests/ui/foo/bar.rs", "stage1")
    assert result == Path("build") / "ui" / "foo" / "bar.stage1"


def test_output_base_name_replaces_inner_extension():
    result = output_base_name("build", "ui", "tests/ui/bar.baz.rs", "stage1")
    assert result == Path("build") / "ui" / "bar.stage1"


def test_aux_output_dir_name():
    base = Path("build") / "bar.stage1"
    assert aux_output_dir_name(base, "") == Path("build") / "bar.stage1.aux"
    assert aux_output_dir_name(base, ".x").parent == base.parent


@pytest.mark.parametrize(
    "target, no_prefer_dynamic, force_host, expected",
    [
        ("x86_64-unknown-linux-gnu", True, False, None),
        ("x86_64-unknown-linux-musl", False, False, "lib"),
        ("x86_64-unknown-linux-musl", False, True, "dylib"),
        ("wasm32-unknown-unknown", False, True, "lib"),
        ("asmjs-unknown-emscripten", False, False, "lib"),
        ("x86_64-unknown-linux-gnu", False, False, "dylib"),
    ],
)
def test_aux_crate_type(target, no_prefer_dynamic, force_host, expected):
    assert aux_crate_type(target, no_prefer_dynamic, force_host) == expected


def test_make_run_args_plain():
    prog, args = make_run_args("build/foo", None, None, "x86_64-unknown-linux-gnu")
    assert prog == "build/foo"
    assert args == []


def test_make_run_args_runtool_and_flags():
    prog, args = make_run_args("build/foo", "valgrind --quiet", "a b", "x86_64-unknown-linux-gnu")
    assert prog == "valgrind"
    assert args == ["--quiet", "build/foo", "a", "b"]


def test_make_run_args_emscripten_needs_node():
    with pytest.raises(TestFailure, match="no NodeJS binary found"):
        make_run_args("build/foo.js", None, None, "asmjs-unknown-emscripten")


def test_make_run_args_wasm_needs_node():
    with pytest.raises(TestFailure, match="no NodeJS binary found"):
        make_run_args("build/foo.wasm", None, None, "wasm32-unknown-unknown", src_base="r/src/test/run-pass")


def test_make_run_args_wasm_uses_shim():
    src_base = Path("root") / "src" / "test" / "run-pass"
    prog, args = make_run_args("build/foo.wasm", None, None, "wasm32-unknown-unknown", "node", src_base)
    assert prog == "node"
    assert Path(args[0]) == Path("root") / "src" / "etc" / "wasm32-shim.js"
    assert args[1:] == ["build/foo.wasm"]