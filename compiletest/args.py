"""Building compiler and run command lines, and the paths they refer to."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path

from compiletest.process import TestFailure

_DEBUG_OPTIONS_TO_REMOVE = frozenset({"-O", "-g", "--debuginfo"})
_DEFAULT_EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""


def split_maybe_args(argstr: str | None) -> list[str]:
    """Split a space-separated argument string, dropping blank pieces."""
    if argstr is None:
        return []
    return [piece for piece in argstr.split(" ") if piece.strip()]


def cleanup_debug_info_options(options: str | None) -> str | None:
    """Remove flags that are unwanted or may be duplicated in debuginfo tests."""
    if options is None:
        return None
    kept = (arg for arg in split_maybe_args(options) if arg not in _DEBUG_OPTIONS_TO_REMOVE)
    return " ".join(kept)


def has_custom_target(compile_flags: Iterable[str]) -> bool:
    """Return whether the test's own flags already choose a target."""
    return any(flag.startswith("--target") for flag in compile_flags)


def exe_name(
    base: str | os.PathLike[str],
    target: str,
    exe_suffix: str = _DEFAULT_EXE_SUFFIX,
) -> Path:
    """Return the executable path for a test's output base name."""
    base = Path(base)
    if "emscripten" in target:
        suffix = ".js"
    elif "spirv" in target:
        suffix = ".spv"
    elif "wasm32" in target:
        suffix = ".wasm"
    else:
        suffix = exe_suffix
    if not suffix:
        return base
    return base.with_name(base.name + suffix)


def _with_extension(path: Path, extension: str) -> Path:
    """Replace the path's extension (or add one), like a path's ``with_extension``."""
    if not extension:
        return path.with_suffix("")
    stem = path.stem if path.suffix else path.name
    return path.with_name(f"{stem}.{extension}")


def output_base_name(
    build_base: str | os.PathLike[str],
    relative_dir: str | os.PathLike[str],
    test_file: str | os.PathLike[str],
    stage_id: str,
) -> Path:
    """Map ``<suite>/foo/bar.rs`` to ``<build_base>/foo/bar.<stage_id>``."""
    directory = Path(build_base) / Path(relative_dir)
    return _with_extension(directory / Path(test_file).stem, stage_id)


def aux_output_dir_name(base: str | os.PathLike[str], disambiguator: str) -> Path:
    """Return the directory that auxiliary builds of a test are written to."""
    base = Path(base)
    return base.with_name(f"{base.name}{disambiguator}.aux")


def aux_crate_type(target: str, no_prefer_dynamic: bool, force_host: bool) -> str | None:
    """Return the crate type to build an auxiliary library as, if any."""
    if no_prefer_dynamic:
        return None
    # Targets without dynamic library support build plain libraries instead.
    if ("musl" in target and not force_host) or "wasm32" in target or "emscripten" in target:
        return "lib"
    return "dylib"


def make_run_args(
    exe_file: str | os.PathLike[str],
    runtool: str | None,
    run_flags: str | None,
    target: str,
    nodejs: str | None = None,
    src_base: str | os.PathLike[str] | None = None,
) -> tuple[str, list[str]]:
    """Return the program and arguments that run a compiled test."""
    args = split_maybe_args(runtool)

    if "emscripten" in target:
        if nodejs is None:
            raise TestFailure("no NodeJS binary found (--nodejs)")
        args.append(nodejs)

    if "wasm32" in target:
        if nodejs is None:
            raise TestFailure("no NodeJS binary found (--nodejs)")
        args.append(nodejs)
        if src_base is None:
            raise TestFailure("no source directory to find the wasm32 shim in")
        # Chop off the suite, `test` and `src` directories.
        root = Path(src_base).parents[2]
        args.append(str(root / "src" / "etc" / "wasm32-shim.js"))

    args.append(os.fspath(exe_file))
    args.extend(split_maybe_args(run_flags))

    prog, *rest = args
    return prog, rest