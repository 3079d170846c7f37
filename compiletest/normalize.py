"""Normalising compiler output and comparing it with the expected output."""

from __future__ import annotations

import difflib
import os
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from compiletest.process import TestFailure

_JSON_FLAGS = (
    "--error-format json",
    "--error-format pretty-json",
    "--error-format=json",
    "--error-format=pretty-json",
    "--output-format json",
    "--output-format=json",
)
_TEMPLATE_REF = re.compile(r"\$(\$|\{([^}]*)\}|([0-9A-Za-z_]+))")


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and any ``\\r``."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def is_json_output(compile_flags: Iterable[str]) -> bool:
    """Return whether the compile flags ask for JSON output."""
    flags = " ".join(compile_flags)
    return any(option in flags for option in _JSON_FLAGS)


def _expand(template: str, match: re.Match[str]) -> str:
    """Expand ``$name``, ``${name}`` and ``$$`` references in a replacement."""

    def reference(ref: re.Match[str]) -> str:
        if ref.group(1) == "$":
            return "$"
        name = ref.group(2) if ref.group(2) is not None else ref.group(3)
        try:
            value = match.group(int(name)) if name.isdigit() else match.group(name)
        except (IndexError, re.error):
            return ""
        return value or ""

    return _TEMPLATE_REF.sub(reference, template)


def normalize_output(
    output: str,
    parent_dir: str | os.PathLike[str],
    build_base: str | os.PathLike[str],
    compile_flags: Sequence[str] = (),
    custom_rules: Iterable[tuple[str, str]] = (),
    src_dir: str | os.PathLike[str] | None = None,
) -> str:
    """Replace machine-specific paths and line endings, then apply custom rules."""
    json = is_json_output(compile_flags)
    normalized = output

    def replace_path(path: str | os.PathLike[str], placeholder: str) -> None:
        nonlocal normalized
        text = str(Path(path))
        if json:
            text = text.replace("\\", "\\\\")
        normalized = normalized.replace(text, placeholder)

    replace_path(parent_dir, "$DIR")
    if src_dir is not None:
        replace_path(src_dir, "$SRC_DIR")
    replace_path(build_base, "$TEST_BUILD_DIR")

    if json:
        # Escaped newlines in JSON strings are easier to read as real ones.
        normalized = normalized.replace("\\n", "\n")

    normalized = (
        normalized.replace("\\\\", "\\")
        .replace("\\", "/")
        .replace("\r\n", "\n")
        .replace("\t", "\\t")
    )
    for pattern, replacement in custom_rules:
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise TestFailure(f"bad regex in custom normalization rule: {exc}") from exc
        normalized = regex.sub(lambda m, r=replacement: _expand(r, m), normalized)
    return normalized


def render_diff(kind: str, expected: str, actual: str) -> str:
    """Describe how ``actual`` differs from ``expected``, line by line."""
    if not expected:
        return f"normalized {kind}:\n{actual}\n"
    old, new = _lines(expected), _lines(actual)
    out = [f"diff of {kind}:\n"]
    matcher = difflib.SequenceMatcher(a=old, b=new, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            out.extend(f" {line}" for line in old[i1:i2])
        else:
            out.extend(f"-{line}" for line in old[i1:i2])
            out.extend(f"+{line}" for line in new[j1:j2])
    return "\n".join(out) + "\n"


def _delete_file(path: Path) -> None:
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as exc:
        raise TestFailure(f"failed to delete `{path}`: {exc}") from exc


def compare_output(
    kind: str,
    actual: str,
    expected: str,
    output_files: Iterable[str | os.PathLike[str]],
    bless: bool = False,
) -> int:
    """Compare outputs; on a difference save ``actual`` and return the error count.

    An empty ``actual`` deletes the output files instead. When blessing, the
    difference is not counted as an error.
    """
    if actual == expected:
        return 0

    if not bless:
        print(render_diff(kind, expected, actual))

    files = [Path(path) for path in output_files]
    for path in files:
        if not actual:
            _delete_file(path)
            continue
        try:
            path.write_text(actual, encoding="utf-8")
        except OSError as exc:
            raise TestFailure(f"failed to write {kind} to `{path}`: {exc}") from exc

    print(f"\nThe actual {kind} differed from the expected {kind}.")
    for path in files:
        print(f"Actual {kind} saved to {path}")
    return 0 if bless else 1