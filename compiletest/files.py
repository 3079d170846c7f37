"""File system helpers for test outputs and the shared coverage report."""

from __future__ import annotations

import os
import stat
import sys
import threading
from pathlib import Path
from typing import TextIO

from compiletest.process import TestFailure


class _CoverageFile:
    """An open coverage report that several threads may append to."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._file: TextIO = open(path, "w", encoding="utf-8")

    def write_line(self, line: str) -> None:
        """Append ``line`` and make sure it reaches the disk."""
        with self._lock:
            self._file.write(f"{line}\n")
            self._file.flush()
            os.fsync(self._file.fileno())


_coverage_files: dict[Path, _CoverageFile] = {}
_coverage_files_lock = threading.Lock()


def _remove_file(path: Path) -> None:
    try:
        path.unlink()
    except PermissionError:
        # Read-only files cannot be removed on Windows until made writable.
        if sys.platform != "win32":
            raise
        path.chmod(path.stat().st_mode | stat.S_IWRITE)
        path.unlink()


def aggressive_rm_rf(path: str | os.PathLike[str]) -> None:
    """Remove a directory tree, including read-only files on Windows."""
    path = Path(path)
    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            aggressive_rm_rf(entry)
        else:
            _remove_file(entry)
    path.rmdir()


def delete_file(path: str | os.PathLike[str]) -> None:
    """Delete a file if it exists; raise :class:`TestFailure` if that fails."""
    path = Path(path)
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as exc:
        raise TestFailure(f"failed to delete `{path}`: {exc}") from exc


def load_expected_output(path: str | os.PathLike[str]) -> str:
    """Return the contents of an expected-output file, or ``""`` if it is absent."""
    path = Path(path)
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TestFailure(f"failed to load expected output from `{path}`: {exc}") from exc


def coverage_file(path: str | os.PathLike[str]) -> _CoverageFile:
    """Return the shared coverage report at ``path``, creating it on first use."""
    key = Path(path)
    with _coverage_files_lock:
        report = _coverage_files.get(key)
        if report is None:
            report = _CoverageFile(key)
            _coverage_files[key] = report
        return report


def record_missing_coverage(
    coverage_path: str | os.PathLike[str], test_file: str | os.PathLike[str]
) -> None:
    """Append ``test_file`` to the report of tests lacking rustfix coverage."""
    report = coverage_file(coverage_path)
    try:
        report.write_line(os.fspath(test_file))
    except OSError as exc:
        raise TestFailure(f"couldn't write to {report.path}") from exc


def is_newer(source: str | os.PathLike[str], output: str | os.PathLike[str]) -> bool:
    """Return whether ``source`` was modified after ``output``."""
    return Path(source).stat().st_mtime_ns > Path(output).stat().st_mtime_ns