"""Writing the scripts that drive GDB and LLDB in debuginfo tests."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence

_AUTO_LOAD_MIN_VERSION = (7, 4)


def gdb_charset(platform: str | None = None) -> str:
    """Return the charset GDB should use on ``platform`` (default: this one)."""
    platform = sys.platform if platform is None else platform
    if platform.startswith("bitrig"):
        return "auto"
    # Old FreeBSD GDB does not support the "auto" charset.
    if platform.startswith("freebsd"):
        return "ISO-8859-1"
    return "UTF-8"


def gdb_script(
    commands: Sequence[str],
    breakpoint_lines: Iterable[int],
    source_name: str,
    exe_file: str,
    pp_module_dir: str,
    gdb_version: tuple[int, ...] | None = None,
    native_rust: bool = False,
    charset: str | None = None,
) -> str:
    """Return a GDB script that loads ``exe_file``, sets breakpoints and runs ``commands``.

    ``gdb_version`` is a version tuple such as ``(8, 1)``; ``None`` means unknown.
    """
    charset = gdb_charset() if charset is None else charset
    parts = [f"set charset {charset}\n", "show version\n"]
    if gdb_version is not None and tuple(gdb_version) > _AUTO_LOAD_MIN_VERSION:
        # Let GDB auto-load the pretty printers from their directory.
        escaped = pp_module_dir.replace("\\", "\\\\")
        parts.append(f"add-auto-load-safe-path {escaped}\n")
    # Print values on one line.
    parts.append("set print pretty off\n")
    parts.append(f"directory {pp_module_dir}\n")
    parts.append("file {}\n".format(exe_file.replace("\\", "\\\\")))
    if native_rust:
        parts.append("set language rust\n")
    parts.extend(f"break '{source_name}':{line}\n" for line in breakpoint_lines)
    parts.append("\n".join(commands))
    parts.append("\nquit\n")
    return "".join(parts)


def lldb_script(
    commands: Iterable[str],
    breakpoint_lines: Iterable[int],
    source_name: str,
    formatters_path: str,
) -> str:
    """Return an LLDB script that loads the formatters, sets breakpoints and runs ``commands``."""
    parts = [
        # Do not hang on `quit` while the process is still running.
        "settings set auto-confirm true\n",
        "version\n",
        f"command script import {formatters_path}\n",
        "type summary add --no-value "
        "--python-function lldb_rust_formatters.print_val "
        '-x ".*" --category Rust\n',
        "type category enable Rust\n",
    ]
    parts.extend(
        f"breakpoint set --file '{source_name}' --line {line}\n" for line in breakpoint_lines
    )
    parts.extend(f"{command}\n" for command in commands)
    parts.append("\nquit\n")
    return "".join(parts)