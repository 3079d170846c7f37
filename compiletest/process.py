"""Running child processes and capturing their (possibly abbreviated) output."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import IO

HEAD_LEN = 160 * 1024
TAIL_LEN = 256 * 1024
_CHUNK = 64 * 1024
_RULE = "------------------------------------------"


class TestFailure(Exception):
    """A test did not behave as expected."""

    __test__ = False

    def __init__(self, message: str, proc_res: ProcRes | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.proc_res = proc_res


@dataclass
class ProcRes:
    """The result of running a process."""

    returncode: int
    stdout: str
    stderr: str
    cmdline: str

    @property
    def status(self) -> str:
        if self.returncode < 0:
            return f"signal: {-self.returncode}"
        return f"exit status: {self.returncode}"

    def success(self) -> bool:
        return self.returncode == 0

    def report(self, error: str | None = None) -> None:
        """Print the process details and raise :class:`TestFailure`."""
        if error is not None:
            print(f"\nerror: {error}")
        print(
            f"status: {self.status}\n"
            f"command: {self.cmdline}\n"
            f"stdout:\n{_RULE}\n{self.stdout}\n{_RULE}\n"
            f"stderr:\n{_RULE}\n{self.stderr}\n{_RULE}\n\n",
            end="",
        )
        raise TestFailure(error or "process failed", self)


class ProcOutput:
    """Collects output, keeping only the head and tail once it grows too large."""

    def __init__(self, head_len: int = HEAD_LEN, tail_len: int = TAIL_LEN) -> None:
        self.head_len = head_len
        self.tail_len = tail_len
        self._full: bytearray | None = bytearray()
        self._head = b""
        self._tail = b""
        self.skipped = 0

    @property
    def abbreviated(self) -> bool:
        return self._full is None

    def extend(self, data: bytes) -> None:
        if self._full is not None:
            self._full.extend(data)
            total = len(self._full)
            if total <= self.head_len + self.tail_len:
                return
            self._tail = bytes(self._full[total - self.tail_len:])
            self._head = bytes(self._full[: self.head_len])
            self.skipped = total - self.head_len - self.tail_len
            self._full = None
            return
        self.skipped += len(data)
        if len(data) <= self.tail_len:
            self._tail = self._tail[len(data):] + bytes(data)
        else:
            self._tail = bytes(data[len(data) - self.tail_len:])

    def into_bytes(self) -> bytes:
        if self._full is not None:
            return bytes(self._full)
        marker = f"\n\n<<<<<< SKIPPED {self.skipped} BYTES >>>>>>\n\n".encode()
        return self._head + marker + self._tail


def dylib_env_var() -> str:
    """Name of the environment variable that holds dynamic library locations."""
    if sys.platform == "win32":
        return "PATH"
    if sys.platform == "darwin":
        return "DYLD_LIBRARY_PATH"
    if sys.platform.startswith("haiku"):
        return "LIBRARY_PATH"
    return "LD_LIBRARY_PATH"


def dylib_search_path(lib_path: str, aux_path: str | None, current: str | None) -> str:
    """Build a library search path with ``lib_path`` and ``aux_path`` first."""
    paths = [lib_path]
    if aux_path is not None:
        paths.append(aux_path)
    if current:
        paths.extend(entry for entry in current.split(os.pathsep) if entry)
    return os.pathsep.join(paths)


def _drain(stream: IO[bytes], sink: ProcOutput) -> None:
    while chunk := stream.read1(_CHUNK):  # type: ignore[attr-defined]
        sink.extend(chunk)
    stream.close()


def run_abbreviated(
    args: Sequence[str | os.PathLike[str]],
    input: str | None = None,
    env: Mapping[str, str] | None = None,
    cwd: str | os.PathLike[str] | None = None,
) -> ProcRes:
    """Run a command, feed it ``input`` and collect abbreviated output.

    ``env`` holds variables added to the current environment.
    """
    cmdline = shlex.join(os.fspath(arg) for arg in args)
    child_env = {**os.environ, **env} if env is not None else None
    try:
        child = subprocess.Popen(
            [os.fspath(arg) for arg in args],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=child_env,
            cwd=cwd,
        )
    except OSError as exc:
        raise TestFailure(f"failed to exec `{cmdline}`: {exc}") from exc

    stdout, stderr = ProcOutput(), ProcOutput()
    readers = [
        threading.Thread(target=_drain, args=(child.stdout, stdout), daemon=True),
        threading.Thread(target=_drain, args=(child.stderr, stderr), daemon=True),
    ]
    for reader in readers:
        reader.start()
    assert child.stdin is not None
    try:
        if input is not None:
            child.stdin.write(input.encode())
        child.stdin.close()
    except BrokenPipeError:
        pass
    for reader in readers:
        reader.join()
    returncode = child.wait()

    return ProcRes(
        returncode=returncode,
        stdout=stdout.into_bytes().decode("utf-8", errors="replace"),
        stderr=stderr.into_bytes().decode("utf-8", errors="replace"),
        cmdline=cmdline,
    )