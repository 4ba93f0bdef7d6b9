"""Process creation: fork, wait, exec and output redirection."""

from __future__ import annotations

import os
import sys
import time
from typing import Callable, TextIO

__all__ = ["fork_hello", "fork_wait", "fork_exec", "fork_redirect", "main"]


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def _flush(stream: TextIO) -> None:
    for handle in (stream, sys.stdout, sys.stderr):
        handle.flush()


def _say(text: str) -> None:
    os.write(1, text.encode())


def _spawn(body: Callable[[], None]) -> tuple[int, int]:
    """Fork a child whose standard output goes to a pipe; return (pid, read end)."""
    read_fd, write_fd = os.pipe()
    pid = os.fork()
    if pid == 0:
        code = 0
        try:
            os.close(read_fd)
            os.dup2(write_fd, 1)
            os.close(write_fd)
            body()
        except BaseException:
            code = 1
        finally:
            os._exit(code)
    os.close(write_fd)
    return pid, read_fd


def _collect(read_fd: int) -> str:
    with os.fdopen(read_fd, "rb") as pipe:
        return pipe.read().decode("utf-8", errors="replace")


def fork_hello(out: TextIO | None = None) -> int:
    """Fork a child; parent and child each greet with their pid. Returns the child pid."""
    stream = _stream(out)
    stream.write(f"hello world (pid:{os.getpid()})\n")
    _flush(stream)
    pid, read_fd = _spawn(lambda: _say(f"hello, I am child (pid:{os.getpid()})\n"))
    stream.write(f"hello, I am parent of {pid} (pid:{os.getpid()})\n")
    child_output = _collect(read_fd)
    os.waitpid(pid, 0)
    stream.write(child_output)
    return pid


def _parent_after_wait(stream: TextIO, pid: int, read_fd: int) -> int:
    child_output = _collect(read_fd)
    waited, _ = os.waitpid(pid, 0)
    stream.write(child_output)
    stream.write(f"hello, I am parent of {pid} (wc:{waited}) (pid:{os.getpid()})\n")
    return pid


def fork_wait(out: TextIO | None = None) -> int:
    """Fork a child that sleeps a second; the parent waits for it. Returns the child pid."""
    stream = _stream(out)
    stream.write(f"hello world (pid:{os.getpid()})\n")
    _flush(stream)

    def child() -> None:
        _say(f"hello, I am child (pid:{os.getpid()})\n")
        time.sleep(1)

    pid, read_fd = _spawn(child)
    return _parent_after_wait(stream, pid, read_fd)


def fork_exec(path: str | os.PathLike[str] = "p3.c", out: TextIO | None = None) -> int:
    """Fork a child that replaces itself with ``wc path``. Returns the child pid."""
    stream = _stream(out)
    target = os.fspath(path)
    stream.write(f"hello world (pid:{os.getpid()})\n")
    _flush(stream)

    def child() -> None:
        _say(f"hello, I am child (pid:{os.getpid()})\n")
        try:
            os.execvp("wc", ["wc", target])
        except OSError:
            _say("this shouldn't print out")

    pid, read_fd = _spawn(child)
    return _parent_after_wait(stream, pid, read_fd)


def fork_redirect(
    path: str | os.PathLike[str] = "p4.c",
    output: str | os.PathLike[str] = "./p4.output",
) -> int:
    """Run ``wc path`` in a child whose standard output is the file ``output``.

    Returns the child pid once it has finished.
    """
    target = os.fspath(path)
    sys.stdout.flush()
    sys.stderr.flush()
    pid = os.fork()
    if pid == 0:
        try:
            os.close(1)
            fd = os.open(output, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o700)
            if fd != 1:
                os.dup2(fd, 1)
                os.close(fd)
            os.execvp("wc", ["wc", target])
        finally:
            os._exit(127)
    waited, _ = os.waitpid(pid, 0)
    return waited


_USAGE = "usage: processes (hello | wait | exec [FILE] | redirect [FILE [OUTPUT]])\n"


def main(argv: list[str] | None = None) -> int:
    """Command line: run one of the process demos."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write(_USAGE)
        raise SystemExit(1)
    command, rest = args[0], args[1:]
    limits = {"hello": 0, "wait": 0, "exec": 1, "redirect": 2}
    if command not in limits or len(rest) > limits[command]:
        sys.stderr.write(_USAGE)
        raise SystemExit(1)
    try:
        if command == "hello":
            fork_hello()
        elif command == "wait":
            fork_wait()
        elif command == "exec":
            fork_exec(*rest)
        else:
            fork_redirect(*rest)
    except OSError as exc:
        sys.stderr.write("fork failed\n")
        raise SystemExit(1) from exc
    return 0