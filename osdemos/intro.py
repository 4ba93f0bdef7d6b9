"""Introductory demos: CPU and memory virtualization, file I/O and a racy counter."""

from __future__ import annotations

import inspect
import os
import re
import sys
import threading
from typing import TextIO

from osdemos.timing import spin

__all__ = ["cpu", "mem", "io", "threads_counter", "address_layout", "main"]

HEAP_ALLOCATION = 100_000_000


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def cpu(text: str, out: TextIO | None = None, iterations: int | None = None) -> None:
    """Print ``text`` and spin for a second, ``iterations`` times or forever."""
    stream = _stream(out)
    done = 0
    while iterations is None or done < iterations:
        stream.write(f"{text}\n")
        stream.flush()
        spin(1)
        done += 1


def mem(value: int, out: TextIO | None = None, iterations: int | None = None) -> int:
    """Keep a value in its own heap cell and bump it once a second; return it."""
    stream = _stream(out)
    pid = os.getpid()
    cell = [value]
    stream.write(f"({pid}) addr pointed to by p: {id(cell):#x}\n")
    done = 0
    while iterations is None or done < iterations:
        spin(1)
        cell[0] += 1
        stream.write(f"({pid}) value of p: {cell[0]}\n")
        stream.flush()
        done += 1
    return cell[0]


def io(path: str | os.PathLike[str] = "/tmp/file") -> int:
    """Write a line to ``path``, force it to disk and return the bytes written."""
    data = b"hello world\n"
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        written = os.write(fd, data)
        if written != len(data):
            raise OSError(f"short write: {written} of {len(data)} bytes")
        os.fsync(fd)
    finally:
        os.close(fd)
    return written


def threads_counter(loops: int) -> int:
    """Two threads each add 1 to a shared, unguarded counter ``loops`` times."""
    counter = [0]

    def worker() -> None:
        for _ in range(loops):
            current = counter[0]
            counter[0] = current + 1

    workers = [threading.Thread(target=worker) for _ in range(2)]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()
    return counter[0]


def address_layout(out: TextIO | None = None) -> dict[str, int]:
    """Print and return rough addresses of code, a large heap block and the stack."""
    stream = _stream(out)
    frame = inspect.currentframe()
    block = bytearray(HEAP_ALLOCATION)
    layout = {
        "code": id(address_layout.__code__),
        "heap": id(block),
        "stack": id(frame),
    }
    stream.write(f"location of code : {layout['code']:#x}\n")
    stream.write(f"location of heap : {layout['heap']:#x}\n")
    stream.write(f"location of stack: {layout['stack']:#x}\n")
    del frame
    return layout


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _usage(text: str) -> None:
    sys.stderr.write(f"usage: {text}\n")
    raise SystemExit(1)


def main(argv: list[str] | None = None) -> int:
    """Command line: intro (cpu <string> | mem <value> | io | threads <loops> | va)."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _usage("intro (cpu <string> | mem <value> | io | threads <loops> | va)")
    command, rest = args[0], args[1:]
    if command == "cpu":
        if len(rest) != 1:
            _usage("cpu <string>")
        cpu(rest[0])
    elif command == "mem":
        if len(rest) != 1:
            _usage("mem <value>")
        mem(_atoi(rest[0]))
    elif command == "io":
        io(*rest[:1])
    elif command == "threads":
        if len(rest) != 1:
            _usage("threads <loops>")
        sys.stdout.write("Initial value : 0\n")
        sys.stdout.write(f"Final value   : {threads_counter(_atoi(rest[0]))}\n")
    elif command == "va":
        address_layout()
    else:
        _usage("intro (cpu <string> | mem <value> | io | threads <loops> | va)")
    return 0