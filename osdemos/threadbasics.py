"""Thread basics: creation, arguments, return values, races, CAS and semaphores."""

from __future__ import annotations

import re
import sys
import threading
import time
from typing import TextIO

from osdemos.zemaphore import Zemaphore

__all__ = [
    "Cell",
    "thread_create",
    "thread_simple_args",
    "thread_return_args",
    "two_threads",
    "shared_counter",
    "semaphore_counter",
    "semaphore_join",
    "throttle",
    "main",
]


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


class Cell:
    """An integer slot supporting an atomic compare-and-swap."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        """Current contents."""
        with self._lock:
            return self._value

    def compare_and_swap(self, old: int, new: int) -> bool:
        """Store ``new`` if the cell holds ``old``; return whether it did."""
        with self._lock:
            if self._value != old:
                return False
            self._value = new
            return True


def thread_create(out: TextIO | None = None) -> None:
    """Pass a pair of values to a thread that prints them, then join it."""
    stream = _stream(out)
    args = (10, 20)

    def worker() -> None:
        stream.write(f"{args[0]} {args[1]}\n")

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()
    stream.write("done\n")


def thread_simple_args(value: int = 100, out: TextIO | None = None) -> int:
    """Hand a thread one number; it prints it and returns the number plus one."""
    stream = _stream(out)
    result: list[int] = []

    def worker() -> None:
        stream.write(f"{value}\n")
        result.append(value + 1)

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()
    stream.write(f"returned {result[0]}\n")
    return result[0]


def thread_return_args(out: TextIO | None = None) -> tuple[int, int]:
    """A thread takes a pair of arguments and hands back a pair of results."""
    stream = _stream(out)
    args = (10, 20)
    result: list[tuple[int, int]] = []

    def worker() -> None:
        stream.write(f"args {args[0]} {args[1]}\n")
        result.append((1, 2))

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()
    x, y = result[0]
    stream.write(f"returned {x} {y}\n")
    return x, y


def two_threads(out: TextIO | None = None) -> None:
    """Start two threads that each print a letter, in no fixed order."""
    stream = _stream(out)
    stream.write("main: begin\n")
    threads = [
        threading.Thread(target=stream.write, args=(f"{letter}\n",))
        for letter in ("A", "B")
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write("main: end\n")


def shared_counter(loops: int, out: TextIO | None = None) -> int:
    """Two threads each bump an unguarded shared counter ``loops`` times."""
    stream = _stream(out)
    counter = [0]

    def worker(letter: str) -> None:
        local = object()
        stream.write(f"{letter}: begin [addr of i: {id(local):#x}]\n")
        for _ in range(loops):
            current = counter[0]
            counter[0] = current + 1
        stream.write(f"{letter}: done\n")

    stream.write(f"main: begin [counter = {counter[0]}] [{id(counter):x}]\n")
    threads = [threading.Thread(target=worker, args=(letter,)) for letter in ("A", "B")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write(f"main: done\n [counter: {counter[0]}]\n [should: {loops * 2}]\n")
    return counter[0]


def semaphore_counter(loops: int = 10_000_000) -> int:
    """Two threads bump a counter ``loops`` times each under a binary semaphore."""
    mutex = threading.Semaphore(1)
    counter = 0

    def worker() -> None:
        nonlocal counter
        for _ in range(loops):
            with mutex:
                counter += 1

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return counter


def semaphore_join(delay: float = 2.0, out: TextIO | None = None) -> None:
    """Parent waits on a semaphore initialised to zero until the child posts."""
    stream = _stream(out)
    sem = Zemaphore(0)

    def child() -> None:
        time.sleep(delay)
        stream.write("child\n")
        sem.post()

    stream.write("parent: begin\n")
    thread = threading.Thread(target=child)
    thread.start()
    sem.wait()
    stream.write("parent: end\n")
    thread.join()


def throttle(
    num_threads: int, sem_value: int, delay: float = 1.0, out: TextIO | None = None
) -> int:
    """Let at most ``sem_value`` of ``num_threads`` children run at once.

    Returns the largest number of children seen running together.
    """
    stream = _stream(out)
    sem = threading.Semaphore(sem_value)
    guard = threading.Lock()
    running = 0
    peak = 0

    def child(cid: int) -> None:
        nonlocal running, peak
        with sem:
            with guard:
                running += 1
                peak = max(peak, running)
            stream.write(f"child {cid}\n")
            time.sleep(delay)
            with guard:
                running -= 1

    stream.write("parent: begin\n")
    threads = [threading.Thread(target=child, args=(cid,)) for cid in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write("parent: end\n")
    return peak


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _usage(text: str) -> None:
    sys.stderr.write(f"usage: {text}\n")
    raise SystemExit(1)


_OVERVIEW = (
    "threadbasics (create | simple-args | return-args | t0 | t1 <loopcount> | "
    "cas | binary [loops] | join | throttle <num_threads> <sem_value>)"
)


def _cas_demo() -> None:
    cell = Cell(0)
    out = sys.stdout
    out.write(f"before successful cas: {cell.value}\n")
    success = cell.compare_and_swap(0, 100)
    out.write(f"after successful cas: {cell.value} (success: {int(success)})\n")
    out.write(f"before failing cas: {cell.value}\n")
    success = cell.compare_and_swap(0, 200)
    out.write(f"after failing cas: {cell.value} (old: {int(success)})\n")


def main(argv: list[str] | None = None) -> int:
    """Command line: run one of the thread demos."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _usage(_OVERVIEW)
    command, rest = args[0], args[1:]
    if command in ("create", "simple-args", "return-args", "t0", "cas", "join"):
        if rest:
            _usage("main" if command == "t0" else f"threadbasics {command}")
        if command == "create":
            thread_create()
        elif command == "simple-args":
            thread_simple_args()
        elif command == "return-args":
            thread_return_args()
        elif command == "t0":
            two_threads()
        elif command == "cas":
            _cas_demo()
        else:
            semaphore_join()
    elif command == "t1":
        if len(rest) != 1:
            _usage("main-first <loopcount>")
        shared_counter(_atoi(rest[0]))
    elif command == "binary":
        if len(rest) > 1:
            _usage("threadbasics binary [loops]")
        loops = _atoi(rest[0]) if rest else 10_000_000
        result = semaphore_counter(loops)
        sys.stdout.write(f"result: {result} (should be {loops * 2})\n")
    elif command == "throttle":
        if len(rest) != 2:
            _usage("throttle <num_threads> <sem_value>")
        throttle(_atoi(rest[0]), _atoi(rest[1]))
    else:
        _usage(_OVERVIEW)
    return 0