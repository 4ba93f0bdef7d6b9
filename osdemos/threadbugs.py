"""Classic concurrency bugs: atomicity violation, deadlock and ordering violation."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from dataclasses import dataclass
from typing import Callable, TextIO

__all__ = [
    "PR_STATE_INIT",
    "PRThread",
    "create_thread",
    "wait_thread",
    "atomicity",
    "deadlock",
    "ordering",
    "main",
]

PR_STATE_INIT = 0

_T2_ATOMICITY = " " * 17
_T2_DEADLOCK = " " * 27


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


@dataclass
class PRThread:
    """A started thread together with its bookkeeping state."""

    thread: threading.Thread
    state: int = PR_STATE_INIT


def create_thread(start_routine: Callable[[], object], delay: float = 1.0) -> PRThread:
    """Start ``start_routine`` in a thread and pause ``delay`` seconds before returning."""
    thread = threading.Thread(target=start_routine)
    handle = PRThread(thread)
    thread.start()
    time.sleep(delay)
    return handle


def wait_thread(thread: PRThread) -> None:
    """Wait for the thread to finish."""
    thread.thread.join()


@dataclass
class _Proc:
    pid: int


@dataclass
class _ThreadInfo:
    proc_info: _Proc | None


def atomicity(
    fixed: bool = False,
    check_delay: float = 2.0,
    clear_delay: float = 1.0,
    out: TextIO | None = None,
) -> int | None:
    """One thread checks then uses a shared pointer while another clears it.

    Returns the pid the checking thread used, or None if it found the
    pointer cleared between its check and its use.
    """
    stream = _stream(out)
    lock = threading.Lock()
    info = _ThreadInfo(_Proc(100))
    used: list[int | None] = [None]

    def thread1() -> None:
        stream.write("t1: before check\n")
        if fixed:
            lock.acquire()
        try:
            if info.proc_info:
                stream.write("t1: after check\n")
                time.sleep(check_delay)
                stream.write("t1: use!\n")
                try:
                    pid = info.proc_info.pid  # type: ignore[union-attr]
                except AttributeError:
                    stream.write("t1: proc_info was cleared; nothing to use\n")
                    return
                stream.write(f"{pid}\n")
                used[0] = pid
        finally:
            if fixed:
                lock.release()

    def thread2() -> None:
        stream.write(f"{_T2_ATOMICITY}t2: begin\n")
        time.sleep(clear_delay)
        if fixed:
            lock.acquire()
        try:
            stream.write(f"{_T2_ATOMICITY}t2: set to NULL\n")
            info.proc_info = None
        finally:
            if fixed:
                lock.release()

    stream.write("main: begin\n")
    threads = [threading.Thread(target=thread1), threading.Thread(target=thread2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write("main: end\n")
    return used[0]


def deadlock(out: TextIO | None = None, timeout: float | None = None) -> bool:
    """Two threads take two locks in opposite orders.

    Without a timeout a deadlock blocks forever. With one, a thread that
    cannot get its second lock in time gives up and drops the first.
    Returns True if both threads got both locks.
    """
    stream = _stream(out)
    l1, l2 = threading.Lock(), threading.Lock()
    wait = -1 if timeout is None else timeout
    finished = [False, False]

    def worker(index: int, prefix: str, first: tuple[str, threading.Lock],
               second: tuple[str, threading.Lock]) -> None:
        tag = f"{prefix}t{index + 1}"
        first_name, first_lock = first
        second_name, second_lock = second
        stream.write(f"{tag}: begin\n")
        stream.write(f"{tag}: try to acquire {first_name}...\n")
        first_lock.acquire()
        stream.write(f"{tag}: {first_name} acquired\n")
        stream.write(f"{tag}: try to acquire {second_name}...\n")
        if not second_lock.acquire(timeout=wait):
            stream.write(f"{tag}: gave up on {second_name}\n")
            first_lock.release()
            return
        stream.write(f"{tag}: {second_name} acquired\n")
        l1.release()
        l2.release()
        finished[index] = True

    stream.write("main: begin\n")
    threads = [
        threading.Thread(target=worker, args=(0, "", ("L1", l1), ("L2", l2))),
        threading.Thread(target=worker, args=(1, _T2_DEADLOCK, ("L2", l2), ("L1", l1))),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write("main: end\n")
    return all(finished)


def ordering(
    fixed: bool = False, delay: float = 1.0, out: TextIO | None = None
) -> int | None:
    """A new thread reads its own handle, which may not be assigned yet.

    The fixed version waits on a condition until the handle is set.
    Returns the state the thread read, or None if the handle was unset.
    """
    stream = _stream(out)
    cond = threading.Condition()
    initialised = False
    handle: PRThread | None = None
    observed: list[int | None] = [None]

    def m_main() -> None:
        stream.write("mMain: begin\n")
        if fixed:
            with cond:
                while not initialised:
                    cond.wait()
        if handle is None:
            stream.write("mMain: thread handle not yet initialised\n")
            return
        observed[0] = handle.state
        stream.write(f"mMain: state is {handle.state}\n")

    stream.write("ordering: begin\n")
    handle = create_thread(m_main, delay)
    if fixed:
        with cond:
            initialised = True
            cond.notify()
    wait_thread(handle)
    stream.write("ordering: end\n")
    return observed[0]


_DEMOS = ("atomicity", "atomicity-fixed", "deadlock", "ordering", "ordering-fixed")


def main(argv: list[str] | None = None) -> int:
    """Command line: run one of the concurrency-bug demos."""
    parser = argparse.ArgumentParser(
        prog="threadbugs", description="Concurrency bug demos."
    )
    parser.add_argument("demo", choices=_DEMOS)
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="deadlock demo: give up on the second lock after this many seconds",
    )
    args = parser.parse_args(argv)

    if args.demo == "atomicity":
        atomicity(fixed=False)
    elif args.demo == "atomicity-fixed":
        atomicity(fixed=True)
    elif args.demo == "deadlock":
        deadlock(timeout=args.timeout)
    elif args.demo == "ordering":
        ordering(fixed=False)
    else:
        ordering(fixed=True)
    return 0