"""Producer/consumer over a bounded ring buffer, with condition variables or semaphores."""

from __future__ import annotations

import re
import sys
import threading
from typing import Callable, TextIO

__all__ = [
    "END_OF_PRODUCTION",
    "MAX_CONSUMERS",
    "BoundedBuffer",
    "ConditionBuffer",
    "SemaphoreBuffer",
    "run_condition",
    "run_semaphore",
    "main",
]

END_OF_PRODUCTION = -1
MAX_CONSUMERS = 10


class BoundedBuffer:
    """Fixed-size FIFO ring of integers; not thread-safe on its own."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"buffer size must be positive, got {size}")
        self._slots = [0] * size
        self._fill = 0
        self._use = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def size(self) -> int:
        """Number of slots."""
        return len(self._slots)

    @property
    def full(self) -> bool:
        """True when every slot holds a value."""
        return self._count == len(self._slots)

    @property
    def empty(self) -> bool:
        """True when no slot holds a value."""
        return self._count == 0

    def fill(self, value: int) -> None:
        """Store ``value`` in the next free slot."""
        if self.full:
            raise OverflowError("buffer is full")
        self._slots[self._fill] = value
        self._fill = (self._fill + 1) % len(self._slots)
        self._count += 1

    def get(self) -> int:
        """Remove and return the oldest value."""
        if self.empty:
            raise IndexError("buffer is empty")
        value = self._slots[self._use]
        self._use = (self._use + 1) % len(self._slots)
        self._count -= 1
        return value


class ConditionBuffer:
    """Bounded buffer guarded by a lock and condition variables.

    With ``single_cv`` producers and consumers share one condition, which can
    leave every thread asleep when there is more than one consumer.
    """

    def __init__(self, size: int, single_cv: bool = False) -> None:
        self._buffer = BoundedBuffer(size)
        lock = threading.Lock()
        self._fill_cv = threading.Condition(lock)
        self._empty_cv = self._fill_cv if single_cv else threading.Condition(lock)

    def put(self, value: int) -> None:
        """Wait for a free slot, then store ``value``."""
        with self._empty_cv:
            while self._buffer.full:
                self._empty_cv.wait()
            self._buffer.fill(value)
            self._fill_cv.notify()

    def take(self) -> int:
        """Wait for a value, then remove and return it."""
        with self._fill_cv:
            while self._buffer.empty:
                self._fill_cv.wait()
            value = self._buffer.get()
            self._empty_cv.notify()
            return value


class SemaphoreBuffer:
    """Bounded buffer guarded by counting semaphores and a mutex."""

    def __init__(self, size: int) -> None:
        self._buffer = BoundedBuffer(size)
        self._empty = threading.Semaphore(size)
        self._full = threading.Semaphore(0)
        self._mutex = threading.Lock()

    def put(self, value: int) -> None:
        """Wait for a free slot, then store ``value``."""
        self._empty.acquire()
        with self._mutex:
            self._buffer.fill(value)
        self._full.release()

    def take(self) -> int:
        """Wait for a value, then remove and return it."""
        self._full.acquire()
        with self._mutex:
            value = self._buffer.get()
        self._empty.release()
        return value


def _run(
    put: Callable[[int], None],
    take: Callable[[], int],
    loops: int,
    consumers: int,
    report: Callable[[int, int], None] | None,
) -> list[list[int]]:
    received: list[list[int]] = [[] for _ in range(consumers)]

    def producer() -> None:
        for value in range(loops):
            put(value)
        for _ in range(consumers):
            put(END_OF_PRODUCTION)

    def consumer(cid: int) -> None:
        while True:
            value = take()
            if report is not None:
                report(cid, value)
            if value == END_OF_PRODUCTION:
                return
            received[cid].append(value)

    threads = [threading.Thread(target=producer)]
    threads += [threading.Thread(target=consumer, args=(cid,)) for cid in range(consumers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return received


def run_condition(
    buffer_size: int, loops: int, consumers: int, single_cv: bool = False
) -> list[list[int]]:
    """One producer and ``consumers`` consumers over a :class:`ConditionBuffer`.

    Returns the values each consumer received, end markers left out.
    """
    buffer = ConditionBuffer(buffer_size, single_cv=single_cv)
    return _run(buffer.put, buffer.take, loops, consumers, None)


def run_semaphore(
    buffer_size: int, loops: int, consumers: int, out: TextIO | None = None
) -> list[list[int]]:
    """One producer and ``consumers`` consumers over a :class:`SemaphoreBuffer`.

    Each consumer prints its id and every value it takes, end marker included.
    Returns the values each consumer received, end markers left out.
    """
    if consumers > MAX_CONSUMERS:
        raise ValueError(f"at most {MAX_CONSUMERS} consumers, got {consumers}")
    stream = sys.stdout if out is None else out
    buffer = SemaphoreBuffer(buffer_size)

    def report(cid: int, value: int) -> None:
        stream.write(f"{cid} {value}\n")

    return _run(buffer.put, buffer.take, loops, consumers, report)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


_MODES = ("--cv", "--single-cv", "--semaphore")


def main(argv: list[str] | None = None) -> int:
    """Command line: boundedbuffer [--cv|--single-cv|--semaphore] <buffersize> <loops> <consumers>."""
    args = sys.argv[1:] if argv is None else list(argv)
    mode = "--semaphore"
    if args and args[0] in _MODES:
        mode = args.pop(0)
    if len(args) != 3:
        sys.stderr.write("usage: boundedbuffer [--cv|--single-cv|--semaphore] "
                         "<buffersize> <loops> <consumers>\n")
        raise SystemExit(1)
    size, loops, consumers = (_atoi(arg) for arg in args)
    try:
        if mode == "--semaphore":
            run_semaphore(size, loops, consumers)
        else:
            run_condition(size, loops, consumers, single_cv=mode == "--single-cv")
    except ValueError as exc:
        sys.stderr.write(f"boundedbuffer: {exc}\n")
        raise SystemExit(1) from exc
    return 0