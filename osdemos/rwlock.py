"""Reader-writer lock built from two semaphores."""

from __future__ import annotations

import re
import sys
import threading
from typing import TextIO

__all__ = ["RWLock", "run", "main"]


class RWLock:
    """Many readers or one writer; readers may starve writers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._writelock = threading.Semaphore(1)
        self._readers = 0
        self._writing = False

    def acquire_readlock(self) -> None:
        """Enter as a reader; the first reader locks out writers."""
        with self._lock:
            self._readers += 1
            if self._readers == 1:
                self._writelock.acquire()

    def release_readlock(self) -> None:
        """Leave as a reader; the last reader lets writers in."""
        with self._lock:
            if self._readers == 0:
                raise RuntimeError("read lock released without being held")
            self._readers -= 1
            if self._readers == 0:
                self._writelock.release()

    def acquire_writelock(self) -> None:
        """Enter as the sole writer."""
        self._writelock.acquire()
        self._writing = True

    def release_writelock(self) -> None:
        """Leave as the writer."""
        if not self._writing:
            raise RuntimeError("write lock released without being held")
        self._writing = False
        self._writelock.release()

    def read_locked(self) -> bool:
        """True while at least one reader holds the lock."""
        with self._lock:
            return self._readers > 0

    def write_locked(self) -> bool:
        """True while a writer holds the lock."""
        return self._writing


def run(read_loops: int, write_loops: int, out: TextIO | None = None) -> int:
    """Run one reader and one writer over a shared counter; return its final value."""
    stream = sys.stdout if out is None else out
    lock = RWLock()
    counter = 0

    def reader() -> None:
        local = 0
        for _ in range(read_loops):
            lock.acquire_readlock()
            local = counter
            lock.release_readlock()
            stream.write(f"read {local}\n")
        stream.write(f"read done: {local}\n")

    def writer() -> None:
        nonlocal counter
        for _ in range(write_loops):
            lock.acquire_writelock()
            counter += 1
            lock.release_writelock()
        stream.write("write done\n")

    threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write("all done\n")
    return counter


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: list[str] | None = None) -> int:
    """Command line: rwlock <readloops> <writeloops>."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        sys.stderr.write("usage: rwlock readloops writeloops\n")
        raise SystemExit(1)
    run(_atoi(args[0]), _atoi(args[1]))
    return 0