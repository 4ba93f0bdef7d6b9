"""A counting semaphore built from a lock and a condition variable."""

from __future__ import annotations

import argparse
import sys
import threading
import time

__all__ = ["Zemaphore", "main"]


class Zemaphore:
    """Counting semaphore: ``wait`` blocks while the value is not positive."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._cond = threading.Condition()

    @property
    def value(self) -> int:
        """Current count."""
        with self._cond:
            return self._value

    def wait(self) -> None:
        """Block until the value is positive, then decrement it."""
        with self._cond:
            while self._value <= 0:
                self._cond.wait()
            self._value -= 1

    def post(self) -> None:
        """Increment the value and wake one waiter."""
        with self._cond:
            self._value += 1
            self._cond.notify()


def main(argv: list[str] | None = None) -> int:
    """Parent waits on a semaphore that a child thread posts after a delay."""
    parser = argparse.ArgumentParser(
        prog="zemaphore", description="Join a thread with a semaphore."
    )
    parser.add_argument(
        "--delay", type=float, default=4.0, help="seconds the child sleeps"
    )
    args = parser.parse_args(argv)

    sem = Zemaphore(0)

    def child() -> None:
        time.sleep(args.delay)
        sys.stdout.write("child\n")
        sem.post()

    sys.stdout.write("parent: begin\n")
    thread = threading.Thread(target=child)
    thread.start()
    sem.wait()
    sys.stdout.write("parent: end\n")
    thread.join()
    return 0