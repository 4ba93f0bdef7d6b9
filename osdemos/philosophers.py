"""Dining philosophers with semaphore forks, with and without deadlock."""

from __future__ import annotations

import re
import sys
import threading
from typing import TextIO

__all__ = ["NUM_PHILOSOPHERS", "left", "right", "DiningTable", "run", "main"]

NUM_PHILOSOPHERS = 5


def left(p: int) -> int:
    """Index of the fork on philosopher ``p``'s left."""
    return p % NUM_PHILOSOPHERS


def right(p: int) -> int:
    """Index of the fork on philosopher ``p``'s right."""
    return (p + 1) % NUM_PHILOSOPHERS


class DiningTable:
    """Five forks, each a binary semaphore.

    With ``avoid_deadlock`` the last philosopher picks up the right fork
    first, which breaks the circular wait.
    """

    def __init__(
        self,
        avoid_deadlock: bool = False,
        verbose: bool = False,
        out: TextIO | None = None,
    ) -> None:
        self.avoid_deadlock = avoid_deadlock
        self.verbose = verbose
        self._out = sys.stdout if out is None else out
        self._forks = [threading.Semaphore(1) for _ in range(NUM_PHILOSOPHERS)]
        self._print_lock = threading.Semaphore(1)

    def _say(self, p: int, text: str) -> None:
        if not self.verbose:
            return
        with self._print_lock:
            self._out.write(" " * (p * 10) + text + "\n")

    def _pick_up(self, p: int, fork: int) -> None:
        if self.avoid_deadlock:
            label = f"4 try {fork}" if p == 4 else f"try {fork}"
        else:
            label = f"{p}: try {fork}"
        self._say(p, label)
        self._forks[fork].acquire()

    @staticmethod
    def _check(p: int) -> None:
        if not 0 <= p < NUM_PHILOSOPHERS:
            raise ValueError(f"no philosopher {p}")

    def get_forks(self, p: int) -> None:
        """Acquire both forks of philosopher ``p``."""
        self._check(p)
        first, second = left(p), right(p)
        if self.avoid_deadlock and p == 4:
            first, second = second, first
        self._pick_up(p, first)
        self._pick_up(p, second)

    def put_forks(self, p: int) -> None:
        """Release both forks of philosopher ``p``."""
        self._check(p)
        self._forks[left(p)].release()
        self._forks[right(p)].release()

    def _dine(self, p: int, num_loops: int, meals: list[int]) -> None:
        self._say(p, f"{p}: start")
        for _ in range(num_loops):
            self._say(p, f"{p}: think")
            self.get_forks(p)
            self._say(p, f"{p}: eat")
            meals[p] += 1
            self.put_forks(p)
            self._say(p, f"{p}: done")


def run(
    num_loops: int,
    avoid_deadlock: bool = True,
    verbose: bool = False,
    out: TextIO | None = None,
) -> list[int]:
    """Seat five philosophers for ``num_loops`` meals each; return meals eaten."""
    stream = sys.stdout if out is None else out
    stream.write("dining: started\n")
    table = DiningTable(avoid_deadlock=avoid_deadlock, verbose=verbose, out=stream)
    meals = [0] * NUM_PHILOSOPHERS
    threads = [
        threading.Thread(target=table._dine, args=(p, num_loops, meals))
        for p in range(NUM_PHILOSOPHERS)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stream.write("dining: finished\n")
    return meals


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: list[str] | None = None) -> int:
    """Command line: philosophers [--no-deadlock] [--print] <num_loops>."""
    args = sys.argv[1:] if argv is None else list(argv)
    avoid = "--no-deadlock" in args
    verbose = "--print" in args
    rest = [arg for arg in args if arg not in ("--no-deadlock", "--print")]
    if len(rest) != 1:
        name = "dining_philosophers" if avoid or verbose else "dining_philosophers_deadlock"
        sys.stderr.write(f"usage: {name} <num_loops>\n")
        raise SystemExit(1)
    run(_atoi(rest[0]), avoid_deadlock=avoid, verbose=verbose)
    return 0