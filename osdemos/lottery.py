"""Lottery scheduling: pick a winning job in proportion to its tickets."""

from __future__ import annotations

import re
import sys
from collections import deque
from typing import Iterator, TextIO

__all__ = ["GlibcRandom", "Lottery", "run", "main"]

_MODULUS = 2147483647
_MASK32 = 0xFFFFFFFF


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


class GlibcRandom:
    """The additive feedback generator behind the C library's random()."""

    def __init__(self, seed: int = 1) -> None:
        seed &= _MASK32
        if seed == 0:
            seed = 1
        word = seed - (1 << 32) if seed >= 1 << 31 else seed
        state = [word]
        for _ in range(30):
            hi = _trunc_div(word, 127773)
            lo = word - hi * 127773
            word = 16807 * lo - 2836 * hi
            if word < 0:
                word += _MODULUS
            state.append(word)
        state.extend(state[:3])
        self._window = deque((value & _MASK32 for value in state[3:]), maxlen=31)
        for _ in range(310):
            self._advance()

    def _advance(self) -> int:
        value = (self._window[0] + self._window[-3]) & _MASK32
        self._window.append(value)
        return value

    def random(self) -> int:
        """Return the next value in [0, 2**31)."""
        return self._advance() >> 1


class Lottery:
    """Jobs held newest first, each with a number of tickets."""

    def __init__(self) -> None:
        self._jobs: list[int] = []
        self._total = 0

    def __iter__(self) -> Iterator[int]:
        return iter(self._jobs)

    def insert(self, tickets: int) -> None:
        """Add a job at the front of the list."""
        self._jobs.insert(0, tickets)
        self._total += tickets

    def tickets(self) -> int:
        """Total tickets over all jobs."""
        return self._total

    def winner(self, number: int) -> int:
        """Return the tickets of the job whose running sum first exceeds ``number``."""
        counter = 0
        for job in self._jobs:
            counter += job
            if counter > number:
                return job
        raise ValueError(f"winning number {number} is out of range")

    def format_list(self) -> str:
        """Render the list the way the scheduler prints it."""
        return "List: " + "".join(f"[{job}] " for job in self._jobs)


def run(seed: int, loops: int, out: TextIO | None = None) -> list[tuple[int, int]]:
    """Hold ``loops`` lotteries over three jobs; return (winner, tickets) pairs."""
    stream = sys.stdout if out is None else out
    rng = GlibcRandom(seed)
    lottery = Lottery()
    for tickets in (50, 100, 25):
        lottery.insert(tickets)

    stream.write(lottery.format_list() + "\n")
    results = []
    for _ in range(loops):
        number = rng.random() % lottery.tickets()
        job = lottery.winner(number)
        stream.write(lottery.format_list() + "\n")
        stream.write(f"winner: {number} {job}\n\n")
        results.append((number, job))
    return results


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: list[str] | None = None) -> int:
    """Command line: lottery <seed> <loops>."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        sys.stderr.write("usage: lottery <seed> <loops>\n")
        raise SystemExit(1)
    run(_atoi(args[0]), _atoi(args[1]))
    return 0