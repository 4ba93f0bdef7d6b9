"""A stack of ints that lives in a memory-mapped file and so persists between runs."""

from __future__ import annotations

import mmap
import os
import re
import struct
import sys
from types import TracebackType
from typing import Iterable, TextIO

__all__ = ["PersistentStack", "run", "main"]

_HEADER = struct.Struct("@N")
_ITEM = struct.Struct("@i")

DEFAULT_PATH = "ps.img"


class PersistentStack:
    """Stack backed by an existing file: a size_t count, then native ints.

    The file must already exist, be at least as large as the header and have
    a size that is a multiple of the int size.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._file = open(path, "r+b")
        self._map: mmap.mmap | None = None
        try:
            size = os.fstat(self._file.fileno()).st_size
            if size < _HEADER.size or size % _ITEM.size:
                raise ValueError(
                    f"backing file size {size} must be at least {_HEADER.size} "
                    f"and a multiple of {_ITEM.size}"
                )
            self._map = mmap.mmap(self._file.fileno(), size)
            self.capacity = (size - _HEADER.size) // _ITEM.size
            if len(self) > self.capacity:
                raise ValueError("backing file holds a corrupt item count")
        except BaseException:
            self.close()
            raise

    def __len__(self) -> int:
        return _HEADER.unpack_from(self._mapping(), 0)[0]

    def __enter__(self) -> PersistentStack:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _mapping(self) -> mmap.mmap:
        if self._map is None:
            raise ValueError("stack is closed")
        return self._map

    def _offset(self, index: int) -> int:
        return _HEADER.size + index * _ITEM.size

    def push(self, value: int) -> None:
        """Push ``value``; raise OverflowError when the file is full."""
        mapping = self._mapping()
        count = len(self)
        if count >= self.capacity:
            raise OverflowError("stack is full")
        try:
            _ITEM.pack_into(mapping, self._offset(count), value)
        except struct.error as exc:
            raise ValueError(f"{value} does not fit in a stack slot") from exc
        _HEADER.pack_into(mapping, 0, count + 1)

    def pop(self) -> int:
        """Remove and return the top value; raise IndexError when empty."""
        mapping = self._mapping()
        count = len(self)
        if count == 0:
            raise IndexError("pop from empty stack")
        count -= 1
        _HEADER.pack_into(mapping, 0, count)
        return _ITEM.unpack_from(mapping, self._offset(count))[0]

    def close(self) -> None:
        """Flush and release the mapping and the file."""
        if self._map is not None:
            self._map.flush()
            self._map.close()
            self._map = None
        if not self._file.closed:
            self._file.close()


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def run(
    path: str | os.PathLike[str],
    commands: Iterable[str],
    out: TextIO | None = None,
) -> list[int]:
    """Apply ``pop`` and push commands in order; print and return popped values.

    Pops on an empty stack and pushes on a full one are skipped.
    """
    stream = sys.stdout if out is None else out
    popped: list[int] = []
    with PersistentStack(path) as stack:
        for command in commands:
            if command == "pop":
                try:
                    value = stack.pop()
                except IndexError:
                    continue
                stream.write(f"{value}\n")
                popped.append(value)
            else:
                try:
                    stack.push(_atoi(command))
                except OverflowError:
                    continue
    return popped


def main(argv: list[str] | None = None) -> int:
    """Command line: pstack [-f FILE] (pop | <int>)..."""
    args = sys.argv[1:] if argv is None else list(argv)
    path = DEFAULT_PATH
    if args[:1] in (["-f"], ["--file"]):
        if len(args) < 2:
            sys.stderr.write("usage: pstack [-f FILE] (pop | <int>)...\n")
            raise SystemExit(1)
        path = args[1]
        args = args[2:]
    try:
        run(path, args)
    except (OSError, ValueError) as exc:
        sys.stderr.write(f"pstack: {exc}\n")
        raise SystemExit(1) from exc
    return 0