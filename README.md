# osdemos

A collection of small, runnable programs that show how an operating system
behaves: creating processes, running threads, racing on shared data, and
fixing those races with locks, condition variables and semaphores. It also
covers lottery scheduling, a persistent stack kept in a memory-mapped file,
and a tiny UDP client and server.

Each demonstration is both a command you can run and a set of functions and
classes you can import and experiment with.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

| Command | What it shows |
| --- | --- |
| `osdemos-intro` | `cpu <string>`, `mem <value>`, `io [path]`, `threads <loops>` (a racy counter), `va` (address layout) |
| `osdemos-processes` | `hello`, `wait`, `exec [FILE]`, `redirect [FILE [OUTPUT]]`: fork, wait, exec and output redirection |
| `osdemos-threads` | `create`, `simple-args`, `return-args`, `t0`, `t1 <loopcount>`, `cas`, `binary [loops]`, `join`, `throttle <num_threads> <sem_value>` |
| `osdemos-threadbugs` | `atomicity`, `atomicity-fixed`, `deadlock [--timeout SECONDS]`, `ordering`, `ordering-fixed` |
| `osdemos-zemaphore` | a semaphore built from a lock and a condition variable, used to wait for a child thread (`--delay SECONDS`) |
| `osdemos-pc` | `[--cv\|--single-cv\|--semaphore] <buffersize> <loops> <consumers>`: producer/consumer over a bounded buffer |
| `osdemos-rwlock` | `<readloops> <writeloops>`: a reader/writer lock built from semaphores |
| `osdemos-dining` | `[--no-deadlock] [--print] <num_loops>`: the dining philosophers |
| `osdemos-lottery` | `<seed> <loops>`: lottery scheduling over three jobs |
| `osdemos-pstack` | `[-f FILE] (pop \| <int>)...`: a stack that persists in a memory-mapped file (default `ps.img`) |
| `osdemos-udp-server`, `osdemos-udp-client` | a request and reply over UDP |

For example, to draw five lottery winners with seed 1:

```
osdemos-lottery 1 5
```

and to run a reader doing 10 reads alongside a writer doing 10 writes:

```
osdemos-rwlock 10 10
```

The persistent stack needs an existing backing file whose size is at least
the header size and a multiple of the int size, for instance one made with
`truncate -s 4096 ps.img`.

## Using the library

The building blocks can be used directly:

```python
from osdemos.timing import get_time, spin
from osdemos.lottery import Lottery
from osdemos.rwlock import RWLock

start = get_time()
spin(1)                      # busy-wait for about a second
print(get_time() - start)

lottery = Lottery()
lottery.insert(50)
lottery.insert(100)
lottery.insert(25)
print(lottery.format_list())
print(lottery.tickets())
print(lottery.winner(60))

lock = RWLock()
lock.acquire_readlock()
lock.release_readlock()
lock.acquire_writelock()
lock.release_writelock()
```

Other modules offer `Zemaphore`, `BoundedBuffer`, `ConditionBuffer`,
`SemaphoreBuffer`, `DiningTable`, `PersistentStack`, `Cell` and `PRThread`,
along with the functions that run each demonstration and print what happens.

## What is not included

There is no demonstration of joining a child thread with a bare condition
variable and state flag, by spinning on a flag, or of what goes wrong when
the flag or the lock is left out. Waiting for a child thread is shown only
through semaphores (`osdemos-zemaphore` and `osdemos-threads join`) and the
ordering fix in `osdemos-threadbugs ordering-fixed`.

## Platform

The process demonstrations rely on `fork` and therefore need a POSIX system.
Everything else runs wherever Python's threading and socket modules do.