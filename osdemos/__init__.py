"""Runnable demonstrations of processes, threads, synchronisation, scheduling, files and sockets."""

__version__ = "0.1.0"

__all__ = [
    "boundedbuffer",
    "intro",
    "lottery",
    "philosophers",
    "processes",
    "pstack",
    "rwlock",
    "threadbasics",
    "threadbugs",
    "timing",
    "udp",
    "zemaphore",
]