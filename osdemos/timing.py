"""Wall-clock helpers shared by the demos."""

import time

__all__ = ["get_time", "spin"]


def get_time() -> float:
    """Return the current wall-clock time in seconds as a float."""
    return time.time()


def spin(howlong: float) -> None:
    """Busy-wait for ``howlong`` seconds, burning CPU instead of sleeping."""
    start = get_time()
    while get_time() - start < howlong:
        pass