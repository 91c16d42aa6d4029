"""
Timing Utilities.

Wall-clock timing for code blocks with time.perf_counter(). The
synthesis handler times the remote call and the whole routine with
separate timers and reports both in whole milliseconds.

Example Usage:
    with timeit("remote_synthesize") as t:
        audio = backend.synthesize(request)
    print(t.timing.ms)   # e.g. 412
"""
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional


@dataclass
class Timing:
    """
    Timing measurement result.

    Attributes:
        name: What was timed (e.g., "remote_synthesize").
        seconds: Duration in seconds.
        meta: Optional metadata dictionary.
    """
    name: str
    seconds: float
    meta: Optional[Dict[str, Any]] = None

    @property
    def ms(self) -> int:
        """Duration rounded to whole milliseconds."""
        return int(round(self.seconds * 1000))


class timeit:
    """
    Context manager for timing code blocks.

    The timing is recorded even when the block raises, so failed remote
    calls still report how long they took.

    Example:
        with timeit("list_voices") as t:
            voices = fetch()
        print(f"took {t.timing.seconds:.3f}s")
    """

    def __init__(self, name: str, meta: Optional[Dict[str, Any]] = None):
        self.name = name
        self.meta = meta
        self._t0: float | None = None
        self.timing: Timing | None = None

    def __enter__(self) -> "timeit":
        self._t0 = perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        t1 = perf_counter()
        assert self._t0 is not None
        self.timing = Timing(name=self.name, seconds=(t1 - self._t0), meta=self.meta)

    def elapsed(self) -> float:
        """Seconds since entry, readable while the block is still running."""
        assert self._t0 is not None
        return perf_counter() - self._t0
