import time
from typing import Callable, Iterable, Iterator, List, TypeVar

T = TypeVar("T")


class ScanTimeout(Exception):
    """A bounded scan ran past its wall-clock budget."""


class Deadline:
    """Wall-clock budget for a scan, checked before each batch, never inside one."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self.clock = clock
        self.started_at = clock()

    @property
    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def expired(self) -> bool:
        return self.elapsed >= self.seconds

    def check(self, what: str = "scan"):
        if self.expired():
            raise ScanTimeout(f"{what} exceeded {self.seconds}s")


def chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """Yield lists of at most ``size`` items."""
    if size < 1:
        raise ValueError("Batch size must be positive")
    chunk: List[T] = []
    for item in items:
        chunk.append(item)
        if len(chunk) == size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk
