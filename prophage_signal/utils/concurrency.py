#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Static range partitioning and the small set of thread-safe primitives the
denoising algorithms share between workers.

Every algorithm call splits ``[0, N)`` into ``T`` contiguous ranges, runs one
worker per range on a thread pool created for that call, and joins all workers
before returning. There is no work stealing and no state survives the call.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, NamedTuple, TypeVar

from ..errors import InvalidParameterError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Partition(NamedTuple):
    """Half-open index range ``[start, end)`` owned by exactly one worker."""
    index: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def partition_range(n: int, num_threads: int) -> List[Partition]:
    """
    Split ``[0, n)`` into ``num_threads`` contiguous near-equal ranges.

    Every range holds ``n // num_threads`` elements except the last, which
    absorbs the remainder. When ``n < num_threads`` the leading ranges are
    empty and the last one covers everything.

    Args:
        n: Number of elements
        num_threads: Number of workers (must already be >= 1)

    Returns:
        List of Partition tuples ordered by start index

    Example:
        >>> [(p.start, p.end) for p in partition_range(10, 3)]
        [(0, 3), (3, 6), (6, 10)]
    """
    if num_threads < 1:
        raise InvalidParameterError(f"Thread count must be positive, got {num_threads}")

    chunk_size = n // num_threads
    partitions = []
    for i in range(num_threads):
        start = i * chunk_size
        end = n if i == num_threads - 1 else (i + 1) * chunk_size
        partitions.append(Partition(i, start, end))
    return partitions


def run_partitioned(worker: Callable[[Partition], T], n: int, num_threads: int,
                    name: str = "worker") -> List[T]:
    """
    Run ``worker`` once per partition of ``[0, n)`` on a per-call thread pool.

    Results are returned in partition order. An exception raised by any worker
    propagates to the caller after the pool has shut down.
    """
    partitions = partition_range(n, num_threads)
    logger.debug(
        f"{name}: {n:,} positions across {num_threads} partition(s) "
        f"of ~{n // num_threads:,}"
    )

    if num_threads == 1:
        return [worker(partitions[0])]

    with ThreadPoolExecutor(max_workers=num_threads,
                            thread_name_prefix=name) as executor:
        futures = [executor.submit(worker, partition) for partition in partitions]
        return [future.result() for future in futures]


class AtomicCounter:
    """Monotonic counter with fetch-and-increment semantics."""

    def __init__(self, initial: int = 1):
        self._value = initial
        self._lock = threading.Lock()

    def fetch_add(self, delta: int = 1) -> int:
        """Return the current value and advance it by ``delta``."""
        with self._lock:
            value = self._value
            self._value += delta
            return value

    @property
    def value(self) -> int:
        return self._value


class VisitedFlags:
    """
    Per-position visitation flags shared by all workers of one call.

    ``test_and_set`` is atomic; ``is_set`` is a plain read that may be stale,
    so callers must tolerate pushing a position that another worker visits
    first. Visiting is idempotent.
    """

    def __init__(self, size: int):
        self._flags = bytearray(size)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._flags)

    def is_set(self, index: int) -> bool:
        return self._flags[index] != 0

    def test_and_set(self, index: int) -> bool:
        """Mark ``index`` visited and return whether it was already visited."""
        with self._lock:
            was_set = self._flags[index] != 0
            self._flags[index] = 1
            return was_set

    def count(self) -> int:
        return sum(self._flags)


__all__ = [
    "Partition",
    "partition_range",
    "run_partitioned",
    "AtomicCounter",
    "VisitedFlags",
]
