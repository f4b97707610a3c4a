"""
ProphageSignal v0.1.0

Run-length filtering: keep only runs of consecutive 1s that are at least
``min_length`` long.

A run belongs to the partition holding its first position. The owner scans
past its partition end to finish a crossing run, and a worker skips a run
already in progress at its partition start, so split runs are measured whole.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from itertools import chain
from typing import Iterable, List, Tuple

import numpy as np

from .base import LABEL_DTYPE, as_signal, check_positive, empty_labels
from ..utils.concurrency import Partition, run_partitioned

logger = logging.getLogger(__name__)

Run = Tuple[int, int]


def _owned_runs(x: np.ndarray, part: Partition) -> List[Run]:
    """Half-open ``(start, end)`` runs whose first 1 lies inside ``part``."""
    start, end = part.start, part.end
    n = len(x)
    if start >= end:
        return []

    stop = end
    if end < n and x[end - 1] == 1:
        zeros = np.flatnonzero(x[end:] == 0)
        stop = end + int(zeros[0]) if zeros.size else n

    padded = np.zeros(stop - start + 2, dtype=LABEL_DTYPE)
    padded[1:-1] = x[start:stop]
    edges = np.diff(padded)
    run_starts = np.flatnonzero(edges == 1) + start
    run_ends = np.flatnonzero(edges == -1) + start

    if start > 0 and x[start - 1] == 1 and x[start] == 1:
        run_starts, run_ends = run_starts[1:], run_ends[1:]

    return list(zip(run_starts.tolist(), run_ends.tolist()))


def find_runs(signal: Iterable[int], num_threads: int = 1) -> List[Run]:
    """
    All maximal runs of 1s as half-open ``(start, end)`` intervals, in order.

    Example:
        >>> find_runs([0, 1, 1, 0, 1])
        [(1, 3), (4, 5)]
    """
    x = as_signal(signal)
    per_partition = run_partitioned(lambda part: _owned_runs(x, part), len(x),
                                    num_threads, name="rle")
    return list(chain.from_iterable(per_partition))


def run_length_encoding(signal: Iterable[int], min_length: int,
                        num_threads: int = 1) -> np.ndarray:
    """
    Suppress every run of 1s shorter than ``min_length``.

    Args:
        signal: Binary labels (0/1)
        min_length: Minimum run length to keep (>= 1)
        num_threads: Number of worker threads

    Returns:
        int8 array with the same length as ``signal``
    """
    x = as_signal(signal)
    min_length = check_positive("min_length", min_length)

    def worker(part: Partition) -> List[Run]:
        return [(s, e) for s, e in _owned_runs(x, part) if e - s >= min_length]

    kept = list(chain.from_iterable(run_partitioned(worker, len(x), num_threads, name="rle")))

    output = empty_labels(len(x))
    for start, end in kept:
        output[start:end] = 1

    logger.debug(f"RLE min_length={min_length}: kept {len(kept):,} run(s)")
    return output
