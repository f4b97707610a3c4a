"""
ProphageSignal v0.1.0

Moving-window average thresholding.

For every position ``i >= window_size - 1`` the mean of the ``window_size``
samples ending at ``i`` is compared against ``threshold`` and the result is
written at the window centre ``i - window_size // 2``. The trailing
``window_size // 2`` positions are never assigned and stay 0.

Each worker reads up to ``window_size - 1`` samples before its partition so
its running sums match a single sequential pass exactly.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import Iterable

import numpy as np

from .base import as_signal, check_finite, check_positive, empty_labels
from ..utils.concurrency import Partition, run_partitioned

logger = logging.getLogger(__name__)


def moving_window_average(signal: Iterable[int], window_size: int, threshold: float,
                          num_threads: int = 1) -> np.ndarray:
    """
    Smooth a binary signal with a thresholded moving-window average.

    Args:
        signal: Binary labels (0/1)
        window_size: Number of samples per window (>= 1)
        threshold: Minimum window mean for a 1
        num_threads: Number of worker threads

    Returns:
        int8 array with the same length as ``signal``

    Example:
        >>> moving_window_average([1, 1, 1, 1, 1], 3, 0.5).tolist()
        [0, 1, 1, 1, 0]
    """
    x = as_signal(signal)
    window_size = check_positive("window_size", window_size)
    threshold = check_finite("threshold", threshold)

    n = len(x)
    half = window_size // 2
    output = empty_labels(n)

    def worker(part: Partition) -> int:
        first = max(part.start, window_size - 1)
        if first >= part.end:
            return 0

        segment = x[first - window_size + 1:part.end]
        csum = np.concatenate(([0], np.cumsum(segment, dtype=np.int64)))
        sums = csum[window_size:] - csum[:-window_size]
        # centre indices of disjoint window ends never collide across workers
        output[first - half:part.end - half] = (sums / window_size) >= threshold
        return part.end - first

    assigned = sum(run_partitioned(worker, n, num_threads, name="mwa"))
    logger.debug(
        f"MWA window={window_size} threshold={threshold}: "
        f"{assigned:,} windows, {int(output.sum()):,} positive"
    )
    return output
