"""
ProphageSignal v0.1.0

Centered median filter over a zero-padded binary signal.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import Iterable

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .base import LABEL_DTYPE, as_signal, check_positive, empty_labels
from ..utils.concurrency import Partition, run_partitioned

logger = logging.getLogger(__name__)


def median_filter(signal: Iterable[int], window_size: int, num_threads: int = 1) -> np.ndarray:
    """
    Replace each position by the median of its centered window.

    The window for position ``i`` covers ``i - window_size // 2`` through
    ``i - window_size // 2 + window_size - 1``; out-of-range samples count as 0.
    The output is element ``window_size // 2`` of the sorted window, so even
    window sizes take the upper median rather than an average.

    Args:
        signal: Binary labels (0/1)
        window_size: Samples per window (>= 1)
        num_threads: Number of worker threads

    Returns:
        int8 array with the same length as ``signal``
    """
    x = as_signal(signal)
    window_size = check_positive("window_size", window_size)

    n = len(x)
    half = window_size // 2
    padded = np.zeros(n + window_size - 1, dtype=LABEL_DTYPE)
    padded[half:half + n] = x
    output = empty_labels(n)

    def worker(part: Partition) -> None:
        if part.size == 0:
            return
        windows = sliding_window_view(padded[part.start:part.end + window_size - 1], window_size)
        output[part.start:part.end] = np.partition(windows, half, axis=1)[:, half]

    run_partitioned(worker, n, num_threads, name="median")
    logger.debug(f"Median window={window_size}: {int(output.sum()):,} positive of {n:,}")
    return output
