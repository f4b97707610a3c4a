#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

One-dimensional density clustering (a DBSCAN analogue over positions).

A position holding a 1 is a *core point* when its closed neighbourhood
``[i - eps, i + eps]`` (clamped to the signal) holds at least ``min_pts`` 1s.
Starting from each unvisited core point a breadth-first expansion visits every
neighbour within ``eps``; each visited 1 joins the cluster and expands further.
Only membership is reported: clustered 1s stay 1, everything else becomes 0.

Expansion is not confined to the worker's partition. Visitation is coordinated
through shared ``VisitedFlags``; each worker collects its cluster members
locally and the coordinator writes them once all workers have joined. The
outcome is the union of all gap-``eps`` chains of 1s that contain a core
point, which does not depend on the thread count or on scheduling.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from collections import deque
from typing import Iterable, List

import numpy as np

from .base import as_signal, check_non_negative, check_positive, empty_labels
from ..utils.concurrency import Partition, VisitedFlags, run_partitioned

logger = logging.getLogger(__name__)


def neighbourhood_counts(x: np.ndarray, start: int, end: int, eps: int) -> np.ndarray:
    """Number of 1s within ``[i - eps, i + eps]`` for every ``i`` in ``[start, end)``."""
    n = len(x)
    lo = max(0, start - eps)
    hi = min(n, end + eps)
    csum = np.concatenate(([0], np.cumsum(x[lo:hi], dtype=np.int64)))

    idx = np.arange(start, end)
    left = np.maximum(idx - eps, 0) - lo
    right = np.minimum(idx + eps + 1, n) - lo
    return csum[right] - csum[left]


def density_clustering(signal: Iterable[int], eps: int, min_pts: int,
                       num_threads: int = 1) -> np.ndarray:
    """
    Keep the 1s that are density-reachable from a core point.

    Args:
        signal: Binary labels (0/1)
        eps: Neighbourhood radius in positions (>= 0, absolute index distance)
        min_pts: Minimum number of 1s in a neighbourhood for a core point (>= 1)
        num_threads: Number of worker threads

    Returns:
        int8 array with the same length as ``signal``
    """
    x = as_signal(signal)
    eps = check_non_negative("eps", eps)
    min_pts = check_positive("min_pts", min_pts)

    n = len(x)
    values = x.tolist()
    visited = VisitedFlags(n)

    def expand(seed: int) -> List[int]:
        members = []
        queue = deque([seed])
        while queue:
            point = queue.popleft()
            if visited.test_and_set(point):
                continue
            if values[point] != 1:
                continue
            members.append(point)
            lo, hi = max(0, point - eps), min(n, point + eps + 1)
            queue.extend(q for q in range(lo, hi) if not visited.is_set(q))
        return members

    def worker(part: Partition) -> List[int]:
        if part.size == 0:
            return []
        counts = neighbourhood_counts(x, part.start, part.end, eps)
        cores = np.flatnonzero((x[part.start:part.end] == 1) & (counts >= min_pts)) + part.start

        members: List[int] = []
        clusters = 0
        for core in cores.tolist():
            if not visited.is_set(core):
                found = expand(core)
                if found:
                    clusters += 1
                    members.extend(found)
        logger.debug(
            f"dbscan partition {part.index} [{part.start}, {part.end}): "
            f"{cores.size} core point(s), {clusters} expansion(s)"
        )
        return members

    output = empty_labels(n)
    for members in run_partitioned(worker, n, num_threads, name="dbscan"):
        output[members] = 1

    logger.debug(f"DBSCAN eps={eps} min_pts={min_pts}: {int(output.sum()):,} clustered position(s)")
    return output
