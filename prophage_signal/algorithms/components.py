"""
ProphageSignal v0.1.0

Gap-tolerant connected-component labeling.

A component is a chain of 1s in which consecutive 1s are separated by at most
``gap_tolerance`` zeros. Its span runs from its first 1 through its last 1
plus up to ``gap_tolerance`` trailing zeros (clamped to the signal end). A
component whose span is at least ``min_size`` long is written as 1s over the
whole span; shorter components are dropped.

Workers label partition-local chains, drawing labels from a shared
``AtomicCounter``. The coordinator then stitches chains that face each other
across a partition boundary with a gap of at most ``gap_tolerance`` zeros, so
a component split by a boundary is measured whole.

Leading zeros are never absorbed: a left-to-right scan has already consumed
any 1 within ``gap_tolerance`` before a component's first 1.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from itertools import chain
from typing import Iterable, List, NamedTuple

import numpy as np

from .base import as_signal, check_non_negative, check_positive, empty_labels
from ..utils.concurrency import AtomicCounter, Partition, run_partitioned

logger = logging.getLogger(__name__)


class Component(NamedTuple):
    label: int
    first: int      # first 1
    last: int       # last 1
    end: int        # exclusive span end, trailing zeros included

    @property
    def size(self) -> int:
        return self.end - self.first


def _partition_chains(x: np.ndarray, part: Partition, gap_tolerance: int,
                      labels: AtomicCounter) -> List[Component]:
    ones = np.flatnonzero(x[part.start:part.end]) + part.start
    if ones.size == 0:
        return []

    breaks = np.flatnonzero(np.diff(ones) - 1 > gap_tolerance)
    firsts = ones[np.concatenate(([0], breaks + 1))]
    lasts = ones[np.concatenate((breaks, [ones.size - 1]))]
    return [
        Component(labels.fetch_add(), first, last, last + 1)
        for first, last in zip(firsts.tolist(), lasts.tolist())
    ]


def stitch_components(chains: Iterable[Component], gap_tolerance: int, n: int) -> List[Component]:
    """
    Merge ordered chains separated by at most ``gap_tolerance`` zeros and
    attach trailing zeros. The merged component keeps the leftmost label.
    """
    merged: List[Component] = []
    for piece in chains:
        if merged and piece.first - merged[-1].last - 1 <= gap_tolerance:
            merged[-1] = merged[-1]._replace(last=piece.last)
        else:
            merged.append(piece)

    return [c._replace(end=min(c.last + 1 + gap_tolerance, n)) for c in merged]


def find_components(signal: Iterable[int], gap_tolerance: int,
                    num_threads: int = 1) -> List[Component]:
    """
    Label every gap-tolerant component of a binary signal.

    Label values depend on thread scheduling; spans do not.

    Example:
        >>> [(c.first, c.end) for c in find_components([1, 1, 0, 1, 1, 0, 0, 0], 1)]
        [(0, 6)]
    """
    x = as_signal(signal)
    gap_tolerance = check_non_negative("gap_tolerance", gap_tolerance)
    labels = AtomicCounter(1)

    per_partition = run_partitioned(
        lambda part: _partition_chains(x, part, gap_tolerance, labels),
        len(x), num_threads, name="ccl",
    )
    pieces = list(chain.from_iterable(per_partition))
    components = stitch_components(pieces, gap_tolerance, len(x))
    logger.debug(
        f"CCL gap_tolerance={gap_tolerance}: {len(pieces)} partition chain(s) "
        f"stitched into {len(components)} component(s)"
    )
    return components


def connected_component_labeling(signal: Iterable[int], min_size: int, gap_tolerance: int,
                                 num_threads: int = 1) -> np.ndarray:
    """
    Keep gap-tolerant components whose span is at least ``min_size`` long.

    Args:
        signal: Binary labels (0/1)
        min_size: Minimum span length (>= 1)
        gap_tolerance: Maximum run of zeros bridged inside a component (>= 0)
        num_threads: Number of worker threads

    Returns:
        int8 array with the same length as ``signal``

    Example:
        >>> connected_component_labeling([1, 1, 0, 1, 1], 4, 1).tolist()
        [1, 1, 1, 1, 1]
    """
    x = as_signal(signal)
    min_size = check_positive("min_size", min_size)
    components = find_components(x, gap_tolerance, num_threads)

    output = empty_labels(len(x))
    kept = 0
    for component in components:
        if component.size >= min_size:
            output[component.first:component.end] = 1
            kept += 1

    logger.debug(f"CCL min_size={min_size}: kept {kept} of {len(components)} component(s)")
    return output
