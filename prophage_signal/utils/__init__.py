"""
Utilities module for ProphageSignal.

This module provides core utilities for the denoising engine:
- Static range partitioning and the per-call worker pool
- Thread-safe label counter and visitation flags
- Hardware thread detection

The execution driver lives in ``prophage_signal.utils.pipeline`` and is
imported from there directly.
"""

from .concurrency import (
    Partition,
    partition_range,
    run_partitioned,
    AtomicCounter,
    VisitedFlags,
)
from .hardware import detect_hardware_threads, resolve_thread_count

__all__ = [
    # Partitioning
    "Partition",
    "partition_range",
    "run_partitioned",
    # Shared state
    "AtomicCounter",
    "VisitedFlags",
    # Hardware
    "detect_hardware_threads",
    "resolve_thread_count",
]
