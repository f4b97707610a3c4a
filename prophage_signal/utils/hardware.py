"""
ProphageSignal v0.1.0

Hardware detection for CPU worker threads.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from multiprocessing import cpu_count
from typing import Optional, Union

from ..errors import InvalidParameterError, SignalParseError

logger = logging.getLogger(__name__)


def detect_hardware_threads() -> int:
    """Number of hardware threads available, never less than 1."""
    try:
        return max(1, cpu_count())
    except NotImplementedError:
        logger.warning("Could not detect CPU count, falling back to 1 thread")
        return 1


def resolve_thread_count(threads: Optional[Union[int, str]] = None) -> int:
    """
    Resolve the worker count for one algorithm call.

    Args:
        threads: Requested thread count (int or numeric string); None means
                 use the detected hardware parallelism

    Returns:
        Positive thread count

    Raises:
        SignalParseError: If a string value is not an integer
        InvalidParameterError: If the value is zero or negative
    """
    if threads is None:
        detected = detect_hardware_threads()
        logger.debug(f"Using detected hardware parallelism: {detected} threads")
        return detected

    if isinstance(threads, str):
        try:
            threads = int(threads.strip())
        except ValueError:
            raise SignalParseError(f"Thread count must be an integer, got '{threads}'")

    if isinstance(threads, bool) or not isinstance(threads, int):
        raise SignalParseError(f"Thread count must be an integer, got {threads!r}")

    if threads <= 0:
        raise InvalidParameterError(f"Thread count must be positive, got {threads}")

    return threads
