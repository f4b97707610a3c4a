#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Shared building blocks for the denoising algorithms: signal coercion,
parameter descriptions and range checks.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidParameterError, ParameterUsageError, SignalParseError

LABEL_DTYPE = np.int8


def as_signal(values: Iterable[int]) -> np.ndarray:
    """
    Coerce a sequence of 0/1 labels into a read-only 1-D int8 array.

    Raises:
        InvalidParameterError: If the input is not 1-D or holds values other than 0 and 1
    """
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise InvalidParameterError(f"Signal must be one-dimensional, got shape {arr.shape}")
    if arr.size and not np.isin(arr, (0, 1)).all():
        bad = arr[~np.isin(arr, (0, 1))][0]
        raise InvalidParameterError(f"Signal must contain only 0 and 1, found {bad!r}")

    signal = arr.astype(LABEL_DTYPE, copy=True)
    signal.flags.writeable = False
    return signal


def empty_labels(n: int) -> np.ndarray:
    """All-zero output buffer of length ``n``."""
    return np.zeros(n, dtype=LABEL_DTYPE)


def check_positive(name: str, value: int) -> int:
    if int(value) != value or int(value) <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value}")
    return int(value)


def check_non_negative(name: str, value: int) -> int:
    if int(value) != value or int(value) < 0:
        raise InvalidParameterError(f"{name} must be a non-negative integer, got {value}")
    return int(value)


def check_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be a finite number, got {value}")
    return value


@dataclass(frozen=True)
class ParameterSpec:
    """One positional parameter of an algorithm."""
    name: str
    kind: type                      # int or float
    description: str
    minimum: Optional[float] = None # inclusive lower bound

    def parse(self, raw: Any) -> Any:
        """
        Convert a raw command-line or config value to ``kind`` and range-check it.

        Raises:
            SignalParseError: If the value is not numeric (or not integral for int parameters)
            InvalidParameterError: If the value is below ``minimum``
        """
        text = str(raw).strip()
        try:
            if self.kind is int:
                try:
                    value = int(text)
                except ValueError:
                    # integral float text such as "3.0"
                    number = float(text)
                    if not number.is_integer():
                        raise
                    value = int(number)
            else:
                value = float(text)
        except (TypeError, ValueError):
            raise SignalParseError(
                f"Parameter '{self.name}' expects {self.kind.__name__}, got '{raw}'"
            )

        if self.kind is float and not math.isfinite(value):
            raise InvalidParameterError(f"Parameter '{self.name}' must be finite, got {value}")
        if self.minimum is not None and value < self.minimum:
            raise InvalidParameterError(
                f"Parameter '{self.name}' must be >= {self.minimum:g}, got {value}"
            )
        return value


@dataclass(frozen=True)
class AlgorithmSpec:
    """Name, parameters and entry point of one denoising algorithm."""
    name: str
    title: str
    parameters: Tuple[ParameterSpec, ...]
    function: Callable[..., np.ndarray]

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.parameters)

    def usage(self) -> str:
        names = " ".join(f"<{name}>" for name in self.parameter_names)
        return f"{self.name} {names}"

    def parse_parameters(self, raw: Sequence[Any]) -> Dict[str, Any]:
        """Parse exactly ``len(parameters)`` raw values, in declaration order."""
        if len(raw) != len(self.parameters):
            raise ParameterUsageError(
                f"{self.title} requires {len(self.parameters)} parameter(s) "
                f"({', '.join(self.parameter_names)}), got {len(raw)}"
            )
        return {spec.name: spec.parse(value) for spec, value in zip(self.parameters, raw)}

    def run(self, signal: Iterable[int], params: Dict[str, Any], num_threads: int) -> np.ndarray:
        return self.function(signal, num_threads=num_threads, **params)
