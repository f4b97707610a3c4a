"""
ProphageSignal v0.1.0

Denoising algorithms and the registry used to select them by name.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Dict

from ..errors import ParameterUsageError
from .base import AlgorithmSpec, ParameterSpec, as_signal
from .components import Component, connected_component_labeling, find_components
from .density import density_clustering
from .median import median_filter
from .moving_window import moving_window_average
from .run_length import find_runs, run_length_encoding

ALGORITHMS: Dict[str, AlgorithmSpec] = {
    spec.name: spec
    for spec in (
        AlgorithmSpec(
            name="mwa",
            title="Moving Window Average",
            parameters=(
                ParameterSpec("window_size", int, "Samples per window", minimum=1),
                ParameterSpec("threshold", float, "Minimum window mean for a positive call"),
            ),
            function=moving_window_average,
        ),
        AlgorithmSpec(
            name="rle",
            title="Run Length Encoding",
            parameters=(
                ParameterSpec("min_length", int, "Shortest run of 1s kept", minimum=1),
            ),
            function=run_length_encoding,
        ),
        AlgorithmSpec(
            name="dbscan",
            title="DBSCAN",
            parameters=(
                ParameterSpec("eps", int, "Neighbourhood radius in positions", minimum=0),
                ParameterSpec("min_pts", int, "Positives needed in a neighbourhood for a core point",
                              minimum=1),
            ),
            function=density_clustering,
        ),
        AlgorithmSpec(
            name="median",
            title="Median Filter",
            parameters=(
                ParameterSpec("window_size", int, "Samples per centered window", minimum=1),
            ),
            function=median_filter,
        ),
        AlgorithmSpec(
            name="ccl",
            title="Connected Component Labeling",
            parameters=(
                ParameterSpec("min_size", int, "Shortest component span kept", minimum=1),
                ParameterSpec("gap_tolerance", int, "Longest run of zeros bridged", minimum=0),
            ),
            function=connected_component_labeling,
        ),
    )
}


def get_algorithm(name: str) -> AlgorithmSpec:
    """Look up an algorithm by its command-line name."""
    try:
        return ALGORITHMS[name.lower()]
    except KeyError:
        raise ParameterUsageError(
            f"Unknown algorithm: {name} (choose from {', '.join(ALGORITHMS)})"
        )


__all__ = [
    "ALGORITHMS",
    "AlgorithmSpec",
    "ParameterSpec",
    "Component",
    "as_signal",
    "get_algorithm",
    "moving_window_average",
    "run_length_encoding",
    "find_runs",
    "density_clustering",
    "median_filter",
    "connected_component_labeling",
    "find_components",
]
