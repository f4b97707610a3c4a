"""
ProphageSignal Execution Driver.

Coordinates one denoising run end to end:
- Algorithm selection by name and strict parameter parsing
- Thread-count resolution (explicit, configured, or detected hardware parallelism)
- Reading the prediction table, running the algorithm, writing the label column
- Scoring raw and denoised labels against the true labels
"""

from pathlib import Path
from typing import Optional, Dict, Any, Sequence, Tuple, Union
from dataclasses import dataclass, field
import logging
import time

import numpy as np

from ..algorithms import AlgorithmSpec, as_signal, get_algorithm
from ..config.schema import load_config
from ..errors import ParameterUsageError
from ..evaluation import EvaluationReport, evaluate_labels
from ..io import LabelTable, read_label_table, write_label_column
from .hardware import resolve_thread_count

logger = logging.getLogger(__name__)


# ============================================================================
# Data Structures
# ============================================================================

@dataclass
class DenoiseResult:
    """Output of one algorithm invocation."""
    algorithm: str
    parameters: Dict[str, Any]
    threads: int
    labels: np.ndarray
    elapsed_sec: float

    def summary(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in self.parameters.items())
        return (
            f"{self.algorithm} ({params}) on {self.threads} thread(s): "
            f"{int(self.labels.sum()):,} of {len(self.labels):,} positions positive "
            f"in {self.elapsed_sec:.3f}s"
        )


@dataclass
class PipelineResult:
    """Complete result of processing one prediction table."""
    input_path: Path
    output_path: Path
    table: LabelTable
    run: DenoiseResult
    report: Optional[EvaluationReport] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'input': str(self.input_path),
            'output': str(self.output_path),
            'algorithm': self.run.algorithm,
            'parameters': self.run.parameters,
            'threads': self.run.threads,
            'elapsed_sec': self.run.elapsed_sec,
            'metrics': self.report.to_dict() if self.report else None,
        }


# ============================================================================
# Parameter Resolution
# ============================================================================

def split_arguments(spec: AlgorithmSpec, args: Sequence[str],
                    configured: Optional[Dict[str, Any]] = None) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Split the positional tail after the algorithm name into parameters and
    an optional trailing thread count.

    With no positional arguments the parameters are taken from ``configured``
    (the ``algorithms.<name>`` config section) when every one is set there.

    Returns:
        (parsed parameters, raw thread count or None)

    Raises:
        ParameterUsageError: If parameters are missing or surplus arguments remain
    """
    expected = len(spec.parameters)
    args = list(args)

    if len(args) > expected + 1:
        raise ParameterUsageError(
            f"Too many arguments for {spec.name}: expected {spec.usage()} [threads], "
            f"got {' '.join(args)}"
        )

    if len(args) >= expected:
        raw_threads = args[expected] if len(args) > expected else None
        return spec.parse_parameters(args[:expected]), raw_threads

    configured = configured or {}
    if not args and all(configured.get(name) is not None for name in spec.parameter_names):
        logger.info(f"Using {spec.name} parameters from configuration")
        return spec.parse_parameters([configured[name] for name in spec.parameter_names]), None

    raise ParameterUsageError(
        f"{spec.title} requires {', '.join(spec.parameter_names)} (usage: {spec.usage()} [threads])"
    )


# ============================================================================
# Execution
# ============================================================================

def run_algorithm(signal, algorithm: str, parameters: Dict[str, Any],
                  threads: Optional[Union[int, str]] = None) -> DenoiseResult:
    """
    Run one denoising algorithm on a signal.

    Args:
        signal: Binary labels (0/1)
        algorithm: Algorithm name ('mwa', 'rle', 'dbscan', 'median', 'ccl')
        parameters: Parsed algorithm parameters
        threads: Worker count (None = detected hardware parallelism)

    Returns:
        DenoiseResult
    """
    spec = get_algorithm(algorithm)
    num_threads = resolve_thread_count(threads)
    x = as_signal(signal)

    start_time = time.time()
    labels = spec.run(x, parameters, num_threads)
    elapsed = time.time() - start_time

    result = DenoiseResult(
        algorithm=spec.name,
        parameters=dict(parameters),
        threads=num_threads,
        labels=labels,
        elapsed_sec=elapsed,
    )
    logger.info(result.summary())
    return result


class DenoisePipeline:
    """
    Read -> denoise -> write -> evaluate for a single prediction table.

    There is no partial success: any error aborts the run before or after the
    output is written, and is raised to the caller.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config if config is not None else load_config()
        self.logger = logging.getLogger(f"{__name__}.DenoisePipeline")

    def run(self, input_path: Union[str, Path], output_path: Union[str, Path],
            algorithm: str, args: Sequence[str] = (),
            evaluate: bool = True) -> PipelineResult:
        """
        Process one table.

        Args:
            input_path: Prediction table (predicted label column, optional true label column)
            output_path: Destination of the single-column label table
            algorithm: Algorithm name
            args: Positional algorithm parameters, optionally followed by a thread count
            evaluate: Score raw and denoised labels when true labels are present

        Returns:
            PipelineResult
        """
        input_path, output_path = Path(input_path), Path(output_path)
        io_config = self.config.get('io', {})

        # Validate arguments before touching any file
        spec = get_algorithm(algorithm)
        configured = self.config.get('algorithms', {}).get(spec.name)
        parameters, raw_threads = split_arguments(spec, args, configured)
        if raw_threads is None:
            raw_threads = self.config.get('hardware', {}).get('threads')
        threads = resolve_thread_count(raw_threads)

        table = read_label_table(
            input_path,
            predicted_column=io_config.get('predicted_column', 1),
            true_column=io_config.get('true_column', 3),
            delimiter=io_config.get('delimiter', ','),
        )

        run = run_algorithm(table.predicted, spec.name, parameters, threads)
        write_label_column(output_path, run.labels, header=io_config.get('output_header', 'label'))

        report = None
        if evaluate and table.has_truth:
            report = evaluate_labels(table.true, table.predicted, run.labels)
        elif evaluate:
            self.logger.warning(f"{input_path.name} has no true labels; skipping metrics")

        return PipelineResult(
            input_path=input_path,
            output_path=output_path,
            table=table,
            run=run,
            report=report,
        )
