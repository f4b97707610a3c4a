#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Flat-table I/O: prediction tables in, single-column label tables out, and the
probability-to-label converter used to prepare prediction tables.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional

import numpy as np

from ..algorithms.base import LABEL_DTYPE
from ..errors import InvalidParameterError, SignalIOError, SignalParseError

logger = logging.getLogger(__name__)

PROBABILITY_HEADER = ["Seq_ID", "prob_0", "prob_1", "predicted_label"]


# ============================================================================
#                           DATA STRUCTURES
# ============================================================================

@dataclass
class LabelTable:
    """
    Labels read from a prediction table.

    Attributes:
        predicted: Raw predicted labels, one per row
        true: Ground-truth labels, or None when the table has no truth column
        source: File the table was read from
    """
    predicted: np.ndarray
    true: Optional[np.ndarray] = None
    source: Optional[Path] = None

    def __post_init__(self):
        if self.true is not None and len(self.true) != len(self.predicted):
            raise InvalidParameterError(
                f"Predicted and true label columns differ in length "
                f"({len(self.predicted)} vs {len(self.true)})"
            )

    def __len__(self) -> int:
        return len(self.predicted)

    @property
    def has_truth(self) -> bool:
        return self.true is not None


@dataclass
class ConversionResult:
    """Outcome of converting a batch of probability tables."""
    converted: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def all_failed(self) -> bool:
        return bool(self.failed) and not self.converted


# ============================================================================
#                           LABEL TABLES
# ============================================================================

def _parse_label(token: str, path: Path, line_num: int, column: int) -> int:
    try:
        value = int(token.strip())
    except ValueError:
        raise SignalParseError(
            f"{path}:{line_num}: column {column} is not an integer: '{token}'"
        )
    if value not in (0, 1):
        raise SignalParseError(
            f"{path}:{line_num}: column {column} must be 0 or 1, got {value}"
        )
    return value


def read_label_table(path: str | Path, predicted_column: int = 1, true_column: int = 3,
                     delimiter: str = ',') -> LabelTable:
    """
    Read predicted (and, when present, true) labels from a delimited table.

    The first row is a header. Every data row must reach ``predicted_column``;
    either every row or no row reaches ``true_column``.

    Args:
        path: Input table
        predicted_column: 0-based column holding the predicted label
        true_column: 0-based column holding the true label

    Returns:
        LabelTable

    Raises:
        SignalIOError: If the file cannot be read
        SignalParseError: If a row is short, ragged, or holds a non-binary value
    """
    path = Path(path)
    logger.info(f"Reading label table: {path}")

    predicted: List[int] = []
    truth: List[int] = []
    rows_with_truth = 0

    try:
        with open(path, 'r', newline='') as f:
            reader = csv.reader(f, delimiter=delimiter)
            for row in reader:
                line_num = reader.line_num
                if line_num == 1 or not any(cell.strip() for cell in row):
                    continue

                if len(row) <= predicted_column:
                    raise SignalParseError(
                        f"{path}:{line_num}: expected at least {predicted_column + 1} "
                        f"columns, got {len(row)}"
                    )
                predicted.append(_parse_label(row[predicted_column], path, line_num, predicted_column))

                if len(row) > true_column:
                    truth.append(_parse_label(row[true_column], path, line_num, true_column))
                    rows_with_truth += 1
                elif rows_with_truth:
                    raise SignalParseError(
                        f"{path}:{line_num}: missing true label column {true_column}"
                    )
    except OSError as e:
        raise SignalIOError(f"Cannot read input table {path}: {e}") from e

    if rows_with_truth and rows_with_truth != len(predicted):
        raise SignalParseError(
            f"{path}: true label column {true_column} present in only "
            f"{rows_with_truth} of {len(predicted)} rows"
        )

    table = LabelTable(
        predicted=np.asarray(predicted, dtype=LABEL_DTYPE),
        true=np.asarray(truth, dtype=LABEL_DTYPE) if rows_with_truth else None,
        source=path,
    )
    logger.info(
        f"Read {len(table):,} rows from {path.name}"
        + ("" if table.has_truth else " (no true labels)")
    )
    return table


def read_label_column(path: str | Path, column: int = 0, delimiter: str = ',') -> np.ndarray:
    """Read one label column (header skipped), e.g. a table written by ``write_label_column``."""
    path = Path(path)
    labels: List[int] = []
    try:
        with open(path, 'r', newline='') as f:
            reader = csv.reader(f, delimiter=delimiter)
            for row in reader:
                if reader.line_num == 1 or not any(cell.strip() for cell in row):
                    continue
                if len(row) <= column:
                    raise SignalParseError(f"{path}:{reader.line_num}: missing column {column}")
                labels.append(_parse_label(row[column], path, reader.line_num, column))
    except OSError as e:
        raise SignalIOError(f"Cannot read label table {path}: {e}") from e

    return np.asarray(labels, dtype=LABEL_DTYPE)


def write_label_column(path: str | Path, labels: Iterable[int], header: str = 'label') -> None:
    """
    Write labels as a single-column table with a header row.

    Raises:
        SignalIOError: If the file cannot be written
    """
    path = Path(path)
    values = np.asarray(labels).reshape(-1).tolist()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', newline='') as f:
            f.write(f"{header}\n")
            f.writelines(f"{int(v)}\n" for v in values)
    except OSError as e:
        raise SignalIOError(f"Cannot write output table {path}: {e}") from e

    logger.info(f"Wrote {len(values):,} labels to {path}")


def write_json(path: str | Path, obj: Any) -> None:
    """JSON writer with parent directory creation."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(obj, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise SignalIOError(f"Cannot write {path}: {e}") from e


# ============================================================================
#                   PROBABILITY -> LABEL CONVERSION
# ============================================================================

def _parse_probability_pair(cells: List[str], path: Path, line_num: int) -> tuple:
    """
    Parse ``[p0, p1]`` from the cells after the sequence id.

    The bracketed pair may arrive quoted (one cell) or unquoted (split
    across two cells by the delimiter).
    """
    text = ",".join(cells).strip().strip('"').strip()
    if not (text.startswith('[') and text.endswith(']')):
        raise SignalParseError(f"{path}:{line_num}: expected '[p0, p1]', got '{text}'")

    parts = [p.strip() for p in text[1:-1].split(',')]
    if len(parts) != 2:
        raise SignalParseError(
            f"{path}:{line_num}: expected two probabilities, got {len(parts)}"
        )
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        raise SignalParseError(f"{path}:{line_num}: non-numeric probability in '{text}'")


def convert_probability_table(input_path: str | Path, output_path: str | Path,
                              threshold: float = 0.5) -> int:
    """
    Convert a ``Seq_ID,[p0, p1]`` table into ``Seq_ID,prob_0,prob_1,predicted_label``.

    The label is 1 when ``p1 >= threshold``.

    Returns:
        Number of rows written

    Raises:
        SignalIOError: If either file cannot be opened
        SignalParseError: If a row is malformed
    """
    input_path, output_path = Path(input_path), Path(output_path)
    rows = 0

    try:
        with open(input_path, 'r', newline='') as fin:
            reader = csv.reader(fin)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', newline='') as fout:
                writer = csv.writer(fout, lineterminator='\n')
                writer.writerow(PROBABILITY_HEADER)
                for row in reader:
                    if reader.line_num == 1 or not row:
                        continue
                    if len(row) < 2:
                        raise SignalParseError(
                            f"{input_path}:{reader.line_num}: expected 'Seq_ID,[p0, p1]'"
                        )
                    prob_0, prob_1 = _parse_probability_pair(row[1:], input_path, reader.line_num)
                    writer.writerow([row[0], prob_0, prob_1, 1 if prob_1 >= threshold else 0])
                    rows += 1
    except OSError as e:
        raise SignalIOError(f"Cannot convert {input_path}: {e}") from e
    except SignalParseError:
        output_path.unlink(missing_ok=True)
        raise

    logger.info(f"Converted {rows:,} rows: {input_path} -> {output_path}")
    return rows


def convert_probability_files(inputs: Iterable[str | Path], threshold: float = 0.5,
                              output_dir: Optional[str | Path] = None,
                              prefix: str = 'processed_') -> ConversionResult:
    """
    Convert several probability tables, skipping files that fail.

    Each output is named ``prefix + input name`` and placed beside its input
    unless ``output_dir`` is given.
    """
    result = ConversionResult()
    for input_path in map(Path, inputs):
        target_dir = Path(output_dir) if output_dir else input_path.parent
        output_path = target_dir / f"{prefix}{input_path.name}"
        try:
            convert_probability_table(input_path, output_path, threshold)
        except (SignalIOError, SignalParseError) as e:
            logger.error(f"Skipping {input_path}: {e}")
            result.failed.append(input_path)
            continue
        result.converted.append(output_path)

    logger.info(f"Converted {len(result.converted)} file(s), {len(result.failed)} failed")
    return result
