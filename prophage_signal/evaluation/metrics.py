#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Binary classification metrics for predicted vs. true prophage labels.

Ratios with a zero denominator (for example precision when nothing was
predicted positive) are reported as NaN instead of raising.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import numpy as np
from sklearn.metrics import (
    accuracy_score, precision_score, recall_score, f1_score,
    confusion_matrix, matthews_corrcoef
)

from ..errors import InvalidParameterError

logger = logging.getLogger(__name__)


def _format_value(value: float) -> str:
    return "nan" if math.isnan(value) else f"{value:.6g}"


@dataclass(frozen=True)
class ConfusionCounts:
    """
    2x2 confusion matrix of one comparison and the statistics derived from it.

    Built with ``from_labels``; the statistics are computed once by
    scikit-learn when the counts are taken.
    """
    tp: int
    fp: int
    tn: int
    fn: int
    accuracy: float = math.nan
    precision: float = math.nan
    recall: float = math.nan
    f1: float = math.nan
    mcc: float = math.nan

    @classmethod
    def from_labels(cls, true_labels: Iterable[int], predicted: Iterable[int]) -> "ConfusionCounts":
        """
        Compare two equal-length binary sequences.

        Raises:
            InvalidParameterError: If the sequences differ in length
        """
        y_true = (np.asarray(true_labels).reshape(-1) == 1).astype(np.int8)
        y_pred = (np.asarray(predicted).reshape(-1) == 1).astype(np.int8)
        if y_true.shape != y_pred.shape:
            raise InvalidParameterError(
                f"Label length mismatch: {y_true.size} true vs {y_pred.size} predicted"
            )
        if y_true.size == 0:
            return cls(tp=0, fp=0, tn=0, fn=0)

        tn, fp, fn, tp = (int(v) for v in confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel())

        precision = float(precision_score(y_true, y_pred, zero_division=np.nan))
        recall = float(recall_score(y_true, y_pred, zero_division=np.nan))
        if math.isnan(precision) or math.isnan(recall) or precision + recall == 0:
            f1 = math.nan
        else:
            f1 = float(f1_score(y_true, y_pred, zero_division=np.nan))

        # matthews_corrcoef reports 0.0 for an empty margin; that case is undefined here
        margins = (tp + fp) * (tp + fn) * (tn + fp) * (tn + fn)
        mcc = float(matthews_corrcoef(y_true, y_pred)) if margins else math.nan

        return cls(
            tp=tp, fp=fp, tn=tn, fn=fn,
            accuracy=float(accuracy_score(y_true, y_pred)),
            precision=precision,
            recall=recall,
            f1=f1,
            mcc=mcc,
        )

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn

    def to_dict(self) -> Dict[str, Any]:
        """Counts and statistics; NaN becomes None so the dict is JSON-safe."""
        stats = {
            'accuracy': self.accuracy,
            'precision': self.precision,
            'recall': self.recall,
            'f1': self.f1,
            'mcc': self.mcc,
        }
        return {
            'tp': self.tp, 'fp': self.fp, 'tn': self.tn, 'fn': self.fn,
            **{k: (None if math.isnan(v) else v) for k, v in stats.items()},
        }

    def summary(self) -> str:
        return (
            f"Accuracy: {_format_value(self.accuracy)}\n"
            f"Precision: {_format_value(self.precision)}\n"
            f"Recall: {_format_value(self.recall)}\n"
            f"F1 Score: {_format_value(self.f1)}\n"
            f"MCC: {_format_value(self.mcc)}"
        )


@dataclass(frozen=True)
class EvaluationReport:
    """Metrics before and after denoising, against the same true labels."""
    before: ConfusionCounts
    after: Optional[ConfusionCounts] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'before': self.before.to_dict(),
            'after': self.after.to_dict() if self.after else None,
        }

    def summary(self) -> str:
        lines = ["Metrics before clustering:", self.before.summary()]
        if self.after is not None:
            lines += ["", "Metrics after clustering:", self.after.summary()]
        return "\n".join(lines)


def evaluate_labels(true_labels: Iterable[int], predicted: Iterable[int],
                    cleaned: Optional[Iterable[int]] = None) -> EvaluationReport:
    """
    Score raw predictions and, optionally, their denoised counterpart.

    Args:
        true_labels: Ground-truth labels
        predicted: Raw predicted labels
        cleaned: Labels produced by a denoising algorithm

    Returns:
        EvaluationReport with a fresh ConfusionCounts per comparison
    """
    before = ConfusionCounts.from_labels(true_labels, predicted)
    after = ConfusionCounts.from_labels(true_labels, cleaned) if cleaned is not None else None

    logger.info(
        f"Evaluated {before.total:,} positions: F1 {_format_value(before.f1)}"
        + (f" -> {_format_value(after.f1)}" if after else "")
    )
    return EvaluationReport(before=before, after=after)
