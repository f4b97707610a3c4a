"""
ProphageSignal v0.1.0

Evaluation of denoised labels against ground truth.
"""

from .metrics import ConfusionCounts, EvaluationReport, evaluate_labels

__all__ = ["ConfusionCounts", "EvaluationReport", "evaluate_labels"]
