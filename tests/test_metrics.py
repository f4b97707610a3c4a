#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Tests for confusion counts and before/after evaluation reports.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import json
import math

import numpy as np
import pytest

from prophage_signal.errors import InvalidParameterError
from prophage_signal.evaluation import ConfusionCounts, EvaluationReport, evaluate_labels


class TestConfusionCounts:
    """Test pairwise comparison and derived statistics."""

    def test_counts_and_accuracy(self):
        counts = ConfusionCounts.from_labels([1, 0, 1, 0], [1, 0, 0, 0])

        assert (counts.tp, counts.fp, counts.tn, counts.fn) == (1, 0, 2, 1)
        assert counts.accuracy == pytest.approx(0.75)
        assert counts.precision == pytest.approx(1.0)
        assert counts.recall == pytest.approx(0.5)
        assert counts.f1 == pytest.approx(2 / 3)
        assert counts.mcc == pytest.approx(2 / math.sqrt(12))

    def test_direction_matters(self):
        """Swapping true and predicted labels exchanges fp and fn."""
        forward = ConfusionCounts.from_labels([1, 0, 1, 0], [1, 0, 0, 0])
        backward = ConfusionCounts.from_labels([1, 0, 0, 0], [1, 0, 1, 0])

        assert (backward.fp, backward.fn) == (forward.fn, forward.fp)
        assert backward.precision != forward.precision

    def test_perfect_prediction(self):
        counts = ConfusionCounts.from_labels([1, 1, 0, 0, 1], np.array([1, 1, 0, 0, 1]))

        assert counts.accuracy == 1.0
        assert counts.f1 == 1.0
        assert counts.mcc == pytest.approx(1.0)

    def test_no_positive_predictions_gives_nan(self):
        counts = ConfusionCounts.from_labels([1, 0, 1], [0, 0, 0])

        assert math.isnan(counts.precision)
        assert counts.recall == 0.0
        assert math.isnan(counts.f1)
        assert math.isnan(counts.mcc)
        assert counts.accuracy == pytest.approx(1 / 3)

    def test_no_true_positives_anywhere(self):
        """Precision and recall both zero leave F1 undefined."""
        counts = ConfusionCounts.from_labels([1, 0], [0, 1])

        assert counts.precision == 0.0
        assert counts.recall == 0.0
        assert math.isnan(counts.f1)

    def test_empty_sequences(self):
        counts = ConfusionCounts.from_labels([], [])

        assert counts.total == 0
        assert math.isnan(counts.accuracy)

    def test_length_mismatch(self):
        with pytest.raises(InvalidParameterError):
            ConfusionCounts.from_labels([1, 0, 1], [1, 0])

    def test_to_dict_is_json_safe(self):
        data = ConfusionCounts.from_labels([1, 0], [0, 0]).to_dict()

        assert data['precision'] is None
        assert data['tn'] == 1
        json.dumps(data)

    def test_summary_lines(self):
        summary = ConfusionCounts.from_labels([1, 0, 1, 0], [1, 0, 0, 0]).summary()

        assert summary.splitlines() == [
            "Accuracy: 0.75",
            "Precision: 1",
            "Recall: 0.5",
            "F1 Score: 0.666667",
            "MCC: 0.57735",
        ]

    def test_statistics_agree_with_counts(self, noisy_signal):
        """Library-computed ratios match the confusion-matrix formulas."""
        counts = ConfusionCounts.from_labels(noisy_signal["true"], noisy_signal["predicted"])
        tp, fp, tn, fn = counts.tp, counts.fp, counts.tn, counts.fn
        precision = tp / (tp + fp)
        recall = tp / (tp + fn)

        assert counts.total == len(noisy_signal["true"])
        assert counts.accuracy == pytest.approx((tp + tn) / counts.total)
        assert counts.precision == pytest.approx(precision)
        assert counts.recall == pytest.approx(recall)
        assert counts.f1 == pytest.approx(2 * precision * recall / (precision + recall))
        assert counts.mcc == pytest.approx(
            (tp * tn - fp * fn) / math.sqrt((tp + fp) * (tp + fn) * (tn + fp) * (tn + fn))
        )

    def test_constant_prediction_mcc_is_nan(self):
        """Predicting every position positive leaves MCC undefined, not zero."""
        counts = ConfusionCounts.from_labels([1, 0, 1, 0], [1, 1, 1, 1])

        assert counts.precision == pytest.approx(0.5)
        assert counts.recall == pytest.approx(1.0)
        assert math.isnan(counts.mcc)
        assert counts.to_dict()["mcc"] is None

    def test_summary_prints_nan(self):
        summary = ConfusionCounts.from_labels([1, 1], [0, 0]).summary()

        assert "Precision: nan" in summary


class TestEvaluationReport:
    """Test before/after reports."""

    def test_before_and_after_blocks(self):
        report = evaluate_labels([1, 1, 0, 0], [1, 0, 1, 0], [1, 1, 0, 0])

        assert report.before.accuracy == pytest.approx(0.5)
        assert report.after.accuracy == pytest.approx(1.0)

        summary = report.summary()
        assert summary.index("Metrics before clustering:") < summary.index("Metrics after clustering:")
        assert summary.count("F1 Score:") == 2

    def test_before_only(self):
        report = evaluate_labels([1, 0], [1, 0])

        assert report.after is None
        assert "Metrics after clustering:" not in report.summary()
        assert report.to_dict()['after'] is None

    def test_fresh_counts_per_comparison(self):
        report = evaluate_labels([1, 0, 1], [1, 0, 1], [0, 0, 0])

        assert report.before.tp == 2
        assert report.after.tp == 0
        assert report.after.fn == 2

    def test_cleaned_length_mismatch(self):
        with pytest.raises(InvalidParameterError):
            evaluate_labels([1, 0, 1], [1, 0, 1], [1, 0])

    def test_report_dict(self):
        report = EvaluationReport(
            before=ConfusionCounts.from_labels([1, 0, 1, 0], [1, 0, 0, 0]),
            after=ConfusionCounts.from_labels([1, 0, 1, 0], [1, 0, 1, 0]),
        )
        data = report.to_dict()

        assert data['before']['accuracy'] == pytest.approx(0.75)
        assert data['after']['f1'] == pytest.approx(1.0)
