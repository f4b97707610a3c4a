#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Tests for argument splitting and the read -> denoise -> write -> evaluate driver.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from prophage_signal.algorithms import get_algorithm, median_filter
from prophage_signal.config import load_config
from prophage_signal.errors import (
    InvalidParameterError,
    ParameterUsageError,
    SignalIOError,
    SignalParseError,
)
from prophage_signal.io import read_label_column
from prophage_signal.utils.pipeline import DenoisePipeline, run_algorithm, split_arguments


class TestSplitArguments:
    """Test parsing of the positional tail after the algorithm name."""

    def test_parameters_only(self):
        params, threads = split_arguments(get_algorithm("mwa"), ["5", "0.6"])

        assert params == {"window_size": 5, "threshold": 0.6}
        assert threads is None

    def test_trailing_thread_count(self):
        params, threads = split_arguments(get_algorithm("rle"), ["5", "4"])

        assert params == {"min_length": 5}
        assert threads == "4"

    def test_too_many_arguments(self):
        with pytest.raises(ParameterUsageError, match="Too many arguments"):
            split_arguments(get_algorithm("median"), ["5", "4", "extra"])

    def test_missing_parameter(self):
        with pytest.raises(ParameterUsageError):
            split_arguments(get_algorithm("ccl"), ["10"])

    def test_parameters_from_configuration(self):
        params, threads = split_arguments(
            get_algorithm("ccl"), [], {"min_size": 10, "gap_tolerance": 2}
        )

        assert params == {"min_size": 10, "gap_tolerance": 2}
        assert threads is None

    def test_incomplete_configuration(self):
        with pytest.raises(ParameterUsageError):
            split_arguments(get_algorithm("dbscan"), [], {"eps": 3, "min_pts": None})

    def test_partial_command_line_not_completed_from_configuration(self):
        with pytest.raises(ParameterUsageError):
            split_arguments(get_algorithm("mwa"), ["5"], {"window_size": 5, "threshold": 0.6})


class TestRunAlgorithm:
    """Test single algorithm invocation."""

    def test_result_fields(self, noisy_signal):
        result = run_algorithm(noisy_signal["predicted"], "median", {"window_size": 5}, threads=3)

        assert result.algorithm == "median"
        assert result.threads == 3
        assert result.parameters == {"window_size": 5}
        assert result.labels.tolist() == median_filter(noisy_signal["predicted"], 5).tolist()
        assert "median" in result.summary()

    def test_algorithm_name_case_insensitive(self):
        assert run_algorithm([1, 1, 0], "RLE", {"min_length": 2}, threads=1).algorithm == "rle"

    def test_default_threads_detected(self):
        result = run_algorithm([1, 0, 1], "rle", {"min_length": 1})

        assert result.threads >= 1

    def test_invalid_threads(self):
        with pytest.raises(InvalidParameterError):
            run_algorithm([1, 0, 1], "rle", {"min_length": 1}, threads=0)


class TestDenoisePipeline:
    """Test end-to-end processing of one prediction table."""

    def test_run_writes_output_and_metrics(self, prediction_table, temp_output_dir, noisy_signal):
        output = temp_output_dir / "out.csv"

        result = DenoisePipeline(load_config()).run(
            prediction_table, output, "mwa", ["7", "0.5", "4"]
        )

        written = read_label_column(output)
        assert len(written) == len(noisy_signal["predicted"])
        assert written.tolist() == result.run.labels.tolist()
        assert result.run.threads == 4
        assert result.report is not None
        assert result.report.after.f1 > result.report.before.f1

    def test_to_dict(self, prediction_table, temp_output_dir):
        result = DenoisePipeline().run(prediction_table, temp_output_dir / "out.csv",
                                       "rle", ["3", "2"])
        data = result.to_dict()

        assert data["algorithm"] == "rle"
        assert data["parameters"] == {"min_length": 3}
        assert data["threads"] == 2
        assert set(data["metrics"]) == {"before", "after"}

    def test_table_without_truth_skips_metrics(self, temp_output_dir, table_writer):
        path = table_writer(temp_output_dir / "in.csv", [1, 1, 0, 1])

        result = DenoisePipeline().run(path, temp_output_dir / "out.csv", "rle", ["2", "1"])

        assert result.report is None
        assert result.run.labels.tolist() == [1, 1, 0, 0]

    def test_evaluate_disabled(self, prediction_table, temp_output_dir):
        result = DenoisePipeline().run(prediction_table, temp_output_dir / "out.csv",
                                       "median", ["3", "1"], evaluate=False)

        assert result.report is None

    def test_configured_parameters_and_threads(self, prediction_table, temp_output_dir):
        config = load_config()
        config["algorithms"]["dbscan"].update({"eps": 3, "min_pts": 4})
        config["hardware"]["threads"] = 2

        result = DenoisePipeline(config).run(prediction_table, temp_output_dir / "out.csv",
                                             "dbscan")

        assert result.run.parameters == {"eps": 3, "min_pts": 4}
        assert result.run.threads == 2

    def test_usage_error_before_reading_input(self, temp_output_dir):
        output = temp_output_dir / "out.csv"

        with pytest.raises(ParameterUsageError):
            DenoisePipeline().run(temp_output_dir / "absent.csv", output, "mwa", ["5"])
        assert not output.exists()

    def test_bad_thread_count_before_reading_input(self, temp_output_dir):
        with pytest.raises(SignalParseError):
            DenoisePipeline().run(temp_output_dir / "absent.csv",
                                  temp_output_dir / "out.csv", "rle", ["3", "many"])

    def test_missing_input(self, temp_output_dir):
        with pytest.raises(SignalIOError):
            DenoisePipeline().run(temp_output_dir / "absent.csv",
                                  temp_output_dir / "out.csv", "rle", ["3", "1"])
