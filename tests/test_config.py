#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Tests for configuration loading, templates and validation.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
import yaml

from prophage_signal.config import (
    DEFAULT_CONFIG,
    load_config,
    save_config_template,
    validate_config,
)
from prophage_signal.errors import ConfigValidationError, SignalIOError


class TestDefaultConfig:
    """Test default configuration values."""

    def test_algorithm_parameters_have_no_defaults(self):
        for name, params in DEFAULT_CONFIG['algorithms'].items():
            assert params, name
            assert all(value is None for value in params.values()), name

    def test_defaults_returned_without_file(self):
        config = load_config()

        assert config['io']['predicted_column'] == 1
        assert config['io']['true_column'] == 3
        assert config['hardware']['threads'] is None
        assert config['threshold']['probability'] == 0.5
        assert validate_config(config) == []

    def test_defaults_not_shared(self):
        config = load_config()
        config['algorithms']['mwa']['window_size'] = 9

        assert DEFAULT_CONFIG['algorithms']['mwa']['window_size'] is None


class TestLoadConfig:
    """Test merging user files into the defaults."""

    def test_deep_merge(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text(yaml.dump({
            'algorithms': {'rle': {'min_length': 7}},
            'hardware': {'threads': 2},
        }))

        config = load_config(path)

        assert config['algorithms']['rle']['min_length'] == 7
        assert config['algorithms']['mwa']['window_size'] is None
        assert config['hardware']['threads'] == 2
        assert config['io']['delimiter'] == ','

    def test_empty_file_gives_defaults(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text("")

        assert load_config(path) == load_config()

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(SignalIOError):
            load_config(temp_output_dir / "absent.yaml")

    def test_invalid_yaml(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text("run: [unclosed\n")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_non_mapping_document(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text("- mwa\n- rle\n")

        with pytest.raises(ConfigValidationError, match="mapping"):
            load_config(path)


class TestConfigTemplates:
    """Test template generation."""

    def test_default_template_round_trips(self, temp_output_dir):
        path = temp_output_dir / "default.yaml"

        save_config_template(path)

        assert load_config(path) == load_config()

    @pytest.mark.parametrize("algorithm,expected", [
        ("mwa", {'window_size': 5, 'threshold': 0.6}),
        ("rle", {'min_length': 5}),
        ("dbscan", {'eps': 3, 'min_pts': 4}),
        ("median", {'window_size': 5}),
        ("ccl", {'min_size': 10, 'gap_tolerance': 2}),
    ])
    def test_algorithm_template(self, temp_output_dir, algorithm, expected):
        path = temp_output_dir / f"{algorithm}.yaml"

        save_config_template(path, template=algorithm)
        config = load_config(path)

        assert config['run']['algorithm'] == algorithm
        assert config['algorithms'][algorithm] == expected
        assert validate_config(config) == []

    def test_unknown_template(self, temp_output_dir):
        with pytest.raises(ConfigValidationError):
            save_config_template(temp_output_dir / "x.yaml", template="kmeans")


class TestValidateConfig:
    """Test configuration validation messages."""

    def _config(self, **sections):
        config = load_config()
        for section, values in sections.items():
            config[section].update(values)
        return config

    def test_unknown_algorithm(self):
        errors = validate_config(self._config(run={'algorithm': 'kmeans'}))

        assert any("Unknown algorithm" in e for e in errors)

    def test_out_of_range_parameter(self):
        config = self._config()
        config['algorithms']['median']['window_size'] = 0

        assert any("algorithms.median.window_size" in e for e in validate_config(config))

    def test_non_numeric_parameter(self):
        config = self._config()
        config['algorithms']['mwa']['threshold'] = "high"

        assert any("algorithms.mwa.threshold" in e for e in validate_config(config))

    def test_unknown_parameter(self):
        config = self._config()
        config['algorithms']['rle']['max_length'] = 3

        assert any("Unknown parameter for rle" in e for e in validate_config(config))

    @pytest.mark.parametrize("threads", [0, -4, "four", 1.5])
    def test_invalid_threads(self, threads):
        errors = validate_config(self._config(hardware={'threads': threads}))

        assert any("hardware.threads" in e for e in errors)

    def test_duplicate_columns(self):
        errors = validate_config(self._config(io={'predicted_column': 2, 'true_column': 2}))

        assert any("must differ" in e for e in errors)

    def test_negative_column(self):
        errors = validate_config(self._config(io={'predicted_column': -1}))

        assert any("io columns" in e for e in errors)

    def test_probability_out_of_range(self):
        errors = validate_config(self._config(threshold={'probability': 1.5}))

        assert any("threshold.probability" in e for e in errors)

    def test_unknown_log_level(self):
        errors = validate_config(self._config(logging={'level': 'CHATTY'}))

        assert errors == ["Invalid logging.level: CHATTY"]
