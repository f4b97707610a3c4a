"""
ProphageSignal v0.1.0

Configuration schema for ProphageSignal.

Defines all available configuration parameters with defaults and validation.
Algorithm parameters have no defaults: they must come from the command line
or from a user configuration file.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
import logging
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml

from ..algorithms import ALGORITHMS
from ..errors import ConfigValidationError, SignalError, SignalIOError

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Run Selection
    # ========================================================================
    'run': {
        'algorithm': None,  # 'mwa', 'rle', 'dbscan', 'median', 'ccl'
    },

    # ========================================================================
    # Algorithm Parameters (never defaulted)
    # ========================================================================
    'algorithms': {
        name: {param: None for param in spec.parameter_names}
        for name, spec in ALGORITHMS.items()
    },

    # ========================================================================
    # Hardware Settings
    # ========================================================================
    'hardware': {
        'threads': None,  # Auto-detect from system
    },

    # ========================================================================
    # Table I/O
    # ========================================================================
    'io': {
        'predicted_column': 1,
        'true_column': 3,
        'delimiter': ',',
        'output_header': 'label',
    },

    # ========================================================================
    # Probability -> Label Conversion
    # ========================================================================
    'threshold': {
        'probability': 0.5,
        'output_prefix': 'processed_',
    },

    # ========================================================================
    # Logging
    # ========================================================================
    'logging': {
        'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
        'log_file': None,
    },
}

# Example parameters written by algorithm-specific templates
TEMPLATE_PARAMETERS = {
    'mwa': {'window_size': 5, 'threshold': 0.6},
    'rle': {'min_length': 5},
    'dbscan': {'eps': 3, 'min_pts': 4},
    'median': {'window_size': 5},
    'ccl': {'min_size': 10, 'gap_tolerance': 2},
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        SignalIOError: If the file does not exist or cannot be read
        ConfigValidationError: If the file is not a YAML mapping
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise SignalIOError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in config file {config_path}: {e}")
        except OSError as e:
            raise SignalIOError(f"Cannot read configuration file {config_path}: {e}") from e

        if user_config is None:
            user_config = {}
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {config_path} must contain a mapping, got {type(user_config).__name__}"
            )

        # Deep merge user config into defaults
        config = _deep_merge(config, user_config)
        logger.debug(f"Loaded configuration from {config_path}")

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default' or an algorithm name)
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if template in TEMPLATE_PARAMETERS:
        config['run']['algorithm'] = template
        config['algorithms'][template].update(TEMPLATE_PARAMETERS[template])
    elif template != 'default':
        raise ConfigValidationError(f"Unknown configuration template: {template}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    # Validate algorithm selection
    algorithm = config.get('run', {}).get('algorithm')
    if algorithm is not None and algorithm not in ALGORITHMS:
        errors.append(f"Unknown algorithm: {algorithm}")

    # Validate algorithm parameters that are set
    for name, params in (config.get('algorithms') or {}).items():
        spec = ALGORITHMS.get(name)
        if spec is None:
            errors.append(f"Parameters given for unknown algorithm: {name}")
            continue
        if not isinstance(params, dict):
            errors.append(f"algorithms.{name} must be a mapping")
            continue
        for param in params:
            if param not in spec.parameter_names:
                errors.append(f"Unknown parameter for {name}: {param}")
        for param_spec in spec.parameters:
            value = params.get(param_spec.name)
            if value is None:
                continue
            try:
                param_spec.parse(value)
            except SignalError as e:
                errors.append(f"algorithms.{name}.{param_spec.name}: {e}")

    # Validate thread count
    threads = config.get('hardware', {}).get('threads')
    if threads is not None and (isinstance(threads, bool) or not isinstance(threads, int) or threads <= 0):
        errors.append(f"Invalid hardware.threads: {threads} (must be a positive integer)")

    # Validate table columns
    io_config = config.get('io', {})
    columns = [io_config.get('predicted_column'), io_config.get('true_column')]
    if any(isinstance(c, bool) or not isinstance(c, int) or c < 0 for c in columns):
        errors.append(f"Invalid io columns: {columns} (must be non-negative integers)")
    elif columns[0] == columns[1]:
        errors.append("io.predicted_column and io.true_column must differ")
    delimiter = io_config.get('delimiter')
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        errors.append(f"Invalid io.delimiter: {delimiter!r} (must be a single character)")

    # Validate probability threshold
    probability = config.get('threshold', {}).get('probability')
    if isinstance(probability, bool) or not isinstance(probability, (int, float)) or not 0.0 <= probability <= 1.0:
        errors.append(f"Invalid threshold.probability: {probability} (must be within [0, 1])")

    # Validate logging level
    level = str(config.get('logging', {}).get('level', 'INFO')).upper()
    if level not in LOG_LEVELS:
        errors.append(f"Invalid logging.level: {level}")

    return errors
