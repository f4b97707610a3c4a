#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Pytest configuration and shared fixtures.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil

import numpy as np


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="prophage_signal_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def noisy_signal():
    """Prophage-like blocks of 1s with flipped positions, 600 positions."""
    rng = np.random.default_rng(1322)
    truth = np.zeros(600, dtype=int)
    truth[50:170] = 1
    truth[300:330] = 1
    truth[420:560] = 1
    flips = rng.random(truth.size) < 0.12
    predicted = np.where(flips, 1 - truth, truth)
    return {"predicted": predicted, "true": truth}


def write_prediction_table(path, predicted, true=None):
    """Write a four-column prediction table (two columns when ``true`` is None)."""
    with open(path, 'w') as f:
        if true is None:
            f.write("position,label\n")
            for i, p in enumerate(predicted):
                f.write(f"{i},{int(p)}\n")
        else:
            f.write("position,label,probability,true_label\n")
            for i, (p, t) in enumerate(zip(predicted, true)):
                f.write(f"{i},{int(p)},0.5,{int(t)}\n")
    return Path(path)


@pytest.fixture
def table_writer():
    """Helper for tests that need custom prediction tables."""
    return write_prediction_table


@pytest.fixture
def prediction_table(temp_output_dir, noisy_signal):
    """Four-column prediction table built from ``noisy_signal``."""
    return write_prediction_table(
        temp_output_dir / "predictions.csv",
        noisy_signal["predicted"],
        noisy_signal["true"],
    )

# ProphageSignal v0.1.0
# Any usage is subject to this software's license.
