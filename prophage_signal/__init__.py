#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Package initialization and version metadata.

Denoises binary per-position prophage calls with one of five partitioned,
multi-threaded smoothing/clustering algorithms and scores the result against
ground-truth labels.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .version import __version__

__all__ = ["__version__"]

# ProphageSignal v0.1.0
# Any usage is subject to this software's license.
