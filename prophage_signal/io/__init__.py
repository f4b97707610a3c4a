"""
ProphageSignal v0.1.0

I/O adapters for prediction tables, label tables and probability tables.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .tables import (
    LabelTable,
    ConversionResult,
    read_label_table,
    read_label_column,
    write_label_column,
    write_json,
    convert_probability_table,
    convert_probability_files,
)

__all__ = [
    "LabelTable",
    "ConversionResult",
    "read_label_table",
    "read_label_column",
    "write_label_column",
    "write_json",
    "convert_probability_table",
    "convert_probability_files",
]
