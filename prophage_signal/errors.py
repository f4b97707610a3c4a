#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProphageSignal v0.1.0

Exception hierarchy shared by the engine, the I/O adapters and the CLI.

Author: ProphageSignal Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""


class SignalError(Exception):
    """Base class for all errors raised deliberately by ProphageSignal."""
    pass


class ParameterUsageError(SignalError):
    """Raised when algorithm arguments are missing, surplus or unknown."""
    pass


class SignalParseError(SignalError, ValueError):
    """Raised when a parameter or a table row cannot be parsed."""
    pass


class InvalidParameterError(SignalError, ValueError):
    """Raised when a parsed value is outside its allowed range."""
    pass


class SignalIOError(SignalError, OSError):
    """Raised when an input cannot be read or an output cannot be written."""
    pass


class ConfigValidationError(SignalError):
    """Raised when configuration loading or validation fails."""
    pass


__all__ = [
    "SignalError",
    "ParameterUsageError",
    "SignalParseError",
    "InvalidParameterError",
    "SignalIOError",
    "ConfigValidationError",
]
