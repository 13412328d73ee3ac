#!/usr/bin/env python3
"""
Exception types raised by the line walking core.

All of them are deterministic validation failures. Nothing here is worth
retrying: a caller that sees one of these has passed bad input.
"""


class LineWalkerError(ValueError):
    """Base class for all linewalker validation errors."""

    pass


class InvalidParameters(LineWalkerError):
    """Raised when a line or smoother is requested with unusable parameters."""

    pass


class DegenerateLine(LineWalkerError):
    """Raised when projecting onto a line that cannot define a direction."""

    pass


class OutOfRange(LineWalkerError):
    """Raised when a coordinate, heading or accuracy is outside its valid range."""

    pass
