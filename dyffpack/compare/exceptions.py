"""Comparison subsystem exceptions."""

from dyffpack.core.exceptions import DyffError


class CompareError(DyffError):
    """Two inputs could not be compared."""
