"""Structural comparison producing diff reports."""

from dyffpack.compare.engine import compare_input_files
from dyffpack.compare.exceptions import CompareError
from dyffpack.compare.options import DEFAULT_COMPARE_OPTIONS, CompareOptions

__all__ = [
    "CompareError",
    "CompareOptions",
    "DEFAULT_COMPARE_OPTIONS",
    "compare_input_files",
]
