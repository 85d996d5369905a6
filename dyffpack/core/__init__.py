"""Core path and diff report models for dyffkit."""

from dyffpack.core.exceptions import (
    DocumentMetadataError,
    DyffError,
    FilterPatternError,
    PathLookupError,
    PathParseError,
    RenderError,
    UnknownOutputStyleError,
)
from dyffpack.core.models import KIND_ORDER, MISSING, Detail, Diff, InputFile, Kind, Report
from dyffpack.core.path import (
    IDENTIFIER_CANDIDATES,
    ROOT_LEVEL,
    DocumentRef,
    KubernetesIdentity,
    Path,
    PathElement,
    grab,
    parse_path_string,
)

__all__ = [
    "DyffError",
    "PathParseError",
    "PathLookupError",
    "FilterPatternError",
    "UnknownOutputStyleError",
    "RenderError",
    "DocumentMetadataError",
    "Kind",
    "KIND_ORDER",
    "MISSING",
    "Detail",
    "Diff",
    "InputFile",
    "Report",
    "IDENTIFIER_CANDIDATES",
    "ROOT_LEVEL",
    "PathElement",
    "KubernetesIdentity",
    "DocumentRef",
    "Path",
    "parse_path_string",
    "grab",
]
