"""Core exceptions shared by the report, filter and output subsystems."""


class DyffError(Exception):
    """Base class for dyffkit errors."""


class PathParseError(DyffError, ValueError):
    """Path string could not be parsed."""


class FilterPatternError(DyffError):
    """Filter or exclude regular expression failed to compile."""


class UnknownOutputStyleError(DyffError):
    """Output style identifier is not registered."""


class RenderError(DyffError):
    """Report could not be rendered or written to its destination."""


class DocumentMetadataError(RenderError):
    """Document identity required for structured output is missing or invalid."""


class PathLookupError(DyffError, LookupError):
    """Path does not resolve to a value inside a document."""
