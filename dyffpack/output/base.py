"""Report writer contract shared by every output style."""

from __future__ import annotations

from typing import Protocol, TextIO

import yaml

from dyffpack.core.exceptions import RenderError
from dyffpack.core.models import Diff
from dyffpack.core.path import Path


# errors raised while rendering one difference, wrapped by `render_failure`
RENDER_FAILURES: tuple[type[Exception], ...] = (
    ValueError,
    TypeError,
    LookupError,
    AttributeError,
    yaml.YAMLError,
)


class ReportWriter(Protocol):
    """Protocol for report renderers."""

    def write_report(self, out: TextIO) -> None:
        """Write the complete report to `out`, ending with a newline."""


def shows_document(path: Path) -> bool:
    """Whether a path line should name the document it belongs to."""
    document = path.document
    if document is None:
        return False
    return document.document_count > 1 or document.kubernetes is not None


def render_failure(diff: Diff, error: Exception) -> RenderError:
    document = diff.path.root_description() or "unknown document"
    return RenderError(f"failed to render difference at {diff.path} ({document}): {error}")
