"""Stable public API surface for dyffkit.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from dyffpack.compare import CompareOptions, compare_input_files
from dyffpack.config import (
    DEFAULT_REPORT_CONFIG,
    ReportConfig,
    ReportConfigError,
    load_report_config_from_file,
)
from dyffpack.core import (
    Detail,
    Diff,
    DocumentMetadataError,
    DyffError,
    InputFile,
    Kind,
    Path as DocumentPath,
    RenderError,
    Report,
    UnknownOutputStyleError,
    parse_path_string,
)
from dyffpack.inputs import change_root, load_input_file
from dyffpack.output import build_report_writer, render_to_string

__version__ = "0.1.0"


def load(location: str | Path) -> InputFile:
    """Load all documents from a file path, URL or `-` for standard input."""
    return load_input_file(str(location))


def compare(
    from_location: str | Path | InputFile,
    to_location: str | Path | InputFile,
    *,
    config: ReportConfig | None = None,
    **options: Any,
) -> Report:
    """Compare two inputs and return the filtered difference report.

    Args:
        from_location: Original input, as a location or an already loaded file.
        to_location: Changed input, as a location or an already loaded file.
        config: Report configuration; defaults to `DEFAULT_REPORT_CONFIG`.
        **options: `ReportConfig` field overrides such as
            `ignore_order_changes=True` or `filters=("/spec",)`.

    Returns:
        Report with every configured filter applied.
    """
    effective = (config or DEFAULT_REPORT_CONFIG).with_overrides(options)
    from_file = from_location if isinstance(from_location, InputFile) else load(from_location)
    to_file = to_location if isinstance(to_location, InputFile) else load(to_location)
    report = compare_input_files(from_file, to_file, effective.to_compare_options())
    return report.apply(effective)


def render(
    report: Report,
    *,
    style: str | None = None,
    config: ReportConfig | None = None,
    color: bool = False,
    terminal_width: int = 80,
) -> str:
    """Render a report in one of the registered output styles.

    Args:
        report: Report to render.
        style: Output style or alias; overrides the style of `config`.
        config: Report configuration with the presentation options.
        color: Emit ANSI colors.
        terminal_width: Width used to decide on side-by-side layout.

    Returns:
        Rendered report text, always ending with a newline.
    """
    effective = config or DEFAULT_REPORT_CONFIG
    if style is not None:
        effective = effective.with_overrides({"style": style})
    writer = build_report_writer(report, effective, color=color, terminal_width=terminal_width)
    return render_to_string(lambda stream, _color: writer.write_report(stream), color=color)


__all__ = [
    "__version__",
    "CompareOptions",
    "ReportConfig",
    "ReportConfigError",
    "DEFAULT_REPORT_CONFIG",
    "DyffError",
    "RenderError",
    "DocumentMetadataError",
    "UnknownOutputStyleError",
    "Kind",
    "Detail",
    "Diff",
    "DocumentPath",
    "InputFile",
    "Report",
    "change_root",
    "parse_path_string",
    "load_report_config_from_file",
    "load",
    "compare",
    "render",
]
