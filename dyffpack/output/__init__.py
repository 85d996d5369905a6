"""Report renderers, the style registry and output sinks."""

from dyffpack.output.base import ReportWriter
from dyffpack.output.brief import BriefReport
from dyffpack.output.diff_syntax import (
    GITEA_PREFIXES,
    GITHUB_PREFIXES,
    GITLAB_PREFIXES,
    DiffSyntaxPrefixes,
    DiffSyntaxReport,
)
from dyffpack.output.documents import restructure, write_documents
from dyffpack.output.human import HumanReport
from dyffpack.output.registry import (
    build_report_writer,
    list_output_styles,
    normalize_output_style,
    register_report_writer,
)
from dyffpack.output.sink import render_to_string, write_in_place, write_to_stdout
from dyffpack.output.yaml_report import YAMLReport

__all__ = [
    "ReportWriter",
    "HumanReport",
    "DiffSyntaxReport",
    "DiffSyntaxPrefixes",
    "GITHUB_PREFIXES",
    "GITLAB_PREFIXES",
    "GITEA_PREFIXES",
    "YAMLReport",
    "BriefReport",
    "build_report_writer",
    "normalize_output_style",
    "list_output_styles",
    "register_report_writer",
    "render_to_string",
    "write_to_stdout",
    "write_in_place",
    "restructure",
    "write_documents",
]
