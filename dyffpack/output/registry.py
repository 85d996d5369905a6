"""Output style registry: style identifiers and aliases to report writers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from dyffpack.core.exceptions import UnknownOutputStyleError
from dyffpack.core.models import Report
from dyffpack.output.base import ReportWriter
from dyffpack.output.brief import BriefReport
from dyffpack.output.diff_syntax import (
    GITEA_PREFIXES,
    GITHUB_PREFIXES,
    GITLAB_PREFIXES,
    DiffSyntaxPrefixes,
    DiffSyntaxReport,
)
from dyffpack.output.human import HumanReport
from dyffpack.output.yaml_report import YAMLReport

if TYPE_CHECKING:
    from dyffpack.config import ReportConfig

# (report, config, color, terminal_width) -> writer
WriterFactory = Callable[[Report, "ReportConfig", bool, int], ReportWriter]

_WRITER_REGISTRY: dict[str, WriterFactory] = {}
_STYLE_ALIASES: dict[str, str] = {}


def register_report_writer(
    style: str,
    factory: WriterFactory,
    *,
    aliases: tuple[str, ...] = (),
    overwrite: bool = False,
) -> None:
    normalized_style = style.strip().lower()
    if not normalized_style:
        raise ValueError("Output style cannot be empty.")
    if not overwrite and normalized_style in _WRITER_REGISTRY:
        raise ValueError(f"Output style '{normalized_style}' is already registered.")
    _WRITER_REGISTRY[normalized_style] = factory
    _STYLE_ALIASES[normalized_style] = normalized_style
    for alias in aliases:
        _STYLE_ALIASES[alias.strip().lower()] = normalized_style


def normalize_output_style(value: str) -> str:
    """Map a style identifier or alias (any case) to its canonical style."""
    key = value.strip().lower()
    if key not in _STYLE_ALIASES:
        raise UnknownOutputStyleError(
            f"unknown output style '{value}', supported styles: {', '.join(list_output_styles())}"
        )
    return _STYLE_ALIASES[key]


def list_output_styles() -> tuple[str, ...]:
    return tuple(sorted(_STYLE_ALIASES))


def build_report_writer(
    report: Report,
    config: "ReportConfig",
    *,
    color: bool = False,
    terminal_width: int = 80,
) -> ReportWriter:
    factory = _WRITER_REGISTRY[normalize_output_style(config.style)]
    return factory(report, config, color, terminal_width)


def _human_writer(report: Report, config: "ReportConfig", color: bool, width: int) -> ReportWriter:
    return HumanReport.from_config(report, config, color=color, terminal_width=width)


def _diff_syntax_writer(prefixes: DiffSyntaxPrefixes) -> WriterFactory:
    def factory(report: Report, config: "ReportConfig", color: bool, width: int) -> ReportWriter:
        return DiffSyntaxReport.from_config(report, config, prefixes, color=color)

    return factory


def _yaml_writer(report: Report, config: "ReportConfig", color: bool, width: int) -> ReportWriter:
    return YAMLReport(report)


def _brief_writer(report: Report, config: "ReportConfig", color: bool, width: int) -> ReportWriter:
    return BriefReport(report)


register_report_writer("human", _human_writer, aliases=("bosh",))
register_report_writer("github", _diff_syntax_writer(GITHUB_PREFIXES), aliases=("linguist",))
register_report_writer("gitlab", _diff_syntax_writer(GITLAB_PREFIXES), aliases=("rogue",))
register_report_writer("gitea", _diff_syntax_writer(GITEA_PREFIXES), aliases=("forgejo",))
register_report_writer("yaml", _yaml_writer, aliases=("yml",))
register_report_writer("brief", _brief_writer, aliases=("short", "summary"))
