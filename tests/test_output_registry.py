import pytest

from dyffpack.config import ReportConfig
from dyffpack.core import InputFile, Report, UnknownOutputStyleError
from dyffpack.output import (
    BriefReport,
    DiffSyntaxReport,
    HumanReport,
    YAMLReport,
    build_report_writer,
    list_output_styles,
    normalize_output_style,
    register_report_writer,
)
from dyffpack.output.diff_syntax import GITEA_PREFIXES, GITHUB_PREFIXES, GITLAB_PREFIXES


def _report() -> Report:
    return Report(from_file=InputFile(location="a.yml"), to_file=InputFile(location="b.yml"))


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("human", "human"),
        ("BOSH", "human"),
        ("linguist", "github"),
        ("rogue", "gitlab"),
        ("forgejo", "gitea"),
        ("yml", "yaml"),
        ("short", "brief"),
        (" Summary ", "brief"),
    ],
)
def test_normalize_output_style_aliases(value: str, expected: str) -> None:
    assert normalize_output_style(value) == expected


def test_unknown_output_style_is_rejected_at_lookup() -> None:
    with pytest.raises(UnknownOutputStyleError, match="unknown output style 'fancy'"):
        normalize_output_style("fancy")


def test_list_output_styles_includes_aliases() -> None:
    styles = list_output_styles()

    assert "human" in styles
    assert "linguist" in styles
    assert styles == tuple(sorted(styles))


def test_build_report_writer_selects_implementation() -> None:
    report = _report()

    assert isinstance(build_report_writer(report, ReportConfig()), HumanReport)
    assert isinstance(build_report_writer(report, ReportConfig(style="yml")), YAMLReport)
    assert isinstance(build_report_writer(report, ReportConfig(style="brief")), BriefReport)

    github = build_report_writer(report, ReportConfig(style="github"))
    gitlab = build_report_writer(report, ReportConfig(style="gitlab"))
    gitea = build_report_writer(report, ReportConfig(style="gitea"))
    assert isinstance(github, DiffSyntaxReport)
    assert github.prefixes == GITHUB_PREFIXES
    assert isinstance(gitlab, DiffSyntaxReport)
    assert gitlab.prefixes == GITLAB_PREFIXES
    assert isinstance(gitea, DiffSyntaxReport)
    assert gitea.prefixes == GITEA_PREFIXES


def test_build_report_writer_passes_presentation_options() -> None:
    writer = build_report_writer(
        _report(),
        ReportConfig(omit_header=True, no_table_style=True),
        color=True,
        terminal_width=120,
    )

    assert isinstance(writer, HumanReport)
    assert writer.omit_header
    assert writer.no_table_style
    assert writer.styler.color
    assert writer.terminal_width == 120


def test_register_report_writer_rejects_duplicates() -> None:
    with pytest.raises(ValueError, match="already registered"):
        register_report_writer("human", lambda report, config, color, width: BriefReport(report))
    with pytest.raises(ValueError, match="cannot be empty"):
        register_report_writer("  ", lambda report, config, color, width: BriefReport(report))
