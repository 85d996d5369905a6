"""Diff-syntax reports for CI systems that highlight `diff` code blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

from dyffpack.core.models import Diff, Report
from dyffpack.output.base import RENDER_FAILURES, render_failure
from dyffpack.output.human import HumanReport
from dyffpack.output.text import Styler

if TYPE_CHECKING:
    from dyffpack.config import ReportConfig


@dataclass(frozen=True, slots=True)
class DiffSyntaxPrefixes:
    """Line prefixes a CI system's diff highlighter reacts to."""

    path: str
    root_description: str
    change_type: str


GITHUB_PREFIXES = DiffSyntaxPrefixes(path="@@", root_description="#", change_type="!")
GITLAB_PREFIXES = DiffSyntaxPrefixes(path="=", root_description="=", change_type="#")
GITEA_PREFIXES = DiffSyntaxPrefixes(path="@@", root_description="=", change_type="!")


@dataclass(frozen=True, slots=True)
class DiffSyntaxReport:
    report: Report
    prefixes: DiffSyntaxPrefixes
    do_not_inspect_certs: bool = False
    use_go_patch_paths: bool = False
    minor_change_threshold: float = 0.1
    multiline_context_lines: int = 4
    styler: Styler = field(default_factory=Styler)

    @classmethod
    def from_config(
        cls,
        report: Report,
        config: "ReportConfig",
        prefixes: DiffSyntaxPrefixes,
        *,
        color: bool = False,
    ) -> "DiffSyntaxReport":
        return cls(
            report=report,
            prefixes=prefixes,
            do_not_inspect_certs=config.do_not_inspect_certs,
            use_go_patch_paths=config.use_go_patch_paths,
            minor_change_threshold=config.minor_change_threshold,
            multiline_context_lines=config.multiline_context_lines,
            styler=Styler(color=color),
        )

    def write_report(self, out: TextIO) -> None:
        human = HumanReport(
            report=self.report,
            indent=0,
            omit_header=True,
            no_table_style=True,
            do_not_inspect_certs=self.do_not_inspect_certs,
            use_go_patch_paths=self.use_go_patch_paths,
            minor_change_threshold=self.minor_change_threshold,
            multiline_context_lines=self.multiline_context_lines,
            prefix_multiline=True,
            styler=self.styler,
        )
        for diff in self.report.diffs:
            try:
                text = self.render_diff(human, diff)
            except RENDER_FAILURES as error:
                raise render_failure(diff, error) from error
            out.write(text)
            out.write("\n")
        if not self.report.diffs:
            out.write("\n")

    def render_diff(self, human: HumanReport, diff: Diff) -> str:
        path_text = diff.path.to_string(use_go_patch_paths=self.use_go_patch_paths)
        lines = [f"{self.prefixes.path} {path_text} {self.prefixes.path}"]
        root_description = diff.path.root_description()
        if root_description:
            lines.append(f"{self.prefixes.root_description} {root_description}")
        for detail in diff.details:
            block = human.render_detail(diff.path, detail)
            lines.append(f"{self.prefixes.change_type} {block.description}")
            lines.extend(block.lines)
        return "\n".join(lines) + "\n"
