"""Human readable report: a header followed by one block per difference."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, TextIO

from dyffpack.core.models import Detail, Diff, Kind, Report, unhandled_kind
from dyffpack.core.path import Path
from dyffpack.output.base import RENDER_FAILURES, render_failure, shows_document
from dyffpack.output.certs import describe_certificate, looks_like_certificate
from dyffpack.output.text import (
    Styler,
    TextHunks,
    change_ratio,
    fits_side_by_side,
    highlight_changes,
    is_multiline,
    is_whitespace_only_change,
    multiline_hunks,
    plural,
    render_inline_list,
    render_value,
    show_whitespace,
    side_by_side,
    type_name,
)

if TYPE_CHECKING:
    from dyffpack.config import ReportConfig

Paint = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class DetailBlock:
    """Description line plus the unindented body lines of one detail."""

    description: str
    lines: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class HumanReport:
    report: Report
    indent: int = 2
    omit_header: bool = False
    no_table_style: bool = False
    do_not_inspect_certs: bool = False
    use_go_patch_paths: bool = False
    minor_change_threshold: float = 0.1
    multiline_context_lines: int = 4
    prefix_multiline: bool = False
    terminal_width: int = 80
    styler: Styler = field(default_factory=Styler)

    @classmethod
    def from_config(
        cls,
        report: Report,
        config: "ReportConfig",
        *,
        color: bool = False,
        terminal_width: int = 80,
    ) -> "HumanReport":
        return cls(
            report=report,
            omit_header=config.omit_header,
            no_table_style=config.no_table_style,
            do_not_inspect_certs=config.do_not_inspect_certs,
            use_go_patch_paths=config.use_go_patch_paths,
            minor_change_threshold=config.minor_change_threshold,
            multiline_context_lines=config.multiline_context_lines,
            terminal_width=terminal_width,
            styler=Styler(color=color),
        )

    def write_report(self, out: TextIO) -> None:
        if not self.omit_header:
            out.write(self.render_header())
        for diff in self.report.diffs:
            try:
                text = self.render_diff(diff)
            except RENDER_FAILURES as error:
                raise render_failure(diff, error) from error
            out.write("\n")
            out.write(text)
        out.write("\n")

    def render_header(self) -> str:
        styler = self.styler
        lines = [
            f"between {styler.heading(self.report.from_file.label)}",
            f"    and {styler.heading(self.report.to_file.label)}",
        ]
        for input_file in (self.report.from_file, self.report.to_file):
            if input_file.note:
                lines.append(styler.note(f"({input_file.note})"))
        lines.append("")
        count = len(self.report.diffs)
        lines.append(f"returned {styler.heading(plural(count, 'difference'))}")
        return "\n".join(lines) + "\n"

    def path_line(self, path: Path) -> str:
        line = self.styler.heading(path.to_string(use_go_patch_paths=self.use_go_patch_paths))
        if shows_document(path):
            line += "  " + self.styler.note(f"({path.root_description()})")
        return line

    def render_diff(self, diff: Diff) -> str:
        pad = " " * self.indent
        lines = [self.path_line(diff.path)]
        for detail in diff.details:
            block = self.render_detail(diff.path, detail)
            lines.append(pad + block.description)
            lines.extend(pad + pad + line if line else "" for line in block.lines)
        return "\n".join(lines) + "\n"

    def render_detail(self, path: Path, detail: Detail) -> DetailBlock:
        if detail.kind is Kind.ADDITION:
            return self._entries(path, detail.to_value, "+", "added", self.styler.added)
        if detail.kind is Kind.REMOVAL:
            return self._entries(path, detail.from_value, "-", "removed", self.styler.removed)
        if detail.kind is Kind.MODIFICATION:
            return self._modification(detail.from_value, detail.to_value)
        if detail.kind is Kind.ORDERCHANGE:
            return self._order_change(detail.from_value, detail.to_value)
        unhandled_kind(detail.kind)

    def _entries(self, path: Path, value: Any, symbol: str, verb: str, paint: Paint) -> DetailBlock:
        if path.is_root:
            noun = "one document"
        elif isinstance(value, dict):
            noun = plural(len(value), "map entry", "map entries")
        elif isinstance(value, list):
            noun = plural(len(value), "list entry", "list entries")
        else:
            noun = "one value"
        description = paint(f"{symbol} {noun} {verb}:")

        text_lines = render_value(value).split("\n")
        if self.prefix_multiline:
            body = tuple(paint(f"{symbol} {line}") for line in text_lines)
        else:
            body = tuple(paint(line) for line in text_lines)
        return DetailBlock(description, body)

    def _modification(self, from_value: Any, to_value: Any) -> DetailBlock:
        from_type = type_name(from_value)
        to_type = type_name(to_value)
        if from_type != to_type:
            return DetailBlock(
                self.styler.modified(f"± type change from {from_type} to {to_type}"),
                self._replacement(from_value, to_value),
            )
        if isinstance(from_value, str):
            return self._text_modification(from_value, to_value)
        return DetailBlock(
            self.styler.modified("± value change"),
            self._replacement(from_value, to_value),
        )

    def _text_modification(self, from_text: str, to_text: str) -> DetailBlock:
        styler = self.styler
        if (
            not self.do_not_inspect_certs
            and looks_like_certificate(from_text)
            and looks_like_certificate(to_text)
        ):
            from_summary = describe_certificate(from_text)
            to_summary = describe_certificate(to_text)
            if from_summary is not None and to_summary is not None:
                hunks = multiline_hunks(
                    from_summary,
                    to_summary,
                    context_lines=self.multiline_context_lines,
                )
                return DetailBlock(styler.modified("± certificate change"), self._hunk_lines(hunks))

        if is_whitespace_only_change(from_text, to_text):
            return DetailBlock(
                styler.modified("± whitespace only change"),
                self._replacement(show_whitespace(from_text), show_whitespace(to_text)),
            )

        if is_multiline(from_text) or is_multiline(to_text):
            hunks = multiline_hunks(
                from_text,
                to_text,
                context_lines=self.multiline_context_lines,
            )
            description = (
                "± value change in multiline text "
                f"({plural(hunks.inserts, 'insert')}, {plural(hunks.deletions, 'deletion')})"
            )
            return DetailBlock(styler.modified(description), self._hunk_lines(hunks))

        if change_ratio(from_text, to_text) <= self.minor_change_threshold:
            left, right = highlight_changes(from_text, to_text, styler)
            return DetailBlock(
                styler.modified("± value change"),
                (f"{styler.removed('-')} {left}", f"{styler.added('+')} {right}"),
            )

        return DetailBlock(styler.modified("± value change"), self._replacement(from_text, to_text))

    def _order_change(self, from_value: Any, to_value: Any) -> DetailBlock:
        description = self.styler.modified("⇆ order changed")
        if _scalar_list(from_value) and _scalar_list(to_value):
            return DetailBlock(
                description,
                (
                    self.styler.removed(f"- {render_inline_list(from_value)}"),
                    self.styler.added(f"+ {render_inline_list(to_value)}"),
                ),
            )
        return DetailBlock(description, self._replacement(from_value, to_value))

    def _replacement(self, from_value: Any, to_value: Any) -> tuple[str, ...]:
        left = self._marked(render_value(from_value), "-", self.styler.removed)
        right = self._marked(render_value(to_value), "+", self.styler.added)
        if (
            not self.no_table_style
            and (len(left) > 1 or len(right) > 1)
            and fits_side_by_side(left, right, width=self.terminal_width - 2 * self.indent)
        ):
            return tuple(side_by_side(left, right))
        return tuple(left + right)

    def _marked(self, text: str, marker: str, paint: Paint) -> list[str]:
        lines = text.split("\n")
        if self.prefix_multiline:
            return [paint(f"{marker} {line}") for line in lines]
        return [paint(f"{marker} {lines[0]}")] + [paint(f"  {line}") for line in lines[1:]]

    def _hunk_lines(self, hunks: TextHunks) -> tuple[str, ...]:
        lines: list[str] = []
        for marker, text in hunks.lines:
            if marker == "-":
                lines.append(self.styler.removed(f"- {text}"))
            elif marker == "+":
                lines.append(self.styler.added(f"+ {text}"))
            elif marker == "~":
                lines.append(self.styler.note(text))
            else:
                lines.append(f"  {text}")
        return tuple(lines)


def _scalar_list(value: Any) -> bool:
    return isinstance(value, list) and not any(isinstance(item, (dict, list)) for item in value)
