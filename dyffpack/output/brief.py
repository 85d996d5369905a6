"""One line per difference: the path and a tally of its change kinds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

from dyffpack.core.models import KIND_ORDER, Diff, Kind, Report, unhandled_kind
from dyffpack.output.base import shows_document


def kind_noun(kind: Kind, count: int) -> str:
    if kind is Kind.ADDITION:
        noun = "addition"
    elif kind is Kind.REMOVAL:
        noun = "removal"
    elif kind is Kind.MODIFICATION:
        noun = "modification"
    elif kind is Kind.ORDERCHANGE:
        noun = "order change"
    else:
        unhandled_kind(kind)
    return noun if count == 1 else f"{noun}s"


def tally(diff: Diff) -> str:
    parts = []
    for kind in KIND_ORDER:
        count = diff.count(kind)
        if count:
            parts.append(f"{count} {kind_noun(kind, count)}")
    return ", ".join(parts)


@dataclass(frozen=True, slots=True)
class BriefReport:
    report: Report

    def write_report(self, out: TextIO) -> None:
        if not self.report.diffs:
            out.write("\n")
            return
        for diff in self.report.diffs:
            line = f"{diff.path}: {tally(diff)}"
            if shows_document(diff.path):
                line += f"  ({diff.path.root_description()})"
            out.write(line + "\n")
