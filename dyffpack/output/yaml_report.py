"""Machine readable report: one YAML document per compared document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TextIO

import yaml

from dyffpack.core.exceptions import DocumentMetadataError, RenderError
from dyffpack.core.models import Report
from dyffpack.report.grouping import DocumentGroup, consolidate_groups, group_by_document


@dataclass(frozen=True, slots=True)
class YAMLReport:
    report: Report

    def records(self) -> list[dict[str, Any]]:
        groups = consolidate_groups(group_by_document(self.report.diffs))
        return [self._record(group) for group in groups]

    def write_report(self, out: TextIO) -> None:
        records = self.records()
        if records:
            try:
                text = yaml.safe_dump_all(
                    records,
                    explicit_start=True,
                    sort_keys=False,
                    allow_unicode=True,
                    default_flow_style=False,
                )
            except yaml.YAMLError as error:
                raise RenderError(f"failed to render YAML report: {error}") from error
            out.write(text)
        out.write("\n")

    def _record(self, group: DocumentGroup) -> dict[str, Any]:
        if not group.root_description:
            first_path = group.diffs[0].path if group.diffs else "/"
            raise DocumentMetadataError(
                f"difference at {first_path} does not belong to an identifiable document"
            )

        record: dict[str, Any] = {"document": group.root_description}
        identity = group.document.kubernetes if group.document is not None else None
        if identity is not None:
            record.update(identity.to_dict())
        record["diffs"] = [
            {
                "path": str(diff.path),
                "details": [detail.to_dict() for detail in diff.details],
            }
            for diff in group.diffs
        ]
        return record
