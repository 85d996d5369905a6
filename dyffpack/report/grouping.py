"""Group diffs by originating document and consolidate one-sided pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from dyffpack.core.models import Detail, Diff, Kind
from dyffpack.core.path import DocumentRef


@dataclass(frozen=True, slots=True)
class DocumentGroup:
    """Diffs of one document, in report order."""

    root_description: str
    document: DocumentRef | None
    diffs: tuple[Diff, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "document": self.root_description,
            "diffs": [diff.to_dict() for diff in self.diffs],
        }


def group_by_document(diffs: Iterable[Diff]) -> list[DocumentGroup]:
    """Partition diffs by root description, groups in first-seen order."""
    order: list[str] = []
    grouped: dict[str, list[Diff]] = {}
    documents: dict[str, DocumentRef | None] = {}

    for diff in diffs:
        description = diff.path.root_description()
        if description not in grouped:
            order.append(description)
            grouped[description] = []
            documents[description] = diff.path.document
        grouped[description].append(diff)

    return [
        DocumentGroup(
            root_description=description,
            document=documents[description],
            diffs=tuple(grouped[description]),
        )
        for description in order
    ]


def consolidate_diff(diff: Diff) -> Diff:
    """Merge an addition plus a removal at the same path into one modification.

    Any other shape is returned unchanged.
    """
    if len(diff.details) != 2:
        return diff

    addition = _single(diff.details, Kind.ADDITION)
    removal = _single(diff.details, Kind.REMOVAL)
    if addition is None or removal is None:
        return diff

    return Diff(
        path=diff.path,
        details=(
            Detail(
                kind=Kind.MODIFICATION,
                from_value=removal.from_value,
                to_value=addition.to_value,
            ),
        ),
    )


def consolidate_groups(groups: Iterable[DocumentGroup]) -> list[DocumentGroup]:
    return [
        DocumentGroup(
            root_description=group.root_description,
            document=group.document,
            diffs=tuple(consolidate_diff(diff) for diff in group.diffs),
        )
        for group in groups
    ]


def _single(details: tuple[Detail, ...], kind: Kind) -> Detail | None:
    matches = [detail for detail in details if detail.kind is kind]
    if len(matches) != 1:
        return None
    return matches[0]
