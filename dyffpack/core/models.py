"""Diff report data model: kinds, details, diffs and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, NoReturn

from dyffpack.core.path import DocumentRef, KubernetesIdentity, Path

if TYPE_CHECKING:
    from dyffpack.config import ReportConfig


class Kind(str, Enum):
    """Closed set of change kinds; the values are the symbols shown to users."""

    ADDITION = "+"
    REMOVAL = "-"
    MODIFICATION = "±"
    ORDERCHANGE = "⇆"

    @property
    def label(self) -> str:
        return self.name.lower()


KIND_ORDER: tuple[Kind, ...] = (
    Kind.ADDITION,
    Kind.REMOVAL,
    Kind.MODIFICATION,
    Kind.ORDERCHANGE,
)


def unhandled_kind(kind: object) -> NoReturn:
    raise ValueError(f"unsupported change kind: {kind!r}")


class _MissingType:
    """Marker for an absent side of a detail, distinct from a YAML null."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _MissingType()


@dataclass(frozen=True, slots=True)
class Detail:
    """One semantic change at a path."""

    kind: Kind
    from_value: Any = MISSING
    to_value: Any = MISSING

    def __post_init__(self) -> None:
        if not isinstance(self.kind, Kind):
            raise TypeError(f"detail kind must be a Kind, got {self.kind!r}")
        has_from = self.from_value is not MISSING
        has_to = self.to_value is not MISSING
        if self.kind is Kind.ADDITION:
            valid = has_to and not has_from
        elif self.kind is Kind.REMOVAL:
            valid = has_from and not has_to
        elif self.kind is Kind.MODIFICATION or self.kind is Kind.ORDERCHANGE:
            valid = has_from and has_to
        else:
            unhandled_kind(self.kind)
        if not valid:
            raise ValueError(
                f"{self.kind.label} detail has invalid sides "
                f"(from={'set' if has_from else 'missing'}, to={'set' if has_to else 'missing'})"
            )

    @property
    def has_from(self) -> bool:
        return self.from_value is not MISSING

    @property
    def has_to(self) -> bool:
        return self.to_value is not MISSING

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind.label}
        if self.has_from:
            payload["from"] = self.from_value
        if self.has_to:
            payload["to"] = self.to_value
        return payload


@dataclass(frozen=True, slots=True)
class Diff:
    """All details found at one path."""

    path: Path
    details: tuple[Detail, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.details, tuple):
            object.__setattr__(self, "details", tuple(self.details))
        if not self.details:
            raise ValueError(f"diff at {self.path} needs at least one detail")

    def count(self, kind: Kind) -> int:
        return sum(1 for detail in self.details if detail.kind is kind)

    def has_kind(self, kind: Kind) -> bool:
        return any(detail.kind is kind for detail in self.details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "document": self.path.root_description(),
            "details": [detail.to_dict() for detail in self.details],
        }


@dataclass(frozen=True, slots=True)
class InputFile:
    """A loaded input: its location and the documents it contains."""

    location: str
    documents: tuple[Any, ...] = (None,)
    identities: tuple[KubernetesIdentity | None, ...] = ()
    note: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.documents, tuple):
            object.__setattr__(self, "documents", tuple(self.documents))
        if not isinstance(self.identities, tuple):
            object.__setattr__(self, "identities", tuple(self.identities))
        if self.identities and len(self.identities) != len(self.documents):
            raise ValueError(
                f"{self.location}: {len(self.identities)} identities for "
                f"{len(self.documents)} documents"
            )

    @property
    def label(self) -> str:
        return "stdin" if self.location == "-" else self.location

    def identity(self, index: int) -> KubernetesIdentity | None:
        if index < len(self.identities):
            return self.identities[index]
        return None

    def document_ref(self, index: int) -> DocumentRef:
        return DocumentRef(
            location=self.location,
            index=index,
            document_count=len(self.documents),
            kubernetes=self.identity(index),
        )


@dataclass(frozen=True, slots=True)
class Report:
    """Ordered differences between two inputs.

    Reports are immutable; filters return new reports sharing `from_file`
    and `to_file`.
    """

    from_file: InputFile
    to_file: InputFile
    diffs: tuple[Diff, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.diffs, tuple):
            object.__setattr__(self, "diffs", tuple(self.diffs))

    @property
    def identical(self) -> bool:
        return not self.diffs

    def with_diffs(self, diffs: Iterable[Diff]) -> "Report":
        return Report(from_file=self.from_file, to_file=self.to_file, diffs=tuple(diffs))

    def summary(self) -> dict[str, int]:
        counts = {kind.label: 0 for kind in KIND_ORDER}
        for diff in self.diffs:
            for detail in diff.details:
                counts[detail.kind.label] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_file.label,
            "to": self.to_file.label,
            "identical": self.identical,
            "summary": self.summary(),
            "diffs": [diff.to_dict() for diff in self.diffs],
        }

    def filter(self, *paths: str) -> "Report":
        from dyffpack.report.filters import filter_paths

        return filter_paths(self, *paths)

    def exclude(self, *paths: str) -> "Report":
        from dyffpack.report.filters import exclude_paths

        return exclude_paths(self, *paths)

    def filter_regexp(self, *patterns: str) -> "Report":
        from dyffpack.report.filters import filter_regexps

        return filter_regexps(self, *patterns)

    def exclude_regexp(self, *patterns: str) -> "Report":
        from dyffpack.report.filters import exclude_regexps

        return exclude_regexps(self, *patterns)

    def filter_document(self, *names: str) -> "Report":
        from dyffpack.report.filters import filter_documents

        return filter_documents(self, *names)

    def exclude_document(self, *names: str) -> "Report":
        from dyffpack.report.filters import exclude_documents

        return exclude_documents(self, *names)

    def filter_document_regexp(self, *patterns: str) -> "Report":
        from dyffpack.report.filters import filter_document_regexps

        return filter_document_regexps(self, *patterns)

    def exclude_document_regexp(self, *patterns: str) -> "Report":
        from dyffpack.report.filters import exclude_document_regexps

        return exclude_document_regexps(self, *patterns)

    def ignore_value_changes(self) -> "Report":
        from dyffpack.report.filters import ignore_value_changes

        return ignore_value_changes(self)

    def ignore_new_documents(self) -> "Report":
        from dyffpack.report.filters import ignore_new_documents

        return ignore_new_documents(self)

    def apply(self, config: "ReportConfig") -> "Report":
        from dyffpack.report.filters import apply_report_filters

        return apply_report_filters(self, config)
