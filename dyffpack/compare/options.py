"""Comparison options."""

from __future__ import annotations

from dataclasses import dataclass, field

from dyffpack.core.path import IDENTIFIER_CANDIDATES


@dataclass(frozen=True, slots=True)
class CompareOptions:
    """Policy knobs for the structural comparison."""

    ignore_order_changes: bool = False
    ignore_whitespace_changes: bool = False
    kubernetes_entity_detection: bool = True
    additional_identifiers: tuple[str, ...] = field(default_factory=tuple)
    detect_renames: bool = True
    marshal_json_strings: bool = False
    chomp_block_scalars: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.additional_identifiers, tuple):
            object.__setattr__(
                self,
                "additional_identifiers",
                tuple(self.additional_identifiers),
            )

    def identifier_candidates(self) -> tuple[str, ...]:
        candidates = list(IDENTIFIER_CANDIDATES)
        for identifier in self.additional_identifiers:
            if identifier and identifier not in candidates:
                candidates.append(identifier)
        return tuple(candidates)


DEFAULT_COMPARE_OPTIONS = CompareOptions()
