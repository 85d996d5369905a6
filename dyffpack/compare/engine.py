"""Structural comparison of two loaded inputs into a diff report."""

from __future__ import annotations

from collections import Counter
import json
import logging
from typing import Any

from dyffpack.compare.exceptions import CompareError
from dyffpack.compare.options import DEFAULT_COMPARE_OPTIONS, CompareOptions
from dyffpack.core.models import Detail, Diff, InputFile, Kind, Report
from dyffpack.core.path import KubernetesIdentity, Path, PathElement

logger = logging.getLogger(__name__)

DocumentPair = tuple[int | None, int | None]


def compare_input_files(
    from_file: InputFile,
    to_file: InputFile,
    options: CompareOptions = DEFAULT_COMPARE_OPTIONS,
) -> Report:
    """Compare all documents of `from_file` with those of `to_file`.

    Documents are paired by Kubernetes identity when entity detection is on
    and every document has one, otherwise by position.
    """
    comparator = _Comparator(options)
    diffs: list[Diff] = []

    try:
        for from_index, to_index in _pair_documents(from_file, to_file, options):
            if to_index is None:
                diffs.append(
                    Diff(
                        path=Path(document=from_file.document_ref(from_index)),
                        details=(
                            Detail(kind=Kind.REMOVAL, from_value=from_file.documents[from_index]),
                        ),
                    )
                )
            elif from_index is None:
                diffs.append(
                    Diff(
                        path=Path(document=to_file.document_ref(to_index)),
                        details=(
                            Detail(kind=Kind.ADDITION, to_value=to_file.documents[to_index]),
                        ),
                    )
                )
            else:
                diffs.extend(
                    comparator.compare(
                        from_file.documents[from_index],
                        to_file.documents[to_index],
                        Path(document=from_file.document_ref(from_index)),
                    )
                )
    except RecursionError as error:
        raise CompareError(
            f"failed to compare {from_file.label} with {to_file.label}: "
            "documents are nested too deeply"
        ) from error

    logger.info(
        "compared %s with %s: %d difference(s)",
        from_file.label,
        to_file.label,
        len(diffs),
    )
    return Report(from_file=from_file, to_file=to_file, diffs=tuple(diffs))


def _pair_documents(
    from_file: InputFile,
    to_file: InputFile,
    options: CompareOptions,
) -> list[DocumentPair]:
    if options.kubernetes_entity_detection:
        from_names = _identity_names(from_file)
        to_names = _identity_names(to_file)
        if from_names is not None and to_names is not None:
            return _pair_by_identity(from_file, to_file, from_names, to_names, options)

    from_count = len(from_file.documents)
    to_count = len(to_file.documents)
    return [
        (idx if idx < from_count else None, idx if idx < to_count else None)
        for idx in range(max(from_count, to_count))
    ]


def _identity_names(input_file: InputFile) -> list[str] | None:
    names: list[str] = []
    for idx in range(len(input_file.documents)):
        identity = input_file.identity(idx)
        if identity is None:
            return None
        names.append(identity.display_name())
    if len(set(names)) != len(names):
        return None
    return names


def _pair_by_identity(
    from_file: InputFile,
    to_file: InputFile,
    from_names: list[str],
    to_names: list[str],
    options: CompareOptions,
) -> list[DocumentPair]:
    to_positions = {name: idx for idx, name in enumerate(to_names)}
    pairs: list[DocumentPair] = []
    matched_to: set[int] = set()

    for from_index, name in enumerate(from_names):
        to_index = to_positions.get(name)
        if to_index is not None:
            matched_to.add(to_index)
        pairs.append((from_index, to_index))

    unmatched_to = [idx for idx in range(len(to_names)) if idx not in matched_to]

    if options.detect_renames:
        renamed = _detect_renames(
            from_file,
            to_file,
            [from_index for from_index, to_index in pairs if to_index is None],
            unmatched_to,
        )
        if renamed:
            pairs = [
                (from_index, renamed.get(from_index, to_index))
                for from_index, to_index in pairs
            ]
            unmatched_to = [idx for idx in unmatched_to if idx not in renamed.values()]

    pairs.extend((None, to_index) for to_index in unmatched_to)
    return pairs


def _detect_renames(
    from_file: InputFile,
    to_file: InputFile,
    removed: list[int],
    added: list[int],
) -> dict[int, int]:
    """Pair leftover entities that are the only ones of their type on each side."""

    def by_type(input_file: InputFile, indices: list[int]) -> dict[tuple[str, str], list[int]]:
        grouped: dict[tuple[str, str], list[int]] = {}
        for idx in indices:
            identity: KubernetesIdentity | None = input_file.identity(idx)
            if identity is not None:
                grouped.setdefault((identity.api_version, identity.kind), []).append(idx)
        return grouped

    removed_by_type = by_type(from_file, removed)
    added_by_type = by_type(to_file, added)

    renamed: dict[int, int] = {}
    for entity_type, from_indices in removed_by_type.items():
        to_indices = added_by_type.get(entity_type, [])
        if len(from_indices) == 1 and len(to_indices) == 1:
            renamed[from_indices[0]] = to_indices[0]
            logger.debug(
                "detected rename of %s to %s",
                from_file.identity(from_indices[0]).display_name(),
                to_file.identity(to_indices[0]).display_name(),
            )
    return renamed


class _Comparator:
    def __init__(self, options: CompareOptions) -> None:
        self._options = options
        self._identifiers = options.identifier_candidates()

    def compare(self, from_value: Any, to_value: Any, path: Path) -> list[Diff]:
        if isinstance(from_value, dict) and isinstance(to_value, dict):
            return self._compare_maps(from_value, to_value, path)
        if isinstance(from_value, list) and isinstance(to_value, list):
            return self._compare_lists(from_value, to_value, path)
        if isinstance(from_value, str) and isinstance(to_value, str):
            return self._compare_strings(from_value, to_value, path)
        if type(from_value) is type(to_value) and from_value == to_value:
            return []
        return [_modification(path, from_value, to_value)]

    def _compare_maps(
        self,
        from_value: dict[Any, Any],
        to_value: dict[Any, Any],
        path: Path,
    ) -> list[Diff]:
        diffs: list[Diff] = []
        removed: dict[Any, Any] = {}
        for key, value in from_value.items():
            if key in to_value:
                diffs.extend(
                    self.compare(value, to_value[key], path.child(PathElement.mapping_key(key)))
                )
            else:
                removed[key] = value
        added = {key: value for key, value in to_value.items() if key not in from_value}

        details: list[Detail] = []
        if removed:
            details.append(Detail(kind=Kind.REMOVAL, from_value=removed))
        if added:
            details.append(Detail(kind=Kind.ADDITION, to_value=added))
        if details:
            diffs.append(Diff(path=path, details=tuple(details)))
        return diffs

    def _compare_lists(self, from_value: list[Any], to_value: list[Any], path: Path) -> list[Diff]:
        identifier = self._named_list_identifier(from_value, to_value)
        if identifier is not None:
            return self._compare_named_lists(from_value, to_value, path, identifier)
        if all(_is_scalar(entry) for entry in from_value + to_value):
            return self._compare_simple_lists(from_value, to_value, path)
        return self._compare_indexed_lists(from_value, to_value, path)

    def _named_list_identifier(self, from_value: list[Any], to_value: list[Any]) -> str | None:
        entries = from_value + to_value
        if not entries or not all(isinstance(entry, dict) for entry in entries):
            return None
        for candidate in self._identifiers:
            if not all(candidate in entry and _is_scalar(entry[candidate]) for entry in entries):
                continue
            from_ids = [str(entry[candidate]) for entry in from_value]
            to_ids = [str(entry[candidate]) for entry in to_value]
            if len(set(from_ids)) == len(from_ids) and len(set(to_ids)) == len(to_ids):
                return candidate
        return None

    def _compare_named_lists(
        self,
        from_value: list[dict[str, Any]],
        to_value: list[dict[str, Any]],
        path: Path,
        identifier: str,
    ) -> list[Diff]:
        to_entries = {str(entry[identifier]): entry for entry in to_value}
        from_ids = [str(entry[identifier]) for entry in from_value]
        from_id_set = set(from_ids)

        diffs: list[Diff] = []
        removed: list[Any] = []
        for name, entry in zip(from_ids, from_value):
            if name in to_entries:
                diffs.extend(
                    self.compare(
                        entry,
                        to_entries[name],
                        path.child(PathElement.named_entry(identifier, name)),
                    )
                )
            else:
                removed.append(entry)
        added = [entry for entry in to_value if str(entry[identifier]) not in from_id_set]

        details: list[Detail] = []
        if removed:
            details.append(Detail(kind=Kind.REMOVAL, from_value=removed))
        if added:
            details.append(Detail(kind=Kind.ADDITION, to_value=added))

        if not self._options.ignore_order_changes:
            from_order = [name for name in from_ids if name in to_entries]
            to_order = [str(entry[identifier]) for entry in to_value if str(entry[identifier]) in from_id_set]
            if from_order != to_order:
                details.append(Detail(kind=Kind.ORDERCHANGE, from_value=from_order, to_value=to_order))

        if details:
            diffs.append(Diff(path=path, details=tuple(details)))
        return diffs

    def _compare_simple_lists(self, from_value: list[Any], to_value: list[Any], path: Path) -> list[Diff]:
        removed = _multiset_difference(from_value, to_value)
        added = _multiset_difference(to_value, from_value)

        details: list[Detail] = []
        if removed:
            details.append(Detail(kind=Kind.REMOVAL, from_value=removed))
        if added:
            details.append(Detail(kind=Kind.ADDITION, to_value=added))
        if (
            not removed
            and not added
            and not self._options.ignore_order_changes
            and [_scalar_key(v) for v in from_value] != [_scalar_key(v) for v in to_value]
        ):
            details.append(
                Detail(kind=Kind.ORDERCHANGE, from_value=list(from_value), to_value=list(to_value))
            )

        if not details:
            return []
        return [Diff(path=path, details=tuple(details))]

    def _compare_indexed_lists(self, from_value: list[Any], to_value: list[Any], path: Path) -> list[Diff]:
        if self._options.ignore_order_changes and sorted(map(_canonical, from_value)) == sorted(
            map(_canonical, to_value)
        ):
            return []

        diffs: list[Diff] = []
        common = min(len(from_value), len(to_value))
        for idx in range(common):
            diffs.extend(
                self.compare(from_value[idx], to_value[idx], path.child(PathElement.list_index(idx)))
            )

        details: list[Detail] = []
        if len(from_value) > common:
            details.append(Detail(kind=Kind.REMOVAL, from_value=from_value[common:]))
        if len(to_value) > common:
            details.append(Detail(kind=Kind.ADDITION, to_value=to_value[common:]))
        if details:
            diffs.append(Diff(path=path, details=tuple(details)))
        return diffs

    def _compare_strings(self, from_value: str, to_value: str, path: Path) -> list[Diff]:
        left, right = from_value, to_value
        if self._options.chomp_block_scalars:
            left, right = left.rstrip("\n"), right.rstrip("\n")
        if self._options.ignore_whitespace_changes:
            left, right = left.strip(), right.strip()
        if left == right:
            return []

        if self._options.marshal_json_strings:
            parsed_left = _parse_json_container(left)
            parsed_right = _parse_json_container(right)
            if parsed_left is not None and parsed_right is not None:
                return self.compare(parsed_left, parsed_right, path)

        return [_modification(path, from_value, to_value)]


def _modification(path: Path, from_value: Any, to_value: Any) -> Diff:
    return Diff(
        path=path,
        details=(Detail(kind=Kind.MODIFICATION, from_value=from_value, to_value=to_value),),
    )


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _scalar_key(value: Any) -> tuple[str, Any]:
    # bool is an int subclass, keep True and 1 apart
    return (type(value).__name__, value)


def _multiset_difference(left: list[Any], right: list[Any]) -> list[Any]:
    remaining = Counter(_scalar_key(value) for value in right)
    result: list[Any] = []
    for value in left:
        key = _scalar_key(value)
        if remaining[key] > 0:
            remaining[key] -= 1
        else:
            result.append(value)
    return result


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str, ensure_ascii=True)


def _parse_json_container(text: str) -> Any:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    if isinstance(parsed, (dict, list)):
        return parsed
    return None
