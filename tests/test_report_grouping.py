from dyffpack.core import Detail, Diff, DocumentRef, Kind, parse_path_string
from dyffpack.report import consolidate_diff, consolidate_groups, group_by_document

FIRST = DocumentRef(location="multi.yml", index=0, document_count=2)
SECOND = DocumentRef(location="multi.yml", index=1, document_count=2)


def _diff(path: str, document: DocumentRef, *details: Detail) -> Diff:
    return Diff(path=parse_path_string(path, document=document), details=details)


def _change(from_value: object, to_value: object) -> Detail:
    return Detail(kind=Kind.MODIFICATION, from_value=from_value, to_value=to_value)


def test_group_by_document_keeps_first_seen_order() -> None:
    diffs = [
        _diff("/b", SECOND, _change(1, 2)),
        _diff("/a", FIRST, _change(1, 2)),
        _diff("/c", SECOND, _change(3, 4)),
    ]

    groups = group_by_document(diffs)

    assert [group.root_description for group in groups] == ["multi.yml#1", "multi.yml#0"]
    assert [str(diff.path) for diff in groups[0].diffs] == ["/b", "/c"]
    assert groups[0].document == SECOND


def test_group_by_document_without_diffs() -> None:
    assert group_by_document([]) == []


def test_consolidate_merges_removal_and_addition() -> None:
    diff = _diff(
        "/data",
        FIRST,
        Detail(kind=Kind.REMOVAL, from_value={"old": 1}),
        Detail(kind=Kind.ADDITION, to_value={"new": 2}),
    )

    merged = consolidate_diff(diff)

    assert merged.details == (_change({"old": 1}, {"new": 2}),)
    assert merged.path == diff.path


def test_consolidate_leaves_other_shapes_unchanged() -> None:
    single = _diff("/a", FIRST, Detail(kind=Kind.ADDITION, to_value=1))
    two_additions = _diff(
        "/b",
        FIRST,
        Detail(kind=Kind.ADDITION, to_value=1),
        Detail(kind=Kind.ADDITION, to_value=2),
    )
    three = _diff(
        "/c",
        FIRST,
        Detail(kind=Kind.REMOVAL, from_value=[1]),
        Detail(kind=Kind.ADDITION, to_value=[2]),
        Detail(kind=Kind.ORDERCHANGE, from_value=["a", "b"], to_value=["b", "a"]),
    )

    assert consolidate_diff(single) is single
    assert consolidate_diff(two_additions) is two_additions
    assert consolidate_diff(three) is three


def test_consolidation_is_idempotent() -> None:
    groups = group_by_document(
        [
            _diff(
                "/data",
                FIRST,
                Detail(kind=Kind.ADDITION, to_value={"new": 2}),
                Detail(kind=Kind.REMOVAL, from_value={"old": 1}),
            ),
            _diff("/x", SECOND, _change("a", "b")),
        ]
    )

    once = consolidate_groups(groups)
    twice = consolidate_groups(once)

    assert [group.diffs for group in twice] == [group.diffs for group in once]
    assert once[0].diffs[0].details == (_change({"old": 1}, {"new": 2}),)
