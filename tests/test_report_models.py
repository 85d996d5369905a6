import pytest

from dyffpack.core import MISSING, Detail, Diff, DocumentRef, InputFile, Kind, Report, parse_path_string


def _report(*diffs: Diff) -> Report:
    return Report(
        from_file=InputFile(location="from.yml"),
        to_file=InputFile(location="to.yml"),
        diffs=diffs,
    )


def test_kind_symbols_and_labels() -> None:
    assert [kind.value for kind in Kind] == ["+", "-", "±", "⇆"]
    assert Kind.ORDERCHANGE.label == "orderchange"


def test_detail_requires_sides_matching_its_kind() -> None:
    with pytest.raises(ValueError):
        Detail(kind=Kind.ADDITION, from_value=1)
    with pytest.raises(ValueError):
        Detail(kind=Kind.REMOVAL, to_value=1)
    with pytest.raises(ValueError):
        Detail(kind=Kind.MODIFICATION, from_value=1)
    with pytest.raises(TypeError):
        Detail(kind="+", to_value=1)  # type: ignore[arg-type]


def test_null_value_is_distinct_from_missing_side() -> None:
    detail = Detail(kind=Kind.ADDITION, to_value=None)

    assert detail.has_to
    assert not detail.has_from
    assert detail.from_value is MISSING
    assert detail.to_dict() == {"kind": "addition", "to": None}


def test_diff_needs_at_least_one_detail() -> None:
    with pytest.raises(ValueError, match="at least one detail"):
        Diff(path=parse_path_string("/a"), details=())


def test_report_summary_counts_details_by_kind() -> None:
    report = _report(
        Diff(
            path=parse_path_string("/a"),
            details=(
                Detail(kind=Kind.REMOVAL, from_value={"x": 1}),
                Detail(kind=Kind.ADDITION, to_value={"y": 2}),
            ),
        ),
        Diff(
            path=parse_path_string("/b"),
            details=(Detail(kind=Kind.MODIFICATION, from_value=1, to_value=2),),
        ),
    )

    assert report.summary() == {
        "addition": 1,
        "removal": 1,
        "modification": 1,
        "orderchange": 0,
    }
    assert not report.identical
    assert _report().identical


def test_report_with_diffs_shares_inputs_and_keeps_original() -> None:
    diff = Diff(
        path=parse_path_string("/a"),
        details=(Detail(kind=Kind.MODIFICATION, from_value=1, to_value=2),),
    )
    report = _report(diff)
    emptied = report.with_diffs([])

    assert emptied.from_file is report.from_file
    assert emptied.to_file is report.to_file
    assert report.diffs == (diff,)
    assert emptied.diffs == ()


def test_input_file_document_refs() -> None:
    input_file = InputFile(location="-", documents=({"a": 1}, {"b": 2}))
    ref = input_file.document_ref(1)

    assert input_file.label == "stdin"
    assert ref == DocumentRef(location="-", index=1, document_count=2)
    assert ref.description() == "stdin#1"


def test_report_to_dict_lists_paths_and_documents() -> None:
    path = parse_path_string("/a", document=DocumentRef(location="from.yml"))
    report = _report(
        Diff(path=path, details=(Detail(kind=Kind.MODIFICATION, from_value=1, to_value=2),))
    )

    payload = report.to_dict()

    assert payload["from"] == "from.yml"
    assert payload["diffs"] == [
        {
            "path": "/a",
            "document": "from.yml",
            "details": [{"kind": "modification", "from": 1, "to": 2}],
        }
    ]
