import datetime
import io

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID
import pytest
import yaml

from dyffpack.config import ReportConfig
from dyffpack.core import (
    Detail,
    Diff,
    DocumentMetadataError,
    RenderError,
    DocumentRef,
    InputFile,
    Kind,
    KubernetesIdentity,
    Report,
    parse_path_string,
)
from dyffpack.output import (
    GITEA_PREFIXES,
    GITHUB_PREFIXES,
    GITLAB_PREFIXES,
    BriefReport,
    DiffSyntaxReport,
    HumanReport,
    YAMLReport,
)
from dyffpack.output.text import Styler
from dyffpack.report import ignore_new_documents

FROM_DOC = DocumentRef(location="from.yml")


def _report(*diffs: Diff, note: str = "") -> Report:
    return Report(
        from_file=InputFile(location="from.yml", note=note),
        to_file=InputFile(location="to.yml"),
        diffs=diffs,
    )


def _diff(path: str, *details: Detail, document: DocumentRef | None = FROM_DOC) -> Diff:
    return Diff(path=parse_path_string(path, document=document), details=details)


def _change(from_value: object, to_value: object) -> Detail:
    return Detail(kind=Kind.MODIFICATION, from_value=from_value, to_value=to_value)


def _render(writer: object) -> str:
    out = io.StringIO()
    writer.write_report(out)  # type: ignore[attr-defined]
    return out.getvalue()


def _certificate(common_name: str) -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=365))
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(common_name)]), critical=False)
        .sign(key, hashes.SHA256())
    )
    return certificate.public_bytes(Encoding.PEM).decode("ascii")


def test_brief_report_single_modification_line() -> None:
    output = _render(BriefReport(_report(_diff("/a/b", _change(1, 2)))))

    assert output == "/a/b: 1 modification\n"
    assert len(output.splitlines()) == 1


def test_brief_report_tallies_kinds_in_order() -> None:
    diff = _diff(
        "/list",
        Detail(kind=Kind.ORDERCHANGE, from_value=["a", "b"], to_value=["b", "a"]),
        Detail(kind=Kind.ADDITION, to_value=["c"]),
        Detail(kind=Kind.ADDITION, to_value=["d"]),
        Detail(kind=Kind.REMOVAL, from_value=["e"]),
    )

    output = _render(BriefReport(_report(diff)))

    assert output == "/list: 2 additions, 1 removal, 1 order change\n"


def test_every_renderer_emits_a_newline_for_an_empty_report() -> None:
    report = _report()

    assert _render(BriefReport(report)) == "\n"
    assert _render(YAMLReport(report)) == "\n"
    assert _render(HumanReport(report, omit_header=True)) == "\n"
    assert _render(DiffSyntaxReport(report, prefixes=GITHUB_PREFIXES)) == "\n"


def test_brief_report_is_empty_after_ignoring_new_documents() -> None:
    new_documents = [
        _diff(
            "/",
            Detail(kind=Kind.ADDITION, to_value={"name": f"doc{index}"}),
            document=DocumentRef(location="file1.yaml", index=index, document_count=2),
        )
        for index in (0, 1)
    ]
    report = ignore_new_documents(_report(*new_documents))

    assert report.diffs == ()
    assert _render(BriefReport(report)) == "\n"


def test_human_report_header() -> None:
    report = _report(
        _diff("/a", _change(1, 2)),
        _diff("/b", _change(3, 4)),
        note="YAML root was changed to spec",
    )

    header = HumanReport(report).render_header()

    assert header.splitlines() == [
        "between from.yml",
        "    and to.yml",
        "(YAML root was changed to spec)",
        "",
        "returned two differences",
    ]


def test_human_report_value_change_block() -> None:
    output = _render(HumanReport(_report(_diff("/a/b", _change(1, 2))), omit_header=True))

    assert output == "\na.b\n  ± value change\n    - 1\n    + 2\n\n"


def test_human_report_go_patch_paths() -> None:
    output = _render(
        HumanReport(
            _report(_diff("/a/b", _change(1, 2))),
            omit_header=True,
            use_go_patch_paths=True,
        )
    )

    assert output.splitlines()[1] == "/a/b"


def test_human_report_additions_and_removals() -> None:
    report = _report(
        _diff(
            "/spec",
            Detail(kind=Kind.REMOVAL, from_value={"paused": True}),
            Detail(kind=Kind.ADDITION, to_value={"replicas": 3, "strategy": "Recreate"}),
        ),
        _diff("/items", Detail(kind=Kind.ADDITION, to_value=["x"])),
    )

    lines = _render(HumanReport(report, omit_header=True)).splitlines()

    assert "  - one map entry removed:" in lines
    assert "    paused: true" in lines
    assert "  + two map entries added:" in lines
    assert "    replicas: 3" in lines
    assert "    strategy: Recreate" in lines
    assert "  + one list entry added:" in lines
    assert "    - x" in lines


def test_human_report_names_documents_of_multi_document_inputs() -> None:
    document = DocumentRef(location="to.yml", index=1, document_count=2)
    report = _report(
        _diff("/", Detail(kind=Kind.ADDITION, to_value={"kind": "Secret"}), document=document)
    )

    lines = _render(HumanReport(report, omit_header=True)).splitlines()

    assert lines[1] == "(root level)  (to.yml#1)"
    assert lines[2] == "  + one document added:"
    assert lines[3] == "    kind: Secret"


def test_human_report_type_change() -> None:
    output = _render(HumanReport(_report(_diff("/port", _change(80, "80"))), omit_header=True))

    assert "± type change from int to string" in output
    assert "- 80" in output
    assert "+ 80" in output


def test_human_report_whitespace_only_change() -> None:
    output = _render(HumanReport(_report(_diff("/name", _change("web", "web "))), omit_header=True))

    assert "± whitespace only change" in output
    assert "+ web·" in output


def test_human_report_multiline_text_change() -> None:
    before = "line one\nline two\nline three\n"
    after = "line one\nline 2\nline three\n"

    output = _render(
        HumanReport(_report(_diff("/script", _change(before, after))), omit_header=True)
    )

    assert "± value change in multiline text (one insert, one deletion)" in output
    assert "- line two" in output
    assert "+ line 2" in output
    assert "  line one" in output


def test_human_report_multiline_context_separates_hunks() -> None:
    before = "\n".join(f"line {idx}" for idx in range(20))
    after = before.replace("line 1\n", "line one\n").replace("line 18", "line eighteen")

    output = _render(
        HumanReport(
            _report(_diff("/text", _change(before, after))),
            omit_header=True,
            multiline_context_lines=1,
        )
    )

    assert "[...]" in output
    assert "line 10" not in output


def test_human_report_minor_change_is_shown_inline() -> None:
    report = _report(_diff("/image", _change("registry/app:1.0.0", "registry/app:1.0.1")))

    output = _render(HumanReport(report, omit_header=True, minor_change_threshold=0.1))

    assert "± value change" in output
    assert "- registry/app:1.0.0" in output
    assert "+ registry/app:1.0.1" in output


def test_human_report_minor_change_highlights_with_color() -> None:
    report = _report(_diff("/image", _change("registry/app:1.0.0", "registry/app:1.0.1")))

    output = _render(
        HumanReport(report, omit_header=True, styler=Styler(color=True))
    )

    assert "\x1b[" in output


def test_human_report_plain_output_has_no_escape_sequences() -> None:
    report = _report(_diff("/a", _change({"x": 1}, {"x": 2})))

    assert "\x1b" not in _render(HumanReport(report))


def test_human_report_table_style_places_values_side_by_side() -> None:
    report = _report(_diff("/a", _change({"x": 1, "y": 2}, {"x": 3, "y": 4})))

    table = _render(HumanReport(report, omit_header=True)).splitlines()
    stacked = _render(HumanReport(report, omit_header=True, no_table_style=True)).splitlines()

    assert "    - x: 1  + x: 3" in table
    assert "      y: 2    y: 4" in table
    assert stacked[3:7] == ["    - x: 1", "      y: 2", "    + x: 3", "      y: 4"]


def test_human_report_order_change() -> None:
    detail = Detail(kind=Kind.ORDERCHANGE, from_value=["a", "b", "c"], to_value=["c", "a", "b"])

    output = _render(HumanReport(_report(_diff("/list", detail)), omit_header=True))

    assert "  ⇆ order changed" in output
    assert "    - a, b, c" in output
    assert "    + c, a, b" in output


def test_human_report_certificate_change() -> None:
    report = _report(
        _diff("/tls", _change(_certificate("old.example.com"), _certificate("new.example.com")))
    )

    inspected = _render(HumanReport(report, omit_header=True))
    raw = _render(HumanReport(report, omit_header=True, do_not_inspect_certs=True))

    assert "± certificate change" in inspected
    assert "- Subject: CN=old.example.com" in inspected
    assert "+ Subject: CN=new.example.com" in inspected
    assert "certificate change" not in raw
    assert "BEGIN CERTIFICATE" in raw


@pytest.mark.parametrize(
    ("prefixes", "expected"),
    [
        (GITHUB_PREFIXES, "@@ a.b @@\n# from.yml\n! ± value change\n- 1\n+ 2\n\n"),
        (GITLAB_PREFIXES, "= a.b =\n= from.yml\n# ± value change\n- 1\n+ 2\n\n"),
        (GITEA_PREFIXES, "@@ a.b @@\n= from.yml\n! ± value change\n- 1\n+ 2\n\n"),
    ],
)
def test_diff_syntax_prefixes(prefixes: object, expected: str) -> None:
    report = _report(_diff("/a/b", _change(1, 2)))

    assert _render(DiffSyntaxReport(report, prefixes=prefixes)) == expected  # type: ignore[arg-type]


def test_diff_syntax_prefixes_every_value_line() -> None:
    report = _report(_diff("/map", Detail(kind=Kind.ADDITION, to_value={"x": 1, "y": 2})))

    lines = _render(DiffSyntaxReport(report, prefixes=GITHUB_PREFIXES)).splitlines()

    assert lines[2:5] == ["! + two map entries added:", "+ x: 1", "+ y: 2"]


def test_yaml_report_records_per_document() -> None:
    identity = KubernetesIdentity(
        api_version="apps/v1",
        kind="Deployment",
        name="web",
        namespace="default",
    )
    web = DocumentRef(location="from.yml", index=0, document_count=2, kubernetes=identity)
    other = DocumentRef(location="from.yml", index=1, document_count=2)
    report = _report(
        _diff("/spec/replicas", _change(1, 2), document=web),
        _diff(
            "/data",
            Detail(kind=Kind.REMOVAL, from_value={"a": 1}),
            Detail(kind=Kind.ADDITION, to_value={"b": 2}),
            document=other,
        ),
    )

    output = _render(YAMLReport(report))
    records = list(yaml.safe_load_all(output))

    assert output.startswith("---\n")
    assert output.endswith("\n")
    assert records[0] == {
        "document": "apps/v1/Deployment/default/web",
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "web", "namespace": "default"},
        "diffs": [
            {
                "path": "/spec/replicas",
                "details": [{"kind": "modification", "from": 1, "to": 2}],
            }
        ],
    }
    assert records[1] == {
        "document": "from.yml#1",
        "diffs": [
            {
                "path": "/data",
                "details": [{"kind": "modification", "from": {"a": 1}, "to": {"b": 2}}],
            }
        ],
    }


def test_yaml_report_requires_document_identity() -> None:
    report = _report(_diff("/a", _change(1, 2), document=None))

    with pytest.raises(DocumentMetadataError, match="/a"):
        _render(YAMLReport(report))


def test_writers_built_from_config() -> None:
    report = _report(_diff("/a/b", _change(1, 2)))
    config = ReportConfig(omit_header=True, use_go_patch_paths=True)

    human = HumanReport.from_config(report, config)
    github = DiffSyntaxReport.from_config(report, config, GITHUB_PREFIXES)

    assert _render(human).splitlines()[1] == "/a/b"
    assert _render(github).startswith("@@ /a/b @@\n")


class _FailingStyler(Styler):
    def modified(self, text: str) -> str:
        raise AttributeError("style unavailable")


def test_render_failures_name_the_difference_being_rendered() -> None:
    report = _report(_diff("/a/b", _change(1, 2)))
    styler = _FailingStyler()

    with pytest.raises(RenderError, match=r"failed to render difference at /a/b \(from.yml\)"):
        _render(HumanReport(report, styler=styler))
    with pytest.raises(RenderError, match="style unavailable"):
        _render(DiffSyntaxReport(report, prefixes=GITLAB_PREFIXES, styler=styler))
