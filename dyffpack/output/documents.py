"""Print the documents of an input file as YAML or JSON."""

from __future__ import annotations

import json
import re
from typing import Any, Literal, TextIO

import yaml

from dyffpack.core.exceptions import RenderError
from dyffpack.core.models import InputFile
from dyffpack.output.text import Styler

DocumentFormat = Literal["yaml", "json"]

# Keys moved to the front of a mapping by `restructure`, in this order.
WELL_KNOWN_KEYS: tuple[str, ...] = (
    "apiVersion",
    "kind",
    "metadata",
    "name",
    "key",
    "id",
    "namespace",
    "type",
    "spec",
    "data",
    "stringData",
)

_YAML_KEY = re.compile(r"^(\s*(?:- )?)([^\s#'\"-][^:]*?):(?=\s|$)")


def restructure(value: Any) -> Any:
    """Return a copy of `value` with well-known mapping keys first."""
    if isinstance(value, list):
        return [restructure(item) for item in value]
    if not isinstance(value, dict):
        return value
    ordered = [key for key in WELL_KNOWN_KEYS if key in value]
    ordered.extend(key for key in value if key not in WELL_KNOWN_KEYS)
    return {key: restructure(value[key]) for key in ordered}


def write_documents(
    out: TextIO,
    input_file: InputFile,
    *,
    output_format: DocumentFormat,
    restructure_keys: bool = False,
    plain: bool = False,
    color: bool = False,
) -> None:
    styler = Styler(color=color and not plain)
    for document in input_file.documents:
        if restructure_keys:
            document = restructure(document)
        try:
            if output_format == "json":
                out.write(_to_json(document, plain=plain) + "\n")
            elif output_format == "yaml":
                out.write(_to_yaml(document, plain=plain, styler=styler))
            else:
                raise ValueError(f"unsupported document format: {output_format!r}")
        except (TypeError, ValueError, yaml.YAMLError) as error:
            raise RenderError(
                f"failed to render {input_file.label} as {output_format}: {error}"
            ) from error


def _to_json(document: Any, *, plain: bool) -> str:
    if plain:
        return json.dumps(document, ensure_ascii=False, separators=(",", ":"), default=str)
    return json.dumps(document, ensure_ascii=False, indent=2, default=str)


def _to_yaml(document: Any, *, plain: bool, styler: Styler) -> str:
    text = yaml.safe_dump(
        document,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
    )
    if plain or not styler.color:
        return "---\n" + text
    lines = [styler.note("---")]
    for line in text.splitlines():
        lines.append(_YAML_KEY.sub(lambda match: match.group(1) + styler.heading(match.group(2)) + ":", line))
    return "\n".join(lines) + "\n"
