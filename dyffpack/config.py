"""Report configuration: defaults, YAML config files and flag layering."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from dyffpack.compare.options import CompareOptions
from dyffpack.core.exceptions import DyffError, FilterPatternError
from dyffpack.report.filters import compile_patterns

DEFAULT_CONFIG_FILE = ".dyffconfig.yml"


class ReportConfigError(DyffError, ValueError):
    """Raised when report configuration values are invalid."""


@dataclass(frozen=True, slots=True)
class ReportConfig:
    """Every comparison, filter and output option, resolved once per invocation."""

    style: str = "human"
    ignore_order_changes: bool = False
    ignore_whitespace_changes: bool = False
    kubernetes_entity_detection: bool = True
    no_table_style: bool = False
    do_not_inspect_certs: bool = False
    exit_with_code: bool = False
    omit_header: bool = False
    use_go_patch_paths: bool = False
    ignore_value_changes: bool = False
    ignore_new_documents: bool = False
    detect_renames: bool = True
    marshal_json_strings: bool = False
    chomp_block_scalars: bool = False
    minor_change_threshold: float = 0.1
    multiline_context_lines: int = 4
    additional_identifiers: tuple[str, ...] = field(default_factory=tuple)
    filters: tuple[str, ...] = field(default_factory=tuple)
    excludes: tuple[str, ...] = field(default_factory=tuple)
    filter_regexps: tuple[str, ...] = field(default_factory=tuple)
    exclude_regexps: tuple[str, ...] = field(default_factory=tuple)
    filter_documents: tuple[str, ...] = field(default_factory=tuple)
    exclude_documents: tuple[str, ...] = field(default_factory=tuple)
    filter_document_regexps: tuple[str, ...] = field(default_factory=tuple)
    exclude_document_regexps: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in _LIST_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

        if not self.style.strip():
            raise ReportConfigError("output style cannot be empty")
        if not 0.0 <= self.minor_change_threshold <= 1.0:
            raise ReportConfigError(
                f"minor change threshold must be between 0 and 1, got {self.minor_change_threshold}"
            )
        if self.multiline_context_lines < 0:
            raise ReportConfigError(
                f"multi-line context lines must not be negative, got {self.multiline_context_lines}"
            )

        # invalid patterns surface as config errors naming the option
        for name in _REGEXP_FIELDS:
            try:
                compile_patterns(getattr(self, name))
            except FilterPatternError as error:
                raise ReportConfigError(f"{_FIELD_TO_KEY[name]}: {error}") from error

    def with_overrides(self, overrides: Mapping[str, Any]) -> "ReportConfig":
        unknown = sorted(set(overrides) - set(_FIELD_TO_KEY))
        if unknown:
            raise ReportConfigError("Unsupported report options: " + ", ".join(unknown))
        return replace(self, **dict(overrides))

    def to_compare_options(self) -> CompareOptions:
        return CompareOptions(
            ignore_order_changes=self.ignore_order_changes,
            ignore_whitespace_changes=self.ignore_whitespace_changes,
            kubernetes_entity_detection=self.kubernetes_entity_detection,
            additional_identifiers=self.additional_identifiers,
            detect_renames=self.detect_renames,
            marshal_json_strings=self.marshal_json_strings,
            chomp_block_scalars=self.chomp_block_scalars,
        )


_LIST_FIELDS = (
    "additional_identifiers",
    "filters",
    "excludes",
    "filter_regexps",
    "exclude_regexps",
    "filter_documents",
    "exclude_documents",
    "filter_document_regexps",
    "exclude_document_regexps",
)

_REGEXP_FIELDS = (
    "filter_regexps",
    "exclude_regexps",
    "filter_document_regexps",
    "exclude_document_regexps",
)

# config file keys, matching the long command line flag names
_KEY_TO_FIELD: dict[str, str] = {
    "style": "style",
    "ignore-order-changes": "ignore_order_changes",
    "ignore-whitespace-changes": "ignore_whitespace_changes",
    "kubernetes-entity-detection": "kubernetes_entity_detection",
    "no-table-style": "no_table_style",
    "do-not-inspect-certs": "do_not_inspect_certs",
    "exit-with-code": "exit_with_code",
    "omit-header": "omit_header",
    "use-go-patch-paths": "use_go_patch_paths",
    "ignore-value-changes": "ignore_value_changes",
    "ignore-new-documents": "ignore_new_documents",
    "detect-renames": "detect_renames",
    "marshal-json-strings": "marshal_json_strings",
    "chomp-block-scalars": "chomp_block_scalars",
    "minor-change-threshold": "minor_change_threshold",
    "multiline-context-lines": "multiline_context_lines",
    "additional-identifier": "additional_identifiers",
    "filter": "filters",
    "exclude": "excludes",
    "filter-regexp": "filter_regexps",
    "exclude-regexp": "exclude_regexps",
    "filter-document": "filter_documents",
    "exclude-document": "exclude_documents",
    "filter-document-regexp": "filter_document_regexps",
    "exclude-document-regexp": "exclude_document_regexps",
}
_FIELD_TO_KEY = {value: key for key, value in _KEY_TO_FIELD.items()}

DEFAULT_REPORT_CONFIG = ReportConfig()


def report_config_from_mapping(
    config: Mapping[str, Any],
    *,
    base: ReportConfig = DEFAULT_REPORT_CONFIG,
) -> ReportConfig:
    """Create a report config from a config-file mapping layered over `base`."""
    unknown = sorted(str(key) for key in config if key not in _KEY_TO_FIELD)
    if unknown:
        raise ReportConfigError("Unsupported config keys: " + ", ".join(unknown))

    field_types = {item.name: item.type for item in fields(ReportConfig)}
    values: dict[str, Any] = {}
    for key, raw in config.items():
        name = _KEY_TO_FIELD[key]
        expected = field_types[name]
        if name in _LIST_FIELDS:
            values[name] = _read_string_list(raw, key=key)
        elif expected == "bool":
            if not isinstance(raw, bool):
                raise ReportConfigError(f"config key '{key}' must be a boolean.")
            values[name] = raw
        elif expected == "float":
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ReportConfigError(f"config key '{key}' must be a number.")
            values[name] = float(raw)
        elif expected == "int":
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise ReportConfigError(f"config key '{key}' must be an integer.")
            values[name] = raw
        else:
            if not isinstance(raw, str):
                raise ReportConfigError(f"config key '{key}' must be a string.")
            values[name] = raw

    return replace(base, **values)


def load_report_config_from_file(
    path: str | Path,
    *,
    base: ReportConfig = DEFAULT_REPORT_CONFIG,
) -> ReportConfig:
    """Load report options from a YAML config file."""
    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except yaml.YAMLError as error:
        raise ReportConfigError(f"Invalid config YAML ({config_path}): {error}") from error

    if raw is None:
        return base
    if not isinstance(raw, dict):
        raise ReportConfigError(f"Config file must contain a YAML mapping ({config_path}).")

    try:
        return report_config_from_mapping(raw, base=base)
    except ReportConfigError as error:
        raise ReportConfigError(f"{config_path}: {error}") from error


def resolve_report_config(
    *,
    config_file: str | Path | None,
    overrides: Mapping[str, Any],
    base: ReportConfig = DEFAULT_REPORT_CONFIG,
) -> ReportConfig:
    """Layer defaults, an optional config file and explicit flag values.

    A missing explicit config file is an error; the default config file is
    only read when it exists.
    """
    config = base
    if config_file is None:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if default_path.is_file():
            config = load_report_config_from_file(default_path, base=config)
    else:
        try:
            config = load_report_config_from_file(config_file, base=config)
        except FileNotFoundError as error:
            raise ReportConfigError(f"config file not found: {config_file}") from error
    return config.with_overrides(overrides)


def _read_string_list(value: Any, *, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ReportConfigError(f"config key '{key}' must be a list of strings.")
    result: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ReportConfigError(f"config key '{key}' must be a list of strings.")
        if item.strip():
            result.append(item.strip())
    return tuple(result)
