from importlib.metadata import PackageNotFoundError, version as package_version
import logging
from pathlib import Path
import shutil
import sys
from dataclasses import dataclass
from typing import Any

import typer

from dyffpack.compare import compare_input_files
from dyffpack.config import ReportConfig, ReportConfigError, resolve_report_config
from dyffpack.core.exceptions import DyffError, UnknownOutputStyleError
from dyffpack.core.models import InputFile
from dyffpack.inputs import (
    STDIN_LOCATION,
    change_root,
    is_url,
    load_input_file,
    load_input_files,
)
from dyffpack.output import (
    build_report_writer,
    normalize_output_style,
    write_documents,
    write_in_place,
    write_to_stdout,
)
from dyffpack.output.sink import Render
from dyffpack.report import apply_report_filters

app = typer.Typer(help="dyff: semantic diffs of YAML and JSON documents.")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# parameter sources compared by name, typer may bundle its own click
_EXPLICIT_SOURCES = frozenset({"COMMANDLINE", "ENVIRONMENT"})


@dataclass(slots=True)
class _OutputOptions:
    no_color: bool = False


_OUTPUT_OPTIONS = _OutputOptions()

# between option name -> ReportConfig field
_OPTION_TO_FIELD: dict[str, str] = {
    "output": "style",
    "ignore_order_changes": "ignore_order_changes",
    "ignore_whitespace_changes": "ignore_whitespace_changes",
    "detect_kubernetes": "kubernetes_entity_detection",
    "additional_identifier": "additional_identifiers",
    "detect_renames": "detect_renames",
    "marshal_json_strings": "marshal_json_strings",
    "chomp_block_scalars": "chomp_block_scalars",
    "no_table_style": "no_table_style",
    "no_cert_inspection": "do_not_inspect_certs",
    "set_exit_code": "exit_with_code",
    "omit_header": "omit_header",
    "use_go_patch_style": "use_go_patch_paths",
    "ignore_value_changes": "ignore_value_changes",
    "ignore_new_documents": "ignore_new_documents",
    "minor_change_threshold": "minor_change_threshold",
    "multi_line_context_lines": "multiline_context_lines",
    "filter": "filters",
    "exclude": "excludes",
    "filter_regexp": "filter_regexps",
    "exclude_regexp": "exclude_regexps",
    "filter_document": "filter_documents",
    "exclude_document": "exclude_documents",
    "filter_document_regexp": "filter_document_regexps",
    "exclude_document_regexp": "exclude_document_regexps",
}

# list options whose values may also be given comma separated
_COMMA_SEPARATED_OPTIONS = {
    "additional_identifier",
    "filter",
    "exclude",
    "filter_document",
    "exclude_document",
}


def _resolve_cli_version() -> str:
    try:
        return package_version("dyffkit")
    except PackageNotFoundError:
        from dyffpack import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


def _log_level_callback(value: str) -> str:
    normalized = value.strip().upper()
    if normalized not in _LOG_LEVELS:
        raise typer.BadParameter(f"expected one of {', '.join(_LOG_LEVELS)}")
    return normalized


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show dyff version and exit.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI color output.",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        callback=_log_level_callback,
        help="Diagnostic log level on stderr: DEBUG, INFO, WARNING, ERROR or CRITICAL.",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.no_color = no_color
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("dyffpack").setLevel(getattr(logging, log_level))


def _echo(message: str, *, err: bool = False) -> None:
    typer.echo(message, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _use_color() -> bool:
    return not _OUTPUT_OPTIONS.no_color and sys.stdout.isatty()


def _terminal_width() -> int:
    return shutil.get_terminal_size((80, 24)).columns


def _split_values(values: list[str] | None) -> tuple[str, ...]:
    result: list[str] = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return tuple(result)


def _explicit_overrides(ctx: typer.Context) -> dict[str, Any]:
    """Collect only the options given on the command line or via environment."""
    overrides: dict[str, Any] = {}
    for option, field_name in _OPTION_TO_FIELD.items():
        source = ctx.get_parameter_source(option)
        if source is None or source.name not in _EXPLICIT_SOURCES:
            continue
        value = ctx.params[option]
        if option in _COMMA_SEPARATED_OPTIONS:
            value = _split_values(value)
        elif isinstance(value, list):
            value = tuple(value)
        overrides[field_name] = value
    return overrides


def _apply_change_root(
    input_file: InputFile,
    path_string: str | None,
    *,
    config: ReportConfig,
    translate_list_to_documents: bool,
) -> InputFile:
    if not path_string:
        return input_file
    return change_root(
        input_file,
        path_string,
        use_go_patch_paths=config.use_go_patch_paths,
        translate_list_to_documents=translate_list_to_documents,
    )


@app.command()
def between(
    ctx: typer.Context,
    from_location: str = typer.Argument(..., metavar="FROM", help="File, URL or - for stdin."),
    to_location: str = typer.Argument(..., metavar="TO", help="File, URL or - for stdin."),
    output: str = typer.Option(
        "human",
        "--output",
        "-o",
        help="Output style: human, github, gitlab, gitea, yaml or brief.",
    ),
    ignore_order_changes: bool = typer.Option(
        False,
        "--ignore-order-changes",
        "-i",
        help="Ignore order changes in lists.",
    ),
    ignore_whitespace_changes: bool = typer.Option(
        False,
        "--ignore-whitespace-changes",
        help="Ignore leading or trailing whitespace changes.",
    ),
    detect_kubernetes: bool = typer.Option(
        True,
        "--detect-kubernetes/--no-detect-kubernetes",
        help="Match Kubernetes documents by apiVersion, kind and name.",
    ),
    additional_identifier: list[str] | None = typer.Option(
        None,
        "--additional-identifier",
        help="Repeatable extra field name that identifies named list entries.",
    ),
    detect_renames: bool = typer.Option(
        True,
        "--detect-renames/--no-detect-renames",
        help="Pair renamed Kubernetes documents of the same kind.",
    ),
    marshal_json_strings: bool = typer.Option(
        False,
        "--marshal-json-strings",
        help="Compare strings holding JSON by their parsed content.",
    ),
    chomp_block_scalars: bool = typer.Option(
        False,
        "--chomp-block-scalars",
        help="Ignore trailing newlines of block scalars.",
    ),
    no_table_style: bool = typer.Option(
        False,
        "--no-table-style",
        "-l",
        help="Do not place from and to values side by side.",
    ),
    no_cert_inspection: bool = typer.Option(
        False,
        "--no-cert-inspection",
        "-x",
        help="Compare certificates as plain text.",
    ),
    set_exit_code: bool = typer.Option(
        False,
        "--set-exit-code",
        "-s",
        help="Exit with 1 when differences were found.",
    ),
    omit_header: bool = typer.Option(
        False,
        "--omit-header",
        "-b",
        help="Omit the report header.",
    ),
    use_go_patch_style: bool = typer.Option(
        False,
        "--use-go-patch-style",
        "-g",
        help="Show paths in go-patch style.",
    ),
    ignore_value_changes: bool = typer.Option(
        False,
        "--ignore-value-changes",
        "-v",
        help="Drop value modifications from the report.",
    ),
    ignore_new_documents: bool = typer.Option(
        False,
        "--ignore-new-documents",
        help="Drop documents that only exist in TO.",
    ),
    minor_change_threshold: float = typer.Option(
        0.1,
        "--minor-change-threshold",
        help="Changed character ratio up to which a string change is shown inline.",
    ),
    multi_line_context_lines: int = typer.Option(
        4,
        "--multi-line-context-lines",
        help="Context lines around changes in multi-line text.",
    ),
    filter: list[str] | None = typer.Option(
        None,
        "--filter",
        help="Repeatable path to keep, go-patch (/a/name=x) or dot style (a.x); comma separated values allowed.",
    ),
    exclude: list[str] | None = typer.Option(
        None,
        "--exclude",
        help="Repeatable path to drop, go-patch (/a/name=x) or dot style (a.x); comma separated values allowed.",
    ),
    filter_regexp: list[str] | None = typer.Option(
        None,
        "--filter-regexp",
        help="Repeatable regular expression for paths to keep.",
    ),
    exclude_regexp: list[str] | None = typer.Option(
        None,
        "--exclude-regexp",
        help="Repeatable regular expression for paths to drop.",
    ),
    filter_document: list[str] | None = typer.Option(
        None,
        "--filter-document",
        help="Repeatable document name to keep.",
    ),
    exclude_document: list[str] | None = typer.Option(
        None,
        "--exclude-document",
        help="Repeatable document name to drop.",
    ),
    filter_document_regexp: list[str] | None = typer.Option(
        None,
        "--filter-document-regexp",
        help="Repeatable regular expression for document names to keep.",
    ),
    exclude_document_regexp: list[str] | None = typer.Option(
        None,
        "--exclude-document-regexp",
        help="Repeatable regular expression for document names to drop.",
    ),
    swap: bool = typer.Option(
        False,
        "--swap",
        help="Swap FROM and TO.",
    ),
    chroot: str | None = typer.Option(
        None,
        "--chroot",
        help="Change the root of both inputs to this path.",
    ),
    chroot_of_from: str | None = typer.Option(
        None,
        "--chroot-of-from",
        help="Change the root of FROM to this path.",
    ),
    chroot_of_to: str | None = typer.Option(
        None,
        "--chroot-of-to",
        help="Change the root of TO to this path.",
    ),
    chroot_list_to_documents: bool = typer.Option(
        False,
        "--chroot-list-to-documents",
        help="Treat a list found at the new root as a list of documents.",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="YAML config file with report options (default: ./.dyffconfig.yml if present).",
    ),
) -> None:
    """Compare two YAML or JSON inputs and report their differences."""
    try:
        config = resolve_report_config(
            config_file=config_path,
            overrides=_explicit_overrides(ctx),
        )
        normalize_output_style(config.style)
    except (ReportConfigError, UnknownOutputStyleError) as error:
        _echo(f"between failed: {error}", err=True)
        raise typer.Exit(code=2) from error

    if swap:
        from_location, to_location = to_location, from_location

    try:
        from_file, to_file = load_input_files(from_location, to_location)
        from_file = _apply_change_root(
            from_file,
            chroot_of_from or chroot,
            config=config,
            translate_list_to_documents=chroot_list_to_documents,
        )
        to_file = _apply_change_root(
            to_file,
            chroot_of_to or chroot,
            config=config,
            translate_list_to_documents=chroot_list_to_documents,
        )
        report = compare_input_files(from_file, to_file, config.to_compare_options())
        report = apply_report_filters(report, config)
        width = _terminal_width()
        write_to_stdout(
            lambda stream, color: build_report_writer(
                report,
                config,
                color=color,
                terminal_width=width,
            ).write_report(stream),
            color=_use_color(),
        )
    except DyffError as error:
        _echo(f"between failed: {error}", err=True)
        raise typer.Exit(code=255) from error

    if config.exit_with_code and report.diffs:
        raise typer.Exit(code=1)


app.command("bw", hidden=True, help="Alias of between.")(between)


def _print_documents(
    command: str,
    locations: list[str],
    *,
    output_format: str,
    plain: bool,
    restructure_keys: bool,
    in_place: bool,
) -> None:
    if in_place:
        unsupported = [
            location for location in locations if location == STDIN_LOCATION or is_url(location)
        ]
        if unsupported:
            _echo(
                f"{command} failed: --in-place only works with local files, got {', '.join(unsupported)}",
                err=True,
            )
            raise typer.Exit(code=2)

    for location in locations:
        try:
            input_file = load_input_file(location)
            render: Render = (
                lambda stream, color: write_documents(
                    stream,
                    input_file,
                    output_format=output_format,
                    restructure_keys=restructure_keys,
                    plain=plain or in_place,
                    color=color,
                )
            )
            if in_place:
                write_in_place(location, render)
            else:
                write_to_stdout(render, color=_use_color())
        except DyffError as error:
            _echo(f"{command} failed: {error}", err=True)
            raise typer.Exit(code=255) from error


@app.command("yaml")
def yaml_command(
    locations: list[str] = typer.Argument(..., metavar="FILE...", help="Files, URLs or - for stdin."),
    plain: bool = typer.Option(
        False,
        "--plain",
        "-p",
        help="Plain output without colors.",
    ),
    restructure: bool = typer.Option(
        False,
        "--restructure",
        "-r",
        help="Move well-known keys such as apiVersion, kind and name to the front.",
    ),
    in_place: bool = typer.Option(
        False,
        "--in-place",
        "-i",
        help="Overwrite the input files with the output.",
    ),
) -> None:
    """Print documents of the inputs as YAML."""
    _print_documents(
        "yaml",
        locations,
        output_format="yaml",
        plain=plain,
        restructure_keys=restructure,
        in_place=in_place,
    )


@app.command("json")
def json_command(
    locations: list[str] = typer.Argument(..., metavar="FILE...", help="Files, URLs or - for stdin."),
    plain: bool = typer.Option(
        False,
        "--plain",
        "-p",
        help="Compact single-line JSON per document.",
    ),
    restructure: bool = typer.Option(
        False,
        "--restructure",
        "-r",
        help="Move well-known keys such as apiVersion, kind and name to the front.",
    ),
    in_place: bool = typer.Option(
        False,
        "--in-place",
        "-i",
        help="Overwrite the input files with the output.",
    ),
) -> None:
    """Print documents of the inputs as JSON."""
    _print_documents(
        "json",
        locations,
        output_format="json",
        plain=plain,
        restructure_keys=restructure,
        in_place=in_place,
    )


def main() -> None:
    app()
