"""Filter and exclude operations deriving new reports from existing ones.

Every function here is pure: it returns a new `Report` (or the input report
itself when there is nothing to do) and never mutates its argument. Predicates
look at a whole `Diff`, never at individual details.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable, Iterable

from dyffpack.core.exceptions import FilterPatternError, PathParseError
from dyffpack.core.models import Diff, Kind, Report
from dyffpack.core.path import parse_path_string

if TYPE_CHECKING:
    from dyffpack.config import ReportConfig

logger = logging.getLogger(__name__)

DiffPredicate = Callable[[Diff], bool]


def filter_paths(report: Report, *paths: str) -> Report:
    """Keep only diffs whose path equals one of `paths`."""
    if not paths:
        return report
    wanted = _parse_paths(paths)
    return _keep(report, lambda diff: _path_in(diff, wanted))


def exclude_paths(report: Report, *paths: str) -> Report:
    """Drop diffs whose path equals one of `paths`."""
    if not paths:
        return report
    unwanted = _parse_paths(paths)
    return _keep(report, lambda diff: not _path_in(diff, unwanted))


def filter_documents(report: Report, *names: str) -> Report:
    if not names:
        return report
    wanted = frozenset(names)
    return _keep(report, lambda diff: diff.path.root_description() in wanted)


def exclude_documents(report: Report, *names: str) -> Report:
    if not names:
        return report
    unwanted = frozenset(names)
    return _keep(report, lambda diff: diff.path.root_description() not in unwanted)


def filter_regexps(report: Report, *patterns: str) -> Report:
    """Keep only diffs whose path string matches any of `patterns`."""
    if not patterns:
        return report
    regexps = compile_patterns(patterns)
    return _keep(report, lambda diff: _matches_any(regexps, str(diff.path)))


def exclude_regexps(report: Report, *patterns: str) -> Report:
    if not patterns:
        return report
    regexps = compile_patterns(patterns)
    return _keep(report, lambda diff: not _matches_any(regexps, str(diff.path)))


def filter_document_regexps(report: Report, *patterns: str) -> Report:
    if not patterns:
        return report
    regexps = compile_patterns(patterns)
    return _keep(
        report,
        lambda diff: _matches_any(regexps, diff.path.root_description()),
    )


def exclude_document_regexps(report: Report, *patterns: str) -> Report:
    if not patterns:
        return report
    regexps = compile_patterns(patterns)
    return _keep(
        report,
        lambda diff: not _matches_any(regexps, diff.path.root_description()),
    )


def ignore_value_changes(report: Report) -> Report:
    """Drop every diff that carries at least one modification."""
    return _keep(report, lambda diff: not diff.has_kind(Kind.MODIFICATION))


def ignore_new_documents(report: Report) -> Report:
    """Drop diffs that only announce a whole new document."""
    return _keep(report, lambda diff: not _is_new_document(diff))


def apply_report_filters(report: Report, config: "ReportConfig") -> Report:
    """Apply the configured filters in their fixed order."""
    stages: list[tuple[str, Callable[[Report], Report]]] = [
        ("filter", lambda r: filter_paths(r, *config.filters)),
        ("exclude", lambda r: exclude_paths(r, *config.excludes)),
        ("filter-regexp", lambda r: filter_regexps(r, *config.filter_regexps)),
        ("exclude-regexp", lambda r: exclude_regexps(r, *config.exclude_regexps)),
        ("filter-document", lambda r: filter_documents(r, *config.filter_documents)),
        ("exclude-document", lambda r: exclude_documents(r, *config.exclude_documents)),
        (
            "filter-document-regexp",
            lambda r: filter_document_regexps(r, *config.filter_document_regexps),
        ),
        (
            "exclude-document-regexp",
            lambda r: exclude_document_regexps(r, *config.exclude_document_regexps),
        ),
    ]
    if config.ignore_value_changes:
        stages.append(("ignore-value-changes", ignore_value_changes))
    if config.ignore_new_documents:
        stages.append(("ignore-new-documents", ignore_new_documents))

    for name, stage in stages:
        before = len(report.diffs)
        report = stage(report)
        if len(report.diffs) != before:
            logger.debug("%s: %d -> %d differences", name, before, len(report.diffs))
    return report


def compile_patterns(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as error:
            raise FilterPatternError(
                f"invalid regular expression {pattern!r}: {error}"
            ) from error
    return tuple(compiled)


def _parse_paths(paths: Iterable[str]) -> frozenset[str]:
    """Render each path in the style it was given in.

    Dot-style arguments are kept in dot style, so they match the paths the
    human report prints, named list entries included.
    """
    parsed: set[str] = set()
    for text in paths:
        try:
            path = parse_path_string(text)
        except PathParseError as error:
            # unparseable paths never match
            logger.debug("ignoring path filter %r: %s", text, error)
            continue
        if path.is_root or text.strip().startswith("/"):
            parsed.add(path.go_patch_style())
        else:
            parsed.add(path.dot_style())
    return frozenset(parsed)


def _path_in(diff: Diff, rendered: frozenset[str]) -> bool:
    # go-patch strings start with "/", dot-style strings never do
    return diff.path.go_patch_style() in rendered or diff.path.dot_style() in rendered


def _matches_any(regexps: tuple[re.Pattern[str], ...], value: str) -> bool:
    return any(regexp.search(value) is not None for regexp in regexps)


def _is_new_document(diff: Diff) -> bool:
    return (
        diff.path.is_root
        and len(diff.details) == 1
        and diff.details[0].kind is Kind.ADDITION
    )


def _keep(report: Report, predicate: DiffPredicate) -> Report:
    return report.with_diffs(diff for diff in report.diffs if predicate(diff))
