"""Report post-processing: filters, excludes and document grouping."""

from dyffpack.report.filters import (
    apply_report_filters,
    compile_patterns,
    exclude_document_regexps,
    exclude_documents,
    exclude_paths,
    exclude_regexps,
    filter_document_regexps,
    filter_documents,
    filter_paths,
    filter_regexps,
    ignore_new_documents,
    ignore_value_changes,
)
from dyffpack.report.grouping import (
    DocumentGroup,
    consolidate_diff,
    consolidate_groups,
    group_by_document,
)

__all__ = [
    "filter_paths",
    "exclude_paths",
    "filter_regexps",
    "exclude_regexps",
    "filter_documents",
    "exclude_documents",
    "filter_document_regexps",
    "exclude_document_regexps",
    "ignore_value_changes",
    "ignore_new_documents",
    "apply_report_filters",
    "compile_patterns",
    "DocumentGroup",
    "group_by_document",
    "consolidate_diff",
    "consolidate_groups",
]
