"""Heuristic extraction from Next.js flight data embedded in HTML pages."""

from .fields import (
    ChapterRecord,
    PageRecord,
    extract_chapter_records,
    extract_field,
    extract_named_list,
    extract_page_records,
    extract_raw_field,
    extract_s3_key,
    parse_publish_date,
)
from .locator import RSC_PUSH_MARKER, extract_rsc_blob
from .normalize import normalize_rsc
from .references import (
    DirectReference,
    IndirectReference,
    UnresolvedReference,
    lookup_reference,
    parse_reference,
    resolve_reference,
)
from .window import TextWindow, clamp_window, find_array_window, find_record_window, whole_blob

__all__ = [
    "ChapterRecord",
    "DirectReference",
    "IndirectReference",
    "PageRecord",
    "RSC_PUSH_MARKER",
    "TextWindow",
    "UnresolvedReference",
    "clamp_window",
    "extract_chapter_records",
    "extract_field",
    "extract_named_list",
    "extract_page_records",
    "extract_raw_field",
    "extract_rsc_blob",
    "extract_s3_key",
    "find_array_window",
    "find_record_window",
    "lookup_reference",
    "normalize_rsc",
    "parse_publish_date",
    "parse_reference",
    "resolve_reference",
    "whole_blob",
]
