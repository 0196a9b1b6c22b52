"""Tolerant regex extractors for fields of records found in flight data.

Each extractor works on a window (or the whole blob), never raises on odd
input and returns ``None`` or an empty list when nothing matches. Field names
are literal and case-sensitive; the first match wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import re

from mangasrc.rsc.window import TextWindow

PUBLISH_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_SCALAR_FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    name: re.compile(rf'"{name}"\s*:\s*"([^"]+)"')
    for name in ("title", "description", "status", "type", "id")
}
_RAW_FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    "publishDate": re.compile(r'"publishDate":"(.*?)"'),
}
_LIST_FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    name: re.compile(rf'"{name}":\[(.*?)\]')
    for name in ("genres", "authors", "artists", "teams")
}
_NAME_RE = re.compile(r'"name":"(.*?)"')
_S3_LINK_RE = re.compile(r'"link"\s*:\s*"s3:([^"]+)"')
_CHAPTER_RE = re.compile(
    r'"id"\s*:\s*"([0-9a-f-]{36})"'
    r'.*?"orderId"\s*:\s*(\d+)'
    r'.*?"publishDate"\s*:\s*"[^"]*?(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})[^"]*"'
    r'.*?"mangaId"\s*:\s*"([0-9a-f-]{36})"'
)
_PAGE_RE = re.compile(r'"link"\s*:\s*"([^"]+)".*?"orderId"\s*:\s*([^,}\]]+)')


@dataclass(frozen=True, slots=True)
class ChapterRecord:
    """One chapter tuple as streamed inside the ``chapters`` array."""

    chapter_id: str
    order_id: int
    publish_date: str
    manga_id: str


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One image of the ``images`` array; ``link`` may be an ``s3:`` key."""

    link: str
    order: int


def _text(window: TextWindow | str) -> str:
    return window if isinstance(window, str) else window.text


def _pattern(patterns: dict[str, re.Pattern[str]], name: str) -> re.Pattern[str]:
    try:
        return patterns[name]
    except KeyError:
        raise ValueError(f"Unsupported field: {name}") from None


def extract_field(window: TextWindow | str, name: str) -> str | None:
    """First non-empty ``"<name>":"<value>"`` string value."""

    match = _pattern(_SCALAR_FIELD_PATTERNS, name).search(_text(window))
    return match.group(1) if match else None


def extract_raw_field(window: TextWindow | str, name: str) -> str | None:
    """First ``"<name>":"<value>"`` value, possibly empty or a reference token."""

    match = _pattern(_RAW_FIELD_PATTERNS, name).search(_text(window))
    return match.group(1) if match else None


def extract_s3_key(window: TextWindow | str) -> str | None:
    match = _S3_LINK_RE.search(_text(window))
    return match.group(1) if match else None


def extract_named_list(window: TextWindow | str, name: str) -> list[str]:
    """Every ``"name"`` inside the first ``"<name>":[...]`` array, in order, duplicates kept."""

    match = _pattern(_LIST_FIELD_PATTERNS, name).search(_text(window))
    if match is None:
        return []
    return _NAME_RE.findall(match.group(1))


def extract_chapter_records(window: TextWindow | str, manga_id: str | None = None) -> list[ChapterRecord]:
    """Chapter tuples in source order, first occurrence per chapter id.

    When ``manga_id`` is known, tuples owned by another title are dropped.
    """
    records: list[ChapterRecord] = []
    seen: set[str] = set()

    for match in _CHAPTER_RE.finditer(_text(window)):
        chapter_id, order_raw, publish_date, chapter_manga_id = match.groups()

        if manga_id is not None and chapter_manga_id != manga_id:
            continue
        if chapter_id in seen:
            continue
        seen.add(chapter_id)

        records.append(
            ChapterRecord(
                chapter_id=chapter_id,
                order_id=int(order_raw),
                publish_date=publish_date,
                manga_id=chapter_manga_id,
            )
        )

    return records


def extract_page_records(window: TextWindow | str) -> list[PageRecord]:
    """Link/order pairs in source order; an unparsable order becomes the running count."""

    records: list[PageRecord] = []
    for match in _PAGE_RE.finditer(_text(window)):
        link, order_raw = match.groups()
        try:
            order = int(order_raw.strip())
        except ValueError:
            order = len(records)
        records.append(PageRecord(link=link, order=order))
    return records


def parse_publish_date(value: str | None) -> datetime | None:
    """Parse a ``YYYY-MM-DDTHH:MM:SS`` prefix as UTC; None when it does not parse."""

    if not value:
        return None
    try:
        parsed = datetime.strptime(value[:19], PUBLISH_DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)
