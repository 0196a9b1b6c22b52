"""ScanR static sites: series JSON under ``/data/series/`` and a JSON-carrying reader page."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
from typing import Any, Sequence

from mangasrc.config import SourceSettings
from mangasrc.errors import ChapterNotFoundError, ResponseShapeError, SourceError
from mangasrc.html import parse_html
from mangasrc.http import HttpClient, HttpResponse, ResponseTransform
from mangasrc.models import CatalogEntry, CatalogPage, Chapter, Page, TitleMetadata, TitleStatus
from mangasrc.normalization import normalize_text
from mangasrc.sources.filters import SearchFilters

logger = logging.getLogger(__name__)

CONFIG_PATH = "/data/config.json"
SERIES_PATH = "/data/series/"
IMGCHEST_PAGES_PATH = "/api/imgchest-chapter-pages"
READER_DATA_SELECTOR = "#reader-data-placeholder"

_RELEASE_STATUS_MAP = {
    "en cours": TitleStatus.ONGOING,
    "fini": TitleStatus.COMPLETED,
    "termine": TitleStatus.COMPLETED,
    "abandonne": TitleStatus.CANCELLED,
    "annule": TitleStatus.CANCELLED,
    "en pause": TitleStatus.ON_HIATUS,
}


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) and value.strip() else None


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return []


@dataclass(slots=True)
class ScanRChapter:
    """One entry of a series' ``chapters`` collection."""

    number: str
    title: str | None = None
    volume: str | None = None
    last_updated: str | None = None
    licencied: bool = False
    groups: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, number: str, payload: Any) -> "ScanRChapter | None":
        if not isinstance(payload, dict):
            return None
        groups = payload.get("groups")
        last_updated = payload.get("last_updated")
        volume = payload.get("volume")
        return cls(
            number=number,
            title=_optional_str(payload, "title"),
            volume=None if volume is None else str(volume),
            last_updated=None if last_updated is None else str(last_updated),
            licencied=bool(payload.get("licencied", False)),
            groups={
                str(name): value
                for name, value in (groups.items() if isinstance(groups, dict) else [])
                if isinstance(value, str) and value
            },
        )

    @property
    def uploaded_at(self) -> datetime | None:
        if not self.last_updated:
            return None
        try:
            return datetime.fromtimestamp(int(self.last_updated), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None


def _iter_chapter_payloads(chapters: Any) -> list[tuple[str, Any]]:
    """Mapping entries as-is; a dense list is numbered from 1."""

    if isinstance(chapters, dict):
        return [(str(key), value) for key, value in chapters.items()]
    if isinstance(chapters, list):
        return [(str(index), value) for index, value in enumerate(chapters, start=1)]
    return []


@dataclass(slots=True)
class ScanRSeries:
    """Series JSON document."""

    slug: str
    title: str
    description: str | None = None
    artist: str | None = None
    author: str | None = None
    cover: str | None = None
    cover_low: str | None = None
    cover_hq: str | None = None
    tags: list[str] = field(default_factory=list)
    release_status: str | None = None
    alternative_titles: list[str] = field(default_factory=list)
    chapters: list[ScanRChapter] = field(default_factory=list)

    @classmethod
    def from_payload(cls, slug: str, payload: Any, *, url: str) -> "ScanRSeries":
        if not isinstance(payload, dict):
            raise ResponseShapeError(url, "Series body is not an object")
        title = payload.get("title")
        if not isinstance(title, str):
            raise ResponseShapeError(url, "Expected string field 'title'")

        chapters = [
            chapter
            for number, value in _iter_chapter_payloads(payload.get("chapters"))
            if (chapter := ScanRChapter.from_payload(number, value)) is not None
        ]
        return cls(
            slug=slug,
            title=title,
            description=_optional_str(payload, "description"),
            artist=_optional_str(payload, "artist"),
            author=_optional_str(payload, "author"),
            cover=_optional_str(payload, "cover"),
            cover_low=_optional_str(payload, "cover_low"),
            cover_hq=_optional_str(payload, "cover_hq"),
            tags=_string_list(payload.get("tags")),
            release_status=_optional_str(payload, "release_status"),
            alternative_titles=_string_list(payload.get("alternative_titles")),
            chapters=chapters,
        )

    @property
    def status(self) -> TitleStatus:
        if self.release_status is None:
            return TitleStatus.UNKNOWN
        return _RELEASE_STATUS_MAP.get(normalize_text(self.release_status), TitleStatus.UNKNOWN)


def series_slug(url: str) -> str:
    """``/<slug>/<chapter>`` or ``/<slug>`` -> ``<slug>``."""

    return url.split("?", 1)[0].strip("/").split("/", 1)[0]


def _chapter_sort_key(chapter: Chapter) -> float:
    return chapter.number


class ScanRSource:
    """Source for a ScanR deployment; site quirks plug in as response transforms."""

    def __init__(
        self,
        name: str,
        base_url: str,
        settings: SourceSettings,
        *,
        lang: str = "fr",
        client: HttpClient | None = None,
        transforms: Sequence[ResponseTransform] = (),
        excluded_titles: frozenset[str] = frozenset(),
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.lang = lang
        self._client = client or HttpClient(self.base_url, settings, transforms=transforms)
        self._excluded_titles = excluded_titles

    def popular(self, page: int) -> CatalogPage:
        return self._catalog(page, query="")

    def latest(self, page: int) -> CatalogPage:
        return self._catalog(page, query="")

    def search(self, page: int, query: str, filters: SearchFilters | None = None) -> CatalogPage:
        return self._catalog(page, query=query)

    def title_metadata(self, url: str) -> TitleMetadata:
        series = self._fetch_series(series_slug(url))
        return TitleMetadata(
            url=f"/{series.slug}",
            title=series.title,
            description=series.description,
            cover_url=series.cover_hq or series.cover,
            status=series.status,
            genres=list(series.tags),
            authors=[series.author] if series.author else [],
            artists=[series.artist] if series.artist else [],
            alternative_titles=list(series.alternative_titles),
        )

    def chapters(self, url: str) -> list[Chapter]:
        series = self._fetch_series(series_slug(url))

        chapters: list[Chapter] = []
        for entry in series.chapters:
            if entry.licencied or not entry.groups:
                continue
            try:
                number = float(entry.number)
            except ValueError:
                logger.debug("Skipping chapter with non-numeric key %r in %s", entry.number, series.slug)
                continue

            name = f"Chapitre {entry.number}"
            if entry.title:
                name = f"{name} - {entry.title}"
            chapters.append(
                Chapter(
                    url=f"/{series.slug}/{entry.number}",
                    name=name,
                    number=number,
                    uploaded_at=entry.uploaded_at,
                    scanlator=", ".join(entry.groups),
                )
            )

        return sorted(chapters, key=_chapter_sort_key, reverse=True)

    def pages(self, chapter_url: str) -> list[Page]:
        response = self._client.get(chapter_url).raise_for_status()
        chapter_number = response.path.rstrip("/").rsplit("/", 1)[-1]
        chapter = self._reader_chapter(response, chapter_number)

        groups = chapter.get("groups")
        group_url = next(iter(groups.values()), None) if isinstance(groups, dict) else None
        if not isinstance(group_url, str) or not group_url:
            raise ChapterNotFoundError(chapter_number, "Chapter URL not found")

        if "imgchest" in group_url:
            chapter_id = group_url.rstrip("/").rsplit("/", 1)[-1]
            listing = self._client.get(IMGCHEST_PAGES_PATH, params={"id": chapter_id}).raise_for_status()
            links = [item.get("link") if isinstance(item, dict) else None for item in self._json_list(listing)]
        else:
            listing = self._client.get(group_url).raise_for_status()
            links = self._json_list(listing)

        if not all(isinstance(link, str) and link for link in links):
            raise ResponseShapeError(listing.url, "Page list contains entries without an image URL")
        return [Page(index=index, image_url=link) for index, link in enumerate(links)]

    def _reader_chapter(self, response: HttpResponse, chapter_number: str) -> dict[str, Any]:
        placeholder = parse_html(response.body).select_one(READER_DATA_SELECTOR)
        if placeholder is None:
            raise ResponseShapeError(response.url, "Reader data placeholder missing")

        try:
            reader_data = json.loads(placeholder.string or placeholder.get_text())
        except json.JSONDecodeError as exc:
            raise ResponseShapeError(response.url, f"Invalid reader data: {exc}") from exc

        series = reader_data.get("series") if isinstance(reader_data, dict) else None
        chapters = series.get("chapters") if isinstance(series, dict) else None

        chapter: Any = None
        if isinstance(chapters, list):
            try:
                index = int(chapter_number) - 1
            except ValueError:
                index = 0
            chapter = chapters[index] if 0 <= index < len(chapters) else None
        elif isinstance(chapters, dict):
            chapter = chapters.get(chapter_number)

        if not isinstance(chapter, dict):
            raise ChapterNotFoundError(chapter_number, "Chapter data not found")
        return chapter

    def _json_list(self, response: HttpResponse) -> list[Any]:
        payload = response.json()
        if not isinstance(payload, list):
            raise ResponseShapeError(response.url, "Expected a JSON list")
        return payload

    def _fetch_series(self, slug: str) -> ScanRSeries:
        response = self._client.get(f"{SERIES_PATH}{slug}.json").raise_for_status()
        return ScanRSeries.from_payload(slug, response.json(), url=response.url)

    def _series_files(self) -> list[str]:
        response = self._client.get(CONFIG_PATH).raise_for_status()
        config = response.json()
        files = config.get("LOCAL_SERIES_FILES") if isinstance(config, dict) else None
        if not isinstance(files, list):
            raise ResponseShapeError(response.url, "Expected list field 'LOCAL_SERIES_FILES'")
        return [name for name in files if isinstance(name, str) and name]

    def _catalog(self, page: int, *, query: str) -> CatalogPage:
        # The whole catalog is one static listing.
        if page > 1:
            return CatalogPage(entries=[], has_next_page=False)

        needle = normalize_text(query)
        entries: list[CatalogEntry] = []
        for file_name in self._series_files():
            slug = file_name.removesuffix(".json")
            try:
                series = self._fetch_series(slug)
            except SourceError as exc:
                logger.warning("Skipping series %s: %s", slug, exc)
                continue

            if series.title in self._excluded_titles:
                continue
            if needle and not any(
                needle in normalize_text(candidate) for candidate in [series.title, *series.alternative_titles]
            ):
                continue

            entries.append(
                CatalogEntry(
                    title=series.title,
                    url=f"/{slug}",
                    cover_url=series.cover_low or series.cover,
                )
            )

        return CatalogPage(entries=entries, has_next_page=False)
