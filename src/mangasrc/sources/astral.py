"""Astral Manga: JSON catalog plus detail, chapter and reader pages rendered with flight data."""

from __future__ import annotations

import logging
import re
import time
from typing import Callable

from bs4 import BeautifulSoup

from mangasrc.config import SourceSettings
from mangasrc.html import absolute_url, parse_html, select_text
from mangasrc.http import HttpClient, RateLimiter
from mangasrc.models import CatalogPage, Chapter, Page, TitleMetadata, TitleStatus
from mangasrc.presign import S3Presigner
from mangasrc.rsc import (
    extract_chapter_records,
    extract_field,
    extract_named_list,
    extract_page_records,
    extract_raw_field,
    extract_rsc_blob,
    extract_s3_key,
    find_array_window,
    find_record_window,
    normalize_rsc,
    parse_publish_date,
    resolve_reference,
)
from mangasrc.rsc.window import TextWindow
from mangasrc.sources.astral_api import CATALOG_PATH, catalog_params, decode_catalog
from mangasrc.sources.filters import DEFAULT_SORT, SearchFilters

logger = logging.getLogger(__name__)

SCANLATOR = "Astral Manga"
UNKNOWN_TITLE = "Unknown"

_PAGE_ALT_RE = re.compile(r"^Page \d+")

_RSC_STATUS_MAP = {
    "ON_GOING": TitleStatus.ONGOING,
    "COMPLETED": TitleStatus.COMPLETED,
    "CANCELLED": TitleStatus.CANCELLED,
    "HIATUS": TitleStatus.ON_HIATUS,
}
_PAGE_TEXT_STATUS = (
    ("En cours", TitleStatus.ONGOING),
    ("Terminé", TitleStatus.COMPLETED),
    ("Annulé", TitleStatus.CANCELLED),
    ("En pause", TitleStatus.ON_HIATUS),
)


def title_url_id(url: str) -> str:
    """``/manga/<urlId>/...?...`` -> ``<urlId>``."""

    tail = url.split("/manga/", 1)[-1]
    return tail.split("/", 1)[0].split("?", 1)[0]


def _normalized_blob(document: BeautifulSoup) -> str:
    raw = extract_rsc_blob(document)
    return normalize_rsc(raw) if raw else ""


def _status_from_page(document: BeautifulSoup) -> TitleStatus:
    main = document.select_one("main")
    page_text = main.get_text(" ", strip=True) if main is not None else ""
    for needle, status in _PAGE_TEXT_STATUS:
        if needle in page_text:
            return status
    return TitleStatus.UNKNOWN


def _field(window: TextWindow | None, name: str) -> str | None:
    return extract_field(window, name) if window is not None else None


def _names(window: TextWindow | None, name: str) -> list[str]:
    return extract_named_list(window, name) if window is not None else []


def decode_title_metadata(
    document: BeautifulSoup,
    title_url: str,
    presigner: S3Presigner,
    *,
    base_url: str = "",
) -> TitleMetadata:
    """Metadata from the title's flight-data record, each field falling back to the HTML."""

    blob = _normalized_blob(document)
    window = find_record_window(blob, title_url_id(title_url)) if blob else None
    if window is None:
        logger.debug("No flight-data record for %s; using HTML only", title_url)

    title = _field(window, "title") or select_text(document, "main h1") or UNKNOWN_TITLE

    description = resolve_reference(blob, _field(window, "description"))
    if description is None:
        description = select_text(document, "main p")

    s3_key = extract_s3_key(window) if window is not None else None
    cover_url: str | None = None
    if s3_key is not None:
        cover_url = presigner.presign(s3_key)
    else:
        cover = document.select_one("main img[alt*=cover]")
        if cover is not None:
            cover_url = absolute_url(cover, "src", title_url) or None

    raw_status = _field(window, "status")
    status = _RSC_STATUS_MAP.get(raw_status.upper()) if raw_status else None
    if status is None:
        status = _status_from_page(document)

    genres = _names(window, "genres")
    if not genres:
        genres = [
            text
            for link in document.select('a[href*="/catalog?tags="]')
            if (text := link.get_text(strip=True))
        ]

    authors = _names(window, "authors")
    artists = _names(window, "artists") or list(authors)
    teams = _names(window, "teams")

    year: str | None = None
    if window is not None:
        publish_date = resolve_reference(blob, extract_raw_field(window, "publishDate"))
        if publish_date:
            year = publish_date.split("-", 1)[0] or None

    html_teams: list[str] = []
    html_year: str | None = None
    for box in document.select("main div.border"):
        label = select_text(box, "h3")
        value = select_text(box, "h2")
        if label is None or value is None:
            continue
        label = label.lower()
        if "auteur" in label:
            if not authors:
                authors = [value]
        elif "artiste" in label or "studio" in label:
            if not artists:
                artists = [value]
        elif "team" in label:
            html_teams = [value]
        elif "année" in label:
            html_year = value

    return TitleMetadata(
        url=title_url.removeprefix(base_url) if base_url else title_url,
        title=title,
        description=description,
        cover_url=cover_url,
        status=status,
        content_type=_field(window, "type"),
        genres=genres,
        authors=authors,
        artists=artists,
        teams=teams or html_teams,
        year=year or html_year,
    )


def decode_chapters(document: BeautifulSoup, title_url: str) -> list[Chapter]:
    """Chapters streamed in the page's ``chapters`` array, owned by the requested title."""

    blob = _normalized_blob(document)
    if not blob:
        return []

    chapters_window = find_array_window(blob, "chapters")
    if chapters_window is None:
        return []

    url_id = title_url_id(title_url)
    record_window = find_record_window(blob, url_id)
    manga_id = _field(record_window, "id")

    return [
        Chapter(
            url=f"/manga/{url_id}/chapter/{record.chapter_id}",
            name=f"Chapitre {record.order_id}",
            number=float(record.order_id),
            uploaded_at=parse_publish_date(record.publish_date),
            scanlator=SCANLATOR,
        )
        for record in extract_chapter_records(chapters_window, manga_id)
    ]


def _pages_from_blob(blob: str, presigner: S3Presigner) -> list[Page]:
    images_window = find_array_window(blob, "images")
    if images_window is None:
        return []

    pages: dict[int, Page] = {}
    for record in extract_page_records(images_window):
        if record.order in pages:
            continue
        image_url = presigner.resolve_link(record.link)
        if image_url:
            pages[record.order] = Page(index=record.order, image_url=image_url)
    return sorted(pages.values(), key=lambda page: page.index)


def _pages_from_html(document: BeautifulSoup, page_url: str) -> list[Page]:
    image_urls = [
        image_url
        for img in document.select("img[alt]")
        if _PAGE_ALT_RE.search(img.get("alt", ""))
        if (image_url := absolute_url(img, "src", page_url) or absolute_url(img, "data-src", page_url))
    ]
    return [Page(index=index, image_url=image_url) for index, image_url in enumerate(image_urls)]


def decode_pages(document: BeautifulSoup, page_url: str, presigner: S3Presigner) -> list[Page]:
    """Reader images from the ``images`` array, else from ``<img alt="Page N">`` elements."""

    blob = _normalized_blob(document)
    pages = _pages_from_blob(blob, presigner) if blob else []
    if pages:
        return pages

    logger.debug("Falling back to HTML images for %s", page_url)
    return _pages_from_html(document, page_url)


class AstralMangaSource:
    """Source for https://astral-manga.fr."""

    name = "AstralManga"
    lang = "fr"

    def __init__(
        self,
        settings: SourceSettings,
        *,
        client: HttpClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.base_url = settings.astral_base_url
        self._client = client or HttpClient(
            self.base_url,
            settings,
            rate_limiter=RateLimiter(settings.astral_rate_limit, 1.0),
        )
        self._presigner = S3Presigner(self._client)
        self._clock = clock

    def popular(self, page: int) -> CatalogPage:
        return self._catalog(catalog_params(page, sort_by="note", sort_order="desc"))

    def latest(self, page: int) -> CatalogPage:
        return self._catalog(catalog_params(page, sort_by="publishDate", sort_order="desc"))

    def search(self, page: int, query: str, filters: SearchFilters | None = None) -> CatalogPage:
        active = filters or SearchFilters(sort_by=DEFAULT_SORT)
        params = catalog_params(
            page,
            sort_by=active.sort_by,
            sort_order=active.sort_order,
            query=query,
            filters=active,
        )
        return self._catalog(params)

    def title_metadata(self, url: str) -> TitleMetadata:
        response = self._client.get(url).raise_for_status()
        return decode_title_metadata(
            parse_html(response.body),
            response.url,
            self._presigner,
            base_url=self.base_url,
        )

    def chapters(self, url: str) -> list[Chapter]:
        response = self._client.get(url).raise_for_status()
        chapters = decode_chapters(parse_html(response.body), url)
        if chapters:
            return chapters

        # Flight data is sometimes partial on a cached first load.
        logger.info("No chapters decoded for %s; retrying without cache", url)
        retry = self._client.get(
            url,
            params={"_": str(int(self._clock() * 1000))},
            headers={"Cache-Control": "no-cache"},
        ).raise_for_status()
        return decode_chapters(parse_html(retry.body), url)

    def pages(self, chapter_url: str) -> list[Page]:
        response = self._client.get(chapter_url).raise_for_status()
        return decode_pages(parse_html(response.body), response.url, self._presigner)

    def _catalog(self, params: list[tuple[str, str]]) -> CatalogPage:
        response = self._client.get(CATALOG_PATH, params=params)
        return decode_catalog(response, self._presigner)
