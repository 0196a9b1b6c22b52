"""JSON catalog API of Astral Manga: request parameters and response decoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mangasrc.errors import ResponseShapeError
from mangasrc.http import HttpResponse
from mangasrc.models import CatalogEntry, CatalogPage
from mangasrc.presign import S3Presigner
from mangasrc.sources.filters import SearchFilters

CATALOG_PATH = "/api/mangas"
PAGE_SIZE = 12


def _require_str(payload: dict[str, Any], key: str, *, url: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise ResponseShapeError(url, f"Expected string field '{key}'")
    return value


def _optional_str(payload: dict[str, Any], key: str, *, url: str) -> str | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ResponseShapeError(url, f"Expected string or null field '{key}'")
    return value


def _optional_object(payload: dict[str, Any], key: str, *, url: str) -> dict[str, Any] | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, dict):
        raise ResponseShapeError(url, f"Expected object or null field '{key}'")
    return value


@dataclass(slots=True)
class MangaDto:
    """One listing row of ``/api/mangas``."""

    id: str
    title: str
    url_id: str
    description: str | None = None
    cover_link: str | None = None
    status: str | None = None
    type: str | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, url: str) -> "MangaDto":
        if not isinstance(payload, dict):
            raise ResponseShapeError(url, "Manga entry is not an object")

        cover_link: str | None = None
        cover = _optional_object(payload, "cover", url=url)
        image = _optional_object(cover, "image", url=url) if cover else None
        if image is not None:
            cover_link = _require_str(image, "link", url=url)

        return cls(
            id=_require_str(payload, "id", url=url),
            title=_require_str(payload, "title", url=url),
            url_id=_require_str(payload, "urlId", url=url),
            description=_optional_str(payload, "description", url=url),
            cover_link=cover_link,
            status=_optional_str(payload, "status", url=url),
            type=_optional_str(payload, "type", url=url),
        )

    def to_entry(self, presigner: S3Presigner) -> CatalogEntry:
        return CatalogEntry(
            title=self.title,
            url=f"/manga/{self.url_id}",
            cover_url=presigner.resolve_link(self.cover_link),
        )


@dataclass(slots=True)
class MangaListingDto:
    """Body of ``/api/mangas``."""

    total: int
    mangas: list[MangaDto] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any, *, url: str) -> "MangaListingDto":
        if not isinstance(payload, dict):
            raise ResponseShapeError(url, "Listing body is not an object")

        mangas = payload.get("mangas")
        if not isinstance(mangas, list):
            raise ResponseShapeError(url, "Expected list field 'mangas'")

        total = payload.get("total")
        if isinstance(total, bool) or not isinstance(total, int):
            raise ResponseShapeError(url, "Expected integer field 'total'")

        return cls(total=total, mangas=[MangaDto.from_payload(item, url=url) for item in mangas])


def catalog_params(
    page: int,
    *,
    sort_by: str,
    sort_order: str,
    query: str = "",
    filters: SearchFilters | None = None,
) -> list[tuple[str, str]]:
    """Query string for ``/api/mangas``; ``tags`` repeats once per selected genre."""

    params: list[tuple[str, str]] = [("page", str(page)), ("pageSize", str(PAGE_SIZE))]
    if query.strip():
        params.append(("query", query.strip()))
    if filters is not None:
        if filters.status:
            params.append(("status", filters.status))
        if filters.content_type:
            params.append(("type", filters.content_type))
        params.extend(("tags", tag) for tag in filters.tags)
    params.extend(
        [
            ("sortBy", sort_by),
            ("sortOrder", sort_order),
            ("includeMode", "and"),
            ("excludeMode", "or"),
        ]
    )
    return params


def decode_catalog(response: HttpResponse, presigner: S3Presigner) -> CatalogPage:
    """Map a listing response to catalog entries, presigning ``s3:`` covers."""

    response.raise_for_status()
    listing = MangaListingDto.from_payload(response.json(), url=response.url)
    entries = [manga.to_entry(presigner) for manga in listing.mangas]
    has_next_page = len(listing.mangas) >= PAGE_SIZE and len(entries) < listing.total
    return CatalogPage(entries=entries, has_next_page=has_next_page)
