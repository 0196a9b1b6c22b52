"""Shared contract every site source implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mangasrc.models import CatalogPage, Chapter, Page, TitleMetadata
from mangasrc.sources.filters import SearchFilters


@runtime_checkable
class MangaSource(Protocol):
    """Capability set the host application browses through."""

    name: str
    base_url: str
    lang: str

    def popular(self, page: int) -> CatalogPage:
        """Catalog ordered by popularity."""

    def latest(self, page: int) -> CatalogPage:
        """Catalog ordered by most recent update."""

    def search(self, page: int, query: str, filters: SearchFilters | None = None) -> CatalogPage:
        """Catalog narrowed by a free-text query and filters."""

    def title_metadata(self, url: str) -> TitleMetadata:
        """Metadata of the title at the given relative URL."""

    def chapters(self, url: str) -> list[Chapter]:
        """Ordered chapters of the title at the given relative URL."""

    def pages(self, chapter_url: str) -> list[Page]:
        """Ordered images of the chapter at the given relative URL."""
