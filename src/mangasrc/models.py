"""Canonical data structures returned by every manga source."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TitleStatus(str, Enum):
    """Publication status of a title."""

    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HIATUS = "on_hiatus"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class CatalogEntry:
    """One title as shown in a catalog listing."""

    title: str
    url: str
    cover_url: str | None = None


@dataclass(slots=True)
class CatalogPage:
    """A page of catalog entries plus the paging hint."""

    entries: list[CatalogEntry] = field(default_factory=list)
    has_next_page: bool = False


@dataclass(slots=True)
class TitleMetadata:
    """Detail-page metadata for a single title."""

    url: str
    title: str
    description: str | None = None
    cover_url: str | None = None
    status: TitleStatus = TitleStatus.UNKNOWN
    content_type: str | None = None
    genres: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    artists: list[str] = field(default_factory=list)
    teams: list[str] = field(default_factory=list)
    year: str | None = None
    alternative_titles: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Chapter:
    """A readable chapter of a title."""

    url: str
    name: str
    number: float
    uploaded_at: datetime | None = None
    scanlator: str | None = None


@dataclass(slots=True)
class Page:
    """One image of a chapter, ordered by index."""

    index: int
    image_url: str
