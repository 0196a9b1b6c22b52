"""Catalog search filters and the option lists offered to the host UI."""

from __future__ import annotations

from dataclasses import dataclass, field

# (label, query value) pairs; an empty value means "no constraint".
SORT_OPTIONS: tuple[tuple[str, str], ...] = (
    ("Titre", "title"),
    ("Note", "note"),
    ("Date de publication", "publishDate"),
    ("Vues", "views"),
)
STATUS_OPTIONS: tuple[tuple[str, str], ...] = (
    ("Tous", ""),
    ("En cours", "ON_GOING"),
    ("Terminé", "COMPLETED"),
    ("Annulé", "CANCELLED"),
    ("En pause", "HIATUS"),
)
TYPE_OPTIONS: tuple[tuple[str, str], ...] = (
    ("Tous", ""),
    ("Manga", "MANGA"),
    ("Manhwa", "MANHWA"),
    ("Manhua", "MANHUA"),
)
GENRE_OPTIONS: tuple[str, ...] = (
    "Action",
    "Aventure",
    "Comédie",
    "Drame",
    "Fantasy",
    "Horreur",
    "Isekai",
    "Mystère",
    "Romance",
    "Sci-fi",
    "Seinen",
    "Shonen",
    "Shojo",
    "Slice of Life",
    "Sport",
    "Surnaturel",
    "Tragédie",
)

DEFAULT_SORT = "title"


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """User-selected catalog constraints."""

    sort_by: str = DEFAULT_SORT
    status: str = ""
    content_type: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.sort_by not in {value for _label, value in SORT_OPTIONS}:
            raise ValueError(f"Unsupported sort: {self.sort_by}")
        if self.status not in {value for _label, value in STATUS_OPTIONS}:
            raise ValueError(f"Unsupported status: {self.status}")
        if self.content_type not in {value for _label, value in TYPE_OPTIONS}:
            raise ValueError(f"Unsupported type: {self.content_type}")

    @property
    def sort_order(self) -> str:
        return "asc" if self.sort_by == "title" else "desc"
