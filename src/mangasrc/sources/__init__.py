"""Site source implementations and the default registry."""

from mangasrc.config import SourceSettings

from .astral import AstralMangaSource
from .base import MangaSource
from .filters import SearchFilters
from .lesporoiniens import build_lesporoiniens_source
from .scanr import ScanRSource


def build_default_sources(settings: SourceSettings) -> dict[str, MangaSource]:
    """Return every supported site keyed by its CLI name."""
    return {
        "astral": AstralMangaSource(settings),
        "lesporoiniens": build_lesporoiniens_source(settings),
    }


__all__ = [
    "AstralMangaSource",
    "MangaSource",
    "ScanRSource",
    "SearchFilters",
    "build_default_sources",
    "build_lesporoiniens_source",
]
