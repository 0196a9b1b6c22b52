"""Catalog, chapter and page extraction for French manga reading sites."""

__version__ = "0.1.0"
