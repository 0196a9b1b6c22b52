"""Domain errors surfaced by sources to the host application."""

from __future__ import annotations

from dataclasses import dataclass


class SourceError(Exception):
    """Base class for every failure a source lets reach the caller."""


@dataclass(slots=True)
class TransportError(SourceError):
    """Network failure or unexpected status for a required request."""

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (url={self.url})"


@dataclass(slots=True)
class ResponseShapeError(SourceError):
    """Response body did not decode into the expected JSON shape."""

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (url={self.url})"


@dataclass(slots=True)
class ChapterNotFoundError(SourceError):
    """Reader data has no entry for the requested chapter."""

    chapter: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (chapter={self.chapter})"
