"""HTML parsing helpers built on BeautifulSoup."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from mangasrc.normalization import normalize_whitespace


def parse_html(body: str) -> BeautifulSoup:
    return BeautifulSoup(body, "lxml")


def select_text(document: BeautifulSoup | Tag, selector: str) -> str | None:
    """Return the whitespace-normalized text of the first match, or None."""

    node = document.select_one(selector)
    if node is None:
        return None
    text = normalize_whitespace(node.get_text(" ", strip=True))
    return text or None


def absolute_url(tag: Tag, attr: str, base_url: str) -> str:
    """Resolve ``tag[attr]`` against ``base_url``; empty string when the attribute is missing."""

    value = tag.get(attr)
    if not isinstance(value, str) or not value.strip():
        return ""
    return urljoin(base_url, value.strip())
