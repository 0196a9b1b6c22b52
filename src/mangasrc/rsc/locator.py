"""Collect the streamed RSC payload embedded in a rendered page."""

from __future__ import annotations

from bs4 import BeautifulSoup

RSC_PUSH_MARKER = "__next_f.push"


def extract_rsc_blob(document: BeautifulSoup) -> str:
    """Concatenate every inline script that pushes flight data, in document order.

    An empty string means the page carries no flight data and callers should
    use their HTML fallback.
    """
    parts: list[str] = []
    for script in document.find_all("script"):
        text = script.string if script.string is not None else script.get_text()
        if text and RSC_PUSH_MARKER in text:
            parts.append(text)
    return "".join(parts)
