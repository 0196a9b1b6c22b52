"""Unescaping of Next.js flight data pulled out of inline scripts."""

from __future__ import annotations

import re

_UNICODE_ESCAPE_RE = re.compile(r"\\u([0-9a-fA-F]{4})")
_LEFTOVER_ESCAPE_RE = re.compile(r'\\+(["/])')

# Longest sequences first so a collapsed escape is never unescaped twice.
_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ('\\\\\\"', '"'),
    ('\\\\"', '"'),
    ('\\"', '"'),
    ("\\\\/", "/"),
    ("\\/", "/"),
)


def _decode_unicode(match: re.Match[str]) -> str:
    return chr(int(match.group(1), 16))


def normalize_rsc(raw: str) -> str:
    """Decode ``\\uXXXX`` escapes and collapse quote, slash and newline escaping.

    Escaping layers deeper than the replacement table are collapsed as well,
    so no backslash is left in front of a quote or slash.
    """

    if not raw:
        return ""

    normalized = _UNICODE_ESCAPE_RE.sub(_decode_unicode, raw)
    for escaped, plain in _REPLACEMENTS:
        normalized = normalized.replace(escaped, plain)
    normalized = _LEFTOVER_ESCAPE_RE.sub(r"\1", normalized)
    return normalized.replace("\\n", "\n")
