"""Heuristic scoping of entity records inside a normalized flight blob.

The blob is not addressable JSON, so windows are located with anchor tokens
and bounded look-around. A window is an offset pair into the blob; it may
over- or under-capture, so extractors treat every match as optional.
"""

from __future__ import annotations

from dataclasses import dataclass

LOOKBEHIND_CHARS = 5000
LOOKAHEAD_CHARS = 5000
FALLBACK_LOOKBEHIND_CHARS = 1000
FALLBACK_LOOKAHEAD_CHARS = 3000
LINK_TAIL_CHARS = 100
UNCLOSED_LINK_TAIL_CHARS = 300

_RECORD_START_MARKERS = ('"title":"', '"id":"')
_S3_LINK_MARKER = '"link":"s3:'
_ARRAY_END_MARKER = '],"'


@dataclass(frozen=True, slots=True)
class TextWindow:
    """Half-open ``[start, end)`` range over a normalized blob."""

    blob: str
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.blob[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start


def clamp_window(blob: str, start: int, end: int) -> TextWindow:
    """Build a window with both offsets clamped to the blob bounds."""

    size = len(blob)
    clamped_start = min(max(0, start), size)
    clamped_end = min(max(clamped_start, end), size)
    return TextWindow(blob=blob, start=clamped_start, end=clamped_end)


def whole_blob(blob: str) -> TextWindow:
    return TextWindow(blob=blob, start=0, end=len(blob))


def _record_start(blob: str, anchor: int) -> int:
    search_start = max(0, anchor - LOOKBEHIND_CHARS)
    before = blob[search_start:anchor]

    marker_idx = max(before.rfind(marker) for marker in _RECORD_START_MARKERS)
    if marker_idx < 0:
        return anchor - FALLBACK_LOOKBEHIND_CHARS

    brace_idx = before.rfind("{", 0, marker_idx + 1)
    return search_start + (brace_idx if brace_idx >= 0 else marker_idx)


def _record_end(blob: str, anchor: int) -> int:
    after = blob[anchor : anchor + LOOKAHEAD_CHARS]

    link_idx = after.find(_S3_LINK_MARKER)
    if link_idx < 0:
        return anchor + FALLBACK_LOOKAHEAD_CHARS

    link_end = after.find('"', link_idx + len(_S3_LINK_MARKER) + 1)
    if link_end >= 0:
        return anchor + link_end + LINK_TAIL_CHARS
    return anchor + link_idx + UNCLOSED_LINK_TAIL_CHARS


def find_record_window(blob: str, url_id: str | None) -> TextWindow | None:
    """Locate the window most likely holding the record whose ``urlId`` is ``url_id``."""

    if not url_id or not url_id.strip():
        return None

    anchor = blob.find(f'"urlId":"{url_id}"')
    if anchor < 0:
        return None

    return clamp_window(blob, _record_start(blob, anchor), _record_end(blob, anchor))


def find_array_window(blob: str, field: str) -> TextWindow | None:
    """Window from ``"<field>":[{`` to the first ``],"`` after it, or to the blob end."""

    start = blob.find(f'"{field}":[{{')
    if start < 0:
        return None

    end = blob.find(_ARRAY_END_MARKER, start)
    if end <= start:
        end = len(blob)
    return clamp_window(blob, start, end)
