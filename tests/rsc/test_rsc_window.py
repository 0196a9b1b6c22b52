from __future__ import annotations

from mangasrc.rsc.window import (
    FALLBACK_LOOKAHEAD_CHARS,
    LINK_TAIL_CHARS,
    LOOKAHEAD_CHARS,
    UNCLOSED_LINK_TAIL_CHARS,
    clamp_window,
    find_array_window,
    find_record_window,
)


def test_record_window_starts_at_enclosing_brace_and_ends_after_cover_link() -> None:
    prefix = "x" * 50
    record = '{"id":"m-1","title":"Solo","urlId":"solo","cover":{"image":{"link":"s3:covers/solo.webp"}}}'
    blob = prefix + record + "y" * 500

    window = find_record_window(blob, "solo")

    assert window is not None
    assert window.start == len(prefix)
    link_close = blob.index('"', blob.index('"link":"s3:') + 12)
    assert window.end == link_close + LINK_TAIL_CHARS
    assert window.text.startswith('{"id":"m-1"')


def test_record_window_never_reads_before_blob_start() -> None:
    blob = '"title":""' + '"urlId":"abc"' + "z" * 20
    assert blob.index('"urlId":"abc"') == 10

    window = find_record_window(blob, "abc")

    assert window is not None
    assert window.start == 0
    assert window.end == len(blob)


def test_record_window_without_markers_uses_fallback_bounds() -> None:
    blob = "q" * 2000 + '"urlId":"lonely"' + "r" * 4000
    anchor = blob.index('"urlId":"lonely"')

    window = find_record_window(blob, "lonely")

    assert window is not None
    assert window.start == anchor - 1000
    assert window.end == anchor + FALLBACK_LOOKAHEAD_CHARS


def test_record_window_ignores_markers_beyond_lookbehind() -> None:
    blob = '{"title":"far"' + "p" * 6000 + '"urlId":"near"'
    anchor = blob.index('"urlId":"near"')

    window = find_record_window(blob, "near")

    assert window is not None
    assert window.start == anchor - 1000
    assert window.end == len(blob)


def test_record_window_missing_anchor_or_blank_id() -> None:
    assert find_record_window('{"urlId":"other"}', "solo") is None
    assert find_record_window('{"urlId":""}', "") is None
    assert find_record_window('{"urlId":"x"}', None) is None


def test_array_window_stops_at_first_closing_marker() -> None:
    blob = 'prefix"chapters":[{"id":"a"},{"id":"b"}],"total":2'

    window = find_array_window(blob, "chapters")

    assert window is not None
    assert window.text == '"chapters":[{"id":"a"},{"id":"b"}'


def test_array_window_runs_to_blob_end_when_unclosed() -> None:
    blob = '"images":[{"link":"a","orderId":1}'

    window = find_array_window(blob, "images")

    assert window is not None
    assert window.end == len(blob)
    assert find_array_window(blob, "chapters") is None


def test_clamp_window_bounds_offsets() -> None:
    window = clamp_window("abcdef", -5, 50)

    assert (window.start, window.end) == (0, 6)
    assert window.text == "abcdef"
    assert len(clamp_window("abc", 2, 1)) == 0


def test_record_window_ignores_cover_link_beyond_lookahead() -> None:
    blob = '{"title":"T","urlId":"far"' + "w" * LOOKAHEAD_CHARS + '"link":"s3:covers/far.webp"}' + "v" * 10
    anchor = blob.index('"urlId":"far"')

    window = find_record_window(blob, "far")

    assert window is not None
    assert window.start == 0
    assert window.end == anchor + FALLBACK_LOOKAHEAD_CHARS


def test_record_window_with_unclosed_cover_link_uses_short_tail() -> None:
    blob = '{"title":"T","urlId":"open","cover":{"image":{"link":"s3:covers/open' + "u" * 500

    window = find_record_window(blob, "open")

    assert window is not None
    assert window.start == 0
    assert window.end == blob.index('"link":"s3:') + UNCLOSED_LINK_TAIL_CHARS
