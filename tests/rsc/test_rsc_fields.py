from __future__ import annotations

from datetime import datetime, timezone

import pytest

from mangasrc.rsc.fields import (
    ChapterRecord,
    PageRecord,
    extract_chapter_records,
    extract_field,
    extract_named_list,
    extract_page_records,
    extract_raw_field,
    extract_s3_key,
    parse_publish_date,
)
from mangasrc.rsc.window import whole_blob

MANGA_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
OTHER_MANGA_ID = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"
CHAPTER_ONE = "11111111-1111-4111-8111-111111111111"
CHAPTER_TWO = "22222222-2222-4222-8222-222222222222"
CHAPTER_FOREIGN = "33333333-3333-4333-8333-333333333333"


def _chapter(chapter_id: str, order: int, manga_id: str, date: str = "2024-01-02T10:20:30.000Z") -> str:
    return (
        f'{{"id":"{chapter_id}","orderId":{order},"title":null,'
        f'"publishDate":"{date}","views":12,"mangaId":"{manga_id}"}}'
    )


def test_scalar_fields_take_first_match() -> None:
    window = whole_blob('{"id":"m-1","title":"Solo, \'Leveling\'","status":"ON_GOING","type":"MANHWA","title":"Second"}')

    assert extract_field(window, "id") == "m-1"
    assert extract_field(window, "title") == "Solo, 'Leveling'"
    assert extract_field(window, "status") == "ON_GOING"
    assert extract_field(window, "type") == "MANHWA"
    assert extract_field(window, "description") is None


def test_unknown_field_name_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported field"):
        extract_field("{}", "colour")


def test_raw_field_keeps_reference_tokens_and_empty_values() -> None:
    assert extract_raw_field('"publishDate":"$D2021-06-01T00:00:00.000Z"', "publishDate") == "$D2021-06-01T00:00:00.000Z"
    assert extract_raw_field('"publishDate":""', "publishDate") == ""
    assert extract_raw_field('"title":"x"', "publishDate") is None


def test_named_list_extracts_names_in_order_without_dedupe() -> None:
    text = (
        '"genres":[{"id":1,"name":"Action"},{"id":2,"name":"Fantasy"},{"id":1,"name":"Action"}],'
        '"authors":[{"name":"Chugong"}],"artists":[]'
    )

    assert extract_named_list(text, "genres") == ["Action", "Fantasy", "Action"]
    assert extract_named_list(text, "authors") == ["Chugong"]
    assert extract_named_list(text, "artists") == []
    assert extract_named_list(text, "teams") == []


def test_s3_key_extraction() -> None:
    assert extract_s3_key('"cover":{"image":{"link" : "s3:covers/solo.webp"}}') == "covers/solo.webp"
    assert extract_s3_key('"link":"https://cdn.example/a.webp"') is None


def test_chapter_records_filter_foreign_titles_and_duplicates() -> None:
    text = (
        '"chapters":['
        + ",".join(
            [
                _chapter(CHAPTER_ONE, 1, MANGA_ID),
                _chapter(CHAPTER_TWO, 2, MANGA_ID, "2024-02-03T04:05:06"),
                _chapter(CHAPTER_ONE, 99, MANGA_ID),
                _chapter(CHAPTER_FOREIGN, 3, OTHER_MANGA_ID),
            ]
        )
        + "]"
    )

    records = extract_chapter_records(text, MANGA_ID)

    assert records == [
        ChapterRecord(CHAPTER_ONE, 1, "2024-01-02T10:20:30", MANGA_ID),
        ChapterRecord(CHAPTER_TWO, 2, "2024-02-03T04:05:06", MANGA_ID),
    ]


def test_chapter_records_keep_every_owner_when_title_id_unknown() -> None:
    text = _chapter(CHAPTER_ONE, 1, MANGA_ID) + "," + _chapter(CHAPTER_FOREIGN, 3, OTHER_MANGA_ID)

    records = extract_chapter_records(text)

    assert [record.chapter_id for record in records] == [CHAPTER_ONE, CHAPTER_FOREIGN]


def test_page_records_fall_back_to_running_count_for_bad_order() -> None:
    text = (
        '"images":[{"link":"s3:pages/a.webp","orderId":3},'
        '{"link":"https://cdn.example/b.webp","orderId":null},'
        '{"link":"https://cdn.example/c.webp","width":800,"orderId":1}'
    )

    assert extract_page_records(text) == [
        PageRecord("s3:pages/a.webp", 3),
        PageRecord("https://cdn.example/b.webp", 1),
        PageRecord("https://cdn.example/c.webp", 1),
    ]


def test_publish_date_parsing_is_lenient() -> None:
    assert parse_publish_date("2024-01-02T10:20:30.000Z") == datetime(2024, 1, 2, 10, 20, 30, tzinfo=timezone.utc)
    assert parse_publish_date("2024-13-45T99:00:00") is None
    assert parse_publish_date("") is None
    assert parse_publish_date(None) is None
