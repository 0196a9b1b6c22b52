"""Les Poroiniens: a ScanR site whose series responses need reshaping before decoding."""

from __future__ import annotations

import json
import logging

from mangasrc.config import SourceSettings
from mangasrc.http import HttpResponse
from mangasrc.sources.scanr import SERIES_PATH, ScanRSource

logger = logging.getLogger(__name__)

NAME = "Les Poroiniens"

SENTINEL_TITLE = "DUMMY_ERROR_403"
SENTINEL_BODY = (
    '{"title":"DUMMY_ERROR_403","description":null,"artist":null,"author":null,'
    '"cover":null,"cover_low":null,"cover_hq":null,"tags":null,"release_status":null,'
    '"alternative_titles":null,"chapters":null}'
)

_DENIAL_STATUSES = {403, 404}
_DENIAL_MARKERS = ("accès refusé", "erreur 404")


def is_series_json(response: HttpResponse) -> bool:
    path = response.path
    if not path.startswith(SERIES_PATH):
        return False
    return path.endswith(".json") or response.fragment.endswith(".json") or path == SERIES_PATH


def patch_series_response(response: HttpResponse) -> HttpResponse:
    """Swap denial pages for a sentinel series and re-key dense chapter arrays from 1."""

    if not is_series_json(response):
        return response

    if response.status in _DENIAL_STATUSES:
        body = response.body.lower()
        if any(marker in body for marker in _DENIAL_MARKERS):
            logger.info("Series access denied (HTTP %s), substituting sentinel: %s", response.status, response.url)
            return response.with_body(SENTINEL_BODY, status=200, content_type="application/json")
        return response

    if response.status != 200:
        return response

    try:
        root = json.loads(response.body)
    except json.JSONDecodeError:
        return response

    if not isinstance(root, dict) or not isinstance(root.get("chapters"), list):
        return response

    root["chapters"] = {str(index): chapter for index, chapter in enumerate(root["chapters"], start=1)}
    return response.with_body(json.dumps(root, ensure_ascii=False, separators=(",", ":")))


def build_lesporoiniens_source(settings: SourceSettings) -> ScanRSource:
    return ScanRSource(
        NAME,
        settings.lesporoiniens_base_url,
        settings,
        transforms=(patch_series_response,),
        excluded_titles=frozenset({SENTINEL_TITLE}),
    )
