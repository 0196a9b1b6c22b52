"""Exchange ``s3:`` storage keys for time-limited direct URLs."""

from __future__ import annotations

import logging

from mangasrc.errors import SourceError
from mangasrc.http import HttpClient

logger = logging.getLogger(__name__)

S3_PREFIX = "s3:"
PRESIGN_PATH = "/api/s3/presign-get"


class S3Presigner:
    """Calls the site's presign endpoint; every failure yields None."""

    def __init__(self, client: HttpClient, *, path: str = PRESIGN_PATH) -> None:
        self._client = client
        self._path = path

    def presign(self, key: str) -> str | None:
        if not key:
            return None

        try:
            response = self._client.get(self._path, params={"key": key})
            if not response.ok:
                logger.warning("Presign rejected with HTTP %s for key %s", response.status, key)
                return None
            payload = response.json()
        except SourceError as exc:
            logger.warning("Presign failed for key %s: %s", key, exc)
            return None

        url = payload.get("url") if isinstance(payload, dict) else None
        if not isinstance(url, str) or not url:
            logger.warning("Presign response missing 'url' for key %s", key)
            return None
        return url

    def resolve_link(self, link: str | None) -> str | None:
        """Return direct links unchanged and presign ``s3:`` ones."""

        if not link:
            return None
        if link.startswith(S3_PREFIX):
            return self.presign(link[len(S3_PREFIX) :])
        return link
