"""Blocking HTTP transport shared by all sources."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
import json
import logging
import time
from typing import Any, Callable, Mapping, Sequence
from urllib.parse import urlsplit

import requests

from mangasrc.config import SourceSettings
from mangasrc.errors import ResponseShapeError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Materialized response: status, decoded body and final URL."""

    status: int
    body: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def fragment(self) -> str:
        return urlsplit(self.url).fragment

    def with_body(self, body: str, *, status: int | None = None, content_type: str | None = None) -> "HttpResponse":
        headers = dict(self.headers)
        if content_type is not None:
            headers["Content-Type"] = content_type
        return replace(self, body=body, status=self.status if status is None else status, headers=headers)

    def raise_for_status(self) -> "HttpResponse":
        if not self.ok:
            raise TransportError(self.url, f"Unexpected HTTP status {self.status}")
        return self

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except json.JSONDecodeError as exc:
            raise ResponseShapeError(self.url, f"Invalid JSON body: {exc}") from exc


ResponseTransform = Callable[[HttpResponse], HttpResponse]


class RateLimiter:
    """Sliding-window limiter allowing ``permits`` calls per ``period`` seconds."""

    def __init__(
        self,
        permits: int,
        period: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if permits < 1:
            raise ValueError("permits must be >= 1")
        if period <= 0:
            raise ValueError("period must be > 0")

        self._permits = permits
        self._period = period
        self._clock = clock
        self._sleep = sleep
        self._calls: deque[float] = deque()

    def acquire(self) -> None:
        now = self._clock()
        while self._calls and now - self._calls[0] >= self._period:
            self._calls.popleft()

        if len(self._calls) >= self._permits:
            delay = self._period - (now - self._calls[0])
            if delay > 0:
                self._sleep(delay)
            now = self._clock()
            self._calls.popleft()

        self._calls.append(now)


class HttpClient:
    """``requests`` session wrapper with default headers, throttling and response transforms."""

    def __init__(
        self,
        base_url: str,
        settings: SourceSettings,
        *,
        session: requests.Session | None = None,
        rate_limiter: RateLimiter | None = None,
        transforms: Sequence[ResponseTransform] = (),
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = settings.timeout_seconds
        self._session = session or requests.Session()
        self._rate_limiter = rate_limiter
        self._transforms = list(transforms)
        self._default_headers = {
            "User-Agent": settings.user_agent,
            "Referer": f"{self._base_url}/",
        }

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | Sequence[tuple[str, Any]] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Issue a GET and return the transformed response; never checks the status."""

        target = url if url.startswith(("http://", "https://")) else f"{self._base_url}{url}"
        merged_headers = {**self._default_headers, **(headers or {})}

        if self._rate_limiter is not None:
            self._rate_limiter.acquire()

        try:
            raw = self._session.get(target, params=params, headers=merged_headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(target, f"Request failed: {exc}") from exc

        fragment = urlsplit(target).fragment
        final_url = raw.url or target
        if fragment and "#" not in final_url:
            final_url = f"{final_url}#{fragment}"

        response = HttpResponse(
            status=raw.status_code,
            body=raw.text,
            url=final_url,
            headers=dict(raw.headers),
        )
        logger.debug("GET %s -> %s", response.url, response.status)

        for transform in self._transforms:
            response = transform(response)
        return response
