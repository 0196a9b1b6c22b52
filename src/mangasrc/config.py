"""Runtime configuration for the HTTP sources and CLI."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/125.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_ASTRAL_BASE_URL = "https://astral-manga.fr"
DEFAULT_LESPOROINIENS_BASE_URL = "https://lesporoiniens.org"
DEFAULT_ASTRAL_RATE_LIMIT = 8
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw_value!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_base_url(*, name: str, raw_value: str) -> str:
    if not raw_value:
        raise ValueError(f"{name} cannot be empty")
    if not (raw_value.startswith("http://") or raw_value.startswith("https://")):
        raise ValueError(f"{name} must start with http:// or https://")
    return raw_value.rstrip("/")


@dataclass(frozen=True, slots=True)
class SourceSettings:
    """Validated transport and site settings shared by all sources."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    astral_base_url: str = DEFAULT_ASTRAL_BASE_URL
    lesporoiniens_base_url: str = DEFAULT_LESPOROINIENS_BASE_URL
    astral_rate_limit: int = DEFAULT_ASTRAL_RATE_LIMIT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SourceSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        user_agent = source.get("MANGASRC_USER_AGENT", DEFAULT_USER_AGENT).strip()
        if not user_agent:
            raise ValueError("MANGASRC_USER_AGENT cannot be empty")

        timeout_raw = source.get("MANGASRC_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)).strip()
        rate_limit_raw = source.get("MANGASRC_ASTRAL_RATE_LIMIT", str(DEFAULT_ASTRAL_RATE_LIMIT)).strip()
        if not timeout_raw:
            raise ValueError("MANGASRC_TIMEOUT_SECONDS cannot be empty")
        if not rate_limit_raw:
            raise ValueError("MANGASRC_ASTRAL_RATE_LIMIT cannot be empty")

        timeout_seconds = _parse_positive_float(
            name="MANGASRC_TIMEOUT_SECONDS",
            raw_value=timeout_raw,
            minimum=1.0,
        )
        astral_rate_limit = _parse_positive_int(
            name="MANGASRC_ASTRAL_RATE_LIMIT",
            raw_value=rate_limit_raw,
            minimum=1,
        )

        astral_base_url = _parse_base_url(
            name="MANGASRC_ASTRAL_BASE_URL",
            raw_value=source.get("MANGASRC_ASTRAL_BASE_URL", DEFAULT_ASTRAL_BASE_URL).strip(),
        )
        lesporoiniens_base_url = _parse_base_url(
            name="MANGASRC_LESPOROINIENS_BASE_URL",
            raw_value=source.get("MANGASRC_LESPOROINIENS_BASE_URL", DEFAULT_LESPOROINIENS_BASE_URL).strip(),
        )

        log_level = source.get("MANGASRC_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"MANGASRC_LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")

        return cls(
            user_agent=user_agent,
            timeout_seconds=timeout_seconds,
            astral_base_url=astral_base_url,
            lesporoiniens_base_url=lesporoiniens_base_url,
            astral_rate_limit=astral_rate_limit,
            log_level=log_level,
        )
