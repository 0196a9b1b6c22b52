from __future__ import annotations

import pytest

from mangasrc.config import (
    DEFAULT_ASTRAL_BASE_URL,
    DEFAULT_ASTRAL_RATE_LIMIT,
    DEFAULT_LESPOROINIENS_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    SourceSettings,
)


def test_settings_defaults_from_empty_env() -> None:
    settings = SourceSettings.from_env({})

    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert settings.astral_base_url == DEFAULT_ASTRAL_BASE_URL
    assert settings.lesporoiniens_base_url == DEFAULT_LESPOROINIENS_BASE_URL
    assert settings.astral_rate_limit == DEFAULT_ASTRAL_RATE_LIMIT
    assert settings.log_level == "WARNING"


def test_settings_load_overrides_from_env() -> None:
    settings = SourceSettings.from_env(
        {
            "MANGASRC_USER_AGENT": " test-agent/1.0 ",
            "MANGASRC_TIMEOUT_SECONDS": "12.5",
            "MANGASRC_ASTRAL_BASE_URL": "https://astral.mirror/",
            "MANGASRC_LESPOROINIENS_BASE_URL": "http://poro.local",
            "MANGASRC_ASTRAL_RATE_LIMIT": "3",
            "MANGASRC_LOG_LEVEL": "debug",
        }
    )

    assert settings.user_agent == "test-agent/1.0"
    assert settings.timeout_seconds == 12.5
    assert settings.astral_base_url == "https://astral.mirror"
    assert settings.lesporoiniens_base_url == "http://poro.local"
    assert settings.astral_rate_limit == 3
    assert settings.log_level == "DEBUG"


def test_settings_validate_base_urls() -> None:
    with pytest.raises(ValueError, match="MANGASRC_ASTRAL_BASE_URL"):
        SourceSettings.from_env({"MANGASRC_ASTRAL_BASE_URL": "astral-manga.fr"})

    with pytest.raises(ValueError, match="MANGASRC_LESPOROINIENS_BASE_URL"):
        SourceSettings.from_env({"MANGASRC_LESPOROINIENS_BASE_URL": "  "})


def test_settings_validate_numeric_bounds() -> None:
    with pytest.raises(ValueError, match="MANGASRC_TIMEOUT_SECONDS"):
        SourceSettings.from_env({"MANGASRC_TIMEOUT_SECONDS": "0.5"})

    with pytest.raises(ValueError, match="MANGASRC_ASTRAL_RATE_LIMIT"):
        SourceSettings.from_env({"MANGASRC_ASTRAL_RATE_LIMIT": "0"})


def test_settings_name_the_variable_holding_a_non_numeric_value() -> None:
    with pytest.raises(ValueError, match="MANGASRC_ASTRAL_RATE_LIMIT must be an integer"):
        SourceSettings.from_env({"MANGASRC_ASTRAL_RATE_LIMIT": "many"})

    with pytest.raises(ValueError, match="MANGASRC_TIMEOUT_SECONDS must be a number"):
        SourceSettings.from_env({"MANGASRC_TIMEOUT_SECONDS": "soon"})


def test_settings_reject_blank_values_and_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="MANGASRC_USER_AGENT"):
        SourceSettings.from_env({"MANGASRC_USER_AGENT": "   "})

    with pytest.raises(ValueError, match="MANGASRC_LOG_LEVEL"):
        SourceSettings.from_env({"MANGASRC_LOG_LEVEL": "chatty"})
