"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclass for safety and clarity
- Single source of truth for all configurable values

EXTENSIBILITY:
- To switch LLM provider: change api_url/model (any OpenAI-compatible API works)
- To move the cache elsewhere: implement ReviewCacheStore, keep cache_days here
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class PlacesSettings:
    """Google Places API settings."""

    api_key: str = field(default_factory=lambda: os.getenv("GOOGLE_PLACES_API_KEY", ""))
    base_url: str = "https://maps.googleapis.com/maps/api/place"
    language: str = field(default_factory=lambda: os.getenv("GOOGLE_PLACES_LANGUAGE", "en"))
    timeout_seconds: int = 15


@dataclass(frozen=True)
class LLMSettings:
    """OpenRouter LLM settings for review analysis."""

    api_key: str = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY", ""))
    api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    model: str = field(
        default_factory=lambda: os.getenv("OPENROUTER_MODEL", "anthropic/claude-3.5-sonnet")
    )

    # Low temperature: the same reviews should score the same way twice
    temperature: float = 0.2
    factor_max_tokens: int = 4096
    emotion_max_tokens: int = 2048
    timeout_seconds: int = 120


@dataclass(frozen=True)
class AnalysisSettings:
    """Review selection, caching and batch pacing."""

    min_review_length: int = 50
    max_reviews: int = 50
    cache_days: int = field(default_factory=lambda: int(os.getenv("REVIEW_CACHE_DAYS", "7")))

    # SAFETY: pause between stores in batch runs to respect LLM rate limits
    batch_delay_seconds: float = field(
        default_factory=lambda: float(os.getenv("BATCH_DELAY_SECONDS", "1.0"))
    )


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from review_insight.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.llm.model)
    """

    places: PlacesSettings = field(default_factory=PlacesSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)

    database_file: Path = field(
        default_factory=lambda: Path(os.getenv("REVIEW_INSIGHT_DB", "review_insight.db"))
    )

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.places.api_key:
            issues.append(
                "WARNING: GOOGLE_PLACES_API_KEY not set. "
                "Place details and reviews cannot be fetched."
            )

        if not self.llm.api_key:
            issues.append(
                "WARNING: OPENROUTER_API_KEY not set. "
                "Review analysis requests will be rejected upstream."
            )

        if self.analysis.cache_days < 0:
            issues.append("WARNING: REVIEW_CACHE_DAYS is negative; every lookup will miss the cache.")

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
