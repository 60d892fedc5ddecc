"""
Domain Models
=============

Value objects shared by every layer. All are constructed fresh per request
and never mutated afterwards.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional


FACTOR_NAMES = (
    "taste_quality",
    "service",
    "atmosphere",
    "cleanliness",
    "value_for_money",
    "location_accessibility",
)

# Fixed axis order. Recommendations, distributions and charts follow it.
EMOTION_NAMES = (
    "joy",
    "satisfaction",
    "disappointment",
    "surprise",
    "anger",
    "expectation",
)


class Sentiment(Enum):
    """Five-value ordinal sentiment scale returned by factor analysis."""
    VERY_POSITIVE = "very_positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very_negative"


@dataclass(frozen=True)
class Review:
    """A single public review of a place."""
    author_name: str
    rating: int                 # 1 to 5 stars
    text: str = ""
    time: int = 0               # epoch seconds
    relative_time_description: str = ""

    @classmethod
    def from_api(cls, raw: dict) -> "Review":
        """Build a review from a Places API (or cached) record."""
        return cls(
            author_name=raw.get("author_name") or "Anonymous",
            rating=int(raw.get("rating") or 0),
            text=raw.get("text") or "",
            time=int(raw.get("time") or 0),
            relative_time_description=raw.get("relative_time_description") or "",
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PlaceMetadata:
    """Core facts about a place, always fetched live."""
    place_id: str
    name: str
    address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    category: str = "restaurant"
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    price_level: Optional[int] = None

    @classmethod
    def from_api(cls, raw: dict, place_id: str = "") -> "PlaceMetadata":
        location = (raw.get("geometry") or {}).get("location") or {}
        types = raw.get("types") or []
        return cls(
            place_id=raw.get("place_id") or place_id,
            name=raw.get("name", ""),
            address=raw.get("formatted_address", ""),
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            category=types[0] if types else "restaurant",
            rating=raw.get("rating"),
            rating_count=raw.get("user_ratings_total"),
            price_level=raw.get("price_level"),
        )


@dataclass(frozen=True)
class EmotionTrendPoint:
    """One emotion snapshot in a time-ordered history."""
    timestamp: str
    emotion_scores: Dict[str, int]
    dominant_emotion: str
