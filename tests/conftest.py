import json
from datetime import datetime, timezone

import pytest

from review_insight.domain.errors import NotFoundError
from review_insight.domain.models import Review
from review_insight.infrastructure.llm.provider import TextGenerationProvider
from review_insight.infrastructure.persistence import Database
from review_insight.infrastructure.persistence.review_cache import ReviewCacheStore
from review_insight.infrastructure.places.places_client import PlaceDataProvider

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)

LONG_TEXT = "The ramen broth was rich and the staff were quick to refill our water glasses."


def make_review(rating=4, text=LONG_TEXT, author="Aiko"):
    return Review(author_name=author, rating=rating, text=text, time=1718000000,
                  relative_time_description="a week ago")


def place_record(place_id="place-1", name="Menya Test", reviews=None):
    record = {
        "place_id": place_id,
        "name": name,
        "formatted_address": "1-2-3 Shibuya, Tokyo",
        "geometry": {"location": {"lat": 35.66, "lng": 139.70}},
        "types": ["restaurant", "food"],
        "rating": 4.3,
        "user_ratings_total": 812,
        "price_level": 2,
    }
    if reviews is not None:
        record["reviews"] = [r.to_dict() for r in reviews]
    return record


class FakePlaceProvider(PlaceDataProvider):
    def __init__(self, places=None):
        self.places = places or {}
        self.calls = []

    def get_place_details(self, place_id, include_reviews=True):
        self.calls.append((place_id, include_reviews))
        if place_id not in self.places:
            raise NotFoundError("No place found (NOT_FOUND)")
        record = dict(self.places[place_id])
        if not include_reviews:
            record.pop("reviews", None)
        return record


class FakeCache(ReviewCacheStore):
    def __init__(self):
        self.entries = {}
        self.puts = []

    def get(self, place_id):
        return self.entries.get(place_id)

    def put(self, place_id, reviews, captured_at):
        self.puts.append(place_id)
        self.entries[place_id] = (list(reviews), captured_at)


class FakeTextProvider(TextGenerationProvider):
    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []
        self.options = []

    def generate(self, prompt, temperature, max_output_tokens):
        self.prompts.append(prompt)
        self.options.append((temperature, max_output_tokens))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


FACTOR_PAYLOAD = {
    "factor_scores": {
        "taste_quality": 85,
        "service": 72,
        "atmosphere": 90,
        "cleanliness": 88,
        "value_for_money": 75,
        "location_accessibility": 80,
    },
    "overall_score": 82,
    "sentiment": "positive",
    "trending_keywords": ["rich broth", "quick service"],
    "summary": "Loved for its broth, service could be warmer.",
    "improvements": ["Add staff at lunch", "Offer a smaller portion", "Post the wait time"],
}

EMOTION_PAYLOAD = {
    "emotion_scores": {
        "joy": 75,
        "satisfaction": 85,
        "disappointment": 20,
        "surprise": 45,
        "anger": 5,
        "expectation": 80,
    },
    "dominant_emotion": "satisfaction",
    "emotion_insights": {
        "joy_examples": ["The broth made my day"],
        "anger_examples": [],
    },
}


def fenced(payload, before="Here is the analysis:", after="Let me know if you need more."):
    return f"{before}\n```json\n{json.dumps(payload, indent=2)}\n```\n{after}"


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    database.init()
    return database
