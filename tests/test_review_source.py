from datetime import timedelta

import pytest

from review_insight.application.review_source import ReviewSource
from review_insight.domain.errors import NotFoundError, UpstreamError
from review_insight.infrastructure.persistence import SQLiteReviewCache

from .conftest import NOW, FakeCache, FakePlaceProvider, make_review, place_record


def build(places, cache=None, now=NOW):
    provider = FakePlaceProvider(places)
    cache = cache if cache is not None else FakeCache()
    return ReviewSource(provider, cache, now=lambda: now), provider, cache


def test_miss_fetches_live_and_writes_cache():
    live = [make_review(5), make_review(2)]
    source, provider, cache = build({"X": place_record("X", reviews=live)})

    place, reviews = source.fetch("X")

    assert place.name == "Menya Test"
    assert place.latitude == 35.66
    assert place.category == "restaurant"
    assert reviews == live
    assert provider.calls == [("X", True)]
    assert cache.entries["X"] == (live, NOW)


def test_fresh_hit_returns_cached_reviews_with_live_metadata():
    cached = [make_review(1, author="cached")]
    cache = FakeCache()
    cache.entries["X"] = (cached, NOW - timedelta(days=6))
    source, provider, _ = build({"X": place_record("X", name="Renamed", reviews=[make_review(5)])}, cache)

    place, reviews = source.fetch("X")

    assert reviews == cached
    assert place.name == "Renamed"
    assert provider.calls == [("X", False)]
    assert cache.puts == []


def test_entry_eight_days_old_is_refetched_and_overwritten():
    cache = FakeCache()
    cache.entries["X"] = ([make_review(1, author="old")], NOW - timedelta(days=8))
    fresh = [make_review(4, author="new")]
    source, provider, _ = build({"X": place_record("X", reviews=fresh)}, cache)

    _, reviews = source.fetch("X")

    assert reviews == fresh
    assert provider.calls == [("X", True)]
    assert cache.entries["X"] == (fresh, NOW)


def test_entry_exactly_at_window_is_still_fresh():
    cache = FakeCache()
    cache.entries["X"] = ([make_review(3)], NOW - timedelta(days=7))
    source, provider, _ = build({"X": place_record("X", reviews=[])}, cache)

    source.fetch("X")

    assert provider.calls == [("X", False)]


def test_place_without_reviews_caches_empty_set():
    source, _, cache = build({"X": place_record("X")})

    _, reviews = source.fetch("X")

    assert reviews == []
    assert cache.puts == ["X"]


def test_not_found_propagates_without_cache_write():
    source, _, cache = build({})

    with pytest.raises(NotFoundError):
        source.fetch("missing")
    assert cache.puts == []


def test_upstream_error_propagates():
    class FailingProvider(FakePlaceProvider):
        def get_place_details(self, place_id, include_reviews=True):
            raise UpstreamError("Places API error: OVER_QUERY_LIMIT", status="OVER_QUERY_LIMIT")

    source = ReviewSource(FailingProvider(), FakeCache(), now=lambda: NOW)

    with pytest.raises(UpstreamError) as info:
        source.fetch("X")
    assert info.value.status == "OVER_QUERY_LIMIT"


def test_works_against_sqlite_cache(db):
    live = [make_review(5, author="Ken"), make_review(3, author="Mei")]
    cache = SQLiteReviewCache(db)
    source, provider, _ = build({"X": place_record("X", reviews=live)}, cache)

    source.fetch("X")
    _, again = source.fetch("X")

    assert again == live
    assert provider.calls == [("X", True), ("X", False)]
