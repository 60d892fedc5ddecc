"""
Review Source - Cache-or-Fetch for Place Reviews
================================================

Review bodies are the expensive, rate-limited part of a place lookup, so
they are cached per place for a fixed freshness window. Place metadata is
always fetched live, even on a cache hit.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from ..domain.models import PlaceMetadata, Review
from ..infrastructure.persistence.review_cache import ReviewCacheStore
from ..infrastructure.places.places_client import PlaceDataProvider

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewSource:
    """
    USAGE:
        source = ReviewSource(GooglePlacesClient(), SQLiteReviewCache(db))
        place, reviews = source.fetch("ChIJN1t_tDeuEmsRUsoyG83frY4")
    """

    def __init__(
        self,
        provider: PlaceDataProvider,
        cache: ReviewCacheStore,
        freshness: timedelta = DEFAULT_FRESHNESS,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._provider = provider
        self._cache = cache
        self._freshness = freshness
        self._now = now

    def fetch(self, place_id: str) -> Tuple[PlaceMetadata, List[Review]]:
        """
        Place metadata plus its reviews.

        Raises:
            NotFoundError: the provider knows no such place.
            UpstreamError: the provider failed.
        """
        cached = self._get_fresh(place_id)

        if cached is not None:
            logger.info(f"Review cache hit for {place_id} ({len(cached)} reviews)")
            details = self._provider.get_place_details(place_id, include_reviews=False)
            return PlaceMetadata.from_api(details, place_id), cached

        logger.info(f"Review cache miss for {place_id}, fetching live")
        details = self._provider.get_place_details(place_id, include_reviews=True)
        reviews = [Review.from_api(r) for r in details.get("reviews") or []]

        self._cache.put(place_id, reviews, self._now())
        return PlaceMetadata.from_api(details, place_id), reviews

    def _get_fresh(self, place_id: str) -> Optional[List[Review]]:
        """Cached reviews, or None when absent or older than the window."""
        entry = self._cache.get(place_id)
        if entry is None:
            return None

        reviews, captured_at = entry
        age = self._now() - captured_at
        if age > self._freshness:
            logger.debug(f"Review cache for {place_id} is stale ({age.days} days old)")
            return None

        return reviews
