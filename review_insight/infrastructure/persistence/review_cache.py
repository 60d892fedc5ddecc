"""
Review Cache Store
==================

Key-value store of review sets by place id. The store only remembers when
an entry was captured; freshness is decided by ReviewSource.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from .database import Database
from ...domain.models import Review

logger = logging.getLogger(__name__)


class ReviewCacheStore(ABC):
    """
    Abstract base class for review caches.
    Implement this interface to move the cache to another backend.
    """

    @abstractmethod
    def get(self, place_id: str) -> Optional[Tuple[List[Review], datetime]]:
        """Cached reviews and their capture time, or None."""
        ...

    @abstractmethod
    def put(self, place_id: str, reviews: List[Review], captured_at: datetime) -> None:
        """Upsert the whole review set for a place."""
        ...


class SQLiteReviewCache(ReviewCacheStore):
    """Review cache kept in the ``review_cache`` table."""

    def __init__(self, db: Database):
        self._db = db

    def get(self, place_id: str) -> Optional[Tuple[List[Review], datetime]]:
        cached = self._db.get_cached_reviews(place_id)
        if cached is None:
            return None
        raw_reviews, captured_at = cached
        return [Review.from_api(r) for r in raw_reviews], captured_at

    def put(self, place_id: str, reviews: List[Review], captured_at: datetime) -> None:
        self._db.save_cached_reviews(place_id, [r.to_dict() for r in reviews], captured_at)
        logger.debug(f"Cached {len(reviews)} reviews for {place_id}")
