"""
Analysis Service - Review Analysis Use Cases
============================================

Sequences ReviewSource -> sampling -> ReviewAnalyzer -> persistence for
the factor and emotion analyses, and reads stored results back.

The store row is written in the same transaction as the analysis and only
after the analysis succeeded, so a failed run leaves nothing behind.
"""

import logging
import re
import time
from dataclasses import asdict
from datetime import timedelta
from typing import Callable, List, Optional, Tuple

from ..domain.errors import NotFoundError, ValidationError
from ..domain.insights import (
    compare_trend,
    emotion_chart_data,
    emotion_distribution,
    recommendations_from_emotions,
)
from ..domain.models import PlaceMetadata, Review
from ..domain.sampling import filter_quality, sample_reviews
from ..infrastructure.config import get_settings
from ..infrastructure.llm import ReviewAnalyzer, run_paced
from ..infrastructure.persistence import Database, SQLiteReviewCache
from ..infrastructure.places import GooglePlacesClient
from .review_source import ReviewSource

logger = logging.getLogger(__name__)

PLACE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]{1,512}$")


def _require_place_id(place_id: Optional[str]) -> str:
    place_id = (place_id or "").strip()
    if not place_id:
        raise ValidationError("place_id is required")
    if not PLACE_ID_PATTERN.match(place_id):
        raise ValidationError(f"place_id is malformed: {place_id!r}")
    return place_id


def _require_store_id(store_id) -> int:
    if store_id is None or str(store_id).strip() == "":
        raise ValidationError("store_id is required")
    try:
        value = int(str(store_id).strip())
    except ValueError:
        raise ValidationError(f"store_id must be an integer: {store_id!r}")
    if value <= 0:
        raise ValidationError(f"store_id must be positive: {store_id!r}")
    return value


class AnalysisService:
    """
    USAGE:
        service = AnalysisService.from_settings()
        summary = service.analyze_store("ChIJN1t_tDeuEmsRUsoyG83frY4", user_id="owner-1")
        latest = service.latest_analysis(summary["store_id"])
    """

    def __init__(
        self,
        db: Database,
        review_source: ReviewSource,
        analyzer: ReviewAnalyzer,
        max_reviews: Optional[int] = None,
        min_review_length: Optional[int] = None,
        batch_delay_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        settings = get_settings()
        self._db = db
        self._source = review_source
        self._analyzer = analyzer
        self._max_reviews = max_reviews or settings.analysis.max_reviews
        self._min_review_length = min_review_length or settings.analysis.min_review_length
        self._batch_delay = (
            settings.analysis.batch_delay_seconds if batch_delay_seconds is None else batch_delay_seconds
        )
        self._sleep = sleep

    @classmethod
    def from_settings(cls, db: Optional[Database] = None) -> "AnalysisService":
        """Wire the service with Google Places, OpenRouter and SQLite."""
        settings = get_settings()
        if db is None:
            db = Database(settings.database_file)
            db.init()

        source = ReviewSource(
            GooglePlacesClient(),
            SQLiteReviewCache(db),
            freshness=timedelta(days=settings.analysis.cache_days),
        )
        return cls(db, source, ReviewAnalyzer())

    # ── Factor analysis ───────────────────────────────────────────

    def analyze_store(self, place_id: Optional[str], user_id: Optional[str]) -> dict:
        """
        Run the factor analysis for a place and store the result.

        Raises:
            ValidationError: place_id or user_id missing/malformed.
            NotFoundError: unknown place, or no reviews worth analyzing.
            UpstreamError, MalformedResponseError: analysis failed.
        """
        place_id = _require_place_id(place_id)
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("user_id is required")

        place, reviews = self._prepare_reviews(place_id)
        analysis = self._analyzer.analyze_factors(reviews, place.name)

        store_id, analysis_id = self._db.save_analysis_run(
            place, user_id, analysis.model_dump(mode="json")
        )

        return {
            "success": True,
            "store_id": store_id,
            "analysis_id": analysis_id,
            "result": {
                "store_name": place.name,
                **analysis.model_dump(mode="json"),
            },
        }

    def latest_analysis(self, store_id) -> dict:
        """Store facts plus its most recent analysis (None if never analyzed)."""
        store_id = _require_store_id(store_id)

        store = self._db.get_store(store_id)
        if store is None:
            raise NotFoundError(f"Store {store_id} not found")

        analysis = self._db.get_latest_analysis(store_id)

        return {
            "store": {
                "id": store.id,
                "name": store.name,
                "address": store.address,
                "rating": store.rating,
                "review_count": store.review_count,
                "last_analyzed": store.last_analyzed,
            },
            "analysis": asdict(analysis) if analysis else None,
        }

    # ── Emotion analysis ──────────────────────────────────────────

    def analyze_emotions(self, place_id: Optional[str], store_name: Optional[str] = None,
                         store_id=None) -> dict:
        """
        Run the emotion analysis for a place.

        When ``store_id`` is given, the scores are attached to that store's
        most recent analysis.
        """
        place_id = _require_place_id(place_id)
        if store_id is not None:
            store_id = _require_store_id(store_id)

        place, reviews = self._prepare_reviews(place_id)
        emotions = self._analyzer.analyze_emotions(reviews, store_name or place.name)

        scores = emotions.emotion_scores.model_dump()
        recommendations = recommendations_from_emotions(scores, emotions.dominant_emotion)

        if store_id is not None:
            updated = self._db.attach_emotions(store_id, scores, emotions.dominant_emotion)
            if updated is None:
                logger.warning(f"Store {store_id} has no analysis to attach emotions to")

        return {
            "success": True,
            "result": {
                "store_name": place.name,
                "review_count": len(reviews),
                "emotion_scores": scores,
                "dominant_emotion": emotions.dominant_emotion,
                "emotion_distribution": [share.model_dump() for share in emotions.distribution],
                "insights": {
                    "examples": emotions.insights,
                    "recommendations": recommendations,
                },
                "chart": emotion_chart_data(scores),
            },
        }

    def latest_emotions(self, store_id) -> dict:
        """
        Emotion profile of the most recent analysis, its advice and the trend.

        A newer factor run without emotions hides older profiles.
        """
        store_id = _require_store_id(store_id)

        latest_run = self._db.get_latest_analysis(store_id)
        history = self._db.get_emotion_history(store_id, limit=2)
        if latest_run is None or latest_run.emotion_scores is None or not history:
            raise NotFoundError("No emotion analysis found. Please run analysis first.")

        latest = history[-1]
        return {
            "emotion_scores": latest.emotion_scores,
            "dominant_emotion": latest.dominant_emotion,
            "emotion_distribution": emotion_distribution(latest.emotion_scores),
            "analyzed_at": latest.timestamp,
            "insights": recommendations_from_emotions(latest.emotion_scores, latest.dominant_emotion),
            "trend": compare_trend(history),
        }

    # ── Batch ─────────────────────────────────────────────────────

    def batch_analyze(self, place_ids: List[str], user_id: str) -> dict:
        """
        Analyze several places one at a time with a pause in between.

        A failing place is logged and skipped; the rest still run.

        Returns:
            {"succeeded": {place_id: summary}, "failed": {place_id: error}}
        """
        succeeded, failed = run_paced(
            place_ids,
            lambda place_id: self.analyze_store(place_id, user_id),
            self._batch_delay,
            self._sleep,
        )
        return {"succeeded": succeeded, "failed": failed}

    # ── Helpers ───────────────────────────────────────────────────

    def _prepare_reviews(self, place_id: str) -> Tuple[PlaceMetadata, List[Review]]:
        """Fetch, drop low-signal reviews and sample down to the cap."""
        place, reviews = self._source.fetch(place_id)
        if not reviews:
            raise NotFoundError("No reviews found for this place")

        quality = filter_quality(reviews, self._min_review_length)
        sampled = sample_reviews(quality, self._max_reviews)
        if not sampled:
            raise NotFoundError("No reviews with enough text to analyze")

        logger.info(
            f"{place.name}: {len(reviews)} reviews, {len(quality)} with enough text, "
            f"{len(sampled)} sampled"
        )
        return place, sampled
