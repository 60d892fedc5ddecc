"""
SQLite Database Repository - Stores, Analyses and Review Cache
==============================================================

Stores are keyed by their Google place id. Analyses are append-only and
linked to a store; the most recent one is what the API serves.
"""

import json
import sqlite3
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from contextlib import contextmanager

from ...domain.models import EmotionTrendPoint, PlaceMetadata

logger = logging.getLogger(__name__)

DATABASE_FILE = "review_insight.db"


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class StoreRecord:
    """Store record from database."""
    id: int
    user_id: str
    place_id: str
    name: str
    address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    category: str = ""
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_level: Optional[int] = None
    last_analyzed: str = ""
    created_at: str = ""


@dataclass
class AnalysisRecord:
    """Analysis record from database."""
    id: int
    store_id: int
    factor_scores: Dict[str, int]
    overall_score: int
    sentiment: str
    trending_keywords: List[str] = field(default_factory=list)
    summary: str = ""
    improvements: List[str] = field(default_factory=list)
    review_count: int = 0
    emotion_scores: Optional[Dict[str, int]] = None
    dominant_emotion: Optional[str] = None
    analyzed_at: str = ""


class Database:
    """
    SQLite database for Review Insight.

    Usage:
        db = Database()
        db.init()

        store_id, analysis_id = db.save_analysis_run(place, "owner-1", analysis)
        latest = db.get_latest_analysis(store_id)
    """

    def __init__(self, db_path: str = DATABASE_FILE):
        self.db_path = str(db_path)

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager. Rolls back on error."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init(self):
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS stores (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    place_id TEXT UNIQUE NOT NULL,
                    name TEXT NOT NULL,
                    address TEXT DEFAULT '',
                    latitude REAL,
                    longitude REAL,
                    category TEXT DEFAULT '',
                    rating REAL,
                    review_count INTEGER,
                    price_level INTEGER,
                    last_analyzed TEXT DEFAULT '',
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS analyses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    store_id INTEGER NOT NULL REFERENCES stores(id),
                    factor_scores TEXT NOT NULL,
                    overall_score INTEGER NOT NULL,
                    sentiment TEXT NOT NULL,
                    trending_keywords TEXT DEFAULT '[]',
                    summary TEXT DEFAULT '',
                    improvements TEXT DEFAULT '[]',
                    review_count INTEGER DEFAULT 0,
                    emotion_scores TEXT,
                    dominant_emotion TEXT,
                    analyzed_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_analyses_store
                ON analyses (store_id, analyzed_at)
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS review_cache (
                    place_id TEXT PRIMARY KEY,
                    reviews TEXT NOT NULL,
                    cached_at TEXT NOT NULL
                )
            """)

            logger.info(f"Database initialized: {self.db_path}")

    # ── Stores and analyses ───────────────────────────────────────

    def save_analysis_run(self, place: PlaceMetadata, user_id: str, analysis: dict) -> Tuple[int, int]:
        """
        Upsert the store and append an analysis in one transaction.

        A new store is created with the place's core facts; an existing one
        only has ``last_analyzed`` touched.

        Args:
            place: Live place metadata.
            user_id: Owner of the store record (kept from first creation).
            analysis: Factor analysis as a JSON-ready dict.

        Returns:
            (store_id, analysis_id)
        """
        now = _utcnow()

        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO stores (user_id, place_id, name, address, latitude, longitude,
                                       category, rating, review_count, price_level,
                                       last_analyzed, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(place_id) DO UPDATE SET last_analyzed = excluded.last_analyzed""",
                (user_id, place.place_id, place.name, place.address, place.latitude,
                 place.longitude, place.category, place.rating, place.rating_count,
                 place.price_level, now, now)
            )
            store_id = conn.execute(
                "SELECT id FROM stores WHERE place_id = ?", (place.place_id,)
            ).fetchone()["id"]

            cursor = conn.execute(
                """INSERT INTO analyses (store_id, factor_scores, overall_score, sentiment,
                                         trending_keywords, summary, improvements,
                                         review_count, analyzed_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (store_id,
                 json.dumps(analysis["factor_scores"]),
                 analysis["overall_score"],
                 analysis["sentiment"],
                 json.dumps(analysis.get("trending_keywords", []), ensure_ascii=False),
                 analysis.get("summary", ""),
                 json.dumps(analysis.get("improvements", []), ensure_ascii=False),
                 analysis.get("review_count", 0),
                 now)
            )
            analysis_id = cursor.lastrowid

        logger.info(f"Saved analysis {analysis_id} for store {store_id} ({place.name})")
        return store_id, analysis_id

    def get_store(self, store_id: int) -> Optional[StoreRecord]:
        """Get store by ID."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM stores WHERE id = ?", (store_id,)).fetchone()
            return self._row_to_store(row) if row else None

    def get_store_by_place_id(self, place_id: str) -> Optional[StoreRecord]:
        """Get store by its Google place id."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM stores WHERE place_id = ?", (place_id,)).fetchone()
            return self._row_to_store(row) if row else None

    def get_latest_analysis(self, store_id: int) -> Optional[AnalysisRecord]:
        """Most recent analysis for a store, or None if it was never analyzed."""
        with self._get_connection() as conn:
            row = conn.execute(
                """SELECT * FROM analyses WHERE store_id = ?
                   ORDER BY analyzed_at DESC, id DESC LIMIT 1""",
                (store_id,)
            ).fetchone()
            return self._row_to_analysis(row) if row else None

    def attach_emotions(self, store_id: int, emotion_scores: Dict[str, int],
                        dominant_emotion: str) -> Optional[int]:
        """
        Attach an emotion profile to the store's most recent analysis.

        Returns:
            The updated analysis id, or None when the store has no analysis.
        """
        with self._get_connection() as conn:
            row = conn.execute(
                """SELECT id FROM analyses WHERE store_id = ?
                   ORDER BY analyzed_at DESC, id DESC LIMIT 1""",
                (store_id,)
            ).fetchone()
            if not row:
                return None

            conn.execute(
                "UPDATE analyses SET emotion_scores = ?, dominant_emotion = ? WHERE id = ?",
                (json.dumps(emotion_scores), dominant_emotion, row["id"])
            )
            return row["id"]

    def get_emotion_history(self, store_id: int, limit: int = 2) -> List[EmotionTrendPoint]:
        """Most recent emotion snapshots for a store, oldest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """SELECT emotion_scores, dominant_emotion, analyzed_at FROM analyses
                   WHERE store_id = ? AND emotion_scores IS NOT NULL
                   ORDER BY analyzed_at DESC, id DESC LIMIT ?""",
                (store_id, limit)
            ).fetchall()

        return [
            EmotionTrendPoint(
                timestamp=row["analyzed_at"],
                emotion_scores=json.loads(row["emotion_scores"]),
                dominant_emotion=row["dominant_emotion"] or "",
            )
            for row in reversed(rows)
        ]

    # ── Review cache ──────────────────────────────────────────────

    def get_cached_reviews(self, place_id: str) -> Optional[Tuple[List[dict], datetime]]:
        """Raw cached review records and their capture time, regardless of age."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT reviews, cached_at FROM review_cache WHERE place_id = ?", (place_id,)
            ).fetchone()
        if not row:
            return None
        return json.loads(row["reviews"]), datetime.fromisoformat(row["cached_at"])

    def save_cached_reviews(self, place_id: str, reviews: List[dict], cached_at: datetime):
        """Replace the cached review set for a place (last write wins)."""
        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO review_cache (place_id, reviews, cached_at) VALUES (?, ?, ?)
                   ON CONFLICT(place_id) DO UPDATE SET
                       reviews = excluded.reviews, cached_at = excluded.cached_at""",
                (place_id, json.dumps(reviews, ensure_ascii=False), cached_at.isoformat())
            )

    # ── Row mapping ───────────────────────────────────────────────

    def _row_to_store(self, row: sqlite3.Row) -> StoreRecord:
        """Convert database row to StoreRecord object."""
        return StoreRecord(
            id=row["id"],
            user_id=row["user_id"],
            place_id=row["place_id"],
            name=row["name"],
            address=row["address"] or "",
            latitude=row["latitude"],
            longitude=row["longitude"],
            category=row["category"] or "",
            rating=row["rating"],
            review_count=row["review_count"],
            price_level=row["price_level"],
            last_analyzed=row["last_analyzed"] or "",
            created_at=row["created_at"] or ""
        )

    def _row_to_analysis(self, row: sqlite3.Row) -> AnalysisRecord:
        """Convert database row to AnalysisRecord object."""
        emotion_scores = row["emotion_scores"]
        return AnalysisRecord(
            id=row["id"],
            store_id=row["store_id"],
            factor_scores=json.loads(row["factor_scores"]),
            overall_score=row["overall_score"],
            sentiment=row["sentiment"],
            trending_keywords=json.loads(row["trending_keywords"] or "[]"),
            summary=row["summary"] or "",
            improvements=json.loads(row["improvements"] or "[]"),
            review_count=row["review_count"] or 0,
            emotion_scores=json.loads(emotion_scores) if emotion_scores else None,
            dominant_emotion=row["dominant_emotion"],
            analyzed_at=row["analyzed_at"]
        )


# Quick init helper
def init_database(db_path: str = DATABASE_FILE) -> Database:
    """Create the database file and tables if needed."""
    db = Database(db_path)
    db.init()
    return db
