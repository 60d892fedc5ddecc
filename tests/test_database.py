import sqlite3
from datetime import datetime, timezone

import pytest

from review_insight.domain.models import PlaceMetadata

from .conftest import FACTOR_PAYLOAD

PLACE = PlaceMetadata(place_id="place-1", name="Menya Test", address="Shibuya",
                      latitude=35.66, longitude=139.70, rating=4.3, rating_count=812)


def analysis(**overrides):
    return dict(FACTOR_PAYLOAD, review_count=12, **overrides)


def test_first_run_creates_store_and_analysis(db):
    store_id, analysis_id = db.save_analysis_run(PLACE, "owner-1", analysis())

    store = db.get_store(store_id)
    latest = db.get_latest_analysis(store_id)

    assert store.place_id == "place-1"
    assert store.user_id == "owner-1"
    assert store.review_count == 812
    assert latest.id == analysis_id
    assert latest.factor_scores["atmosphere"] == 90
    assert latest.trending_keywords == ["rich broth", "quick service"]
    assert latest.emotion_scores is None


def test_repeat_run_touches_store_and_appends_analysis(db):
    store_id, first = db.save_analysis_run(PLACE, "owner-1", analysis())
    before = db.get_store(store_id).last_analyzed

    same_store, second = db.save_analysis_run(PLACE, "owner-2", analysis(overall_score=60))

    assert same_store == store_id
    assert second != first
    assert db.get_store(store_id).user_id == "owner-1"
    assert db.get_store(store_id).last_analyzed >= before
    assert db.get_latest_analysis(store_id).overall_score == 60


def test_failed_analysis_insert_leaves_no_store(db):
    with pytest.raises(KeyError):
        db.save_analysis_run(PLACE, "owner-1", {"sentiment": "positive", "overall_score": 1})

    assert db.get_store_by_place_id("place-1") is None


def test_unknown_store_and_missing_analysis(db):
    assert db.get_store(42) is None
    assert db.get_latest_analysis(42) is None


def test_attach_emotions_updates_latest_analysis_only(db):
    store_id, first = db.save_analysis_run(PLACE, "owner-1", analysis())
    _, second = db.save_analysis_run(PLACE, "owner-1", analysis())

    updated = db.attach_emotions(store_id, {"joy": 80}, "joy")

    assert updated == second
    assert db.get_latest_analysis(store_id).emotion_scores == {"joy": 80}
    assert db.attach_emotions(999, {"joy": 1}, "joy") is None


def test_emotion_history_is_oldest_first(db):
    store_id, _ = db.save_analysis_run(PLACE, "owner-1", analysis())
    db.attach_emotions(store_id, {"joy": 40}, "joy")
    db.save_analysis_run(PLACE, "owner-1", analysis())
    db.attach_emotions(store_id, {"joy": 50}, "joy")
    db.save_analysis_run(PLACE, "owner-1", analysis())  # no emotions yet

    history = db.get_emotion_history(store_id, limit=2)

    assert [p.emotion_scores["joy"] for p in history] == [40, 50]


def test_review_cache_upsert_replaces_entry(db):
    first = datetime(2025, 1, 1, tzinfo=timezone.utc)
    second = datetime(2025, 2, 1, tzinfo=timezone.utc)

    db.save_cached_reviews("place-1", [{"author_name": "A", "rating": 5}], first)
    db.save_cached_reviews("place-1", [{"author_name": "B", "rating": 1}], second)

    reviews, cached_at = db.get_cached_reviews("place-1")
    assert reviews == [{"author_name": "B", "rating": 1}]
    assert cached_at == second
    assert db.get_cached_reviews("other") is None


def test_init_is_idempotent(db):
    db.init()

    with sqlite3.connect(db.db_path) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"stores", "analyses", "review_cache"} <= tables
