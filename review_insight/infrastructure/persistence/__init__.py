from .database import Database, StoreRecord, AnalysisRecord, init_database
from .review_cache import ReviewCacheStore, SQLiteReviewCache

__all__ = [
    "Database",
    "StoreRecord",
    "AnalysisRecord",
    "init_database",
    "ReviewCacheStore",
    "SQLiteReviewCache",
]
