# Application Layer
# =================
# Use cases: fetch reviews (cache or live), run the analysis pipeline,
# read stored results. No business rules live here.

from .review_source import ReviewSource
from .analysis_service import AnalysisService

__all__ = ["ReviewSource", "AnalysisService"]
