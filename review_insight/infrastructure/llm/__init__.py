from .provider import TextGenerationProvider, OpenRouterProvider
from .review_analyzer import ReviewAnalyzer, extract_json_payload, run_paced
from .schemas import FactorAnalysisResult, EmotionAnalysisResult

__all__ = [
    "TextGenerationProvider",
    "OpenRouterProvider",
    "ReviewAnalyzer",
    "extract_json_payload",
    "run_paced",
    "FactorAnalysisResult",
    "EmotionAnalysisResult",
]
