"""
Response Schemas
================

Pydantic models for the JSON the LLM is asked to return. Validation is
the hard boundary between free text and the rest of the system.

Scores are clamped to 0-100 and rounded to integers; anything that is not
a number fails validation.
"""

import logging
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from ...domain.insights import round_half_up
from ...domain.models import EMOTION_NAMES, FACTOR_NAMES, Sentiment

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100
MAX_KEYWORDS = 10


def _coerce_score(value):
    if isinstance(value, bool) or value is None:
        raise ValueError("score must be a number")
    try:
        score = round_half_up(float(value))
    except (TypeError, OverflowError) as e:
        raise ValueError(f"score must be a number, got {value!r}") from e
    if score < MIN_SCORE or score > MAX_SCORE:
        logger.warning(f"Score {value} outside {MIN_SCORE}-{MAX_SCORE}, clamping")
        score = max(MIN_SCORE, min(MAX_SCORE, score))
    return score


Score = Annotated[int, BeforeValidator(_coerce_score)]


class FactorScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    taste_quality: Score
    service: Score
    atmosphere: Score
    cleanliness: Score
    value_for_money: Score
    location_accessibility: Score


class FactorAnalysisResult(BaseModel):
    """Six-factor score, sentiment and text insights for one analysis run."""
    model_config = ConfigDict(frozen=True)

    factor_scores: FactorScores
    sentiment: Sentiment
    overall_score: Score
    trending_keywords: List[str] = Field(default_factory=list)
    summary: str = ""
    improvements: List[str] = Field(default_factory=list)
    review_count: int = 0

    @field_validator("sentiment", mode="before")
    @classmethod
    def _normalize_sentiment(cls, value):
        if isinstance(value, str):
            return value.strip().lower().replace(" ", "_").replace("-", "_")
        return value

    @field_validator("summary", mode="before")
    @classmethod
    def _null_summary(cls, value):
        return "" if value is None else value

    @field_validator("trending_keywords", "improvements", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value

    @field_validator("trending_keywords")
    @classmethod
    def _cap_keywords(cls, value: List[str]) -> List[str]:
        return value[:MAX_KEYWORDS]

    @model_validator(mode="before")
    @classmethod
    def _default_overall(cls, data):
        # a missing overall score falls back to the rounded factor mean
        if not isinstance(data, dict) or data.get("overall_score") is not None:
            return data
        factors = data.get("factor_scores")
        if not isinstance(factors, dict):
            return data
        try:
            scores = [_coerce_score(factors[name]) for name in FACTOR_NAMES if name in factors]
        except (TypeError, ValueError):
            return data
        if not scores:
            return data
        return dict(data, overall_score=round_half_up(sum(scores) / len(scores)))


class EmotionScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    joy: Score
    satisfaction: Score
    disappointment: Score
    surprise: Score
    anger: Score
    expectation: Score


class EmotionPayload(BaseModel):
    """Raw emotion analysis as returned by the model."""

    emotion_scores: EmotionScores
    dominant_emotion: Optional[str] = None
    emotion_insights: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("emotion_insights", mode="before")
    @classmethod
    def _normalize_insight_keys(cls, value):
        # "joy_examples" -> "joy"; unknown axes are dropped
        if not isinstance(value, dict):
            return value
        insights = {}
        for key, quotes in value.items():
            name = str(key).lower().removesuffix("_examples")
            if name in EMOTION_NAMES:
                insights[name] = quotes or []
        return insights


class EmotionShare(BaseModel):
    emotion: str
    percentage: int


class EmotionAnalysisResult(BaseModel):
    """Emotion profile derived from one analysis run."""
    model_config = ConfigDict(frozen=True)

    emotion_scores: EmotionScores
    dominant_emotion: str
    distribution: List[EmotionShare]
    insights: Dict[str, List[str]] = Field(default_factory=dict)
