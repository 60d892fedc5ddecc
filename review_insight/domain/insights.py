"""
Insight Engine
==============

Pure derivations over analysis results: aggregate scores, emotion
distribution, rule-based recommendations and trend comparison.
"""

import logging
import math
from typing import Dict, List, Mapping, Sequence, Union

from .models import EMOTION_NAMES, EmotionTrendPoint, Sentiment

logger = logging.getLogger(__name__)

TREND_THRESHOLD = 5

SENTIMENT_SCORES = {
    Sentiment.VERY_POSITIVE: 100,
    Sentiment.POSITIVE: 75,
    Sentiment.NEUTRAL: 50,
    Sentiment.NEGATIVE: 25,
    Sentiment.VERY_NEGATIVE: 0,
}

# (emotion, threshold, advice). Evaluated independently, in axis order.
EMOTION_RULES = (
    ("joy", 70, "Customers feel real delight here. Put the moments that spark it front and centre in your marketing."),
    ("satisfaction", 80, "Satisfaction is high. Keep the current quality consistent."),
    ("disappointment", 40, "Watch the gap between expectations and experience. Review what your listing and photos promise."),
    ("surprise", 60, "Guests are pleasantly surprised. Turn that distinctive experience into a selling point."),
    ("anger", 20, "Complaints need attention now. Strengthen how the team handles and follows up on issues."),
    ("expectation", 75, "Strong intent to return. Consider a loyalty programme."),
)

EMOTION_LABELS = {
    "joy": "Joy",
    "satisfaction": "Satisfaction",
    "disappointment": "Disappointment",
    "surprise": "Surprise",
    "anger": "Anger",
    "expectation": "Expectation",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, e.g. 80.5 -> 81."""
    return math.floor(value + 0.5)


def average_factor_score(factor_scores: Mapping[str, int]) -> int:
    """Arithmetic mean of the factor scores, rounded to the nearest integer."""
    values = list(factor_scores.values())
    return round_half_up(sum(values) / len(values))


def sentiment_to_score(label: Union[str, Sentiment]) -> int:
    """
    Map a sentiment label onto 0/25/50/75/100.

    Raises:
        ValueError: label is not one of the five sentiment values.
    """
    return SENTIMENT_SCORES[Sentiment(label)]


def dominant_emotion(emotion_scores: Mapping[str, int]) -> str:
    """Highest scoring emotion. Ties go to the earlier axis."""
    return max(EMOTION_NAMES, key=lambda name: emotion_scores.get(name, 0))


def emotion_distribution(emotion_scores: Mapping[str, int]) -> List[Dict[str, Union[str, int]]]:
    """
    Share of each emotion in the total, as whole percentages.

    A zero total has no meaningful shares; every percentage is 0 then.
    """
    total = sum(emotion_scores.get(name, 0) for name in EMOTION_NAMES)
    if total == 0:
        logger.warning("Emotion scores sum to zero, distribution set to 0 for every axis")
        return [{"emotion": name, "percentage": 0} for name in EMOTION_NAMES]

    return [
        {"emotion": name, "percentage": round_half_up(emotion_scores.get(name, 0) / total * 100)}
        for name in EMOTION_NAMES
    ]


def recommendations_from_emotions(emotion_scores: Mapping[str, int], dominant: str = "") -> List[str]:
    """Advice lines for every emotion whose score crosses its threshold."""
    return [
        advice
        for emotion, threshold, advice in EMOTION_RULES
        if emotion_scores.get(emotion, 0) > threshold
    ]


def compare_snapshots(previous: Mapping[str, int], current: Mapping[str, int]) -> Dict[str, List[str]]:
    """Classify each emotion as improving, declining or stable (|diff| <= 5)."""
    trend = {"improving": [], "declining": [], "stable": []}

    for emotion in EMOTION_NAMES:
        diff = current.get(emotion, 0) - previous.get(emotion, 0)
        if diff > TREND_THRESHOLD:
            trend["improving"].append(emotion)
        elif diff < -TREND_THRESHOLD:
            trend["declining"].append(emotion)
        else:
            trend["stable"].append(emotion)

    return trend


def compare_trend(history: Sequence[EmotionTrendPoint]) -> Dict[str, List[str]]:
    """
    Compare the last two snapshots of a time-ordered history.

    Fewer than two snapshots yields three empty lists.
    """
    if len(history) < 2:
        return {"improving": [], "declining": [], "stable": []}

    return compare_snapshots(history[-2].emotion_scores, history[-1].emotion_scores)


def emotion_chart_data(emotion_scores: Mapping[str, int]) -> dict:
    """Radar chart payload with labels and values in axis order."""
    return {
        "labels": [EMOTION_LABELS[name] for name in EMOTION_NAMES],
        "datasets": [
            {
                "label": "Emotion score",
                "data": [emotion_scores.get(name, 0) for name in EMOTION_NAMES],
            }
        ],
    }
