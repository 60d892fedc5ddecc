"""
Analysis Prompts
================

Both prompts embed every review with its rating, separated by ``---``
lines, and ask for a single fenced JSON block with a fixed schema.
Rendering is deterministic: the same reviews give the same prompt.
"""

from typing import List

from ...domain.models import Review

REVIEW_SEPARATOR = "\n\n---\n\n"

FACTOR_PROMPT_TEMPLATE = """You are an expert analyst of customer reviews for local businesses. Analyze the following {review_count} reviews of "{store_name}" and return a structured JSON response.

# Reviews
{reviews}

# Task
Score each of these six factors from 0 to 100:

1. **taste_quality**: quality of the food, products or core service
2. **service**: staff attitude and responsiveness
3. **atmosphere**: comfort and design of the space
4. **cleanliness**: cleanliness of the premises and restrooms
5. **value_for_money**: satisfaction relative to price
6. **location_accessibility**: distance from transit, parking, ease of access

# Response format (use exactly this format)
```json
{{
  "factor_scores": {{
    "taste_quality": 85,
    "service": 72,
    "atmosphere": 90,
    "cleanliness": 88,
    "value_for_money": 75,
    "location_accessibility": 80
  }},
  "overall_score": 82,
  "sentiment": "positive",
  "trending_keywords": ["delicious", "stylish", "crowded", "good value", "near the station"],
  "summary": "Highly rated overall, especially for food and atmosphere. Service has room to improve.",
  "improvements": [
    "Add staff at peak hours so service stays smooth",
    "Introduce reservations to cut waiting times",
    "Describe menu items in more detail"
  ]
}}
```

## Rules
- Every score is an integer from 0 to 100
- sentiment is one of "very_positive", "positive", "neutral", "negative", "very_negative"
- trending_keywords has at most 10 entries
- improvements lists 3 to 5 concrete, actionable suggestions
- Reply with the JSON block only (no comments)
"""

EMOTION_PROMPT_TEMPLATE = """You are an expert in emotion analysis. Analyze the following {review_count} reviews of "{store_name}" and score the emotions customers express.

# Reviews
{reviews}

# Task
Score each of these six emotions from 0 to 100:

## 1. Joy
- Delight, fun, excitement
- Example phrases: "the best", "so much fun", "moved", "happy"

## 2. Satisfaction
- Met expectations, reassurance, contentment
- Example phrases: "glad we went", "satisfied", "reliable", "just right"

## 3. Disappointment
- Fell short, underwhelming, lacking
- Example phrases: "shame", "meh", "not what I expected", "just average"

## 4. Surprise
- Unexpected experiences, good or bad
- Example phrases: "blown away", "unexpected", "didn't see that coming"

## 5. Anger
- Strong dissatisfaction, complaints, outrage
- Example phrases: "terrible", "the worst", "unacceptable", "never again"

## 6. Expectation
- Intent to return, repeat visits, recommending to others
- Example phrases: "will be back", "definitely coming again", "highly recommend", "bringing friends"

# Response format (use exactly this format)
```json
{{
  "emotion_scores": {{
    "joy": 75,
    "satisfaction": 85,
    "disappointment": 20,
    "surprise": 45,
    "anger": 5,
    "expectation": 80
  }},
  "dominant_emotion": "satisfaction",
  "emotion_insights": {{
    "joy_examples": ["The food was so good I was genuinely moved"],
    "satisfaction_examples": ["Exactly the quality we hoped for"],
    "disappointment_examples": ["Portions could have been bigger"],
    "surprise_examples": ["Never expected a hidden gem like this"],
    "anger_examples": [],
    "expectation_examples": ["I will definitely come back!"]
  }}
}}
```

## Rules
- Every emotion score is an integer from 0 to 100
- dominant_emotion is the emotion with the highest score
- emotion_insights quotes actual review text
- Reply with the JSON block only (no comments)
"""


def format_reviews(reviews: List[Review]) -> str:
    """Number each review and show its rating, one block per review."""
    return REVIEW_SEPARATOR.join(
        f"[Review {i}] Rating: ★{r.rating}\n{r.text}"
        for i, r in enumerate(reviews, start=1)
    )


def build_factor_prompt(reviews: List[Review], store_name: str) -> str:
    return FACTOR_PROMPT_TEMPLATE.format(
        store_name=store_name,
        review_count=len(reviews),
        reviews=format_reviews(reviews),
    )


def build_emotion_prompt(reviews: List[Review], store_name: str) -> str:
    return EMOTION_PROMPT_TEMPLATE.format(
        store_name=store_name,
        review_count=len(reviews),
        reviews=format_reviews(reviews),
    )
