"""
Review Analyzer - LLM-Based Factor and Emotion Scoring
=======================================================

ARCHITECTURAL DECISION:
- One LLM call per analysis; prompt building and response parsing are
  the only logic on this side
- The model is asked for a fenced JSON block, but prose around it is
  tolerated: the block is extracted, and the whole reply is parsed when
  no block is found
- Output is validated with pydantic. Anything that does not fit raises
  MalformedResponseError with the raw text attached; it is never coerced
  into a default and never retried here

USAGE:
    analyzer = ReviewAnalyzer()
    result = analyzer.analyze_factors(reviews, "Blue Bottle Coffee")
    print(result.overall_score, result.sentiment.value)
"""

import json
import logging
import re
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from ..config import get_settings
from .prompts import build_emotion_prompt, build_factor_prompt
from .provider import OpenRouterProvider, TextGenerationProvider
from .schemas import EmotionAnalysisResult, EmotionPayload, FactorAnalysisResult
from ...domain.errors import MalformedResponseError, ReviewInsightError
from ...domain.insights import dominant_emotion, emotion_distribution
from ...domain.models import Review

logger = logging.getLogger(__name__)

JSON_BLOCK_PATTERN = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

ModelT = TypeVar("ModelT", bound=BaseModel)
ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


def run_paced(
    items: Sequence[ItemT],
    task: Callable[[ItemT], ResultT],
    delay_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
    key: Callable[[ItemT], str] = str,
) -> Tuple[Dict[str, ResultT], Dict[str, str]]:
    """
    Run task over items one at a time with a fixed pause in between.

    A ReviewInsightError from one item is logged and recorded; the rest
    still run.

    Returns:
        (results keyed by item, error messages keyed by item)
    """
    succeeded: Dict[str, ResultT] = {}
    failed: Dict[str, str] = {}

    for index, item in enumerate(items):
        if index > 0 and delay_seconds > 0:
            sleep(delay_seconds)
        name = key(item)
        try:
            succeeded[name] = task(item)
        except ReviewInsightError as e:
            logger.warning(f"Failed to analyze {name}: {e}")
            failed[name] = str(e)

    logger.info(f"Batch finished: {len(succeeded)}/{len(items)} succeeded")
    return succeeded, failed


def extract_json_payload(raw_text: str) -> dict:
    """
    Pull the JSON object out of an LLM reply.

    Uses the first ```json fenced block when present, otherwise the whole
    reply.

    Raises:
        MalformedResponseError: the payload is not a JSON object.
    """
    match = JSON_BLOCK_PATTERN.search(raw_text)
    json_text = match.group(1) if match else raw_text.strip()

    try:
        payload = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error(f"LLM response is not valid JSON: {e}\nRaw response:\n{raw_text[:1000]}")
        raise MalformedResponseError(f"LLM response is not valid JSON: {e}", raw_text=raw_text) from e

    if not isinstance(payload, dict):
        logger.error(f"LLM response JSON is not an object:\n{raw_text[:1000]}")
        raise MalformedResponseError("LLM response JSON is not an object", raw_text=raw_text)

    return payload


class ReviewAnalyzer:
    """
    Factor and emotion analysis of a set of reviews.

    The text-generation provider is injected; by default the OpenRouter
    provider from settings is used.
    """

    def __init__(self, provider: Optional[TextGenerationProvider] = None):
        settings = get_settings()
        self._provider = provider or OpenRouterProvider()
        self._temperature = settings.llm.temperature
        self._factor_max_tokens = settings.llm.factor_max_tokens
        self._emotion_max_tokens = settings.llm.emotion_max_tokens

    def analyze_factors(self, reviews: List[Review], store_name: str) -> FactorAnalysisResult:
        """
        Score the six quality factors and the overall sentiment.

        Returns:
            FactorAnalysisResult with ``review_count`` set to len(reviews).

        Raises:
            UpstreamError: the provider call failed.
            MalformedResponseError: the reply did not match the schema.
        """
        prompt = build_factor_prompt(reviews, store_name)
        logger.info(f"Sending {len(reviews)} reviews of '{store_name}' for factor analysis")

        raw_text = self._provider.generate(prompt, self._temperature, self._factor_max_tokens)
        payload = extract_json_payload(raw_text)
        payload["review_count"] = len(reviews)

        return self._validate(FactorAnalysisResult, payload, raw_text)

    def analyze_emotions(self, reviews: List[Review], store_name: str) -> EmotionAnalysisResult:
        """
        Score the six emotions and derive dominant emotion and distribution.

        The dominant emotion is recomputed from the scores; the model's own
        pick is only logged when it disagrees.
        """
        prompt = build_emotion_prompt(reviews, store_name)
        logger.info(f"Sending {len(reviews)} reviews of '{store_name}' for emotion analysis")

        raw_text = self._provider.generate(prompt, self._temperature, self._emotion_max_tokens)
        payload = self._validate(EmotionPayload, extract_json_payload(raw_text), raw_text)

        scores = payload.emotion_scores.model_dump()
        dominant = dominant_emotion(scores)
        if payload.dominant_emotion and payload.dominant_emotion.lower() != dominant:
            logger.info(
                f"Model named '{payload.dominant_emotion}' as dominant, "
                f"highest score is '{dominant}'"
            )

        return EmotionAnalysisResult(
            emotion_scores=payload.emotion_scores,
            dominant_emotion=dominant,
            distribution=emotion_distribution(scores),
            insights=payload.emotion_insights,
        )

    def batch_analyze_stores(
        self,
        stores: Sequence[Tuple[str, List[Review]]],
        delay_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Dict[str, FactorAnalysisResult]:
        """
        Factor-analyze several stores one after another.

        A fixed pause between stores keeps the request rate under the
        provider's limit. A failing store is logged and skipped.

        Args:
            stores: (store name, reviews) pairs.
            delay_seconds: Pause between stores; defaults to settings.

        Returns:
            Successful results keyed by store name.
        """
        if delay_seconds is None:
            delay_seconds = get_settings().analysis.batch_delay_seconds

        results, _ = run_paced(
            stores,
            lambda store: self.analyze_factors(store[1], store[0]),
            delay_seconds,
            sleep,
            key=lambda store: store[0],
        )
        return results

    def _validate(self, model: Type[ModelT], payload: dict, raw_text: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except SchemaValidationError as e:
            logger.error(
                f"LLM response does not match {model.__name__}: {e.errors()}\n"
                f"Raw response:\n{raw_text[:1000]}"
            )
            raise MalformedResponseError(
                f"Invalid {model.__name__} from LLM: {e.error_count()} error(s)",
                raw_text=raw_text,
            ) from e
