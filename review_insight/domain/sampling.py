"""
Review Sampling
===============

Drops reviews with too little text to score, then caps the review set
while keeping its star-rating distribution representative.
"""

import math
import random
from collections import defaultdict
from itertools import chain, zip_longest
from typing import Dict, List, Optional

from .models import Review

MIN_TEXT_LENGTH = 50
DEFAULT_MAX_REVIEWS = 50

_MISSING = object()


def filter_quality(reviews: List[Review], min_length: int = MIN_TEXT_LENGTH) -> List[Review]:
    """
    Keep reviews whose text is at least ``min_length`` characters.

    Ratings are not filtered: 1-star and 5-star reviews stay in so the
    analysis is not biased towards the middle.
    """
    return [r for r in reviews if r.text and len(r.text) >= min_length]


def sample_reviews(
    reviews: List[Review],
    max_count: int = DEFAULT_MAX_REVIEWS,
    rng: Optional[random.Random] = None,
) -> List[Review]:
    """
    Stratified sample of at most ``max_count`` reviews.

    Reviews are bucketed by rating and each bucket contributes up to
    ceil(max_count / buckets) randomly chosen reviews. The per-bucket
    selections are interleaved round-robin before truncating to
    ``max_count``, so the truncation trims every bucket evenly and each
    rating present survives whenever max_count >= number of buckets.
    """
    if len(reviews) <= max_count:
        return reviews

    rng = rng or random.Random()

    by_rating: Dict[int, List[Review]] = defaultdict(list)
    for review in reviews:
        by_rating[review.rating].append(review)

    per_rating = math.ceil(max_count / len(by_rating))

    selections = [
        rng.sample(bucket, min(per_rating, len(bucket)))
        for bucket in by_rating.values()
    ]
    interleaved = [
        r for r in chain.from_iterable(zip_longest(*selections, fillvalue=_MISSING))
        if r is not _MISSING
    ]

    return interleaved[:max_count]
