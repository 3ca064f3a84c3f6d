# app/utils/rating_stats.py
from typing import Dict, Iterable

RATING_SCALE = (5, 4, 3, 2, 1)
POSITIVE_THRESHOLD = 4


def rating_distribution(ratings: Iterable[int]) -> Dict[int, int]:
    """Histogram keyed 5..1; always carries every key"""
    distribution = {star: 0 for star in RATING_SCALE}
    for rating in ratings:
        if rating in distribution:
            distribution[rating] += 1
    return distribution


def average_rating(ratings: Iterable[int]) -> float:
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 2)


def summarize_ratings(ratings: Iterable[int]) -> Dict:
    """
    Fold a list of ratings into the numbers shown on the feedback page:
    average (2 decimals), review count, count of 4+ ratings, histogram.
    """
    ratings = list(ratings)
    return {
        "average_rating": average_rating(ratings),
        "total_reviews": len(ratings),
        "positive_reviews": sum(1 for r in ratings if r >= POSITIVE_THRESHOLD),
        "distribution": rating_distribution(ratings),
    }
