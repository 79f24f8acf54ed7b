"""
Item scoring: personalized affinity of one item for one user.

affinity = 100 * sum(weight_f * factor_f) over genre, author, tags, difficulty,
rating, popularity, freshness, and length. Behavior multipliers are applied after
the weighted sum, in order: completed, abandoned, bookmarked-and-not-completed.
The final score is clamped to [0, 100].
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..models.behavior import UserBehavior
from ..models.config import ScoringWeights
from ..models.item import Item
from ..models.profile import UserProfile
from ..models.result import MatchFactors
from ..utils.scores import clamp, clamp_score, days_since, freshness_score, safe_ratio
from .novelty import ExposureProfile, facet_novelty

COMPLETED_MULTIPLIER = 0.3
ABANDONED_MULTIPLIER = 0.1
BOOKMARKED_MULTIPLIER = 1.2

# Genre match: favorite-genre indicator blended with tag overlap against favorite genres.
FAVORITE_GENRE_MATCH = 1.0
OTHER_GENRE_MATCH = 0.3
GENRE_INDICATOR_SHARE = 0.7
GENRE_TAG_SHARE = 0.3

# Penalty per difficulty level of distance.
DIFFICULTY_STEP_PENALTY = 0.4
MAX_RATING = 5.0
LENGTH_MISMATCH = 0.5

# Factor order for the weighted sum; must match ScoringWeights field names.
FACTOR_ORDER = (
    "genre",
    "author",
    "tags",
    "difficulty",
    "rating",
    "popularity",
    "freshness",
    "length",
)


def genre_match(profile: UserProfile, item: Item) -> float:
    """Favorite-genre indicator (1.0 / 0.3) blended 70/30 with the item's favorite-genre tags."""
    indicator = FAVORITE_GENRE_MATCH if item.genre in profile.favorite_genres else OTHER_GENRE_MATCH
    favorites = set(profile.favorite_genres)
    tag_ratio = safe_ratio(len(item.tags & favorites), len(item.tags))
    return indicator * GENRE_INDICATOR_SHARE + tag_ratio * GENRE_TAG_SHARE


def author_match(profile: UserProfile, item: Item) -> float:
    return 1.0 if item.author and item.author in profile.favorite_authors else 0.0


def tag_match(profile: UserProfile, item: Item) -> float:
    """Fraction of the user's top tags present on the item."""
    return safe_ratio(len(profile.top_tags & item.tags), len(profile.top_tags))


def difficulty_match(profile: UserProfile, item: Item) -> float:
    distance = abs(profile.preferred_difficulty.level - item.difficulty.level)
    return max(0.0, 1.0 - DIFFICULTY_STEP_PENALTY * distance)


def rating_score(item: Item) -> float:
    return clamp(item.average_rating / MAX_RATING)


def popularity_score(item: Item, pool_max_popularity: int) -> float:
    """Popularity relative to the pool maximum; 0 for an empty or all-zero pool."""
    return clamp(safe_ratio(item.popularity, pool_max_popularity))


def length_match(profile: UserProfile, item: Item) -> float:
    return 1.0 if item.length_bucket == profile.preferred_length else LENGTH_MISMATCH


def max_popularity(items: List[Item]) -> int:
    """Pool maximum popularity (0 for an empty pool)."""
    return max((item.popularity for item in items), default=0)


def compute_factors(
    profile: UserProfile,
    item: Item,
    pool_max_popularity: int,
    now: datetime,
) -> Dict[str, float]:
    """Every weighted factor, each in [0, 1]."""
    return {
        "genre": genre_match(profile, item),
        "author": author_match(profile, item),
        "tags": tag_match(profile, item),
        "difficulty": difficulty_match(profile, item),
        "rating": rating_score(item),
        "popularity": popularity_score(item, pool_max_popularity),
        "freshness": freshness_score(days_since(item.published_at, now)),
        "length": length_match(profile, item),
    }


def affinity_score(factors: Dict[str, float], weights: ScoringWeights) -> float:
    """Weighted factor sum on a 0-100 scale, before behavior multipliers."""
    factor_vec = np.array([factors[name] for name in FACTOR_ORDER], dtype=float)
    weight_vec = np.array([getattr(weights, name) for name in FACTOR_ORDER], dtype=float)
    return float(np.dot(factor_vec, weight_vec)) * 100.0


def apply_behavior_multipliers(score: float, item_id: str, behavior: UserBehavior) -> float:
    """Completed x0.3, abandoned x0.1, bookmarked-and-not-completed x1.2 (in that order)."""
    completed = item_id in behavior.completed_items
    if completed:
        score *= COMPLETED_MULTIPLIER
    if item_id in behavior.abandoned_items:
        score *= ABANDONED_MULTIPLIER
    if item_id in behavior.bookmarked_items and not completed:
        score *= BOOKMARKED_MULTIPLIER
    return score


def build_match_factors(
    factors: Dict[str, float],
    item: Item,
    exposure: ExposureProfile,
) -> MatchFactors:
    """Reported breakdown; diversity_score is the item's genre novelty for this user."""
    return MatchFactors(
        genre_match=clamp(factors["genre"]),
        difficulty_match=clamp(factors["difficulty"]),
        popularity_boost=clamp(factors["popularity"]),
        diversity_score=facet_novelty(exposure.genres, item.genre),
        freshness=clamp(factors["freshness"]),
    )


def score_item(
    profile: UserProfile,
    behavior: UserBehavior,
    item: Item,
    pool_max_popularity: int,
    weights: ScoringWeights,
    now: datetime,
    exposure: Optional[ExposureProfile] = None,
) -> Tuple[float, MatchFactors]:
    """
    Personalized score (0-100) for one item, with its factor breakdown.

    pool_max_popularity is the candidate pool's maximum popularity (see max_popularity).
    """
    if exposure is None:
        exposure = ExposureProfile.from_behavior(behavior)
    factors = compute_factors(profile, item, pool_max_popularity, now)
    score = apply_behavior_multipliers(affinity_score(factors, weights), item.id, behavior)
    return clamp_score(score), build_match_factors(factors, item, exposure)
