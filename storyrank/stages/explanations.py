"""
Human-readable reasons and confidence for recommendation results.

Reasons are picked from a fixed priority order (genre, author, high rating, trending,
similarity, novelty, popularity); the first two that apply are kept.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..models.behavior import UserBehavior
from ..models.profile import UserProfile
from ..models.result import ScoredItem
from ..utils.scores import clamp

MAX_REASONS = 2
FALLBACK_REASON = "Recommended for you"

HIGH_RATING = 4.5
# Thresholds on 0-100 signal scores.
TRENDING_THRESHOLD = 70.0
SIMILARITY_THRESHOLD = 70.0
NOVELTY_THRESHOLD = 70.0
# Lifetime engagement count a popular item must exceed.
POPULAR_THRESHOLD = 5000

# Behavior data points at which data-volume confidence saturates.
CONFIDENCE_DATA_POINTS = 20
DATA_CONFIDENCE_WEIGHT = 0.6
SCORE_CONFIDENCE_WEIGHT = 0.4


@dataclass(frozen=True)
class ReasonContext:
    """What the reason rules may look at besides the scored item."""

    profile: UserProfile
    behavior: UserBehavior
    # Title of the item a similarity score was measured against, if any.
    seed_title: Optional[str] = None


def _genre_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.item.genre and s.item.genre in ctx.profile.favorite_genres:
        return f"You love {s.item.genre}"
    return None


def _author_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.item.author and s.item.author in ctx.profile.favorite_authors:
        return f"From your favorite author {s.item.author}"
    return None


def _rating_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.item.average_rating >= HIGH_RATING:
        return f"Highly rated ({s.item.average_rating:.1f}★)"
    return None


def _trending_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.trend > TRENDING_THRESHOLD:
        return "Trending now"
    return None


def _similarity_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.similarity <= SIMILARITY_THRESHOLD:
        return None
    if ctx.seed_title:
        return f"Because you enjoyed {ctx.seed_title}"
    if ctx.behavior.liked_items:
        return "Similar to stories you liked"
    return None


def _novelty_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.novelty > NOVELTY_THRESHOLD:
        return "Discover something new"
    return None


def _popularity_reason(s: ScoredItem, ctx: ReasonContext) -> Optional[str]:
    if s.item.popularity > POPULAR_THRESHOLD:
        return "Popular with readers"
    return None


ReasonRule = Callable[[ScoredItem, ReasonContext], Optional[str]]

REASON_PRIORITY: Tuple[ReasonRule, ...] = (
    _genre_reason,
    _author_reason,
    _rating_reason,
    _trending_reason,
    _similarity_reason,
    _novelty_reason,
    _popularity_reason,
)


def get_reasons(
    scored: ScoredItem,
    ctx: ReasonContext,
    lead: Optional[str] = None,
) -> List[str]:
    """
    Up to two reasons for a result.

    lead, when given, takes the first slot (continue-reading progress, peer share).
    """
    reasons: List[str] = [lead] if lead else []
    for rule in REASON_PRIORITY:
        if len(reasons) >= MAX_REASONS:
            break
        reason = rule(scored, ctx)
        if reason and reason not in reasons:
            reasons.append(reason)
    return reasons or [FALLBACK_REASON]


def compute_confidence(score: float, behavior: UserBehavior) -> float:
    """0.6 * data-volume confidence + 0.4 * score confidence, in [0, 1]."""
    data_confidence = min(behavior.data_points / CONFIDENCE_DATA_POINTS, 1.0)
    score_confidence = clamp(score / 100.0)
    return clamp(DATA_CONFIDENCE_WEIGHT * data_confidence + SCORE_CONFIDENCE_WEIGHT * score_confidence)
