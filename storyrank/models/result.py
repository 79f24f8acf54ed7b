"""
Result models: recommendation categories, score breakdowns, and final results.

Contains:
- Category: recommendation list a result belongs to
- MatchFactors: per-factor breakdown reported by the item scorer
- ScoredItem: an item with every signal the composer blends
- RecommendationResult: what a caller receives
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .item import Item


class Category(str, Enum):
    """Recommendation categories, in output order."""

    PERSONALIZED = "personalized"
    TRENDING = "trending"
    SIMILAR = "similar"
    NOVEL = "novel"
    COMMUNITY = "community"
    CONTINUE = "continue"


class MatchFactors(BaseModel):
    """Item scorer breakdown; every factor is in [0, 1]."""

    genre_match: float = 0.0
    difficulty_match: float = 0.0
    popularity_boost: float = 0.0
    diversity_score: float = 0.0
    freshness: float = 0.0


class ScoredItem(BaseModel):
    """An item with its per-signal scores (all on a 0-100 scale)."""

    item: Item
    personal: float = 0.0
    trend: float = 0.0
    novelty: float = 0.0
    similarity: float = 0.0
    final: float = 0.0
    # Diversity-adjusted score used for ordering; equals final until re-ranked.
    adjusted: float = 0.0
    match_factors: MatchFactors = Field(default_factory=MatchFactors)

    @property
    def item_id(self) -> str:
        return self.item.id


class RecommendationResult(BaseModel):
    """A single ranked recommendation."""

    item_id: str
    score: float = Field(ge=0.0, le=100.0)
    reasons: List[str] = Field(default_factory=list, max_length=2)
    confidence: float = Field(ge=0.0, le=1.0)
    category: Category
