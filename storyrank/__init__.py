"""
storyrank — personalized story recommendation and ranking

Single entry point for the package:
- models/: RecommendationConfig, UserProfile, UserBehavior, Item, RecommendationResult
- stages/: profile aggregation, item scoring, trend, novelty, similarity, diversity
- composer: RecommendationComposer, which assembles per-category ranked lists
"""

from typing import Any, Dict, List, Union

from .composer import CategoryResults, RecommendationComposer
from .exceptions import ConfigurationError, RecommendationError
from .models import (
    DEFAULT_CONFIG,
    Category,
    Difficulty,
    InteractionEvent,
    Item,
    LengthPreference,
    MatchFactors,
    PeerUser,
    RecommendationConfig,
    RecommendationResult,
    ScoringWeights,
    UserBehavior,
    UserProfile,
)
from .sources import BehaviorSource, CatalogSource, InMemoryBehaviorSource, InMemoryCatalog
from .stages import aggregate_profile, score_item

_default_composer = RecommendationComposer()


def recommend(
    profile: Union[UserProfile, Dict[str, Any], None],
    behavior: Union[UserBehavior, Dict[str, Any], None],
    candidates: List[Union[Item, Dict[str, Any]]],
    config: Union[RecommendationConfig, Dict[str, Any], None] = None,
    **kwargs,
) -> CategoryResults:
    """
    Recommend with a composer that has no catalog or behavior source.

    Accepts dicts or models (same as RecommendationComposer.recommend).
    """
    return _default_composer.recommend(profile, behavior, candidates, config, **kwargs)


__all__ = [
    "BehaviorSource",
    "CatalogSource",
    "Category",
    "CategoryResults",
    "ConfigurationError",
    "DEFAULT_CONFIG",
    "Difficulty",
    "InMemoryBehaviorSource",
    "InMemoryCatalog",
    "InteractionEvent",
    "Item",
    "LengthPreference",
    "MatchFactors",
    "PeerUser",
    "RecommendationComposer",
    "RecommendationConfig",
    "RecommendationError",
    "RecommendationResult",
    "ScoringWeights",
    "UserBehavior",
    "UserProfile",
    "aggregate_profile",
    "recommend",
    "score_item",
]
