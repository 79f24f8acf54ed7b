"""Data models for the recommendation engine."""

from .behavior import InteractionEvent, UserBehavior, ensure_behavior
from .config import DEFAULT_CONFIG, RecommendationConfig, ScoringWeights, resolve_config
from .item import Difficulty, Item, LengthPreference, ensure_items, length_bucket
from .profile import PeerUser, UserProfile, ensure_peers, ensure_profile
from .result import Category, MatchFactors, RecommendationResult, ScoredItem

__all__ = [
    "DEFAULT_CONFIG",
    "Category",
    "Difficulty",
    "InteractionEvent",
    "Item",
    "LengthPreference",
    "MatchFactors",
    "PeerUser",
    "RecommendationConfig",
    "RecommendationResult",
    "ScoredItem",
    "ScoringWeights",
    "UserBehavior",
    "UserProfile",
    "ensure_behavior",
    "ensure_items",
    "ensure_peers",
    "ensure_profile",
    "length_bucket",
    "resolve_config",
]
