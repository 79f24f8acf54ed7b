"""
Scoring stages: profile aggregation, item scoring, trend, novelty, similarity,
community, diversity re-ranking, and explanations.
"""

from .community import community_scores
from .diversity import rerank_for_diversity
from .explanations import compute_confidence, get_reasons
from .item_scorer import score_item
from .novelty import ExposureProfile, novelty_score
from .profile_aggregator import aggregate_profile
from .similarity import item_similarity, most_similar_items, most_similar_users, user_similarity
from .trend import compute_trend_scores

__all__ = [
    "ExposureProfile",
    "aggregate_profile",
    "community_scores",
    "compute_confidence",
    "compute_trend_scores",
    "get_reasons",
    "item_similarity",
    "most_similar_items",
    "most_similar_users",
    "novelty_score",
    "rerank_for_diversity",
    "score_item",
    "user_similarity",
]
