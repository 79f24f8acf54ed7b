"""Shared utilities for scoring, ratios, and top-K selection."""

from .scores import clamp, clamp_score, days_since, freshness_score, overlap_ratio, safe_ratio
from .selection import rank_key, sort_ranked, top_k

__all__ = [
    "clamp",
    "clamp_score",
    "days_since",
    "freshness_score",
    "overlap_ratio",
    "safe_ratio",
    "rank_key",
    "sort_ranked",
    "top_k",
]
