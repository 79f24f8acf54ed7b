"""
Trending: popularity velocity over a trailing window, independent of any user.

velocity    = recent_engagement / window_days, normalized by the pool maximum
trend_ratio = recent_engagement / lifetime popularity (1 for brand-new items)
trend       = 100 * (0.6 * velocity + 0.4 * trend_ratio)

The ratio term favors accelerating items over large, long-popular ones.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from ..exceptions import ConfigurationError
from ..models.item import Item
from ..utils.scores import clamp, clamp_score

logger = logging.getLogger(__name__)

VELOCITY_WEIGHT = 0.6
TREND_RATIO_WEIGHT = 0.4


def trend_ratio(recent: int, popularity: int) -> float:
    """Share of lifetime engagement that happened recently; 1.0 when popularity is 0."""
    if popularity <= 0:
        return 1.0
    return clamp(recent / popularity)


def compute_trend_scores(
    items: List[Item],
    recent_engagement: Optional[Dict[str, int]],
    window_days: int,
) -> Dict[str, float]:
    """
    Trend score (0-100) per item id.

    recent_engagement maps item id -> engagement count inside the window; items absent
    from the map count as 0. An empty pool returns an empty dict.
    """
    if window_days <= 0:
        raise ConfigurationError(f"window_days must be positive, got {window_days}")
    if not items:
        return {}
    recent_engagement = recent_engagement or {}
    recent = np.array(
        [max(0, int(recent_engagement.get(item.id, 0) or 0)) for item in items], dtype=float
    )
    velocity = recent / float(window_days)
    max_velocity = float(velocity.max())
    if max_velocity > 0:
        velocity_norm = velocity / max_velocity
    else:
        velocity_norm = np.zeros_like(velocity)

    scores: Dict[str, float] = {}
    for idx, item in enumerate(items):
        ratio = trend_ratio(int(recent[idx]), item.popularity)
        scores[item.id] = clamp_score(
            100.0 * (VELOCITY_WEIGHT * float(velocity_norm[idx]) + TREND_RATIO_WEIGHT * ratio)
        )
    logger.debug("[trend] scored=%d max_velocity=%.3f", len(scores), max_velocity)
    return scores
