"""
Score helpers: clamping, guarded ratios, and time utilities used by every stage.
"""

import math
from datetime import datetime, timezone
from typing import Optional, Set


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]; NaN maps to low."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def clamp_score(value: float) -> float:
    """Clamp a 0-100 score."""
    return clamp(value, 0.0, 100.0)


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or default when the denominator is not positive."""
    if denominator <= 0:
        return default
    return numerator / denominator


def overlap_ratio(a: Set[str], b: Set[str]) -> float:
    """|a ∩ b| / max(|a|, |b|); 0 when both are empty."""
    return safe_ratio(len(a & b), max(len(a), len(b)))


def days_since(when: Optional[datetime], now: datetime) -> Optional[float]:
    """Fractional days between when and now. Naive datetimes are read as UTC."""
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - when).total_seconds() / 86400.0


def freshness_score(days_old: Optional[float]) -> float:
    """Step freshness: <=7 days 1.0, <=30 0.7, <=90 0.4, older or unknown 0.2."""
    if days_old is None:
        return 0.2
    if days_old <= 7:
        return 1.0
    if days_old <= 30:
        return 0.7
    if days_old <= 90:
        return 0.4
    return 0.2
