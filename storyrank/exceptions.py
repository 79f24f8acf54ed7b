"""Exceptions raised by the recommendation engine."""


class RecommendationError(Exception):
    """Base class for engine errors."""


class ConfigurationError(RecommendationError):
    """
    A RecommendationConfig value is out of domain or unknown.

    Raised before any scoring starts; values are never clamped into range.
    """
