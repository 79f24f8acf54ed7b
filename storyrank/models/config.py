"""
Engine configuration: category blend weights, diversity, novelty, and factor weights.

RecommendationConfig defaults are defined here. Callers may pass a dict (e.g. from a
serving layer's JSON); from_dict() flattens section keys and validates. Out-of-domain
values raise ConfigurationError; nothing is clamped into range.
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from ..exceptions import ConfigurationError
from .result import Category


def _reject_unknown_keys(model_cls, data: Any) -> Any:
    """Raise ConfigurationError for keys that are neither field names nor aliases."""
    if not isinstance(data, dict):
        return data
    allowed = set(model_cls.model_fields)
    allowed.update(f.alias for f in model_cls.model_fields.values() if f.alias)
    unknown = sorted(str(k) for k in data if k not in allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown {model_cls.__name__} option(s): {', '.join(unknown)}"
        )
    return data


# from_dict section keys -> flat field names.
_SECTION_KEYS = {
    "trending": {"weight": "trending_weight", "window_days": "trend_window_days"},
    "diversity": {
        "factor": "diversity_factor",
        "genre_penalty": "genre_penalty_unit",
        "author_penalty": "author_penalty_unit",
    },
    "novelty": {
        "factor": "novelty_factor",
        "threshold": "novelty_threshold",
        "min_rating": "discovery_min_rating",
    },
}


class ScoringWeights(BaseModel):
    """Per-factor weights for the item scorer (must sum to 1.0)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    genre: float = 0.25
    author: float = 0.15
    tags: float = 0.15
    difficulty: float = 0.10
    rating: float = 0.15
    popularity: float = 0.10
    freshness: float = 0.10
    # Length bucket vs preferred_length. Off by default.
    length: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def no_unknown_keys(cls, data: Any) -> Any:
        return _reject_unknown_keys(cls, data)

    @model_validator(mode="after")
    def weights_valid(self):
        for name in type(self).model_fields:
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"Scoring weight '{name}' must be finite and >= 0, got {value}")
        total = sum(getattr(self, name) for name in type(self).model_fields)
        if abs(total - 1.0) > 0.01:
            raise ConfigurationError(f"Scoring weights must sum to 1.0, got {total}")
        return self


class RecommendationConfig(BaseModel):
    """Configuration for one recommendation request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    # Max results per category.
    max_recommendations: int = 10
    # Categories to compute. None = all.
    include_categories: Optional[List[Category]] = None

    # -------------------------------------------------------------------------
    # Personalized blend
    # final = personal_weight * affinity + trending_weight * trend
    #       + novelty_factor * novelty + (1 - personal - trending) * similarity
    # -------------------------------------------------------------------------

    personal_weight: float = 0.7
    trending_weight: float = 0.3
    novelty_factor: float = 0.2

    # -------------------------------------------------------------------------
    # Diversity re-ranking
    # adjusted = final - factor * (genre_unit * genre_seen + author_unit * author_seen)
    # -------------------------------------------------------------------------

    # 0 disables re-ranking.
    diversity_factor: float = 0.3
    genre_penalty_unit: float = 10.0
    author_penalty_unit: float = 15.0

    # -------------------------------------------------------------------------
    # Trending
    # -------------------------------------------------------------------------

    # Trailing window the caller's recent engagement counts cover.
    trend_window_days: int = 7

    # -------------------------------------------------------------------------
    # Discovery (novel category)
    # -------------------------------------------------------------------------

    # Novelty (0-1) an item must exceed to be offered as a discovery pick.
    novelty_threshold: float = 0.7
    discovery_min_rating: float = 4.0

    # -------------------------------------------------------------------------
    # Community (collaborative filtering)
    # -------------------------------------------------------------------------

    # Number of most similar peers whose history is pooled.
    peer_count: int = 10

    weights: ScoringWeights = ScoringWeights()

    @model_validator(mode="before")
    @classmethod
    def no_unknown_keys(cls, data: Any) -> Any:
        return _reject_unknown_keys(cls, data)

    @model_validator(mode="after")
    def values_in_domain(self):
        if self.max_recommendations <= 0:
            raise ConfigurationError(
                f"max_recommendations must be positive, got {self.max_recommendations}"
            )
        for name in ("diversity_factor", "novelty_factor", "trending_weight", "personal_weight"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.personal_weight + self.trending_weight > 1.0 + 1e-9:
            raise ConfigurationError(
                "personal_weight + trending_weight must not exceed 1.0, got "
                f"{self.personal_weight + self.trending_weight}"
            )
        if not 0.0 <= self.novelty_threshold <= 1.0:
            raise ConfigurationError(
                f"novelty_threshold must be within [0, 1], got {self.novelty_threshold}"
            )
        if not 0.0 <= self.discovery_min_rating <= 5.0:
            raise ConfigurationError(
                f"discovery_min_rating must be within [0, 5], got {self.discovery_min_rating}"
            )
        for name in ("genre_penalty_unit", "author_penalty_unit"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be finite and >= 0, got {value}")
        if self.trend_window_days <= 0:
            raise ConfigurationError(
                f"trend_window_days must be positive, got {self.trend_window_days}"
            )
        if self.peer_count <= 0:
            raise ConfigurationError(f"peer_count must be positive, got {self.peer_count}")
        return self

    @property
    def similarity_weight(self) -> float:
        """Blend weight left over for similarity to liked items."""
        return max(0.0, 1.0 - self.personal_weight - self.trending_weight)

    def wants(self, category: Category) -> bool:
        """True if the category should be computed for this request."""
        return self.include_categories is None or category in self.include_categories

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from a dictionary (e.g. loaded from JSON)."""
        flat = dict(config_dict)
        for section_name, mapping in _SECTION_KEYS.items():
            if section_name not in flat:
                continue
            section = flat.pop(section_name)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Config section '{section_name}' must be a mapping, "
                    f"got {type(section).__name__}"
                )
            unknown = sorted(str(k) for k in section if k not in mapping)
            if unknown:
                raise ConfigurationError(
                    f"Unknown '{section_name}' option(s): {', '.join(unknown)}"
                )
            for key, value in section.items():
                flat[mapping[key]] = value
        try:
            return cls.model_validate(flat)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config) -> RecommendationConfig:
    """
    Return a validated config: DEFAULT_CONFIG for None, from_dict() for a dict.
    """
    if config is None:
        return DEFAULT_CONFIG
    if isinstance(config, dict):
        return RecommendationConfig.from_dict(config)
    return config
