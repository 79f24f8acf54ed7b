"""
Configuration Validation Tests

RecommendationConfig rejects out-of-domain values with ConfigurationError instead of
clamping them, and rejects unknown options.

Run:
----
    pytest tests/test_config.py -v
"""

import pytest

from storyrank import Category, ConfigurationError, RecommendationConfig, ScoringWeights
from storyrank.models.config import DEFAULT_CONFIG, resolve_config


class TestDefaults:
    def test_defaults_are_valid(self):
        config = RecommendationConfig()
        assert config.max_recommendations == 10
        assert config.diversity_factor == 0.3
        assert config.novelty_factor == 0.2
        assert config.trending_weight == 0.3
        assert config.personal_weight == 0.7
        assert config.include_categories is None

    def test_default_weights_sum_to_one(self):
        weights = ScoringWeights()
        total = sum(getattr(weights, name) for name in ScoringWeights.model_fields)
        assert total == pytest.approx(1.0)

    def test_similarity_weight_is_the_remainder(self):
        config = RecommendationConfig(personal_weight=0.5, trending_weight=0.2)
        assert config.similarity_weight == pytest.approx(0.3)
        assert DEFAULT_CONFIG.similarity_weight == pytest.approx(0.0)


class TestRejection:
    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_max_recommendations(self, value):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(max_recommendations=value)

    @pytest.mark.parametrize(
        "field", ["diversity_factor", "novelty_factor", "trending_weight", "personal_weight"]
    )
    def test_negative_weight(self, field):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(**{field: -0.1})

    def test_weight_above_one(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(diversity_factor=1.5)

    def test_personal_plus_trending_above_one(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(personal_weight=0.8, trending_weight=0.3)

    def test_non_positive_trend_window(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(trend_window_days=0)

    def test_negative_scoring_weight(self):
        with pytest.raises(ConfigurationError):
            ScoringWeights(genre=0.35, author=-0.1)

    def test_scoring_weights_must_sum_to_one(self):
        with pytest.raises(ConfigurationError):
            ScoringWeights(genre=0.9)

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(max_results=5)

    def test_unknown_option_from_dict(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig.from_dict({"maxRecommendations": 5, "boost": 2})

    def test_wrong_type_from_dict(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig.from_dict({"max_recommendations": "lots"})

    def test_unknown_category_from_dict(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig.from_dict({"include_categories": ["bestsellers"]})

    @pytest.mark.parametrize("section", [0.5, "fast", ["weight"]])
    def test_section_must_be_a_mapping(self, section):
        with pytest.raises(ConfigurationError):
            RecommendationConfig.from_dict({"trending": section})

    def test_unknown_section_key(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig.from_dict({"novelty": {"factr": 0.9}})

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    @pytest.mark.parametrize("field", ["genre_penalty_unit", "author_penalty_unit"])
    def test_non_finite_penalty_unit(self, field, value):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(**{field: value})

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_scoring_weight(self, value):
        with pytest.raises(ConfigurationError):
            RecommendationConfig.from_dict({"weights": {"genre": value}})

    def test_non_finite_blend_weight(self):
        with pytest.raises(ConfigurationError):
            RecommendationConfig(novelty_factor=float("nan"))


class TestFromDict:
    def test_camel_case_keys(self):
        config = RecommendationConfig.from_dict(
            {"maxRecommendations": 5, "diversityFactor": 0.5, "includeCategories": ["trending"]}
        )
        assert config.max_recommendations == 5
        assert config.diversity_factor == 0.5
        assert config.include_categories == [Category.TRENDING]

    def test_sections_are_flattened(self):
        config = RecommendationConfig.from_dict(
            {
                "trending": {"weight": 0.2, "window_days": 14},
                "diversity": {"factor": 0.6, "genre_penalty": 5, "author_penalty": 8},
                "novelty": {"factor": 0.1, "threshold": 0.8, "min_rating": 3.5},
            }
        )
        assert config.trending_weight == 0.2
        assert config.trend_window_days == 14
        assert config.diversity_factor == 0.6
        assert config.genre_penalty_unit == 5
        assert config.author_penalty_unit == 8
        assert config.novelty_factor == 0.1
        assert config.novelty_threshold == 0.8
        assert config.discovery_min_rating == 3.5

    def test_empty_section_keeps_defaults(self):
        config = RecommendationConfig.from_dict({"diversity": None, "novelty": {}})
        assert config.diversity_factor == DEFAULT_CONFIG.diversity_factor
        assert config.novelty_factor == DEFAULT_CONFIG.novelty_factor

    def test_nested_weights(self):
        config = RecommendationConfig.from_dict(
            {"weights": {"genre": 0.15, "length": 0.10}}
        )
        assert config.weights.genre == 0.15
        assert config.weights.length == 0.10

    def test_resolve_config(self):
        assert resolve_config(None) is DEFAULT_CONFIG
        assert resolve_config({"maxRecommendations": 3}).max_recommendations == 3
        config = RecommendationConfig(max_recommendations=4)
        assert resolve_config(config) is config

    def test_wants(self):
        config = RecommendationConfig(include_categories=[Category.NOVEL])
        assert config.wants(Category.NOVEL)
        assert not config.wants(Category.TRENDING)
        assert DEFAULT_CONFIG.wants(Category.CONTINUE)
