"""
Recommendation composer: runs every stage and assembles per-category result lists.

The main entry point is RecommendationComposer.recommend, which validates the config,
scores the candidate pool once (affinity, trend, novelty, similarity to liked items),
and builds each requested category:

- personalized: blended score, behavior multipliers, diversity re-ranking
- trending: trend score only, independent of the user
- similar: similarity to a reference item (or to liked/completed items)
- novel: high-novelty, well-rated items, least-explored genre first
- community: what the most similar peers completed or liked
- continue: in-progress items by progress

The composer is stateless: collaborators are passed at construction, inputs are never
mutated, and identical inputs (including `now`) give identical output.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from .exceptions import RecommendationError
from .models.behavior import InteractionEvent, UserBehavior, ensure_behavior
from .models.config import RecommendationConfig, resolve_config
from .models.item import Item, ensure_items
from .models.profile import PeerUser, UserProfile, ensure_peers, ensure_profile
from .models.result import Category, RecommendationResult, ScoredItem
from .sources import BehaviorSource, CatalogSource
from .stages.community import community_scores
from .stages.diversity import rerank_for_diversity
from .stages.explanations import ReasonContext, compute_confidence, get_reasons
from .stages.item_scorer import (
    affinity_score,
    apply_behavior_multipliers,
    build_match_factors,
    compute_factors,
    max_popularity,
)
from .stages.novelty import ExposureProfile, novelty_score
from .stages.profile_aggregator import aggregate_profile
from .stages.similarity import most_similar_items, seeded_similarity_scores
from .stages.trend import compute_trend_scores
from .utils.scores import clamp_score
from .utils.selection import rank_key, top_k

logger = logging.getLogger(__name__)

CategoryResults = Dict[Category, List[RecommendationResult]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _PoolCatalog:
    """Resolves ids against the candidate pool first, then the configured catalog."""

    def __init__(self, pool: Dict[str, Item], fallback: Optional[CatalogSource]):
        self._pool = pool
        self._fallback = fallback

    def get_item(self, item_id: str) -> Optional[Item]:
        item = self._pool.get(item_id)
        if item is None and self._fallback is not None:
            item = self._fallback.get_item(item_id)
        return item


@dataclass
class _Request:
    """Validated inputs and shared per-pool signals for one recommend() call."""

    profile: UserProfile
    behavior: UserBehavior
    config: RecommendationConfig
    items: List[Item]
    catalog: _PoolCatalog
    # Every signal per item id; final = personalized blend.
    signals: Dict[str, ScoredItem]

    @property
    def limit(self) -> int:
        return self.config.max_recommendations

    def reason_context(self, seed_title: Optional[str] = None) -> ReasonContext:
        return ReasonContext(profile=self.profile, behavior=self.behavior, seed_title=seed_title)


def _dedupe(items: List[Item]) -> List[Item]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for item in items:
        if item.id in seen:
            logger.warning("[pool] DUPLICATE_ITEM_DROPPED item_id=%s", item.id)
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def _resolve_all(ids, catalog: _PoolCatalog) -> List[Item]:
    resolved = []
    for item_id in sorted(ids):
        item = catalog.get_item(item_id)
        if item is not None:
            resolved.append(item)
    return resolved


def _score_pool(
    profile: UserProfile,
    behavior: UserBehavior,
    items: List[Item],
    config: RecommendationConfig,
    catalog: _PoolCatalog,
    exposure: ExposureProfile,
    now: datetime,
    recent_engagement: Optional[Dict[str, int]],
) -> Dict[str, ScoredItem]:
    """
    Compute every signal for every item and the personalized blend.

    final = personal_weight * affinity + trending_weight * trend
          + novelty_factor * novelty + similarity_weight * similarity,
    clamped, then behavior multipliers, then clamped again.
    """
    trend_scores = compute_trend_scores(items, recent_engagement, config.trend_window_days)
    liked = _resolve_all(behavior.liked_items, catalog)
    similarity = seeded_similarity_scores(items, liked)
    pool_max = max_popularity(items)

    signals: Dict[str, ScoredItem] = {}
    for item in items:
        factors = compute_factors(profile, item, pool_max, now)
        affinity = affinity_score(factors, config.weights)
        novelty = novelty_score(item, exposure) * 100.0
        trend = trend_scores.get(item.id, 0.0)
        sim = similarity[item.id][0]
        blend = (
            config.personal_weight * affinity
            + config.trending_weight * trend
            + config.novelty_factor * novelty
            + config.similarity_weight * sim
        )
        final = clamp_score(apply_behavior_multipliers(clamp_score(blend), item.id, behavior))
        signals[item.id] = ScoredItem(
            item=item,
            personal=clamp_score(apply_behavior_multipliers(affinity, item.id, behavior)),
            trend=trend,
            novelty=novelty,
            similarity=sim,
            final=final,
            adjusted=final,
            match_factors=build_match_factors(factors, item, exposure),
        )
    return signals


def _to_result(
    scored: ScoredItem,
    score: float,
    category: Category,
    req: _Request,
    seed_title: Optional[str] = None,
    lead: Optional[str] = None,
) -> RecommendationResult:
    score = clamp_score(score)
    return RecommendationResult(
        item_id=scored.item_id,
        score=score,
        reasons=get_reasons(scored, req.reason_context(seed_title), lead=lead),
        confidence=compute_confidence(score, req.behavior),
        category=category,
    )


def _personalized(req: _Request) -> List[RecommendationResult]:
    """Blended scores, diversity re-ranked; reported score is the pre-penalty blend."""
    reranked = rerank_for_diversity(
        list(req.signals.values()),
        req.config.diversity_factor,
        req.config.genre_penalty_unit,
        req.config.author_penalty_unit,
        k=req.limit,
    )
    return [_to_result(s, s.final, Category.PERSONALIZED, req) for s in reranked]


def _trending(req: _Request) -> List[RecommendationResult]:
    ranked = top_k(req.signals.values(), req.limit, key=lambda s: rank_key(s.trend, s.item_id))
    return [_to_result(s, s.trend, Category.TRENDING, req) for s in ranked]


def _title(item: Item) -> str:
    return item.title or item.id


def _similar(req: _Request, reference_item_id: Optional[str]) -> List[RecommendationResult]:
    """
    With a reference item: most similar items to it. Without: items most similar to any
    liked item (completed items when nothing is liked); seeds and completed items are
    excluded.
    """
    if reference_item_id:
        reference = req.catalog.get_item(reference_item_id)
        if reference is None:
            logger.warning("[similar] REFERENCE_NOT_FOUND item_id=%s", reference_item_id)
            return []
        pairs = most_similar_items(reference, req.items, req.limit)
        results = []
        for item, sim in pairs:
            scored = req.signals[item.id].model_copy(update={"similarity": sim * 100.0})
            results.append(
                _to_result(scored, sim * 100.0, Category.SIMILAR, req, seed_title=_title(reference))
            )
        return results

    seeds = _resolve_all(req.behavior.liked_items, req.catalog) or _resolve_all(
        req.behavior.completed_items, req.catalog
    )
    if not seeds:
        return []
    seed_ids = {seed.id for seed in seeds}
    seed_by_id = {seed.id: seed for seed in seeds}
    eligible = [
        item for item in req.items
        if item.id not in seed_ids and item.id not in req.behavior.completed_items
    ]
    sims = seeded_similarity_scores(eligible, seeds)
    ranked = top_k(eligible, req.limit, key=lambda item: rank_key(sims[item.id][0], item.id))
    results = []
    for item in ranked:
        sim, seed_id = sims[item.id]
        scored = req.signals[item.id].model_copy(update={"similarity": sim})
        seed_title = _title(seed_by_id[seed_id]) if seed_id else None
        results.append(_to_result(scored, sim, Category.SIMILAR, req, seed_title=seed_title))
    return results


def _novel(req: _Request) -> List[RecommendationResult]:
    """High-novelty, well-rated, unread items; least-explored genre first, then rating."""
    threshold = req.config.novelty_threshold * 100.0
    behavior = req.behavior
    eligible = [
        s for s in req.signals.values()
        if s.novelty > threshold
        and s.item.average_rating >= req.config.discovery_min_rating
        and s.item_id not in behavior.completed_items
        and s.item_id not in behavior.abandoned_items
    ]
    ranked = top_k(
        eligible,
        req.limit,
        key=lambda s: (behavior.genre_count(s.item.genre), -s.item.average_rating, s.item_id),
    )
    return [_to_result(s, s.novelty, Category.NOVEL, req) for s in ranked]


def _community(
    req: _Request,
    peers: List[PeerUser],
    user_id: str,
) -> List[RecommendationResult]:
    if not peers:
        return []
    target = PeerUser(user_id=user_id, profile=req.profile, behavior=req.behavior)
    excluded = req.behavior.completed_items | req.behavior.abandoned_items
    eligible = [item for item in req.items if item.id not in excluded]
    support = community_scores(target, peers, eligible, req.config.peer_count)
    ranked = top_k(support.items(), req.limit, key=lambda kv: rank_key(kv[1].score, kv[0]))
    results = []
    for item_id, backing in ranked:
        lead = f"{backing.supporting_peers} of {backing.selected_peers} similar readers enjoyed this"
        results.append(
            _to_result(req.signals[item_id], backing.score, Category.COMMUNITY, req, lead=lead)
        )
    return results


def _continue(req: _Request, progress: Optional[Dict[str, float]]) -> List[RecommendationResult]:
    """In-progress (0 < p < 100), not completed, present in the pool; most progress first."""
    if not progress:
        return []
    in_progress = []
    for item_id, pct in progress.items():
        if pct is None or not 0 < pct < 100 or item_id in req.behavior.completed_items:
            continue
        if item_id not in req.signals:
            logger.warning("[continue] PROGRESS_ITEM_NOT_IN_POOL item_id=%s", item_id)
            continue
        in_progress.append((item_id, float(pct)))
    ranked = top_k(in_progress, req.limit, key=lambda p: rank_key(p[1], p[0]))
    return [
        _to_result(
            req.signals[item_id], pct, Category.CONTINUE, req,
            lead=f"Continue reading ({pct:.0f}% complete)",
        )
        for item_id, pct in ranked
    ]


class RecommendationComposer:
    """
    Stateless recommendation service.

    Args:
        catalog: Resolves history ids that are not in the candidate pool.
        behavior_source: Supplies behavior for recommend_for_user.
        clock: Returns "now" when a call does not pass one.
    """

    def __init__(
        self,
        catalog: Optional[CatalogSource] = None,
        behavior_source: Optional[BehaviorSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._catalog = catalog
        self._behavior_source = behavior_source
        self._clock = clock or _utc_now

    def recommend(
        self,
        profile: Union[UserProfile, Dict[str, Any], None],
        behavior: Union[UserBehavior, Dict[str, Any], None],
        candidates: List[Union[Item, Dict[str, Any]]],
        config: Union[RecommendationConfig, Dict[str, Any], None] = None,
        progress: Optional[Dict[str, float]] = None,
        recent_engagement: Optional[Dict[str, int]] = None,
        reference_item_id: Optional[str] = None,
        peers: Optional[List[Union[PeerUser, Dict[str, Any]]]] = None,
        now: Optional[datetime] = None,
        user_id: str = "",
    ) -> CategoryResults:
        """
        Ranked results per requested category (all categories when include_categories
        is None), keyed in Category order.

        Raises ConfigurationError for an invalid config before any scoring. Every other
        degenerate input (empty pool, missing progress, no peers) yields empty lists.
        """
        config = resolve_config(config)
        profile = ensure_profile(profile)
        behavior = ensure_behavior(behavior)
        items = _dedupe(ensure_items(candidates))
        now = now or self._clock()

        pool = {item.id: item for item in items}
        catalog = _PoolCatalog(pool, self._catalog)
        exposure = ExposureProfile.from_behavior(behavior, catalog)
        signals = _score_pool(
            profile, behavior, items, config, catalog, exposure, now, recent_engagement
        )
        req = _Request(
            profile=profile,
            behavior=behavior,
            config=config,
            items=items,
            catalog=catalog,
            signals=signals,
        )

        builders = {
            Category.PERSONALIZED: lambda: _personalized(req),
            Category.TRENDING: lambda: _trending(req),
            Category.SIMILAR: lambda: _similar(req, reference_item_id),
            Category.NOVEL: lambda: _novel(req),
            Category.COMMUNITY: lambda: _community(req, ensure_peers(peers), user_id),
            Category.CONTINUE: lambda: _continue(req, progress),
        }
        results: CategoryResults = {}
        for category in Category:
            if not config.wants(category):
                continue
            results[category] = builders[category]() if items else []
        logger.debug(
            "[compose] pool=%d %s",
            len(items),
            " ".join(f"{c.value}={len(r)}" for c, r in results.items()),
        )
        return results

    def recommend_for_user(
        self,
        user_id: str,
        candidates: List[Union[Item, Dict[str, Any]]],
        config: Union[RecommendationConfig, Dict[str, Any], None] = None,
        events: Optional[List[InteractionEvent]] = None,
        **kwargs,
    ) -> CategoryResults:
        """
        Pull behavior from the behavior source, aggregate the profile, and recommend.

        Extra keyword arguments are passed to recommend().
        """
        if self._behavior_source is None:
            raise RecommendationError("recommend_for_user requires a behavior_source")
        config = resolve_config(config)
        behavior = self._behavior_source.get_behavior(user_id)
        items = ensure_items(candidates)
        catalog = _PoolCatalog({item.id: item for item in items}, self._catalog)
        profile = aggregate_profile(behavior, events, catalog)
        return self.recommend(profile, behavior, items, config, user_id=user_id, **kwargs)
