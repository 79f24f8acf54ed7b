"""
Content and user similarity for "more like this" and peer-based discovery.

item_similarity = 0.4 * same_genre + 0.3 * tag_overlap + 0.15 * same_difficulty
                + 0.15 * (1 - |rating_a - rating_b| / 5)
user_similarity = 0.4 * genre_overlap + 0.4 * history_overlap
                + 0.2 * (1 - |avg_rating_a - avg_rating_b| / 5)

Overlaps are |A ∩ B| / max(|A|, |B|). Both similarities are in [0, 1]; top-K helpers
order by similarity desc, then id.
"""

from typing import Dict, List, Tuple

from ..models.item import Item
from ..models.profile import PeerUser
from ..utils.scores import clamp, overlap_ratio
from ..utils.selection import rank_key, top_k

MAX_RATING = 5.0
# Similarity (0-100) used when there is nothing to compare against.
NEUTRAL_SIMILARITY = 50.0


def _rating_closeness(a: float, b: float) -> float:
    return max(0.0, 1.0 - abs(a - b) / MAX_RATING)


def item_similarity(a: Item, b: Item) -> float:
    """Content similarity between two items."""
    similarity = 0.0
    if a.genre and a.genre == b.genre:
        similarity += 0.4
    similarity += 0.3 * overlap_ratio(a.tags, b.tags)
    if a.difficulty == b.difficulty:
        similarity += 0.15
    similarity += 0.15 * _rating_closeness(a.average_rating, b.average_rating)
    return clamp(similarity)


def user_similarity(a: PeerUser, b: PeerUser) -> float:
    """Taste similarity between two users."""
    genre_overlap = overlap_ratio(set(a.profile.favorite_genres), set(b.profile.favorite_genres))
    history_overlap = overlap_ratio(a.behavior.history, b.behavior.history)
    rating = _rating_closeness(a.behavior.average_rating, b.behavior.average_rating)
    return clamp(0.4 * genre_overlap + 0.4 * history_overlap + 0.2 * rating)


def most_similar_items(reference: Item, items: List[Item], k: int) -> List[Tuple[Item, float]]:
    """Top-k items most similar to reference (reference excluded)."""
    pairs = [(item, item_similarity(reference, item)) for item in items if item.id != reference.id]
    return top_k(pairs, k, key=lambda p: rank_key(p[1], p[0].id))


def most_similar_users(target: PeerUser, peers: List[PeerUser], k: int) -> List[Tuple[PeerUser, float]]:
    """Top-k peers most similar to target (target excluded)."""
    pairs = [(peer, user_similarity(target, peer)) for peer in peers if peer.user_id != target.user_id]
    return top_k(pairs, k, key=lambda p: rank_key(p[1], p[0].user_id))


def seeded_similarity_scores(items: List[Item], seeds: List[Item]) -> Dict[str, Tuple[float, str]]:
    """
    For each item: (max similarity to any seed on a 0-100 scale, id of that seed).

    Seeds are compared in id order so the reported seed is stable on ties. With no
    seeds every item gets NEUTRAL_SIMILARITY and an empty seed id.
    """
    ordered_seeds = sorted(seeds, key=lambda s: s.id)
    scores: Dict[str, Tuple[float, str]] = {}
    for item in items:
        best, best_seed = (NEUTRAL_SIMILARITY, "") if not ordered_seeds else (-1.0, "")
        for seed in ordered_seeds:
            if seed.id == item.id:
                continue
            sim = item_similarity(seed, item) * 100.0
            if sim > best:
                best, best_seed = sim, seed.id
        scores[item.id] = (max(best, 0.0), best_seed)
    return scores
