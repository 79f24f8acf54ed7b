"""
Diversity re-ranking: soft penalties against stacking one genre or author.

Selection loop: each slot takes the remaining candidate with the best
adjusted = final - factor * (genre_unit * genre_selected + author_unit * author_selected),
where the counts cover items already selected. There is no hard cap; each additional
item from the same genre/author is simply less attractive than the last.
"""

from collections import Counter
from typing import List, Optional

from ..models.result import ScoredItem
from ..utils.selection import rank_key, sort_ranked


def rerank_for_diversity(
    scored_list: List[ScoredItem],
    diversity_factor: float,
    genre_penalty_unit: float = 10.0,
    author_penalty_unit: float = 15.0,
    k: Optional[int] = None,
) -> List[ScoredItem]:
    """
    Re-rank scored candidates with genre/author diversity penalties.

    Args:
        scored_list: Candidates with final scores set. Not mutated.
        diversity_factor: 0 disables re-ranking; 1 applies full penalty units.
        genre_penalty_unit: Points deducted per selected item of the same genre.
        author_penalty_unit: Points deducted per selected item by the same author.
        k: Number of slots to fill; None re-ranks every candidate.

    Returns:
        New list of up to k ScoredItems in selection order, with adjusted set to the
        score each had when selected.
    """
    remaining = sort_ranked(scored_list, key=lambda s: rank_key(s.final, s.item_id))
    slots = len(remaining) if k is None else min(k, len(remaining))
    if diversity_factor <= 0:
        return [s.model_copy(update={"adjusted": s.final}) for s in remaining[:slots]]

    genre_selected: Counter = Counter()
    author_selected: Counter = Counter()

    def adjusted_score(scored: ScoredItem) -> float:
        genre = scored.item.genre
        author = scored.item.author
        penalty = diversity_factor * (
            genre_penalty_unit * (genre_selected[genre] if genre else 0)
            + author_penalty_unit * (author_selected[author] if author else 0)
        )
        return scored.final - penalty

    selected: List[ScoredItem] = []
    for _ in range(slots):
        best_idx = 0
        best_key = None
        best_adjusted = 0.0
        for idx, scored in enumerate(remaining):
            adjusted = adjusted_score(scored)
            key = rank_key(adjusted, scored.item_id)
            if best_key is None or key < best_key:
                best_idx, best_key, best_adjusted = idx, key, adjusted

        chosen = remaining.pop(best_idx)
        selected.append(chosen.model_copy(update={"adjusted": best_adjusted}))
        if chosen.item.genre:
            genre_selected[chosen.item.genre] += 1
        if chosen.item.author:
            author_selected[chosen.item.author] += 1

    return selected
