"""
Novelty: reward items whose genre, author, and tags the user has explored least.

novelty = 0.4 * genre_novelty + 0.3 * author_novelty + 0.3 * tag_novelty
facet_novelty = 1 - exposure(facet value) / max exposure over that facet
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..models.behavior import UserBehavior
from ..models.item import Item
from ..sources import CatalogSource
from ..utils.scores import clamp

GENRE_NOVELTY_WEIGHT = 0.4
AUTHOR_NOVELTY_WEIGHT = 0.3
TAG_NOVELTY_WEIGHT = 0.3
# Tag novelty for an untagged item.
UNTAGGED_TAG_NOVELTY = 0.5


@dataclass(frozen=True)
class ExposureProfile:
    """How often the user has met each genre, author, and tag."""

    genres: Dict[str, int] = field(default_factory=dict)
    authors: Dict[str, int] = field(default_factory=dict)
    tags: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_behavior(
        cls,
        behavior: UserBehavior,
        catalog: Optional[CatalogSource] = None,
    ) -> "ExposureProfile":
        """
        Genre exposure comes from genre_exploration; author and tag exposure from
        completed, liked, and bookmarked items resolvable in the catalog.
        """
        authors: Counter = Counter()
        tags: Counter = Counter()
        if catalog is not None:
            touched = behavior.history | behavior.bookmarked_items
            for item_id in sorted(touched):
                item = catalog.get_item(item_id)
                if item is None:
                    continue
                if item.author:
                    authors[item.author] += 1
                tags.update(item.tags)
        genres = {g: c for g, c in behavior.genre_exploration.items() if (c or 0) > 0}
        return cls(genres=genres, authors=dict(authors), tags=dict(tags))


def facet_novelty(counts: Dict[str, int], key: str) -> float:
    """1 - count(key) / max(count); 1.0 when nothing in the facet has been seen."""
    max_count = max(counts.values(), default=0)
    if max_count <= 0:
        return 1.0
    return clamp(1.0 - (counts.get(key, 0) / max_count))


def tag_novelty(item: Item, exposure: ExposureProfile) -> float:
    """Mean facet novelty over the item's tags."""
    if not item.tags:
        return UNTAGGED_TAG_NOVELTY
    return sum(facet_novelty(exposure.tags, t) for t in sorted(item.tags)) / len(item.tags)


def novelty_score(item: Item, exposure: ExposureProfile) -> float:
    """Novelty of an item for this user, in [0, 1]."""
    return clamp(
        GENRE_NOVELTY_WEIGHT * facet_novelty(exposure.genres, item.genre)
        + AUTHOR_NOVELTY_WEIGHT * facet_novelty(exposure.authors, item.author)
        + TAG_NOVELTY_WEIGHT * tag_novelty(item, exposure)
    )
