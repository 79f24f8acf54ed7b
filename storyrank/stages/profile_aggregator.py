"""
Profile aggregation: derive a complete UserProfile from behavior.

Inputs: UserBehavior, an optional raw interaction log, and an optional catalog used
to resolve history ids to items (authors, tags, difficulty). Every preference falls
back to a documented default, so aggregation never fails on missing data.

The public entry point is aggregate_profile.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..models.behavior import InteractionEvent, UserBehavior
from ..models.item import Difficulty, Item, LengthPreference
from ..models.profile import DEFAULT_ACTIVE_HOURS, DEFAULT_READING_SPEED, UserProfile
from ..sources import CatalogSource

logger = logging.getLogger(__name__)

FAVORITE_GENRE_COUNT = 3
TOP_TAG_COUNT = 5
# An author becomes a favorite after this many completed/liked items.
FAVORITE_AUTHOR_MIN_ITEMS = 2
# Completed items needed before difficulty moves off the default.
DIFFICULTY_MIN_SAMPLES = 3
# averageSessionDuration thresholds (minutes).
SHORT_SESSION_MINUTES = 30
MEDIUM_SESSION_MINUTES = 60


def _as_utc(ts: datetime) -> datetime:
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def _resolve_items(ids: Iterable[str], catalog: Optional[CatalogSource]) -> List[Item]:
    """Look up ids in the catalog (sorted for stable iteration); unknown ids are skipped."""
    if catalog is None:
        return []
    resolved = []
    for item_id in sorted(ids):
        item = catalog.get_item(item_id)
        if item is not None:
            resolved.append(item)
    return resolved


def _event_genre(event: InteractionEvent, catalog: Optional[CatalogSource]) -> Optional[str]:
    if event.genre:
        return event.genre
    if catalog is not None and event.item_id:
        item = catalog.get_item(event.item_id)
        if item is not None and item.genre:
            return item.genre
    return None


def _last_seen_by_genre(
    events: List[InteractionEvent],
    catalog: Optional[CatalogSource],
) -> Dict[str, datetime]:
    """Most recent interaction timestamp per genre."""
    last_seen: Dict[str, datetime] = {}
    for event in events:
        genre = _event_genre(event, catalog)
        if not genre:
            continue
        ts = _as_utc(event.timestamp)
        if genre not in last_seen or ts > last_seen[genre]:
            last_seen[genre] = ts
    return last_seen


def _favorite_genres(
    behavior: UserBehavior,
    events: List[InteractionEvent],
    catalog: Optional[CatalogSource],
) -> List[str]:
    """
    Top genres by exploration count.

    Ties: genres interacted with more recently first (genres absent from the log
    after those present), then genre name.
    """
    last_seen = _last_seen_by_genre(events, catalog)

    def key(entry):
        genre, count = entry
        seen = last_seen.get(genre)
        recency = -seen.timestamp() if seen is not None else 0.0
        return (-count, 0 if seen is not None else 1, recency, genre)

    counted = [(g, c) for g, c in behavior.genre_exploration.items() if (c or 0) > 0]
    counted.sort(key=key)
    return [genre for genre, _ in counted[:FAVORITE_GENRE_COUNT]]


def _preferred_length(behavior: UserBehavior) -> LengthPreference:
    duration = behavior.average_session_duration
    if duration < SHORT_SESSION_MINUTES:
        return LengthPreference.SHORT
    if duration < MEDIUM_SESSION_MINUTES:
        return LengthPreference.MEDIUM
    return LengthPreference.LONG


def _preferred_difficulty(completed: List[Item]) -> Difficulty:
    """Strictly most common difficulty of completed items; medium otherwise."""
    if len(completed) < DIFFICULTY_MIN_SAMPLES:
        return Difficulty.MEDIUM
    counts = Counter(item.difficulty for item in completed).most_common()
    if len(counts) > 1 and counts[0][1] == counts[1][1]:
        return Difficulty.MEDIUM
    return counts[0][0]


def _active_hours(events: List[InteractionEvent]) -> set:
    """Hour bucket(s) with the most interactions."""
    if not events:
        return set(DEFAULT_ACTIVE_HOURS)
    counts = Counter(event.timestamp.hour for event in events)
    top = max(counts.values())
    return {hour for hour, count in counts.items() if count == top}


def _reading_speed(events: List[InteractionEvent]) -> float:
    words = 0
    minutes = 0.0
    for event in events:
        if event.words_read and event.duration_minutes and event.duration_minutes > 0:
            words += event.words_read
            minutes += event.duration_minutes
    if words <= 0 or minutes <= 0:
        return DEFAULT_READING_SPEED
    return words / minutes


def _favorite_authors(engaged: List[Item]) -> set:
    counts = Counter(item.author for item in engaged if item.author)
    return {author for author, count in counts.items() if count >= FAVORITE_AUTHOR_MIN_ITEMS}


def _top_tags(items: List[Item]) -> set:
    counts = Counter(tag for item in items for tag in item.tags)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return {tag for tag, _ in ranked[:TOP_TAG_COUNT]}


def aggregate_profile(
    behavior: UserBehavior,
    events: Optional[List[InteractionEvent]] = None,
    catalog: Optional[CatalogSource] = None,
) -> UserProfile:
    """
    Derive a UserProfile from behavior, the optional interaction log, and the catalog.

    Without a catalog, authors/tags/difficulty keep their defaults; without events,
    active hours and reading speed keep theirs.
    """
    events = list(events or [])
    completed = _resolve_items(behavior.completed_items, catalog)
    engaged = _resolve_items(behavior.history, catalog)
    touched = _resolve_items(behavior.history | behavior.bookmarked_items, catalog)

    profile = UserProfile(
        favorite_genres=_favorite_genres(behavior, events, catalog),
        favorite_authors=_favorite_authors(engaged),
        top_tags=_top_tags(touched),
        reading_speed=_reading_speed(events),
        preferred_length=_preferred_length(behavior),
        preferred_difficulty=_preferred_difficulty(completed),
        active_hours=_active_hours(events),
    )
    logger.debug(
        "[profile] genres=%s authors=%d tags=%d events=%d resolved=%d",
        profile.favorite_genres, len(profile.favorite_authors), len(profile.top_tags),
        len(events), len(touched),
    )
    return profile
