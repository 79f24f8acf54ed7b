"""
Profile Aggregation Tests

aggregate_profile always returns a fully populated profile; favorites are
derived deterministically from behavior, the interaction log, and the catalog.
"""

from datetime import timedelta

import pytest

from storyrank import (
    Difficulty,
    InMemoryCatalog,
    InteractionEvent,
    LengthPreference,
    UserBehavior,
    UserProfile,
    aggregate_profile,
)
from storyrank.models.profile import DEFAULT_ACTIVE_HOURS, DEFAULT_READING_SPEED
from tests.conftest import NOW, make_item


class TestDefaults:
    def test_empty_behavior_gives_complete_profile(self):
        profile = aggregate_profile(UserBehavior())
        assert profile.favorite_genres == []
        assert profile.favorite_authors == set()
        assert profile.top_tags == set()
        assert profile.reading_speed == DEFAULT_READING_SPEED
        assert profile.preferred_length == LengthPreference.SHORT
        assert profile.preferred_difficulty == Difficulty.MEDIUM
        assert profile.active_hours == set(DEFAULT_ACTIVE_HOURS)

    def test_none_fields_read_as_defaults(self):
        behavior = UserBehavior.model_validate(
            {"completedItems": None, "genreExploration": None, "averageSessionDuration": None}
        )
        profile = aggregate_profile(behavior)
        assert profile.favorite_genres == []
        assert behavior.completed_items == set()

    def test_profile_none_fields_fall_back(self):
        profile = UserProfile.model_validate(
            {"favoriteGenres": None, "readingSpeed": None, "activeHours": None, "preferredLength": None}
        )
        assert profile.favorite_genres == []
        assert profile.reading_speed == DEFAULT_READING_SPEED
        assert profile.active_hours == set(DEFAULT_ACTIVE_HOURS)
        assert profile.preferred_length == LengthPreference.MEDIUM


class TestFavoriteGenres:
    def test_top_three_by_count(self):
        behavior = UserBehavior(
            genre_exploration={"fantasy": 9, "horror": 1, "mystery": 5, "romance": 7, "sci-fi": 0}
        )
        assert aggregate_profile(behavior).favorite_genres == ["fantasy", "romance", "mystery"]

    def test_ties_broken_by_recent_interaction(self):
        behavior = UserBehavior(genre_exploration={"a-genre": 3, "b-genre": 3, "c-genre": 3})
        events = [
            InteractionEvent(item_id="x", timestamp=NOW - timedelta(days=5), genre="a-genre"),
            InteractionEvent(item_id="y", timestamp=NOW - timedelta(days=1), genre="c-genre"),
        ]
        # c-genre most recent, a-genre older, b-genre never seen in the log.
        assert aggregate_profile(behavior, events).favorite_genres == ["c-genre", "a-genre", "b-genre"]

    def test_ties_broken_by_name_without_log(self):
        behavior = UserBehavior(genre_exploration={"mystery": 2, "fantasy": 2, "horror": 2, "drama": 2})
        assert aggregate_profile(behavior).favorite_genres == ["drama", "fantasy", "horror"]

    def test_event_genre_resolved_from_catalog(self):
        catalog = InMemoryCatalog([make_item("h1", genre="horror")])
        behavior = UserBehavior(genre_exploration={"fantasy": 1, "horror": 1})
        events = [InteractionEvent(item_id="h1", timestamp=NOW)]
        assert aggregate_profile(behavior, events, catalog).favorite_genres == ["horror", "fantasy"]


class TestPreferredLength:
    @pytest.mark.parametrize(
        "minutes, expected",
        [
            (0, LengthPreference.SHORT),
            (29.9, LengthPreference.SHORT),
            (30, LengthPreference.MEDIUM),
            (59, LengthPreference.MEDIUM),
            (60, LengthPreference.LONG),
            (180, LengthPreference.LONG),
        ],
    )
    def test_session_duration_thresholds(self, minutes, expected):
        behavior = UserBehavior(average_session_duration=minutes)
        assert aggregate_profile(behavior).preferred_length == expected


class TestCatalogDerived:
    @pytest.fixture
    def catalog(self):
        return InMemoryCatalog(
            [
                make_item("c1", author="ann", difficulty="hard", tags={"magic", "quest"}),
                make_item("c2", author="ann", difficulty="hard", tags={"magic", "dragons"}),
                make_item("c3", author="bob", difficulty="hard", tags={"magic"}),
                make_item("l1", author="cy", difficulty="easy", tags={"quest"}),
                make_item("b1", author="dee", tags={"noir"}),
            ]
        )

    def test_difficulty_from_completed_items(self, catalog):
        behavior = UserBehavior(completed_items={"c1", "c2", "c3"})
        assert aggregate_profile(behavior, catalog=catalog).preferred_difficulty == Difficulty.HARD

    def test_difficulty_needs_enough_samples(self, catalog):
        behavior = UserBehavior(completed_items={"c1", "c2"})
        assert aggregate_profile(behavior, catalog=catalog).preferred_difficulty == Difficulty.MEDIUM

    def test_favorite_authors_need_two_items(self, catalog):
        behavior = UserBehavior(completed_items={"c1", "c3"}, liked_items={"c2", "l1"})
        assert aggregate_profile(behavior, catalog=catalog).favorite_authors == {"ann"}

    def test_top_tags_by_frequency(self, catalog):
        behavior = UserBehavior(
            completed_items={"c1", "c2", "c3"}, liked_items={"l1"}, bookmarked_items={"b1"}
        )
        assert aggregate_profile(behavior, catalog=catalog).top_tags == {
            "magic", "quest", "dragons", "noir"
        }

    def test_unknown_ids_are_skipped(self, catalog):
        behavior = UserBehavior(completed_items={"missing"})
        profile = aggregate_profile(behavior, catalog=catalog)
        assert profile.favorite_authors == set()


class TestEventDerived:
    def test_active_hours_are_most_frequent(self):
        events = [
            InteractionEvent(item_id="a", timestamp=NOW.replace(hour=7)),
            InteractionEvent(item_id="b", timestamp=NOW.replace(hour=7)),
            InteractionEvent(item_id="c", timestamp=NOW.replace(hour=23)),
            InteractionEvent(item_id="d", timestamp=NOW.replace(hour=23)),
            InteractionEvent(item_id="e", timestamp=NOW.replace(hour=12)),
        ]
        assert aggregate_profile(UserBehavior(), events).active_hours == {7, 23}

    def test_reading_speed_from_log(self):
        events = [
            InteractionEvent(item_id="a", timestamp=NOW, words_read=3000, duration_minutes=10),
            InteractionEvent(item_id="b", timestamp=NOW, words_read=1000, duration_minutes=10),
            InteractionEvent(item_id="c", timestamp=NOW, words_read=500),
        ]
        assert aggregate_profile(UserBehavior(), events).reading_speed == pytest.approx(200.0)
