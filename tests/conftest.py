"""Shared fixtures: a fixed clock and small story catalogs."""

from datetime import datetime, timedelta, timezone

import pytest

from storyrank import Item, UserBehavior, UserProfile

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_item(item_id: str, **overrides) -> Item:
    """Item with neutral defaults; published 3 days before NOW unless overridden."""
    fields = {
        "id": item_id,
        "title": f"Story {item_id}",
        "author": "author-x",
        "genre": "fantasy",
        "tags": set(),
        "difficulty": "medium",
        "average_rating": 4.0,
        "total_ratings": 10,
        "popularity": 100,
        "length": 10000,
        "published_at": NOW - timedelta(days=3),
        "completion_rate": 50.0,
    }
    fields.update(overrides)
    return Item(**fields)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def empty_profile():
    return UserProfile()


@pytest.fixture
def empty_behavior():
    return UserBehavior()


@pytest.fixture
def fantasy_profile():
    return UserProfile(favorite_genres=["fantasy"])


@pytest.fixture
def mixed_catalog():
    """Three fantasy and two sci-fi stories with equal rating, freshness and popularity."""
    return [
        make_item("f1", genre="fantasy", author="a1", average_rating=4.5),
        make_item("f2", genre="fantasy", author="a2", average_rating=4.5),
        make_item("f3", genre="fantasy", author="a3", average_rating=4.5),
        make_item("s1", genre="sci-fi", author="a4", average_rating=4.5),
        make_item("s2", genre="sci-fi", author="a5", average_rating=4.5),
    ]


@pytest.fixture
def reader_behavior():
    """A reader with enough history to exercise every signal."""
    return UserBehavior(
        completed_items={"f1"},
        abandoned_items={"s2"},
        bookmarked_items={"f2"},
        liked_items={"f1", "m1"},
        genre_exploration={"fantasy": 6, "mystery": 2},
        average_session_duration=45,
        total_engagement_time=600,
        average_rating=4.2,
    )
