"""
Behavior models: what a user has done, as supplied by the interaction-history store.

UserBehavior is the aggregate; InteractionEvent is one raw log entry (optional input
to the profile aggregator). Missing or None fields read as empty/zero.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UserBehavior(BaseModel):
    """Interaction history for one user."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    completed_items: Set[str] = Field(default_factory=set)
    abandoned_items: Set[str] = Field(default_factory=set)
    bookmarked_items: Set[str] = Field(default_factory=set)
    liked_items: Set[str] = Field(default_factory=set)
    genre_exploration: Dict[str, int] = Field(default_factory=dict)
    # Minutes.
    average_session_duration: float = 0.0
    total_engagement_time: float = 0.0
    choice_patterns: Dict[str, int] = Field(default_factory=dict)
    # Mean rating this user gives (0-5); 0 when unknown.
    average_rating: float = 0.0

    @field_validator(
        "completed_items", "abandoned_items", "bookmarked_items", "liked_items", mode="before"
    )
    @classmethod
    def _none_to_empty_set(cls, v):
        return set() if v is None else v

    @field_validator("genre_exploration", "choice_patterns", mode="before")
    @classmethod
    def _none_to_empty_dict(cls, v):
        return {} if v is None else v

    @field_validator(
        "average_session_duration", "total_engagement_time", "average_rating", mode="before"
    )
    @classmethod
    def _none_to_zero(cls, v):
        return 0.0 if v is None else v

    @property
    def data_points(self) -> int:
        """Behavioral signals backing a recommendation (completed + liked + bookmarked)."""
        return len(self.completed_items) + len(self.liked_items) + len(self.bookmarked_items)

    @property
    def history(self) -> Set[str]:
        """Items the user engaged with positively (completed or liked)."""
        return self.completed_items | self.liked_items

    def genre_count(self, genre: str) -> int:
        return self.genre_exploration.get(genre, 0) or 0


class InteractionEvent(BaseModel):
    """
    One raw interaction (view, complete, like, ...).

    genre is optional: when missing the aggregator resolves it from the catalog.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    item_id: str = ""
    timestamp: datetime
    action: str = "view"
    genre: Optional[str] = None
    duration_minutes: Optional[float] = None
    words_read: Optional[int] = None


def ensure_behavior(behavior: Union[Dict[str, Any], "UserBehavior", None]) -> "UserBehavior":
    """Convert a dict (or None) to UserBehavior."""
    if behavior is None:
        return UserBehavior()
    if isinstance(behavior, dict):
        return UserBehavior.model_validate(behavior)
    return behavior
