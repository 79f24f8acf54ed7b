"""
Profile models: derived user preferences and peer users for collaborative filtering.

UserProfile is produced by the profile aggregator and never hand-edited. Missing or
None fields fall back to the documented defaults, so a profile is always complete.
"""

from typing import Any, Dict, List, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .behavior import UserBehavior
from .item import Difficulty, LengthPreference

DEFAULT_READING_SPEED = 250.0
DEFAULT_ACTIVE_HOURS = frozenset({19, 20, 21, 22})


class UserProfile(BaseModel):
    """Normalized user preferences."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    # Most preferred first.
    favorite_genres: List[str] = Field(default_factory=list)
    favorite_authors: Set[str] = Field(default_factory=set)
    top_tags: Set[str] = Field(default_factory=set)
    # Words per minute.
    reading_speed: float = Field(default=DEFAULT_READING_SPEED, gt=0)
    preferred_length: LengthPreference = LengthPreference.MEDIUM
    preferred_difficulty: Difficulty = Difficulty.MEDIUM
    active_hours: Set[int] = Field(default_factory=lambda: set(DEFAULT_ACTIVE_HOURS))

    @field_validator("favorite_genres", mode="before")
    @classmethod
    def _none_to_empty_list(cls, v):
        return [] if v is None else v

    @field_validator("favorite_authors", "top_tags", mode="before")
    @classmethod
    def _none_to_empty_set(cls, v):
        return set() if v is None else v

    @field_validator("reading_speed", mode="before")
    @classmethod
    def _reading_speed_default(cls, v):
        return DEFAULT_READING_SPEED if v is None or v <= 0 else v

    @field_validator("preferred_length", mode="before")
    @classmethod
    def _length_default(cls, v):
        return LengthPreference.MEDIUM if v is None else v

    @field_validator("preferred_difficulty", mode="before")
    @classmethod
    def _difficulty_default(cls, v):
        return Difficulty.MEDIUM if v is None else v

    @field_validator("active_hours", mode="before")
    @classmethod
    def _active_hours_default(cls, v):
        if not v:
            return set(DEFAULT_ACTIVE_HOURS)
        return {h for h in v if 0 <= int(h) <= 23} or set(DEFAULT_ACTIVE_HOURS)


class PeerUser(BaseModel):
    """Another user, as seen by collaborative filtering."""

    user_id: str
    profile: UserProfile = Field(default_factory=UserProfile)
    behavior: UserBehavior = Field(default_factory=UserBehavior)


def ensure_profile(profile: Union[Dict[str, Any], "UserProfile", None]) -> "UserProfile":
    """Convert a dict (or None) to UserProfile."""
    if profile is None:
        return UserProfile()
    if isinstance(profile, dict):
        return UserProfile.model_validate(profile)
    return profile


def ensure_peers(peers: List[Union[Dict[str, Any], "PeerUser"]]) -> List["PeerUser"]:
    """Convert a list of dicts or PeerUsers to PeerUser models."""
    return [
        PeerUser.model_validate(p) if isinstance(p, dict) else p
        for p in (peers or [])
    ]
