"""
Item model: a candidate story supplied by the catalog.

Built from catalog dicts via Item.model_validate(d) or ensure_items().
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def level(self) -> int:
        return DIFFICULTY_LEVELS[self]


DIFFICULTY_LEVELS = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}


class LengthPreference(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


# Word-count upper bounds (exclusive) for the short and medium buckets.
SHORT_MAX_WORDS = 5000
MEDIUM_MAX_WORDS = 20000


def length_bucket(word_count: int) -> LengthPreference:
    """Length bucket for a word count."""
    if word_count < SHORT_MAX_WORDS:
        return LengthPreference.SHORT
    if word_count < MEDIUM_MAX_WORDS:
        return LengthPreference.MEDIUM
    return LengthPreference.LONG


class Item(BaseModel):
    """
    Candidate content item.

    All fields except id are optional to support partial catalog rows.
    published_at may be missing; such items count as old for freshness.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: str
    title: str = ""
    author: str = ""
    genre: str = ""
    tags: Set[str] = Field(default_factory=set)
    difficulty: Difficulty = Difficulty.MEDIUM
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    total_ratings: int = Field(default=0, ge=0)
    popularity: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0)
    published_at: Optional[datetime] = None
    completion_rate: float = Field(default=0.0, ge=0.0, le=100.0)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_none_to_empty(cls, v):
        return set() if v is None else v

    @field_validator("title", "author", "genre", mode="before")
    @classmethod
    def _text_none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty_default(cls, v):
        return Difficulty.MEDIUM if v is None else v

    @property
    def length_bucket(self) -> LengthPreference:
        return length_bucket(self.length)


def ensure_items(items: List[Union[Dict[str, Any], "Item"]]) -> List["Item"]:
    """Convert a list of dicts or Items to Item models for use in the pipeline."""
    return [
        Item.model_validate(i) if isinstance(i, dict) else i
        for i in (items or [])
    ]
