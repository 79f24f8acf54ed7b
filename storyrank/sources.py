"""
Collaborator abstractions.

The engine does no I/O. A serving layer supplies catalog lookups and behavior
through these protocols; in-memory implementations cover tests and callers that
already hold the data.
"""

from typing import Dict, Iterable, Optional, Protocol

from .models.behavior import UserBehavior
from .models.item import Item


class CatalogSource(Protocol):
    """Protocol for item lookups (resolving ids in a user's history to items)."""

    def get_item(self, item_id: str) -> Optional[Item]:
        """Get one item by id, or None when unknown."""
        ...


class BehaviorSource(Protocol):
    """Protocol for reading one user's interaction history."""

    def get_behavior(self, user_id: str) -> UserBehavior:
        """Return the user's behavior; an empty UserBehavior for unknown users."""
        ...


class InMemoryCatalog:
    """Catalog backed by a dict of items keyed by id."""

    def __init__(self, items: Iterable[Item] = ()):
        self._items: Dict[str, Item] = {item.id: item for item in items}

    def get_item(self, item_id: str) -> Optional[Item]:
        return self._items.get(item_id)

    def __len__(self) -> int:
        return len(self._items)


class InMemoryBehaviorSource:
    """Behavior source backed by a dict of user_id -> UserBehavior."""

    def __init__(self, behaviors: Optional[Dict[str, UserBehavior]] = None):
        self._behaviors = dict(behaviors or {})

    def get_behavior(self, user_id: str) -> UserBehavior:
        return self._behaviors.get(user_id) or UserBehavior()
