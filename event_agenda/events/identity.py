"""Event identity: the title is the lookup key across all collections.

Two distinct events that share a title collide. ``AgendaStore.save`` only
checks the saved collection, so an attended title may be saved again.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Protocol, TypeVar


class HasTitle(Protocol):
    title: str


E = TypeVar("E", bound=HasTitle)


def identity_of(event: HasTitle) -> str:
    """Return the identity key of any event (exact title, no normalization)."""
    return event.title


def contains_identity(events: Iterable[HasTitle], title: str) -> bool:
    """True if any event in ``events`` has identity ``title``."""
    return any(identity_of(event) == title for event in events)


def index_by_identity(events: Iterable[E]) -> Dict[str, List[E]]:
    """Group events by identity, keeping encounter order within each title."""
    index: Dict[str, List[E]] = {}
    for event in events:
        index.setdefault(identity_of(event), []).append(event)
    return index
