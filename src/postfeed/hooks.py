"""Translate host-native mutation topics into engine events."""

import logging

from postfeed.engine import SyncEngine
from postfeed.errors import PostfeedError
from postfeed.models import EventKind, MutationEvent

logger = logging.getLogger(__name__)

TOPICS: dict[str, EventKind] = {
    "save_post": EventKind.SAVED,
    "trashed_post": EventKind.TRASHED,
    "delete_post": EventKind.DELETED,
}


def resolve_kind(name: str) -> EventKind | None:
    """Resolve a native topic or kind name ('save_post', 'saved', ...) to an EventKind."""
    name = name.lower().strip()
    if name in TOPICS:
        return TOPICS[name]
    try:
        return EventKind(name)
    except ValueError:
        return None


def translate(
    topic: str,
    post_id: int | None = None,
    parent_id: int | None = None,
    autosave: bool = False,
) -> MutationEvent:
    kind = resolve_kind(topic)
    if kind is None:
        raise ValueError(f"Unknown topic: {topic}")
    return MutationEvent(kind=kind, subject_id=post_id, parent_id=parent_id, autosave=autosave)


def dispatch(
    engine: SyncEngine,
    topic: str,
    post_id: int | None = None,
    parent_id: int | None = None,
    autosave: bool = False,
) -> bool:
    """Run the engine for a host event without letting failures escape.

    Cache upkeep happens as a side effect of someone else's save, so errors
    are logged and reported through the return value only.
    """
    event = translate(topic, post_id, parent_id=parent_id, autosave=autosave)
    try:
        engine.handle(event)
    except PostfeedError as exc:
        logger.warning("Feed sync for %s %s failed: %s", topic, post_id, exc)
        return False
    return True
