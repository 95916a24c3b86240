"""Keeps the cached feed in step with content mutations."""

import logging
import time
from collections.abc import Callable
from enum import Enum

from postfeed.cache import CacheStore
from postfeed.errors import RecordNotFound
from postfeed.formatter import format_item
from postfeed.gateway import ContentGateway
from postfeed.models import CacheDocument, CacheItem, EventKind, MutationEvent, Record, Visibility
from postfeed.visibility import DEFAULT_EXPIRY_FIELD, classify, is_expired

logger = logging.getLogger(__name__)

DEFAULT_MAX_POSTS = 250


class SyncAction(Enum):
    SKIPPED = "skipped"
    REBUILT = "rebuilt"
    UPSERTED = "upserted"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


def resolve_subject(event: MutationEvent, gateway: ContentGateway) -> int | None:
    """The id an event really concerns: a revision's parent, else the subject itself."""
    if event.subject_id is None:
        return None
    if event.parent_id is not None:
        return event.parent_id
    return gateway.is_revision_of(event.subject_id) or event.subject_id


class SyncEngine:
    """Stateless read-modify-write of the feed document, one event at a time."""

    def __init__(
        self,
        store: CacheStore,
        gateway: ContentGateway,
        max_posts: int = DEFAULT_MAX_POSTS,
        expiry_field: str = DEFAULT_EXPIRY_FIELD,
    ):
        self.store = store
        self.gateway = gateway
        self.max_posts = max_posts
        self.expiry_field = expiry_field

    def handle(self, event: MutationEvent) -> SyncAction:
        """Apply one mutation event to the cache.

        Rebuilds from scratch when there is no usable document or no subject,
        otherwise touches only the subject's entry. Raises PostfeedError
        subclasses on write or gateway failure, leaving the file untouched.
        """
        if event.autosave:
            logger.debug("Ignoring autosave event for %s", event.subject_id)
            return SyncAction.SKIPPED

        subject = resolve_subject(event, self.gateway)
        is_revision = subject is not None and subject != event.subject_id
        if is_revision and event.kind is not EventKind.SAVED:
            # Dropping a revision says nothing about its parent
            logger.debug("Ignoring %s of revision %s", event.kind.value, event.subject_id)
            return SyncAction.SKIPPED

        doc = self.store.read()
        if doc is None or subject is None:
            self.rebuild()
            return SyncAction.REBUILT

        key = str(subject)
        if event.kind is EventKind.SAVED:
            item = self._visible_item(subject)
        else:
            item = None

        if item is None:
            action = SyncAction.REMOVED if doc.posts.pop(key, None) is not None else SyncAction.UNCHANGED
        else:
            doc.posts[key] = item
            action = SyncAction.UPSERTED

        doc.metadata = self.gateway.site_metadata()
        self.store.write(doc)
        logger.debug("%s post %s", action.value.capitalize(), key)
        return action

    def subject_state(self, record_id: int) -> tuple[Visibility, Record | None]:
        """Fetch and classify one record; a record the store no longer has is DELETED."""
        try:
            record = self.gateway.get_by_id(record_id)
        except RecordNotFound:
            return Visibility.DELETED, None
        return classify(record, self.expiry_field), record

    def _visible_item(self, record_id: int) -> CacheItem | None:
        state, record = self.subject_state(record_id)
        if not state.visible:
            logger.debug("Post %s is %s", record_id, state.value)
            return None
        return format_item(record)

    def rebuild(self) -> int:
        """Regenerate the whole document from the content store. Returns the post count."""
        now = time.time()
        posts: dict[str, CacheItem] = {}
        for record in self.gateway.list_published(self.max_posts):
            if classify(record, self.expiry_field, now).visible:
                posts[str(record.id)] = format_item(record)
        doc = CacheDocument(metadata=self.gateway.site_metadata(), posts=posts)
        self.store.write(doc)
        logger.info("Rebuilt %s with %d posts", self.store.path, len(posts))
        return len(posts)

    def regenerate(self, on_deleted: Callable[[bool], None] | None = None) -> bool:
        """Delete the document and rebuild it, even if there was nothing to delete.

        `on_deleted` receives the delete result before the rebuild starts, so
        callers can report it even when the rebuild then fails.
        """
        deleted = self.store.delete()
        if on_deleted is not None:
            on_deleted(deleted)
        self.rebuild()
        return deleted

    def sweep(self, now: float | None = None) -> int:
        """Drop cached posts whose expiry has passed. Returns how many were removed."""
        doc = self.store.read()
        if doc is None:
            return 0
        now = time.time() if now is None else now
        expired = [key for key, item in doc.posts.items() if is_expired(item, self.expiry_field, now)]
        if not expired:
            return 0
        for key in expired:
            del doc.posts[key]
        self.store.write(doc)
        logger.info("Swept %d expired posts from %s", len(expired), self.store.path)
        return len(expired)
