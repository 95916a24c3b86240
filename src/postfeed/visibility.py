"""Decide whether a record belongs in the cache."""

import time

from postfeed.models import CacheItem, Record, Visibility
from postfeed.utils import parse_timestamp

DEFAULT_EXPIRY_FIELD = "_expiration-date"

_STATUS_MAP = {
    "publish": Visibility.PUBLISHED,
    "trash": Visibility.TRASHED,
}


def _first(values):
    if isinstance(values, (list, tuple)):
        return values[0] if values else None
    return values


def expiry_of(custom: dict, expiry_field: str = DEFAULT_EXPIRY_FIELD) -> float | None:
    """Return the expiry timestamp held in a custom-field mapping, if any parses."""
    if not expiry_field or expiry_field not in custom:
        return None
    return parse_timestamp(_first(custom[expiry_field]))


def classify(
    record: Record,
    expiry_field: str = DEFAULT_EXPIRY_FIELD,
    now: float | None = None,
) -> Visibility:
    """Map a record's status, publish time and expiry onto a Visibility."""
    state = _STATUS_MAP.get(record.status, Visibility.DRAFT)
    if state is not Visibility.PUBLISHED:
        return state

    now = time.time() if now is None else now
    if record.published is not None and record.published.timestamp() > now:
        return Visibility.SCHEDULED

    expires = expiry_of(record.custom, expiry_field)
    if expires is not None and now >= expires:
        return Visibility.EXPIRED
    return Visibility.PUBLISHED


def is_visible(
    record: Record,
    expiry_field: str = DEFAULT_EXPIRY_FIELD,
    now: float | None = None,
) -> bool:
    return classify(record, expiry_field, now).visible


def is_expired(
    item: CacheItem,
    expiry_field: str = DEFAULT_EXPIRY_FIELD,
    now: float | None = None,
) -> bool:
    """Whether an already-cached item's expiry field has passed."""
    custom = item.get("custom") if isinstance(item, dict) else None
    if not isinstance(custom, dict):
        return False
    expires = expiry_of(custom, expiry_field)
    if expires is None:
        return False
    now = time.time() if now is None else now
    return now >= expires
