"""Map content-store records onto the cached item shape."""

from postfeed.models import CacheItem, Record
from postfeed.utils import format_pub_date, sanitize_html, trim_words


def collapse_custom(custom: dict) -> dict[str, str]:
    """Reduce each custom field to a single string.

    Multi-valued fields keep only their first value. Consumers rely on the
    flat name -> string shape, so the extra values are dropped on purpose.
    """
    flat: dict[str, str] = {}
    for name, values in custom.items():
        if isinstance(values, (list, tuple)):
            value = values[0] if values else ""
        else:
            value = values
        flat[str(name)] = "" if value is None else str(value)
    return flat


def make_excerpt(record: Record) -> str:
    """Hand-written excerpt if the record has one, else the opening words of the body."""
    excerpt = sanitize_html(record.excerpt)
    if excerpt:
        return excerpt
    return trim_words(sanitize_html(record.body))


def format_item(record: Record) -> CacheItem:
    """Format a Record into the item written to the JSON feed."""
    return {
        "id": record.id,
        "title": record.title or "",
        "link": record.link or "",
        "body": record.body or "",
        "author": record.author or "",
        "categories": [str(name) for name in record.categories or []],
        "pubDate": format_pub_date(record.published),
        "siteImage": record.image or "",
        "siteImage-thumbnail": record.thumbnail or "",
        "excerpt": make_excerpt(record),
        "custom": collapse_custom(record.custom or {}),
    }
