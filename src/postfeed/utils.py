"""Utility functions — timestamps, HTML stripping, text truncation."""

import html
import re
import time
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

EXCERPT_WORDS = 55
EXCERPT_MORE = " […]"


def time_ago(published: str | None) -> str:
    """Convert a published date string to a human-readable 'time ago' format."""
    if not published:
        return ""
    try:
        dt = parsedate_to_datetime(published)
        diff = time.time() - dt.timestamp()
    except (TypeError, ValueError):
        return ""

    if diff < 60:
        return "just now"
    elif diff < 3600:
        mins = int(diff / 60)
        return f"{mins}m ago"
    elif diff < 86400:
        hours = int(diff / 3600)
        return f"{hours}h ago"
    else:
        days = int(diff / 86400)
        return f"{days}d ago"


def format_pub_date(published: datetime | None) -> str:
    """Render a datetime as 'Dow, DD Mon YYYY HH:MM:SS +0000'."""
    if published is None:
        return ""
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return format_datetime(published.astimezone(timezone.utc))


def parse_timestamp(value) -> float | None:
    """Parse epoch seconds, ISO-8601 or RFC-2822 into epoch seconds; None if unparseable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    if re.fullmatch(r"-?\d+(\.\d+)?", text):
        return float(text)
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        try:
            dt = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def sanitize_html(text: str | None) -> str:
    """Strip HTML tags and decode entities from text."""
    if not text:
        return ""
    # Tags first so encoded angle brackets survive as text
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def trim_words(text: str, num_words: int = EXCERPT_WORDS, more: str = EXCERPT_MORE) -> str:
    """Keep the first num_words words of text, appending `more` if anything was cut."""
    words = text.split()
    if len(words) <= num_words:
        return " ".join(words)
    return " ".join(words[:num_words]) + more


def truncate(text: str, max_len: int = 200) -> str:
    """Truncate text to max_len characters, adding ellipsis if needed."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 1].rsplit(" ", 1)[0] + "…"
