"""Content store gateway interface and an in-memory implementation."""

from typing import Protocol
from urllib.parse import urlsplit

from postfeed.errors import RecordNotFound
from postfeed.models import Record, SiteMetadata


class ContentGateway(Protocol):
    def list_published(self, limit: int) -> list[Record]:
        """Up to `limit` published records, newest first."""
        ...

    def get_by_id(self, record_id: int) -> Record:
        """Fetch one record, raising RecordNotFound if it is gone."""
        ...

    def is_revision_of(self, record_id: int) -> int | None:
        """Parent id if `record_id` is a revision, else None."""
        ...

    def site_metadata(self) -> SiteMetadata:
        ...


def slug_from_url(url: str) -> str:
    """Last path segment of a site's home URL, or its host name for a root install."""
    parts = urlsplit(url if "://" in url else f"//{url}")
    segments = [seg for seg in parts.path.split("/") if seg]
    if segments:
        return segments[-1]
    return parts.hostname or "site"


class MemoryGateway:
    """Dict-backed gateway for hosts that hold their records in process."""

    def __init__(self, metadata: SiteMetadata | None = None):
        self.metadata = metadata or SiteMetadata()
        self.records: dict[int, Record] = {}
        self.revisions: dict[int, int] = {}

    def add(self, record: Record) -> Record:
        self.records[record.id] = record
        return record

    def remove(self, record_id: int) -> None:
        self.records.pop(record_id, None)

    def add_revision(self, revision_id: int, parent_id: int) -> None:
        self.revisions[revision_id] = parent_id

    def list_published(self, limit: int) -> list[Record]:
        published = [r for r in self.records.values() if r.status == "publish"]
        # Undated records sort last
        published.sort(key=lambda r: r.published.timestamp() if r.published else float("-inf"), reverse=True)
        return published[:limit]

    def get_by_id(self, record_id: int) -> Record:
        try:
            return self.records[record_id]
        except KeyError:
            raise RecordNotFound(record_id) from None

    def is_revision_of(self, record_id: int) -> int | None:
        return self.revisions.get(record_id)

    def site_metadata(self) -> SiteMetadata:
        return self.metadata
