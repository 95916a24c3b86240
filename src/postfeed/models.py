"""Data types shared by the cache store, formatter and sync engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypedDict


class Visibility(Enum):
    """Where a record stands with respect to the cache."""

    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    DRAFT = "draft"
    TRASHED = "trashed"
    DELETED = "deleted"
    EXPIRED = "expired"

    @property
    def visible(self) -> bool:
        return self is Visibility.PUBLISHED


class EventKind(Enum):
    SAVED = "saved"
    TRASHED = "trashed"
    DELETED = "deleted"


@dataclass(frozen=True)
class MutationEvent:
    """A content mutation delivered by the host.

    ``subject_id`` of None requests a full rebuild. ``parent_id`` lets a host
    that already knows a revision's parent skip the gateway lookup.
    """

    kind: EventKind
    subject_id: int | None = None
    parent_id: int | None = None
    autosave: bool = False


@dataclass
class Record:
    """One content-store record as supplied by a gateway."""

    id: int
    status: str
    title: str = ""
    link: str = ""
    body: str = ""
    author: str = ""
    categories: list[str] = field(default_factory=list)
    published: datetime | None = None
    image: str = ""
    thumbnail: str = ""
    excerpt: str = ""
    custom: dict[str, list] = field(default_factory=dict)


@dataclass
class SiteMetadata:
    title: str = ""
    link: str = ""
    description: str = ""
    language: str = ""
    slug: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "language": self.language,
            "slug": self.slug,
        }


# Functional form because of the hyphenated key.
CacheItem = TypedDict(
    "CacheItem",
    {
        "id": int,
        "title": str,
        "link": str,
        "body": str,
        "author": str,
        "categories": list[str],
        "pubDate": str,
        "siteImage": str,
        "siteImage-thumbnail": str,
        "excerpt": str,
        "custom": dict[str, str],
    },
)


@dataclass
class CacheDocument:
    """The persisted feed: site metadata plus visible posts keyed by id."""

    metadata: SiteMetadata = field(default_factory=SiteMetadata)
    posts: dict[str, CacheItem] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data: dict = self.metadata.to_dict()
        data["posts"] = self.posts
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CacheDocument":
        """Build a document from decoded JSON, raising ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise ValueError("document root is not an object")
        posts = data.get("posts")
        if not isinstance(posts, dict):
            raise ValueError("'posts' is not an object")
        for key, item in posts.items():
            if not isinstance(item, dict) or not isinstance(item.get("custom", {}), dict):
                raise ValueError(f"post {key!r} is not an object with object 'custom'")
        metadata = SiteMetadata(
            **{key: str(data.get(key) or "") for key in SiteMetadata().to_dict()}
        )
        return cls(metadata=metadata, posts={str(k): v for k, v in posts.items()})
