"""Shared fixtures for postfeed tests."""

from datetime import datetime, timezone, timedelta

import pytest

from postfeed.cache import CacheStore
from postfeed.engine import SyncEngine
from postfeed.gateway import MemoryGateway
from postfeed.models import Record, SiteMetadata


@pytest.fixture()
def make_record():
    """Factory fixture: a published Record dated `hours_ago` hours in the past."""

    def _make(record_id: int, status: str = "publish", hours_ago: float = 1, **fields) -> Record:
        defaults = {
            "title": f"Post {record_id}",
            "link": f"https://blog.example.com/news/post-{record_id}/",
            "body": f"<p>Body of post {record_id}.</p>",
            "author": "Jo Bloggs",
            "categories": ["News"],
            "published": datetime.now(timezone.utc) - timedelta(hours=hours_ago),
        }
        defaults.update(fields)
        return Record(id=record_id, status=status, **defaults)

    return _make


@pytest.fixture()
def site_metadata():
    return SiteMetadata(
        title="News Blog",
        link="https://blog.example.com/news",
        description="Just another blog",
        language="en-GB",
        slug="news",
    )


@pytest.fixture()
def gateway(site_metadata):
    return MemoryGateway(site_metadata)


@pytest.fixture()
def store(tmp_path):
    return CacheStore(tmp_path, "news")


@pytest.fixture()
def engine(store, gateway):
    return SyncEngine(store, gateway)
