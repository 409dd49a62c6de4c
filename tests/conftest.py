"""Shared fixtures and in-memory stand-ins for the repositories."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import pytest

from feedpipe.db.items import UpsertStats
from feedpipe.errors import StoreError
from feedpipe.ingestion.models import FetchResult, ParsedItem
from feedpipe.models import BatchRunLog, Feed, FeedItem

FIXTURES = Path(__file__).parent / "fixtures"

T0 = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def rss2_xml() -> str:
    return load_fixture("rss2.xml")


@pytest.fixture
def atom_xml() -> str:
    return load_fixture("atom.xml")


class Clock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now


class FakeFeedRepository:
    def __init__(self, feeds: Iterable[Feed]) -> None:
        self.feeds = {feed.id: feed for feed in feeds}
        self.fetched: List[tuple] = []
        self.fail_find = False
        self.find_by_ids_calls: List[Set[int]] = []

    def find_active(self, conn, feed_ids=None) -> List[Feed]:
        if self.fail_find:
            raise StoreError("Failed to load active feeds: connection refused")
        wanted = set(feed_ids) if feed_ids is not None else None
        return [
            feed
            for feed_id, feed in sorted(self.feeds.items())
            if feed.is_active and (wanted is None or feed_id in wanted)
        ]

    def find_by_ids(self, conn, feed_ids) -> List[Feed]:
        ids = set(feed_ids)
        self.find_by_ids_calls.append(ids)
        return [feed for feed_id, feed in self.feeds.items() if feed_id in ids]

    def mark_fetched(self, conn, feed_id, fetched_at, next_fetch_at) -> None:
        self.fetched.append((feed_id, fetched_at, next_fetch_at))
        feed = self.feeds[feed_id]
        feed.last_fetched_at = fetched_at
        feed.next_fetch_at = next_fetch_at


class FakeItemStore:
    def __init__(self) -> None:
        self.rows: Dict[tuple, FeedItem] = {}
        self.fail_feed_ids: Set[int] = set()
        self.fail_reads = False

    def upsert(self, conn, feed_id: int, items: List[ParsedItem]) -> UpsertStats:
        if feed_id in self.fail_feed_ids:
            raise StoreError("Failed to store feed items: disk full")
        stats = UpsertStats()
        for item in items:
            key = (feed_id, item.guid)
            if key in self.rows:
                stats.skipped += 1
                continue
            self.rows[key] = FeedItem(
                id=len(self.rows) + 1,
                feed_id=feed_id,
                guid=item.guid,
                url=item.url,
                title=item.title,
                description=item.description,
                published_at=item.published_at,
                fetched_at=T0,
            )
            stats.created += 1
        return stats

    def add(self, feed_id: int, url: str, published_at: Optional[datetime] = None) -> FeedItem:
        row = FeedItem(
            id=len(self.rows) + 1,
            feed_id=feed_id,
            guid=url,
            url=url,
            title=f"Title for {url}",
            published_at=published_at,
            fetched_at=T0,
        )
        self.rows[(feed_id, url)] = row
        return row

    def _filtered(self, feed_id: Optional[int]) -> List[FeedItem]:
        if self.fail_reads:
            raise StoreError("Failed to load feed items: timeout")
        rows = [r for r in self.rows.values() if feed_id is None or r.feed_id == feed_id]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(rows, key=lambda r: (r.published_at or epoch, r.id), reverse=True)

    def find_with_pagination(self, conn, limit, offset=0, feed_id=None) -> List[FeedItem]:
        return self._filtered(feed_id)[offset:offset + limit]

    def count(self, conn, feed_id=None) -> int:
        return len(self._filtered(feed_id))


class FakeBatchLogRepository:
    def __init__(self) -> None:
        self.rows: Dict[int, BatchRunLog] = {}
        self.finish_calls: Dict[int, int] = {}
        self.fail_start = False
        self.fail_finish = False

    def start(self, conn, feed_id: int, started_at: datetime) -> int:
        if self.fail_start:
            raise StoreError("Failed to open batch log: connection reset")
        log_id = len(self.rows) + 1
        self.rows[log_id] = BatchRunLog(id=log_id, feed_id=feed_id, started_at=started_at)
        return log_id

    def finish(
        self,
        conn,
        log_id,
        status,
        finished_at,
        items_fetched=0,
        items_created=0,
        error_message=None,
    ) -> None:
        if self.fail_finish:
            raise StoreError("Failed to finish batch log: connection reset")
        row = self.rows[log_id]
        if row.finished_at is not None:
            raise StoreError(f"Batch log {log_id} is missing or already finished")
        self.finish_calls[log_id] = self.finish_calls.get(log_id, 0) + 1
        row.status = status
        row.finished_at = finished_at
        row.items_fetched = items_fetched
        row.items_created = items_created
        row.error_message = error_message

    def for_feed(self, feed_id: int) -> List[BatchRunLog]:
        return [row for row in self.rows.values() if row.feed_id == feed_id]


class FakeSavedItems:
    def __init__(self, urls: Iterable[str] = ()) -> None:
        self.urls = set(urls)
        self.calls: List[Set[str]] = []

    def find_saved_urls(self, conn, urls) -> Set[str]:
        candidates = set(urls)
        self.calls.append(candidates)
        return candidates & self.urls


class FakeFetcher:
    """Returns canned FetchResults keyed by URL."""

    def __init__(self, results: Dict[str, FetchResult]) -> None:
        self.results = results
        self.requested: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.requested.append(url)
        return self.results[url]


def ok(url: str, body: str) -> FetchResult:
    return FetchResult(url=url, success=True, body=body, status_code=200)


def make_feed(feed_id: int, name: Optional[str] = None, is_active: bool = True) -> Feed:
    return Feed(
        id=feed_id,
        name=name or f"Feed {feed_id}",
        url=f"https://feed{feed_id}.example.com/rss",
        is_active=is_active,
    )
