from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeFeedRepository, FakeItemStore, FakeSavedItems, make_feed
from feedpipe.config import ReaderConfig
from feedpipe.errors import FetchFailed
from feedpipe.reader import FeedItemReader, ItemQuery

BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return FakeItemStore()


@pytest.fixture
def feeds():
    return FakeFeedRepository([make_feed(1, "Python Insider"), make_feed(2, "Hacker News")])


@pytest.fixture
def saved():
    return FakeSavedItems()


@pytest.fixture
def reader(store, feeds, saved):
    return FeedItemReader(conn=None, items=store, feeds=feeds, saved=saved)


def fill(store, count, feed_id=1):
    for n in range(count):
        store.add(feed_id, f"https://example.com/{feed_id}/{n}", BASE + timedelta(hours=n))


def test_exactly_limit_items_has_no_more(reader, store):
    fill(store, 5)

    page = reader.get_items(limit=5)

    assert len(page.items) == 5
    assert page.has_more is False
    assert page.total == 5


def test_limit_plus_one_items_has_more(reader, store):
    fill(store, 6)

    page = reader.get_items(limit=5)

    assert len(page.items) == 5
    assert page.has_more is True
    assert page.total == 6


def test_items_are_newest_first(reader, store):
    fill(store, 3)

    page = reader.get_items()

    assert [i.url for i in page.items] == [
        "https://example.com/1/2",
        "https://example.com/1/1",
        "https://example.com/1/0",
    ]


def test_offset_pages_through_results(reader, store):
    fill(store, 5)

    page = reader.get_items(limit=2, offset=4)

    assert [i.url for i in page.items] == ["https://example.com/1/0"]
    assert page.has_more is False
    assert page.total == 5


def test_saved_flag(reader, store, saved):
    store.add(1, "https://a.example.com", BASE)
    store.add(1, "https://b.example.com", BASE + timedelta(hours=1))
    saved.urls = {"https://a.example.com"}

    page = reader.get_items()

    flags = {i.url: i.is_saved for i in page.items}
    assert flags == {"https://a.example.com": True, "https://b.example.com": False}


def test_feed_names_resolved_in_one_lookup(reader, store, feeds):
    fill(store, 2, feed_id=1)
    fill(store, 2, feed_id=2)

    page = reader.get_items()

    assert {i.feed_name for i in page.items} == {"Python Insider", "Hacker News"}
    assert feeds.find_by_ids_calls == [{1, 2}]


def test_missing_feed_gets_placeholder_name(reader, store):
    store.add(99, "https://orphan.example.com", BASE)

    (item,) = reader.get_items().items

    assert item.feed_name == "Unknown Feed"


def test_feed_filter_scopes_items_and_total(reader, store):
    fill(store, 3, feed_id=1)
    fill(store, 4, feed_id=2)

    page = reader.get_items(feed_id=2, limit=2)

    assert {i.feed_id for i in page.items} == {2}
    assert page.total == 4
    assert page.has_more is True


def test_empty_result_skips_enrichment(reader, feeds, saved):
    page = reader.get_items(feed_id=1)

    assert page.items == []
    assert page.total == 0
    assert page.has_more is False
    assert saved.calls == []
    assert feeds.find_by_ids_calls == []


def test_store_error_surfaces_as_fetch_failed(reader, store):
    store.fail_reads = True

    with pytest.raises(FetchFailed):
        reader.get_items()


def test_default_and_clamped_limits(store, feeds, saved):
    fill(store, 30)
    reader = FeedItemReader(
        conn=None,
        config=ReaderConfig(default_limit=20, max_limit=25),
        items=store,
        feeds=feeds,
        saved=saved,
    )

    assert len(reader.get_items().items) == 20
    assert len(reader.get_items(limit=500).items) == 25
    assert len(reader.get_items(limit=0).items) == 1


def test_query_object(reader, store):
    fill(store, 3)

    page = reader.query(ItemQuery(limit=1, offset=1))

    assert [i.url for i in page.items] == ["https://example.com/1/1"]
    assert page.has_more is True
