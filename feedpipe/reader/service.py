"""Paginated, enriched read access to stored feed items."""

from typing import Optional

import structlog
from psycopg import Connection

from ..config import ReaderConfig
from ..db.feeds import FeedRepository
from ..db.items import ItemStore
from ..db.saved_items import SavedItemsIndex
from ..errors import FetchFailed, StoreError
from .models import EnrichedItem, ItemPage, ItemQuery

logger = structlog.get_logger(__name__)


class FeedItemReader:
    """Serve feed items newest first with saved flags and feed names.

    Stateless apart from the connection it is given; store failures are
    raised as ``FetchFailed`` with no fallback.
    """

    def __init__(
        self,
        conn: Connection,
        config: Optional[ReaderConfig] = None,
        items: Optional[ItemStore] = None,
        feeds: Optional[FeedRepository] = None,
        saved: Optional[SavedItemsIndex] = None,
    ) -> None:
        """Initialize feed item reader."""
        self.conn = conn
        self.config = config or ReaderConfig()
        self.items = items or ItemStore()
        self.feeds = feeds or FeedRepository()
        self.saved = saved or SavedItemsIndex()

    def _page_size(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.config.default_limit
        return max(1, min(limit, self.config.max_limit))

    def get_items(
        self,
        feed_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> ItemPage:
        """Get one page of items, optionally for a single feed."""
        limit = self._page_size(limit)
        offset = max(0, offset)

        try:
            # One extra row tells us whether another page exists.
            rows = self.items.find_with_pagination(
                self.conn, limit + 1, offset, feed_id=feed_id
            )
            has_more = len(rows) > limit
            rows = rows[:limit]

            if not rows:
                return ItemPage(items=[], total=0, has_more=False)

            saved_urls = self.saved.find_saved_urls(self.conn, (row.url for row in rows))
            feeds = self.feeds.find_by_ids(self.conn, {row.feed_id for row in rows})
            feed_names = {feed.id: feed.name for feed in feeds}

            items = [
                EnrichedItem(
                    **row.model_dump(),
                    is_saved=row.url in saved_urls,
                    feed_name=feed_names.get(row.feed_id, self.config.unknown_feed_name),
                )
                for row in rows
            ]
            total = self.items.count(self.conn, feed_id)
        except StoreError as e:
            logger.error("feed_items_read_failed", feed_id=feed_id, error=str(e))
            raise FetchFailed(f"Failed to get feed items: {e}") from e

        return ItemPage(items=items, total=total, has_more=has_more)

    def query(self, query: ItemQuery) -> ItemPage:
        """Get a page described by an ItemQuery."""
        return self.get_items(feed_id=query.feed_id, limit=query.limit, offset=query.offset)
