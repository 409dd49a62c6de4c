"""Feed item storage and deduplication."""

from typing import List, Optional

import pendulum
import structlog
from psycopg import Connection
from pydantic import BaseModel

from ..ingestion.models import ParsedItem
from ..models import FeedItem
from .connection import store_errors

logger = structlog.get_logger(__name__)


class UpsertStats(BaseModel):
    """Counts from one upsert call."""

    created: int = 0
    skipped: int = 0


class ItemStore:
    """Append-only store for feed items, unique per (feed_id, guid).

    The table's unique constraint is the source of truth: an insert that
    loses a race to a concurrent writer is counted as skipped.
    """

    def find_by_feed_id_and_guid(
        self,
        conn: Connection,
        feed_id: int,
        guid: str,
    ) -> Optional[FeedItem]:
        """Get an item by its identity key."""
        with store_errors(conn, "load feed item"):
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT * FROM feed_items WHERE feed_id = %s AND guid = %s",
                    (feed_id, guid),
                )
                row = cur.fetchone()
        return FeedItem.model_validate(row) if row else None

    def upsert(
        self,
        conn: Connection,
        feed_id: int,
        items: List[ParsedItem],
    ) -> UpsertStats:
        """Insert unseen items; items already stored are skipped."""
        stats = UpsertStats()
        fetched_at = pendulum.now("UTC")

        with store_errors(conn, "store feed items"):
            with conn.cursor() as cur:
                for item in items:
                    cur.execute(
                        "SELECT id FROM feed_items WHERE feed_id = %s AND guid = %s",
                        (feed_id, item.guid),
                    )
                    if cur.fetchone():
                        stats.skipped += 1
                        continue

                    cur.execute(
                        """
                        INSERT INTO feed_items (
                            feed_id, guid, url, title, description,
                            published_at, fetched_at
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (feed_id, guid) DO NOTHING
                        RETURNING id
                        """,
                        (
                            feed_id,
                            item.guid,
                            item.url,
                            item.title,
                            item.description,
                            item.published_at,
                            fetched_at,
                        ),
                    )
                    if cur.fetchone():
                        stats.created += 1
                    else:
                        # Lost a race with a concurrent insert of the same key.
                        stats.skipped += 1
            conn.commit()

        logger.debug(
            "feed_items_upserted",
            feed_id=feed_id,
            created=stats.created,
            skipped=stats.skipped,
        )
        return stats

    def find_with_pagination(
        self,
        conn: Connection,
        limit: int,
        offset: int = 0,
        feed_id: Optional[int] = None,
    ) -> List[FeedItem]:
        """Get items newest first."""
        query = "SELECT * FROM feed_items"
        params: list = []
        if feed_id is not None:
            query += " WHERE feed_id = %s"
            params.append(feed_id)
        query += " ORDER BY published_at DESC NULLS LAST, id DESC LIMIT %s OFFSET %s"
        params.extend([limit, offset])

        with store_errors(conn, "load feed items"):
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [FeedItem.model_validate(row) for row in cur.fetchall()]

    def count(self, conn: Connection, feed_id: Optional[int] = None) -> int:
        """Count items, optionally for one feed."""
        query = "SELECT COUNT(*) AS total FROM feed_items"
        params: list = []
        if feed_id is not None:
            query += " WHERE feed_id = %s"
            params.append(feed_id)

        with store_errors(conn, "count feed items"):
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchone()["total"]
