"""Feed management in database."""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from psycopg import Connection

from ..config import FeedConfig
from ..models import Feed
from .connection import store_errors


class FeedRepository:
    """Read and schedule feeds."""

    def find_all(self, conn: Connection) -> List[Feed]:
        """Get all feeds ordered by name."""
        with store_errors(conn, "load feeds"):
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM feeds ORDER BY name, id")
                return [Feed.model_validate(row) for row in cur.fetchall()]

    def find_active(
        self,
        conn: Connection,
        feed_ids: Optional[Iterable[int]] = None,
    ) -> List[Feed]:
        """Get active feeds, optionally limited to the given ids."""
        query = "SELECT * FROM feeds WHERE is_active = TRUE"
        params: tuple = ()
        if feed_ids is not None:
            query += " AND id = ANY(%s)"
            params = (list(feed_ids),)
        query += " ORDER BY id"

        with store_errors(conn, "load active feeds"):
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [Feed.model_validate(row) for row in cur.fetchall()]

    def find_by_id(self, conn: Connection, feed_id: int) -> Optional[Feed]:
        """Get a feed by ID."""
        with store_errors(conn, "load feed"):
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM feeds WHERE id = %s", (feed_id,))
                row = cur.fetchone()
        return Feed.model_validate(row) if row else None

    def find_by_ids(self, conn: Connection, feed_ids: Iterable[int]) -> List[Feed]:
        """Get feeds for a set of IDs in one query."""
        ids = sorted(set(feed_ids))
        if not ids:
            return []
        with store_errors(conn, "load feeds"):
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM feeds WHERE id = ANY(%s)", (ids,))
                return [Feed.model_validate(row) for row in cur.fetchall()]

    def mark_fetched(
        self,
        conn: Connection,
        feed_id: int,
        fetched_at: datetime,
        next_fetch_at: datetime,
    ) -> None:
        """Record a completed fetch and the next scheduled one."""
        with store_errors(conn, "update feed schedule"):
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE feeds
                    SET last_fetched_at = %s, next_fetch_at = %s
                    WHERE id = %s
                    """,
                    (fetched_at, next_fetch_at, feed_id),
                )
            conn.commit()

    def sync_feeds(self, conn: Connection, feeds: List[FeedConfig]) -> Dict[str, int]:
        """
        Upsert declared feeds by URL. Feeds missing from the list are left alone.

        Returns:
            Mapping of feed URL to database ID
        """
        feed_map = {}

        with store_errors(conn, "sync feeds"):
            with conn.cursor() as cur:
                for feed in feeds:
                    cur.execute(
                        """
                        INSERT INTO feeds (name, url, is_active)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (url) DO UPDATE SET
                            name = EXCLUDED.name,
                            is_active = EXCLUDED.is_active
                        RETURNING id
                        """,
                        (feed.name, feed.url, feed.is_active),
                    )
                    feed_map[feed.url] = cur.fetchone()["id"]
            conn.commit()

        return feed_map
