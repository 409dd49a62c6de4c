"""Batch run log management in database."""

from datetime import datetime
from typing import List, Optional

from psycopg import Connection

from ..errors import StoreError
from ..models import BatchRunLog, BatchStatus
from .connection import store_errors


class BatchLogRepository:
    """Append-only per-feed run log.

    A row is inserted as pending and finished exactly once; finished rows
    are never modified.
    """

    def start(self, conn: Connection, feed_id: int, started_at: datetime) -> int:
        """
        Open a pending log row.

        Returns:
            Log ID
        """
        with store_errors(conn, "open batch log"):
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO feed_batch_logs (feed_id, status, started_at)
                    VALUES (%s, %s, %s)
                    RETURNING id
                    """,
                    (feed_id, BatchStatus.PENDING.value, started_at),
                )
                log_id = cur.fetchone()["id"]
            conn.commit()
        return log_id

    def finish(
        self,
        conn: Connection,
        log_id: int,
        status: BatchStatus,
        finished_at: datetime,
        items_fetched: int = 0,
        items_created: int = 0,
        error_message: Optional[str] = None,
    ) -> None:
        """Close a pending log row with its terminal status."""
        if not status.is_terminal:
            raise ValueError(f"Cannot finish a batch log with status {status.value}")

        with store_errors(conn, "close batch log"):
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE feed_batch_logs
                    SET status = %s,
                        items_fetched = %s,
                        items_created = %s,
                        error_message = %s,
                        finished_at = %s
                    WHERE id = %s AND finished_at IS NULL
                    """,
                    (
                        status.value,
                        items_fetched,
                        items_created,
                        error_message,
                        finished_at,
                        log_id,
                    ),
                )
                updated = cur.rowcount
            conn.commit()

        if updated != 1:
            raise StoreError(f"Batch log {log_id} is missing or already finished")

    def find_by_feed_id(self, conn: Connection, feed_id: int, limit: int = 50) -> List[BatchRunLog]:
        """Get log rows for a feed, newest first."""
        with store_errors(conn, "load batch logs"):
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT * FROM feed_batch_logs
                    WHERE feed_id = %s
                    ORDER BY created_at DESC, id DESC
                    LIMIT %s
                    """,
                    (feed_id, limit),
                )
                return [BatchRunLog.model_validate(row) for row in cur.fetchall()]

    def find_latest_by_feed_id(self, conn: Connection, feed_id: int) -> Optional[BatchRunLog]:
        """Get the most recent log row for a feed."""
        logs = self.find_by_feed_id(conn, feed_id, limit=1)
        return logs[0] if logs else None

    def recent(self, conn: Connection, limit: int = 20) -> List[BatchRunLog]:
        """Get the most recent log rows across all feeds."""
        with store_errors(conn, "load batch logs"):
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT * FROM feed_batch_logs ORDER BY created_at DESC, id DESC LIMIT %s",
                    (limit,),
                )
                return [BatchRunLog.model_validate(row) for row in cur.fetchall()]
