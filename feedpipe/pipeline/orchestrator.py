"""Batch orchestrator: fetch, parse and store every active feed."""

import asyncio
from datetime import datetime
from typing import Callable, Iterable, List, Optional

import pendulum
import structlog
from psycopg import Connection
from pydantic import BaseModel, Field

from ..config import IngestionConfig
from ..db.batch_logs import BatchLogRepository
from ..db.feeds import FeedRepository
from ..db.items import ItemStore
from ..errors import StoreError
from ..ingestion import FeedFetcher, FeedParser
from ..models import BatchStatus, Feed

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return pendulum.now("UTC")


class FeedOutcome(BaseModel):
    """Result of processing one feed in a batch."""

    feed_id: int = Field(..., description="Feed ID")
    feed_name: str = Field(..., description="Feed display name")
    status: BatchStatus = Field(..., description="Terminal status")
    items_fetched: int = Field(0, description="Items parsed")
    items_created: int = Field(0, description="New items stored")
    error: Optional[str] = Field(None, description="Failure cause")
    log_id: Optional[int] = Field(None, description="Batch log row, if one was written")
    started_at: datetime = Field(..., description="When the feed started")
    finished_at: datetime = Field(..., description="When the feed finished")

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


class BatchSummary(BaseModel):
    """Aggregate of one run_batch invocation."""

    started_at: datetime = Field(..., description="When the batch started")
    finished_at: Optional[datetime] = Field(None, description="When the batch finished")
    outcomes: List[FeedOutcome] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Set when feeds could not be loaded at all")

    @property
    def total_feeds(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.status is BatchStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status is BatchStatus.FAILED)

    @property
    def items_fetched(self) -> int:
        return sum(o.items_fetched for o in self.outcomes)

    @property
    def items_created(self) -> int:
        return sum(o.items_created for o in self.outcomes)

    @property
    def status(self) -> str:
        """'completed', 'partial_failure', or 'failed' when no feed could be loaded."""
        if self.error is not None:
            return "failed"
        if any(o.status is not BatchStatus.SUCCESS for o in self.outcomes):
            return "partial_failure"
        return "completed"


class BatchOrchestrator:
    """Drive fetch -> parse -> store for each active feed.

    Every per-feed failure is caught at the feed boundary and written to
    that feed's batch log row; nothing is raised out of ``run_batch``.
    """

    def __init__(
        self,
        conn: Connection,
        config: Optional[IngestionConfig] = None,
        fetcher: Optional[FeedFetcher] = None,
        parser: Optional[FeedParser] = None,
        feeds: Optional[FeedRepository] = None,
        items: Optional[ItemStore] = None,
        logs: Optional[BatchLogRepository] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize batch orchestrator."""
        self.conn = conn
        self.config = config or IngestionConfig()
        self.fetcher = fetcher or FeedFetcher(self.config)
        self.parser = parser or FeedParser()
        self.feeds = feeds or FeedRepository()
        self.items = items or ItemStore()
        self.logs = logs or BatchLogRepository()
        self.clock = clock

    def next_fetch_at(self, fetched_at: datetime) -> datetime:
        return pendulum.instance(fetched_at).add(minutes=self.config.fetch_interval_minutes)

    async def run_batch_async(self, feed_ids: Optional[Iterable[int]] = None) -> BatchSummary:
        """Process all active feeds (or the active subset of ``feed_ids``)."""
        if feed_ids is not None:
            feed_ids = list(feed_ids)
        summary = BatchSummary(started_at=self.clock())
        logger.info("batch_started", feed_ids=feed_ids)

        try:
            active_feeds = self.feeds.find_active(self.conn, feed_ids)
        except Exception as e:
            summary.error = str(e)
            summary.finished_at = self.clock()
            logger.error("batch_feeds_unavailable", error=summary.error)
            return summary

        semaphore = asyncio.Semaphore(self.config.max_concurrent)

        async def process_with_semaphore(feed: Feed) -> FeedOutcome:
            async with semaphore:
                return await self.process_feed(feed)

        tasks = [process_with_semaphore(feed) for feed in active_feeds]
        summary.outcomes = list(await asyncio.gather(*tasks))
        summary.finished_at = self.clock()

        logger.info(
            "batch_finished",
            status=summary.status,
            feeds=summary.total_feeds,
            succeeded=summary.succeeded,
            failed=summary.failed,
            items_created=summary.items_created,
        )
        return summary

    def run_batch(self, feed_ids: Optional[Iterable[int]] = None) -> BatchSummary:
        """Synchronous entry point for schedulers."""
        return asyncio.run(self.run_batch_async(feed_ids))

    async def process_feed(self, feed: Feed) -> FeedOutcome:
        """Run one feed through the pipeline and close its log row."""
        log = logger.bind(feed_id=feed.id, feed_name=feed.name)
        started_at = self.clock()

        try:
            log_id = self.logs.start(self.conn, feed.id, started_at)
        except Exception as e:
            log.error("batch_log_open_failed", error=str(e))
            return FeedOutcome(
                feed_id=feed.id,
                feed_name=feed.name,
                status=BatchStatus.FAILED,
                error=str(e),
                started_at=started_at,
                finished_at=self.clock(),
            )

        outcome = FeedOutcome(
            feed_id=feed.id,
            feed_name=feed.name,
            status=BatchStatus.FAILED,
            log_id=log_id,
            started_at=started_at,
            finished_at=started_at,
        )
        try:
            await self._ingest(feed, outcome)
        except Exception as e:
            outcome.status = BatchStatus.FAILED
            outcome.error = f"Unexpected error: {e}"
            log.exception("feed_processing_crashed")

        outcome.finished_at = self.clock()
        try:
            self.logs.finish(
                self.conn,
                log_id,
                outcome.status,
                outcome.finished_at,
                items_fetched=outcome.items_fetched,
                items_created=outcome.items_created,
                error_message=outcome.error,
            )
        except Exception as e:
            log.error("batch_log_close_failed", log_id=log_id, error=str(e))

        if outcome.status is BatchStatus.SUCCESS:
            log.info(
                "feed_processed",
                items_fetched=outcome.items_fetched,
                items_created=outcome.items_created,
            )
        else:
            log.warning("feed_failed", error=outcome.error)
        return outcome

    async def _ingest(self, feed: Feed, outcome: FeedOutcome) -> None:
        fetched = await self.fetcher.fetch(feed.url)
        if not fetched.success:
            outcome.error = str(fetched.error)
            return

        parsed = self.parser.parse(fetched.body or "")
        if not parsed.success:
            outcome.error = str(parsed.error)
            return
        outcome.items_fetched = len(parsed.items)

        try:
            stats = self.items.upsert(self.conn, feed.id, parsed.items)
        except StoreError as e:
            outcome.error = str(e)
            return
        outcome.items_created = stats.created
        outcome.status = BatchStatus.SUCCESS

        fetched_at = self.clock()
        try:
            self.feeds.mark_fetched(self.conn, feed.id, fetched_at, self.next_fetch_at(fetched_at))
        except Exception as e:
            logger.warning("feed_schedule_update_failed", feed_id=feed.id, error=str(e))
