"""Data models for the feed pipeline."""

from .batch_log import BatchRunLog, BatchStatus
from .feed import Feed
from .feed_item import FeedItem

__all__ = ["BatchRunLog", "BatchStatus", "Feed", "FeedItem"]
