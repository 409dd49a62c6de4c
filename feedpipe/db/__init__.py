"""Database management for the feed pipeline."""

from .batch_logs import BatchLogRepository
from .connection import close_connection_pool, get_connection, get_connection_pool
from .feeds import FeedRepository
from .init import init_database, validate_connection
from .items import ItemStore, UpsertStats
from .saved_items import SavedItemsIndex

__all__ = [
    "BatchLogRepository",
    "FeedRepository",
    "ItemStore",
    "SavedItemsIndex",
    "UpsertStats",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
