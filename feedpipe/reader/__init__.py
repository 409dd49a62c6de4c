"""Paginated read access to ingested feed items."""

from .models import EnrichedItem, ItemPage, ItemQuery
from .service import FeedItemReader

__all__ = ["EnrichedItem", "FeedItemReader", "ItemPage", "ItemQuery"]
