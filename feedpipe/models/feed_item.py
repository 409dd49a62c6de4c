"""Persisted feed item model."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class FeedItem(DBModel):
    """Normalized entry ingested from a feed. Unique per (feed_id, guid)."""

    feed_id: int = Field(..., description="Foreign key to feeds table")
    guid: str = Field(..., description="Feed-provided identifier, or the URL when absent")
    url: str = Field(..., description="Item URL")
    title: str = Field(..., description="Item title")
    description: Optional[str] = Field(None, description="Summary or content")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    fetched_at: datetime = Field(..., description="When the item was ingested")
