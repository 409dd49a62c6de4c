"""Read path models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import FeedItem


class ItemQuery(BaseModel):
    """Parameters for one page of feed items."""

    feed_id: Optional[int] = Field(None, description="Restrict to one feed")
    limit: Optional[int] = Field(None, description="Page size; configured default when omitted")
    offset: int = Field(0, description="Rows to skip")


class EnrichedItem(FeedItem):
    """Feed item joined with saved state and its feed's display name."""

    is_saved: bool = Field(False, description="URL is in the saved items index")
    feed_name: str = Field(..., description="Source feed display name")


class ItemPage(BaseModel):
    """One page of enriched items."""

    items: List[EnrichedItem] = Field(default_factory=list)
    total: int = Field(0, description="Items matching the filter, across all pages")
    has_more: bool = Field(False, description="Whether a further page exists")
