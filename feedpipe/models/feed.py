"""Feed model for configured RSS/Atom sources."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class Feed(DBModel):
    """Configured feed, polled by the batch orchestrator."""

    name: str = Field(..., description="Display name")
    url: str = Field(..., description="Feed URL (unique)")
    is_active: bool = Field(True, description="Whether the feed is polled")
    last_fetched_at: Optional[datetime] = Field(None, description="Last completed fetch")
    next_fetch_at: Optional[datetime] = Field(None, description="Next scheduled fetch")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
