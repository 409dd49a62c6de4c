"""Batch run log models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import DBModel


class BatchStatus(str, Enum):
    """Per-feed run status.

    ``PARTIAL`` is never produced by the current pipeline; it is kept so
    stored rows and readers accept it.
    """

    PENDING = "pending"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not BatchStatus.PENDING


class BatchRunLog(DBModel):
    """Audit record of one ingestion attempt for one feed."""

    feed_id: int = Field(..., description="Foreign key to feeds table")
    status: BatchStatus = Field(BatchStatus.PENDING, description="Run status")
    items_fetched: int = Field(0, description="Items parsed from the payload", ge=0)
    items_created: int = Field(0, description="New items stored", ge=0)
    error_message: Optional[str] = Field(None, description="Failure cause")
    started_at: datetime = Field(..., description="When the feed run started")
    finished_at: Optional[datetime] = Field(None, description="When the feed run finished")
