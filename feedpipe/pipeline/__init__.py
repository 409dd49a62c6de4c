"""Batch ingestion pipeline."""

from .orchestrator import BatchOrchestrator, BatchSummary, FeedOutcome

__all__ = ["BatchOrchestrator", "BatchSummary", "FeedOutcome"]
