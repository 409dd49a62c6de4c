"""Feed ingestion pipeline: fetch, normalize, deduplicate and serve RSS/Atom items."""

__version__ = "0.1.0"
