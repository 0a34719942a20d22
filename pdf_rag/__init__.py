"""Tenant-scoped PDF ingestion and retrieval for retrieval-augmented chat."""

__version__ = "0.1.0"
