"""
Vector index interface.

The ingestion pipeline and the retriever only talk to this interface, so the
production S3 Vectors index and the local FAISS index are interchangeable.
Calls are synchronous; async callers offload them with asyncio.to_thread.

Dependencies: pdf_rag.boundary.vdb.vector_schemas, pdf_rag.boundary.vdb.filters
System role: Vector Index port
"""

from abc import ABC, abstractmethod
from typing import Sequence

from pdf_rag.boundary.vdb.filters import ScopedFilter
from pdf_rag.boundary.vdb.vector_schemas import VectorRecord, VectorSearchResult


class VectorIndex(ABC):
    """Storage and similarity search over vector records."""

    @abstractmethod
    def add_records(self, records: Sequence[VectorRecord]) -> list[str]:
        """
        Insert or overwrite records by key.

        Args:
            records: Records to write

        Returns:
            list[str]: Keys written

        Raises:
            VectorStoreError: Write failed
        """

    @abstractmethod
    def delete_where(self, scoped_filter: ScopedFilter) -> int:
        """
        Delete every record matching an owner and document scoped filter.

        Args:
            scoped_filter: Filter that must carry a document clause

        Returns:
            int: Number of records deleted

        Raises:
            ValueError: Filter has no document clause
            VectorStoreError: Delete failed
        """

    @abstractmethod
    def search(
        self,
        embedding: Sequence[float],
        k: int,
        scoped_filter: ScopedFilter,
    ) -> list[VectorSearchResult]:
        """
        Return up to k nearest records that satisfy the filter.

        Args:
            embedding: Query vector
            k: Maximum number of results
            scoped_filter: Owner (and optional document) scope

        Returns:
            list[VectorSearchResult]: Results ordered by decreasing similarity

        Raises:
            VectorStoreError: Query failed
        """

    @staticmethod
    def _require_document_clause(scoped_filter: ScopedFilter) -> None:
        if not scoped_filter.has_document_clause:
            raise ValueError("delete_where requires both an owner and a document clause")
