"""
Scoped retrieval engine.

Turns (owner, question, optional document IDs) into a similarity search that
can only ever see the owner's records:

1. Candidate document IDs are validated against the metadata store; IDs the
   owner does not own are dropped and logged.
2. The filter always carries the owner clause, plus a document clause when
   validated IDs remain.
3. Top-k search. If a document-scoped search returns nothing, it is retried
   once with the document clause removed (owner clause kept), which covers
   legacy records stored without a source document ID.
4. Still nothing: a NoRelevantContent value explains why.

Dependencies: pdf_rag.boundary.vdb, pdf_rag.boundary.db, pdf_rag.core.document_processing
System role: RAG retrieval business logic
"""

import asyncio
import logging
from typing import Sequence

from pdf_rag.boundary.db.document_repository import DocumentRepository
from pdf_rag.boundary.db.models.document_model import DocumentStatus
from pdf_rag.boundary.vdb.filters import ScopedFilter, and_, document_filter, owner_filter
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.boundary.vdb.vector_schemas import VectorSearchResult
from pdf_rag.core.document_processing.tasks.embedding_task import EmbeddingTask
from pdf_rag.core.exceptions import NoDocumentsToSearchError, ValidationError
from pdf_rag.models.retrieval import (
    NoRelevantContent,
    NoRelevantContentReason,
    RetrievalResult,
    RetrievedChunk,
)
from pdf_rag.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


class ScopedRetriever:
    """Owner-isolated similarity search with a single document-filter fallback."""

    def __init__(
        self,
        repository: DocumentRepository,
        vector_index: VectorIndex,
        embedding_task: EmbeddingTask,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        """
        Initialize retriever.

        Args:
            repository: Metadata store used for ownership validation
            vector_index: Index to search
            embedding_task: Query embedding (same provider as ingestion)
            top_k: Results per search
        """
        if top_k <= 0:
            raise ValueError("top_k must be positive")
        self._repository = repository
        self._vector_index = vector_index
        self._embedding_task = embedding_task
        self._top_k = top_k

    async def retrieve(
        self,
        owner_id: str,
        query: str,
        document_ids: Sequence[str] | None = None,
    ) -> RetrievalResult | NoRelevantContent:
        """
        Retrieve chunks relevant to a question.

        Args:
            owner_id: Verified identity of the caller
            query: Natural-language question
            document_ids: Optional documents to restrict the search to;
                None or empty searches all of the owner's documents

        Returns:
            RetrievalResult with chunks, or NoRelevantContent

        Raises:
            ValidationError: Empty query
            NoDocumentsToSearchError: Document IDs given but none are owned
            EmbeddingError: Query embedding failed
            VectorStoreError: Search failed
        """
        if not query or not query.strip():
            raise ValidationError("Query must not be empty", field="query")

        scoped = owner_filter(owner_id)
        allowed: list[str] = []
        if document_ids:
            allowed = await self._validate_candidates(owner_id, document_ids)
            scoped = and_(scoped, document_filter(allowed))

        embedding = await asyncio.to_thread(self._embedding_task.embed_query, query)

        hits = await self._search(embedding, scoped)
        used_fallback = False
        if not hits and scoped.has_document_clause:
            logger.info(
                f"{__name__}:retrieve - No results with document filter, retrying owner-wide",
                extra={"owner_id": owner_id, "document_count": len(allowed)},
            )
            used_fallback = True
            hits = await self._search(embedding, scoped.without_documents())

        if hits:
            logger.info(
                f"{__name__}:retrieve - Retrieved {len(hits)} chunks",
                extra={
                    "owner_id": owner_id,
                    "used_fallback": used_fallback,
                    "query_preview": safe_log_value(query, max_length=50),
                },
            )
            return RetrievalResult(
                chunks=[self._to_chunk(hit) for hit in hits],
                used_fallback=used_fallback,
                searched_document_ids=allowed,
            )

        return await self._explain_empty(owner_id, used_fallback)

    async def _validate_candidates(
        self,
        owner_id: str,
        document_ids: Sequence[str],
    ) -> list[str]:
        requested = list(dict.fromkeys(document_ids))
        allowed = await self._repository.validate_ownership(owner_id, requested)

        dropped = len(requested) - len(allowed)
        if dropped:
            logger.warning(
                f"{__name__}:retrieve - Dropped {dropped} document IDs not owned by caller "
                f"(possible probing)",
                extra={"owner_id": owner_id, "requested": len(requested), "allowed": len(allowed)},
            )
        if not allowed:
            raise NoDocumentsToSearchError(requested, {"owner_id": owner_id})
        return allowed

    async def _search(
        self,
        embedding: list[float],
        scoped: ScopedFilter,
    ) -> list[VectorSearchResult]:
        return await asyncio.to_thread(self._vector_index.search, embedding, self._top_k, scoped)

    async def _explain_empty(self, owner_id: str, used_fallback: bool) -> NoRelevantContent:
        # An empty result always ends with an owner-wide search, so classify owner-wide
        counts = await self._repository.count_by_status(owner_id)
        if sum(counts.values()) == 0:
            reason = NoRelevantContentReason.NO_DOCUMENTS
        elif counts.get(DocumentStatus.COMPLETED, 0) == 0:
            reason = NoRelevantContentReason.DOCUMENTS_NOT_PROCESSED
        else:
            reason = NoRelevantContentReason.NO_MATCH

        logger.info(
            f"{__name__}:retrieve - No relevant content ({reason.value})",
            extra={"owner_id": owner_id, "used_fallback": used_fallback},
        )
        return NoRelevantContent.for_reason(reason, used_fallback=used_fallback)

    @staticmethod
    def _to_chunk(hit: VectorSearchResult) -> RetrievedChunk:
        payload = hit.payload
        return RetrievedChunk(
            key=hit.key,
            text=payload.text,
            owner_id=payload.owner_id,
            source_document_id=payload.source_document_id,
            sequence_index=payload.sequence_index,
            total_chunks=payload.total_chunks,
            score=hit.score,
        )
