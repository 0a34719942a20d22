"""
Document ingestion pipeline orchestrator.

Runs one ingestion job: download -> parse -> chunk -> embed -> write vectors,
and drives the document through its status lifecycle
(pending -> processing -> completed | failed).

Blocking stages run in a worker thread via asyncio.to_thread; stages of a
single job never run in parallel.

Dependencies: All task modules, pdf_rag.boundary.db, configs
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time

from langchain_core.embeddings import Embeddings

from pdf_rag.boundary.db.document_repository import DocumentRepository
from pdf_rag.boundary.db.models.document_model import DocumentStatus
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.core.exceptions import (
    DocumentNotFoundError,
    EmptyDocumentError,
    OwnershipError,
    PdfRagException,
)
from pdf_rag.observability.log_utils import log_exception_with_context

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .models import IngestionJob, PipelineResult
from .tasks import (
    BlobDownloadTask,
    ChunkingTask,
    EmbeddingTask,
    PdfParsingTask,
    VectorStoreTask,
)
from .tasks.blob_download_task import BlobReader

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Orchestrate document ingestion for queued jobs."""

    def __init__(
        self,
        repository: DocumentRepository,
        blob_store: BlobReader,
        vector_index: VectorIndex,
        embeddings: Embeddings,
        settings: DocumentPipelineSettings | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            repository: Document metadata store
            blob_store: Source of uploaded PDF bytes
            vector_index: Destination for vector records
            embeddings: Embedding provider
            settings: Pipeline settings (uses environment defaults if None)
        """
        self._settings = settings or get_pipeline_settings()
        self._repository = repository

        self._download_task = BlobDownloadTask(blob_store)
        self._parsing_task = PdfParsingTask()
        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            overlap_probe_length=self._settings.overlap_probe_length,
        )
        self._embedding_task = EmbeddingTask(
            embeddings,
            batch_size=self._settings.embedding_batch_size,
            max_attempts=self._settings.embedding_max_attempts,
            backoff_initial=self._settings.embedding_backoff_initial,
            backoff_max=self._settings.embedding_backoff_max,
        )
        self._vector_store_task = VectorStoreTask(vector_index)

    async def run(self, job: IngestionJob, final_attempt: bool = True) -> PipelineResult:
        """
        Process one ingestion job.

        A document that is already COMPLETED or FAILED is acknowledged without
        doing any work. On error the document is marked FAILED and the error
        re-raised, except for retryable errors when the queue still has
        attempts left: the document then stays PROCESSING so the retry can
        pick it up.

        Args:
            job: Validated ingestion job
            final_attempt: Whether the queue will redeliver on failure

        Returns:
            PipelineResult: Outcome with page and chunk counts

        Raises:
            DocumentNotFoundError: No metadata record for the job
            OwnershipError: Job owner does not match the record
            PdfRagException: Any stage failure, after status bookkeeping
        """
        start_time = time.perf_counter()

        record = await self._repository.get_by_id(job.document_id)
        if record is None:
            raise DocumentNotFoundError(job.document_id)
        if record.owner_id != job.owner_id:
            logger.warning(
                f"{__name__}:run - Job owner does not match document owner",
                extra={"document_id": job.document_id, "owner_id": job.owner_id},
            )
            raise OwnershipError(job.owner_id, job.document_id)

        if record.status.is_terminal:
            logger.info(
                f"{__name__}:run - Document already {record.status.value}, skipping",
                extra={"document_id": job.document_id},
            )
            return PipelineResult(
                document_id=job.document_id,
                status=record.status,
                skipped=True,
                page_count=record.page_count,
                chunk_count=record.chunk_count or 0,
            )

        redelivered = record.status == DocumentStatus.PROCESSING
        await self._repository.update_status(
            job.document_id, job.owner_id, DocumentStatus.PROCESSING
        )
        logger.info(
            f"{__name__}:run - Processing started",
            extra={
                "document_id": job.document_id,
                "original_filename": job.original_filename,
                "redelivered": redelivered,
            },
        )

        try:
            data = await asyncio.to_thread(self._download_task.download, job.blob_handle)
            extracted = await asyncio.to_thread(self._parsing_task.parse, data)

            chunks = self._chunking_task.chunk(extracted.text)
            if not chunks:
                raise EmptyDocumentError(
                    "PDF document produced no chunks", document_id=job.document_id
                )
            chunks = [chunk.bind(job.owner_id, job.document_id) for chunk in chunks]

            vectors = await asyncio.to_thread(self._embedding_task.embed_chunks, chunks)
            await asyncio.to_thread(
                self._vector_store_task.upload,
                chunks,
                vectors,
                redelivered,
            )

            await self._repository.update_status(
                job.document_id,
                job.owner_id,
                DocumentStatus.COMPLETED,
                page_count=extracted.page_count,
                chunk_count=len(chunks),
            )
        except Exception as e:
            await self._record_failure(job, e, final_attempt)
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:run - Processing completed",
            extra={
                "document_id": job.document_id,
                "page_count": extracted.page_count,
                "chunk_count": len(chunks),
                "processing_time_ms": round(elapsed_ms, 1),
            },
        )
        return PipelineResult(
            document_id=job.document_id,
            status=DocumentStatus.COMPLETED,
            page_count=extracted.page_count,
            chunk_count=len(chunks),
            processing_time_ms=elapsed_ms,
        )

    async def _record_failure(
        self,
        job: IngestionJob,
        error: Exception,
        final_attempt: bool,
    ) -> None:
        """Mark the document FAILED unless a retry is still coming."""
        if getattr(error, "retryable", False) and not final_attempt:
            logger.warning(
                f"{__name__}:run - Processing delayed, job will be retried",
                extra={
                    "document_id": job.document_id,
                    "error_type": type(error).__name__,
                },
            )
            return

        message = error.message if isinstance(error, PdfRagException) else str(error)
        try:
            await self._repository.update_status(
                job.document_id,
                job.owner_id,
                DocumentStatus.FAILED,
                error_message=message or type(error).__name__,
            )
        except Exception as status_error:
            log_exception_with_context(
                logger,
                f"{__name__}:run - Could not mark document as FAILED",
                status_error,
                document_id=job.document_id,
                original_error=message,
            )
