"""
Document service orchestrator.

Coordinates upload (validate -> store blob -> create record -> enqueue job),
listing, status lookup, default selection and deletion of an owner's documents.

Dependencies: pdf_rag.boundary, pdf_rag.workers
System role: Document management orchestration
"""

import asyncio
import logging

from pdf_rag.boundary.aws.s3_client import S3BlobStore
from pdf_rag.boundary.db.document_repository import DocumentRepository
from pdf_rag.boundary.db.models.document_model import DocumentStatus
from pdf_rag.boundary.vdb.filters import and_, document_filter, owner_filter
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.configs.upload import UploadSettings
from pdf_rag.core.document_processing.models import IngestionJob
from pdf_rag.core.exceptions import (
    PdfRagException,
    UploadLimitExceededError,
    ValidationError,
)
from pdf_rag.models.document import DocumentRecord, UploadResult
from pdf_rag.observability.log_utils import log_exception_with_context
from pdf_rag.workers.job_queue import JobQueue

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"


class DocumentService:
    """Owner-scoped document management."""

    def __init__(
        self,
        repository: DocumentRepository,
        blob_store: S3BlobStore,
        vector_index: VectorIndex,
        job_queue: JobQueue,
        upload_settings: UploadSettings | None = None,
    ) -> None:
        self._repository = repository
        self._blob_store = blob_store
        self._vector_index = vector_index
        self._job_queue = job_queue
        self._upload_settings = upload_settings or UploadSettings()

    async def upload_document(self, owner_id: str, filename: str, data: bytes) -> UploadResult:
        """
        Store a PDF and queue it for ingestion.

        Args:
            owner_id: Verified owner identity
            filename: Original filename
            data: Raw PDF bytes

        Returns:
            UploadResult: PENDING record plus queue task ID

        Raises:
            ValidationError: Not a PDF, empty, or too large
            UploadLimitExceededError: Owner already has the maximum number of documents
            BlobStoreError: Blob upload failed
            MetadataStoreError: Record creation failed
            JobQueueError: Job could not be enqueued (record is marked FAILED)
        """
        if not owner_id:
            raise ValidationError("Owner ID is required", field="owner_id")
        self._validate_file(filename, data)

        limit = self._upload_settings.max_documents_per_owner
        if await self._repository.count_by_owner(owner_id) >= limit:
            logger.warning(
                f"{__name__}:upload_document - Upload limit reached",
                extra={"owner_id": owner_id, "limit": limit},
            )
            raise UploadLimitExceededError(owner_id, limit)

        blob_handle = await asyncio.to_thread(self._blob_store.upload, data, owner_id, filename)

        try:
            record = await self._repository.create(
                owner_id=owner_id,
                filename=filename,
                blob_handle=blob_handle,
                file_size=len(data),
            )
        except PdfRagException:
            await self._discard_blob(blob_handle, owner_id)
            raise

        job = IngestionJob.create(
            owner_id=owner_id,
            document_id=record.id,
            blob_handle=blob_handle,
            original_filename=filename,
        )
        try:
            job_id = await asyncio.to_thread(self._job_queue.enqueue, job)
        except PdfRagException as e:
            await self._mark_queue_failure(record.id, owner_id, e)
            raise

        logger.info(
            f"{__name__}:upload_document - Document queued for ingestion",
            extra={"document_id": record.id, "owner_id": owner_id, "job_id": job_id},
        )
        return UploadResult(document=record, job_id=job_id)

    async def list_documents(self, owner_id: str) -> list[DocumentRecord]:
        """List the owner's documents, newest first."""
        return await self._repository.list_by_owner(owner_id)

    async def get_document(self, owner_id: str, document_id: str) -> DocumentRecord:
        """
        Get one document with its processing status.

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
        """
        return await self._repository.get_owned(document_id, owner_id)

    async def set_document_active(
        self,
        owner_id: str,
        document_id: str,
        is_active: bool,
    ) -> DocumentRecord:
        """
        Toggle whether a document is part of the owner's default selection.

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
        """
        return await self._repository.set_active(document_id, owner_id, is_active)

    async def delete_document(self, owner_id: str, document_id: str) -> int:
        """
        Delete a document, its vectors and its blob.

        Vectors go first so a partially deleted document is never searchable.

        Args:
            owner_id: Verified owner identity
            document_id: Document to delete

        Returns:
            int: Number of vector records removed

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
        """
        record = await self._repository.get_owned(document_id, owner_id)

        removed = await asyncio.to_thread(
            self._vector_index.delete_where,
            and_(owner_filter(owner_id), document_filter([document_id])),
        )
        await asyncio.to_thread(self._blob_store.delete, record.blob_handle, owner_id)
        await self._repository.delete(document_id, owner_id)

        logger.info(
            f"{__name__}:delete_document - Document deleted",
            extra={"document_id": document_id, "owner_id": owner_id, "vectors_removed": removed},
        )
        return removed

    def _validate_file(self, filename: str, data: bytes) -> None:
        if not filename:
            raise ValidationError("Filename is required", field="filename")
        if not data:
            raise ValidationError("File is empty", field="file")
        max_size = self._upload_settings.max_file_size_bytes
        if len(data) > max_size:
            raise ValidationError(
                f"File exceeds maximum size of {max_size} bytes",
                field="file",
                details={"size_bytes": len(data)},
            )
        if not data.startswith(PDF_SIGNATURE):
            raise ValidationError("Only PDF files are accepted", field="file")

    async def _discard_blob(self, blob_handle: str, owner_id: str) -> None:
        try:
            await asyncio.to_thread(self._blob_store.delete, blob_handle, owner_id)
        except PdfRagException as e:
            log_exception_with_context(
                logger,
                f"{__name__}:upload_document - Could not remove orphaned blob",
                e,
                blob_handle=blob_handle,
            )

    async def _mark_queue_failure(
        self,
        document_id: str,
        owner_id: str,
        error: PdfRagException,
    ) -> None:
        try:
            await self._repository.update_status(
                document_id,
                owner_id,
                DocumentStatus.FAILED,
                error_message=f"Failed to queue document for processing: {error.message}",
            )
        except Exception as status_error:
            log_exception_with_context(
                logger,
                f"{__name__}:upload_document - Could not mark document as FAILED",
                status_error,
                document_id=document_id,
                original_error=error.message,
            )
