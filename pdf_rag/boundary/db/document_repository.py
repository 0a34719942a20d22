"""
Document metadata store.

Owner-scoped persistence for document records: creation, status transitions
(pending -> processing -> completed | failed), listing, ownership
validation and deletion. Each call runs in its own session and commits or
rolls back before returning, so records handed out are detached snapshots.

Dependencies: sqlalchemy, pdf_rag.boundary.db.CRUD
System role: Metadata Store adapter for the pipeline, retriever and services
"""

import logging
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from pdf_rag.boundary.db.CRUD.document_crud import document_crud
from pdf_rag.boundary.db.models.document_model import DocumentStatus
from pdf_rag.core.exceptions import (
    DocumentNotFoundError,
    MetadataStoreError,
    ValidationError,
)
from pdf_rag.models.document import DocumentRecord

logger = logging.getLogger(__name__)

ERROR_MESSAGE_LIMIT = 2000


class DocumentRepository:
    """Owner-scoped CRUD and lifecycle transitions for documents."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        error_message_limit: int = ERROR_MESSAGE_LIMIT,
    ) -> None:
        """
        Initialize repository.

        Args:
            session_factory: Async session factory bound to the metadata database
            error_message_limit: Maximum stored length of failure messages
        """
        self._session_factory = session_factory
        self._error_message_limit = error_message_limit

    async def create(
        self,
        owner_id: str,
        filename: str,
        blob_handle: str,
        file_size: int = 0,
    ) -> DocumentRecord:
        """
        Create a document record in PENDING status.

        Args:
            owner_id: Verified owner identity
            filename: Original filename
            blob_handle: Blob store key of the uploaded PDF
            file_size: PDF size in bytes

        Returns:
            DocumentRecord: The new record

        Raises:
            MetadataStoreError: Database write failed
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.create(
                    session,
                    owner_id=owner_id,
                    filename=filename,
                    blob_handle=blob_handle,
                    file_size=file_size,
                    status=DocumentStatus.PENDING,
                )
                record = DocumentRecord.model_validate(document)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"{__name__}:create - {type(e).__name__}: {e}")
                raise MetadataStoreError(
                    "Failed to create document record",
                    {"owner_id": owner_id, "error": str(e)},
                ) from e

        logger.info(
            f"{__name__}:create - Document created",
            extra={"document_id": record.id, "owner_id": owner_id},
        )
        return record

    async def update_status(
        self,
        document_id: str,
        owner_id: str,
        status: DocumentStatus,
        error_message: str | None = None,
        page_count: int | None = None,
        chunk_count: int | None = None,
    ) -> DocumentRecord:
        """
        Move a document to a new status.

        COMPLETED clears any previous error and records page/chunk counts in
        the same write. FAILED stores the (truncated) error message.

        Args:
            document_id: Document ID
            owner_id: Owner the document must belong to
            status: Target status
            error_message: Failure description (FAILED only)
            page_count: Page count (COMPLETED only)
            chunk_count: Chunk count (COMPLETED only)

        Returns:
            DocumentRecord: The updated record

        Raises:
            DocumentNotFoundError: Document missing or owned by someone else
            ValidationError: Transition not allowed from the current status
            MetadataStoreError: Database write failed
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.get_owned(session, document_id, owner_id)
                if document is None:
                    raise DocumentNotFoundError(document_id, {"owner_id": owner_id})

                if not document.status.can_transition_to(status):
                    raise ValidationError(
                        f"Illegal status transition {document.status.value} -> {status.value}",
                        field="status",
                        details={"document_id": document_id},
                    )

                fields: dict = {"status": status}
                if status == DocumentStatus.COMPLETED:
                    fields.update(
                        error_message=None,
                        page_count=page_count,
                        chunk_count=chunk_count,
                    )
                elif status == DocumentStatus.FAILED:
                    fields["error_message"] = self._truncate(error_message or "Unknown error")

                document = await document_crud.update_instance(session, document, **fields)
                record = DocumentRecord.model_validate(document)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"{__name__}:update_status - {type(e).__name__}: {e}")
                raise MetadataStoreError(
                    "Failed to update document status",
                    {"document_id": document_id, "status": status.value, "error": str(e)},
                ) from e
            except (DocumentNotFoundError, ValidationError):
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:update_status - Document marked as {status.value.upper()}",
            extra={"document_id": document_id, "status": status.value},
        )
        return record

    async def get_by_id(self, document_id: str) -> DocumentRecord | None:
        """
        Fetch a document regardless of owner.

        Used by the worker, which trusts the owner recorded at upload time.

        Args:
            document_id: Document ID

        Returns:
            DocumentRecord or None
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.get_by_id(session, document_id)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to read document", {"document_id": document_id, "error": str(e)}
                ) from e
            return DocumentRecord.model_validate(document) if document else None

    async def get_owned(self, document_id: str, owner_id: str) -> DocumentRecord:
        """
        Fetch a document that must belong to owner_id.

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.get_owned(session, document_id, owner_id)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to read document", {"document_id": document_id, "error": str(e)}
                ) from e
            if document is None:
                raise DocumentNotFoundError(document_id, {"owner_id": owner_id})
            return DocumentRecord.model_validate(document)

    async def list_by_owner(self, owner_id: str) -> list[DocumentRecord]:
        """
        List an owner's documents, newest first.

        Args:
            owner_id: Owner whose documents to list

        Returns:
            list[DocumentRecord]: Records ordered by created_at descending
        """
        async with self._session_factory() as session:
            try:
                documents = await document_crud.get_by_owner_id(session, owner_id)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to list documents", {"owner_id": owner_id, "error": str(e)}
                ) from e
            return [DocumentRecord.model_validate(doc) for doc in documents]

    async def count_by_owner(self, owner_id: str) -> int:
        """Number of documents the owner currently has."""
        async with self._session_factory() as session:
            try:
                return await document_crud.count_by_owner_id(session, owner_id)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to count documents", {"owner_id": owner_id, "error": str(e)}
                ) from e

    async def count_by_status(
        self,
        owner_id: str,
        document_ids: Sequence[str] | None = None,
    ) -> dict[DocumentStatus, int]:
        """
        Count an owner's documents per status.

        Args:
            owner_id: Owner to count for
            document_ids: Optional subset of document IDs

        Returns:
            dict[DocumentStatus, int]: Counts keyed by status
        """
        async with self._session_factory() as session:
            try:
                return await document_crud.count_by_status(session, owner_id, document_ids)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to count documents", {"owner_id": owner_id, "error": str(e)}
                ) from e

    async def validate_ownership(
        self,
        owner_id: str,
        document_ids: Sequence[str],
    ) -> list[str]:
        """
        Keep only the document IDs that belong to owner_id.

        Input order is preserved and duplicates are collapsed. Rejected IDs
        are logged as unauthorized access attempts.

        Args:
            owner_id: Requesting owner
            document_ids: Candidate document IDs

        Returns:
            list[str]: Owned IDs in input order
        """
        candidates = list(dict.fromkeys(document_ids))
        if not candidates:
            return []

        async with self._session_factory() as session:
            try:
                owned = await document_crud.get_owned_ids(session, owner_id, candidates)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to validate document ownership",
                    {"owner_id": owner_id, "error": str(e)},
                ) from e

        rejected = [doc_id for doc_id in candidates if doc_id not in owned]
        if rejected:
            logger.warning(
                f"{__name__}:validate_ownership - Unauthorized document IDs rejected",
                extra={"owner_id": owner_id, "rejected_ids": rejected},
            )
        return [doc_id for doc_id in candidates if doc_id in owned]

    async def set_active(
        self,
        document_id: str,
        owner_id: str,
        is_active: bool,
    ) -> DocumentRecord:
        """
        Include or exclude a document from the owner's default selection.

        Args:
            document_id: Document ID
            owner_id: Owner the document must belong to
            is_active: New selection flag

        Returns:
            DocumentRecord: The updated record

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
            MetadataStoreError: Database write failed
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.get_owned(session, document_id, owner_id)
                if document is None:
                    raise DocumentNotFoundError(document_id, {"owner_id": owner_id})
                document = await document_crud.update_instance(
                    session, document, is_active=is_active
                )
                record = DocumentRecord.model_validate(document)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"{__name__}:set_active - {type(e).__name__}: {e}")
                raise MetadataStoreError(
                    "Failed to update document selection",
                    {"document_id": document_id, "error": str(e)},
                ) from e

        logger.info(
            f"{__name__}:set_active - Document selection updated",
            extra={"document_id": document_id, "is_active": is_active},
        )
        return record

    async def delete(self, document_id: str, owner_id: str) -> None:
        """
        Delete an owned document record.

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
            MetadataStoreError: Database write failed
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.get_owned(session, document_id, owner_id)
                if document is None:
                    raise DocumentNotFoundError(document_id, {"owner_id": owner_id})
                await document_crud.delete_by_id(session, document_id)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"{__name__}:delete - {type(e).__name__}: {e}")
                raise MetadataStoreError(
                    "Failed to delete document", {"document_id": document_id, "error": str(e)}
                ) from e

        logger.info(
            f"{__name__}:delete - Document deleted",
            extra={"document_id": document_id, "owner_id": owner_id},
        )

    def _truncate(self, message: str) -> str:
        if len(message) > self._error_message_limit:
            return message[: self._error_message_limit]
        return message
