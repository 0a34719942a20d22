"""
Test suite for DocumentService.

Tests upload validation, limits, queue failure handling, listing and
deletion. Uses the SQLite repository, in-memory blob store, FAISS index and
a mocked job queue.

System role: Verification of document service orchestration layer
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pdf_rag.application.services.document_service import DocumentService
from pdf_rag.boundary.db.models.document_model import DocumentStatus
from pdf_rag.configs.upload import UploadSettings
from pdf_rag.core.exceptions import (
    DocumentNotFoundError,
    JobQueueError,
    MetadataStoreError,
    UploadLimitExceededError,
    ValidationError,
)


@pytest.fixture
def job_queue() -> MagicMock:
    queue = MagicMock()
    queue.enqueue.return_value = "task-123"
    return queue


@pytest.fixture
def upload_settings() -> UploadSettings:
    return UploadSettings(max_documents_per_owner=2, max_file_size_bytes=10_000)


@pytest.fixture
def document_service(repository, blob_store, faiss_index, job_queue, upload_settings):
    return DocumentService(
        repository=repository,
        blob_store=blob_store,
        vector_index=faiss_index,
        job_queue=job_queue,
        upload_settings=upload_settings,
    )


class TestUploadDocument:
    """Test document upload."""

    @pytest.mark.asyncio
    async def test_upload_creates_pending_record_and_job(
        self, document_service, job_queue, blob_store, pdf_factory
    ) -> None:
        """Should store the blob, create a PENDING record and enqueue a job."""
        data = pdf_factory(["hello"])

        result = await document_service.upload_document("owner-1", "hello.pdf", data)

        assert result.job_id == "task-123"
        assert result.document.status == DocumentStatus.PENDING
        assert result.document.file_size == len(data)
        assert blob_store.objects[result.document.blob_handle] == data

        job = job_queue.enqueue.call_args.args[0]
        assert job.kind == "ingest_document"
        assert job.owner_id == "owner-1"
        assert job.document_id == result.document.id
        assert job.blob_handle == result.document.blob_handle
        assert job.original_filename == "hello.pdf"

    @pytest.mark.parametrize(
        "filename,data",
        [
            ("a.pdf", b""),
            ("a.txt", b"plain text, not a pdf"),
            ("", b"%PDF-1.4"),
            ("big.pdf", b"%PDF-" + b"0" * 20_000),
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_files_rejected(
        self, document_service, job_queue, blob_store, filename, data
    ) -> None:
        """Should reject empty, non-PDF, unnamed and oversized uploads before storing."""
        with pytest.raises(ValidationError):
            await document_service.upload_document("owner-1", filename, data)

        assert blob_store.objects == {}
        job_queue.enqueue.assert_not_called()

    @pytest.mark.asyncio
    async def test_limit_per_owner(self, document_service, pdf_factory) -> None:
        """Should refuse uploads past the per-owner limit."""
        data = pdf_factory(["x"])
        await document_service.upload_document("owner-1", "1.pdf", data)
        await document_service.upload_document("owner-1", "2.pdf", data)

        with pytest.raises(UploadLimitExceededError):
            await document_service.upload_document("owner-1", "3.pdf", data)

        await document_service.upload_document("owner-2", "1.pdf", data)

    @pytest.mark.asyncio
    async def test_queue_failure_marks_failed(
        self, document_service, job_queue, repository, pdf_factory
    ) -> None:
        """Should mark the record FAILED when the job cannot be enqueued."""
        job_queue.enqueue.side_effect = JobQueueError("broker down")

        with pytest.raises(JobQueueError):
            await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))

        [record] = await repository.list_by_owner("owner-1")
        assert record.status == DocumentStatus.FAILED
        assert "broker down" in record.error_message

    @pytest.mark.asyncio
    async def test_queue_failure_survives_status_write_error(
        self, document_service, job_queue, repository, monkeypatch, pdf_factory
    ) -> None:
        """Should re-raise the queue error even when marking FAILED also fails."""
        job_queue.enqueue.side_effect = JobQueueError("broker down")
        monkeypatch.setattr(
            repository, "update_status", AsyncMock(side_effect=MetadataStoreError("db down"))
        )

        with pytest.raises(JobQueueError, match="broker down"):
            await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))

        repository.update_status.assert_awaited_once()


class TestReadAndDelete:
    """Test listing, lookup and deletion."""

    @pytest.mark.asyncio
    async def test_get_document_is_owner_scoped(self, document_service, pdf_factory) -> None:
        """Should hide other owners' documents."""
        uploaded = await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))

        found = await document_service.get_document("owner-1", uploaded.document.id)
        assert found.id == uploaded.document.id

        with pytest.raises(DocumentNotFoundError):
            await document_service.get_document("owner-2", uploaded.document.id)

    @pytest.mark.asyncio
    async def test_list_documents(self, document_service, pdf_factory) -> None:
        """Should list only the caller's documents."""
        await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))
        await document_service.upload_document("owner-2", "b.pdf", pdf_factory(["y"]))

        listed = await document_service.list_documents("owner-1")

        assert [d.filename for d in listed] == ["a.pdf"]

    @pytest.mark.asyncio
    async def test_delete_removes_vectors_blob_and_record(
        self, document_service, pipeline, job_queue, blob_store, faiss_index, repository,
        index_texts, pdf_factory,
    ) -> None:
        """Should remove the document's vectors, blob and record only."""
        uploaded = await document_service.upload_document(
            "owner-1", "a.pdf", pdf_factory(["alpha beta"])
        )
        await pipeline.run(job_queue.enqueue.call_args.args[0])
        index_texts("owner-1", "another-doc", ["keep me"])

        removed = await document_service.delete_document("owner-1", uploaded.document.id)

        assert removed >= 1
        assert len(faiss_index) == 1
        assert uploaded.document.blob_handle not in blob_store.objects
        assert await repository.get_by_id(uploaded.document.id) is None

    @pytest.mark.asyncio
    async def test_delete_other_owner_rejected(self, document_service, blob_store, pdf_factory):
        """Should refuse to delete another owner's document."""
        uploaded = await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))

        with pytest.raises(DocumentNotFoundError):
            await document_service.delete_document("owner-2", uploaded.document.id)

        assert uploaded.document.blob_handle in blob_store.objects


class TestDefaultSelection:
    """Test the per-document selection flag."""

    @pytest.mark.asyncio
    async def test_new_documents_are_active(self, document_service, pdf_factory) -> None:
        """Should include uploads in the default selection."""
        uploaded = await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))
        assert uploaded.document.is_active

    @pytest.mark.asyncio
    async def test_toggle_selection(self, document_service, pdf_factory) -> None:
        """Should persist the flag for the owner."""
        uploaded = await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))

        updated = await document_service.set_document_active(
            "owner-1", uploaded.document.id, False
        )
        found = await document_service.get_document("owner-1", uploaded.document.id)

        assert not updated.is_active
        assert not found.is_active
        assert found.status == DocumentStatus.PENDING

    @pytest.mark.asyncio
    async def test_toggle_other_owner_rejected(self, document_service, pdf_factory) -> None:
        """Should refuse to change another owner's document."""
        uploaded = await document_service.upload_document("owner-1", "a.pdf", pdf_factory(["x"]))

        with pytest.raises(DocumentNotFoundError):
            await document_service.set_document_active("owner-2", uploaded.document.id, False)

        assert (await document_service.get_document("owner-1", uploaded.document.id)).is_active
