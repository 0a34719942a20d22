"""
End-to-end scenario: upload an invoice, ingest it, ask for the invoice number.

System role: Verification of upload -> ingestion -> retrieval -> answer flow
"""

from unittest.mock import MagicMock

import pytest
from langchain_core.language_models import FakeListChatModel

from pdf_rag.application.services.chat_service import ChatService
from pdf_rag.application.services.document_service import DocumentService
from pdf_rag.boundary.db.models.document_model import DocumentStatus
from pdf_rag.configs.upload import UploadSettings
from pdf_rag.models.retrieval import RetrievalResult


class TestInvoiceScenario:
    """Test the full path for a three-page invoice."""

    @pytest.mark.asyncio
    async def test_invoice_number_is_retrieved(
        self,
        repository,
        blob_store,
        faiss_index,
        pipeline,
        retriever,
        pdf_factory,
        lorem,
    ):
        """Should ingest the invoice and retrieve the chunk holding its number."""
        job_queue = MagicMock()
        job_queue.enqueue.return_value = "task-1"
        documents = DocumentService(
            repository=repository,
            blob_store=blob_store,
            vector_index=faiss_index,
            job_queue=job_queue,
            upload_settings=UploadSettings(),
        )
        pdf = pdf_factory(
            [
                "INVOICE #4471\nInvoice number 4471 issued to Acme Corp",
                lorem(980),
                lorem(980),
            ]
        )

        uploaded = await documents.upload_document("owner-1", "invoice.pdf", pdf)
        assert uploaded.document.status == DocumentStatus.PENDING
        job = job_queue.enqueue.call_args.args[0]

        outcome = await pipeline.run(job)
        record = await documents.get_document("owner-1", uploaded.document.id)

        assert outcome.status == DocumentStatus.COMPLETED
        assert record.status == DocumentStatus.COMPLETED
        assert record.page_count == 3
        assert record.chunk_count == len(faiss_index)
        assert record.chunk_count >= 3

        result = await retriever.retrieve(
            "owner-1", "What is the invoice number?", [uploaded.document.id]
        )

        assert isinstance(result, RetrievalResult)
        assert not result.used_fallback
        assert "4471" in result.chunks[0].text
        assert all(c.source_document_id == uploaded.document.id for c in result.chunks)

        chat = ChatService(retriever, FakeListChatModel(responses=["The invoice number is 4471."]))
        answer = await chat.answer("owner-1", "What is the invoice number?")

        assert answer.answer == "The invoice number is 4471."
        assert answer.no_content_reason is None
        assert answer.sources

        other = await retriever.retrieve("owner-2", "What is the invoice number?")
        assert not isinstance(other, RetrievalResult)
