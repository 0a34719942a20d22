"""
Tests for Chunk binding and the ingestion job payload.

System role: Verification of document processing models
"""

import json

import pytest

from pdf_rag.core.document_processing.models import (
    INGEST_DOCUMENT,
    Chunk,
    IngestionJob,
    parse_job_payload,
)
from pdf_rag.core.exceptions import PoisonMessageError


def _chunk() -> Chunk:
    return Chunk(text="abc", sequence_index=0, total_chunks=1, char_length=3)


class TestChunkBinding:
    """Test attaching owner and source document to chunks."""

    def test_bind_sets_identifiers(self) -> None:
        """Should return a bound copy and leave the original untouched."""
        chunk = _chunk()

        bound = chunk.bind("owner-1", "doc-1")

        assert bound.is_bound
        assert bound.owner_id == "owner-1"
        assert bound.source_document_id == "doc-1"
        assert not chunk.is_bound

    @pytest.mark.parametrize("owner_id,document_id", [("", "doc-1"), ("owner-1", "")])
    def test_bind_rejects_empty_identifiers(self, owner_id: str, document_id: str) -> None:
        """Should raise ValueError when either identifier is empty."""
        with pytest.raises(ValueError):
            _chunk().bind(owner_id, document_id)

    def test_total_chunks_must_be_positive(self) -> None:
        """Should reject total_chunks of zero."""
        with pytest.raises(ValueError):
            Chunk(text="abc", sequence_index=0, total_chunks=0, char_length=3)


class TestJobPayload:
    """Test decoding of queue message bodies."""

    @pytest.fixture
    def payload(self) -> dict:
        return {
            "kind": "ingest_document",
            "owner_id": "owner-1",
            "document_id": "doc-1",
            "blob_handle": "documents/owner-1/abc-invoice.pdf",
            "original_filename": "invoice.pdf",
        }

    def test_parse_dict(self, payload: dict) -> None:
        """Should accept a dict body."""
        job = parse_job_payload(payload)

        assert isinstance(job, IngestionJob)
        assert job.kind == INGEST_DOCUMENT
        assert job.document_id == "doc-1"

    def test_parse_json_bytes(self, payload: dict) -> None:
        """Should accept a JSON-encoded body."""
        job = parse_job_payload(json.dumps(payload).encode("utf-8"))
        assert job.owner_id == "owner-1"

    def test_create_round_trips_through_json(self) -> None:
        """Should parse what create() serializes."""
        job = IngestionJob.create("owner-1", "doc-1", "documents/owner-1/x.pdf", "x.pdf")
        assert parse_job_payload(job.model_dump(mode="json")) == job

    def test_missing_field_is_poison(self, payload: dict) -> None:
        """Should raise PoisonMessageError naming the missing field."""
        del payload["blob_handle"]

        with pytest.raises(PoisonMessageError) as exc_info:
            parse_job_payload(payload)

        assert "blob_handle" in exc_info.value.details["fields"]
        assert not exc_info.value.retryable

    def test_wrong_kind_is_poison(self, payload: dict) -> None:
        """Should reject messages with an unknown kind tag."""
        payload["kind"] = "delete_document"
        with pytest.raises(PoisonMessageError):
            parse_job_payload(payload)

    def test_empty_owner_is_poison(self, payload: dict) -> None:
        """Should reject an empty owner ID."""
        payload["owner_id"] = ""
        with pytest.raises(PoisonMessageError):
            parse_job_payload(payload)

    def test_invalid_json_is_poison(self) -> None:
        """Should reject bodies that are not JSON."""
        with pytest.raises(PoisonMessageError):
            parse_job_payload(b"not json")
