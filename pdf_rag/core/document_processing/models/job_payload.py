"""
Ingestion job payload schema.

Validates messages carried by the job queue. The payload is tagged with a
`kind` so the worker can reject anything that is not an ingestion job
instead of guessing.

Dependencies: pydantic
System role: Data validation and contract definition for queued jobs
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from pdf_rag.core.exceptions import PoisonMessageError

INGEST_DOCUMENT = "ingest_document"


class IngestionJob(BaseModel):
    """Immutable request to ingest one uploaded PDF."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "kind": "ingest_document",
                "owner_id": "user_2a9f",
                "document_id": "550e8400-e29b-41d4-a716-446655440000",
                "blob_handle": "documents/user_2a9f/6f1c...-invoice.pdf",
                "original_filename": "invoice.pdf",
            }
        },
    )

    kind: Literal["ingest_document"]
    owner_id: str = Field(min_length=1, description="Owner of the document")
    document_id: str = Field(min_length=1, description="Document ID from the metadata store")
    blob_handle: str = Field(min_length=1, description="Blob store key of the raw PDF")
    original_filename: str = Field(min_length=1, description="Original filename for logging")

    @classmethod
    def create(
        cls,
        owner_id: str,
        document_id: str,
        blob_handle: str,
        original_filename: str,
    ) -> "IngestionJob":
        """Build a job with the ingestion tag set."""
        return cls(
            kind=INGEST_DOCUMENT,
            owner_id=owner_id,
            document_id=document_id,
            blob_handle=blob_handle,
            original_filename=original_filename,
        )


def parse_job_payload(body: Any) -> IngestionJob:
    """
    Decode and validate a queue message body.

    Args:
        body: dict, JSON string or JSON bytes

    Returns:
        IngestionJob: Validated job

    Raises:
        PoisonMessageError: Body is not a well-formed ingestion job
    """
    try:
        if isinstance(body, (str, bytes, bytearray)):
            return IngestionJob.model_validate_json(body)
        return IngestionJob.model_validate(body)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors()})
        raise PoisonMessageError(
            "Malformed ingestion job payload",
            {"error_count": e.error_count(), "fields": fields},
        ) from e
