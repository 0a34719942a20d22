"""
Document domain models and schemas.

Detached, immutable views of document rows handed out by the metadata store
so callers never hold live ORM objects across sessions or threads.

Dependencies: pydantic
System role: Document data contracts
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pdf_rag.boundary.db.models.document_model import DocumentStatus


class DocumentRecord(BaseModel):
    """Snapshot of a document's metadata."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(description="Opaque document ID")
    owner_id: str = Field(description="Owner of the document (tenant boundary)")
    filename: str = Field(description="Original filename")
    blob_handle: str = Field(description="Blob store key for the raw PDF")
    file_size: int = Field(default=0, description="PDF size in bytes")
    status: DocumentStatus
    page_count: int | None = None
    chunk_count: int | None = None
    error_message: str | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class UploadResult(BaseModel):
    """Outcome of a successful upload request."""

    document: DocumentRecord
    job_id: str = Field(description="Queue task ID of the ingestion job")
