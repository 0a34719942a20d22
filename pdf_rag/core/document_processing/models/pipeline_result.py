"""
Pipeline result model for document processing.

Represents the outcome of processing one ingestion job.

Dependencies: pydantic
System role: Return type for IngestionPipeline.run()
"""

from pydantic import BaseModel, Field

from pdf_rag.boundary.db.models.document_model import DocumentStatus


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: str = Field(description="Document identifier")
    status: DocumentStatus = Field(description="Document status after the job")
    skipped: bool = Field(
        default=False,
        description="True when the document was already terminal and no work was done",
    )
    page_count: int | None = Field(default=None, description="Pages extracted")
    chunk_count: int = Field(default=0, description="Number of chunks indexed")
    processing_time_ms: float = Field(default=0.0, description="Total processing time in milliseconds")
