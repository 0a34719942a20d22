"""
Chunk domain model for document processing pipeline.

Represents one contiguous, possibly overlapping, piece of a document's text
together with its position in the document and the identity of its source.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A piece of document text ready to be embedded."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Chunk text including any prepended overlap")
    sequence_index: int = Field(ge=0, description="0-based position in the document")
    total_chunks: int = Field(gt=0, description="Number of chunks in the document")
    char_length: int = Field(ge=0, description="Length of text in characters")
    overlap_length: int = Field(
        default=0,
        ge=0,
        description="Characters at the start of text copied from the previous chunk",
    )
    owner_id: str | None = Field(default=None, description="Owner of the source document")
    source_document_id: str | None = Field(default=None, description="Source document ID")

    def bind(self, owner_id: str, source_document_id: str) -> "Chunk":
        """
        Attach ownership and provenance.

        Args:
            owner_id: Owner of the document
            source_document_id: Document the chunk was cut from

        Returns:
            Chunk: Copy carrying both identifiers

        Raises:
            ValueError: Either identifier is empty
        """
        if not owner_id or not source_document_id:
            raise ValueError("owner_id and source_document_id are required")
        return self.model_copy(
            update={"owner_id": owner_id, "source_document_id": source_document_id}
        )

    @property
    def is_bound(self) -> bool:
        return bool(self.owner_id) and bool(self.source_document_id)
