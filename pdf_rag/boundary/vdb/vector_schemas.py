"""
Vector database schemas.

Pydantic models for vector records, their stored payload and search hits.
The payload's JSON field names (text, ownerId, sourceDocumentId,
sequenceIndex, totalChunks) are a storage contract shared with records that
already exist in the index.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VectorPayload(BaseModel):
    """
    Payload stored alongside each vector.

    source_document_id is optional only so that legacy records written
    before document scoping existed can still be read; every record written
    by the ingestion pipeline carries it.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    text: str = Field(description="Chunk text including any prepended overlap")
    owner_id: str = Field(alias="ownerId", description="Tenant boundary")
    source_document_id: str | None = Field(
        default=None,
        alias="sourceDocumentId",
        description="Document the chunk was cut from",
    )
    sequence_index: int = Field(default=0, alias="sequenceIndex", ge=0)
    total_chunks: int = Field(default=0, alias="totalChunks", ge=0)

    def to_metadata(self, include_text: bool = True) -> dict[str, Any]:
        """
        Serialize to the stored JSON shape.

        Args:
            include_text: Whether to include the chunk text

        Returns:
            dict: Metadata keyed by the storage field names
        """
        exclude = None if include_text else {"text"}
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)


class VectorRecord(BaseModel):
    """A vector ready to be written to the index."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Deterministic record key")
    embedding: list[float] = Field(description="Embedding vector")
    payload: VectorPayload


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Record key")
    payload: VectorPayload
    score: float = Field(description="Similarity score reported by the index (higher is closer)")
