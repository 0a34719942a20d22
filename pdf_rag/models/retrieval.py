"""
Retrieval result models.

A retrieval either returns scored chunks or a NoRelevantContent value that
says why nothing could be returned. An empty search is an expected outcome,
not an error.

Dependencies: pydantic
System role: Retrieval contracts between retriever and chat service
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RetrievedChunk(BaseModel):
    """A chunk returned by similarity search."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Vector record key")
    text: str = Field(description="Chunk text")
    owner_id: str
    source_document_id: str | None = Field(
        default=None,
        description="Source document (None for legacy records)",
    )
    sequence_index: int
    total_chunks: int
    score: float = Field(description="Similarity reported by the index")


class RetrievalResult(BaseModel):
    """Chunks ordered by the index's similarity ranking."""

    model_config = ConfigDict(frozen=True)

    chunks: list[RetrievedChunk]
    used_fallback: bool = Field(
        default=False,
        description="True when the document filter was dropped after an empty search",
    )
    searched_document_ids: list[str] = Field(
        default_factory=list,
        description="Validated document IDs the primary search was restricted to",
    )


class NoRelevantContentReason(str, Enum):
    """Why a retrieval produced nothing."""

    NO_DOCUMENTS = "no_documents"
    DOCUMENTS_NOT_PROCESSED = "documents_not_processed"
    NO_MATCH = "no_match"


NO_RELEVANT_CONTENT_MESSAGES: dict[NoRelevantContentReason, str] = {
    NoRelevantContentReason.NO_DOCUMENTS: "You have not uploaded any documents yet.",
    NoRelevantContentReason.DOCUMENTS_NOT_PROCESSED: (
        "Your documents are still being processed. Please try again shortly."
    ),
    NoRelevantContentReason.NO_MATCH: (
        "No relevant content was found in your documents for this question."
    ),
}


class NoRelevantContent(BaseModel):
    """Typed empty outcome of a retrieval."""

    model_config = ConfigDict(frozen=True)

    reason: NoRelevantContentReason
    message: str
    used_fallback: bool = False

    @classmethod
    def for_reason(
        cls,
        reason: NoRelevantContentReason,
        used_fallback: bool = False,
    ) -> "NoRelevantContent":
        return cls(
            reason=reason,
            message=NO_RELEVANT_CONTENT_MESSAGES[reason],
            used_fallback=used_fallback,
        )
