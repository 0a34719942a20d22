"""
Chat domain models.

Dependencies: pydantic
System role: Chat answer contract
"""

from pydantic import BaseModel, Field

from pdf_rag.models.retrieval import NoRelevantContentReason, RetrievedChunk


class ChatAnswer(BaseModel):
    """Answer to a question asked against an owner's documents."""

    answer: str
    sources: list[RetrievedChunk] = Field(
        default_factory=list,
        description="Chunks the answer was grounded on, in ranking order",
    )
    no_content_reason: NoRelevantContentReason | None = Field(
        default=None,
        description="Set when retrieval found nothing and no model call was made",
    )
    used_fallback: bool = False
