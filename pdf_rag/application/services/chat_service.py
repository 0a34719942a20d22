"""
Chat service for question answering over an owner's documents.

Retrieves owner-scoped context and asks the chat model to answer from it.
When retrieval finds nothing the model is not called; the caller gets the
NoRelevantContent message instead.

Dependencies: langchain_core, pdf_rag.core.retriever
System role: Chat service orchestration layer
"""

import logging
from typing import Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from pdf_rag.core.retriever import ScopedRetriever
from pdf_rag.models.chat import ChatAnswer
from pdf_rag.models.retrieval import NoRelevantContent, RetrievedChunk
from pdf_rag.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that can answer questions about the documents.
You are given a question and a list of documents.
You need to answer the question based on the documents.
If the question is not related to the documents, you should say "This question is not related to the documents. Please ask a question that is related to the documents.".
Be concise and to the point.
Context: {context}"""

CONTEXT_SEPARATOR = "\n\n---\n\n"


def build_context(chunks: Sequence[RetrievedChunk]) -> str:
    """Join chunk texts in ranking order."""
    return CONTEXT_SEPARATOR.join(chunk.text for chunk in chunks)


class ChatService:
    """Answer questions grounded on retrieved chunks."""

    def __init__(self, retriever: ScopedRetriever, chat_model: BaseChatModel) -> None:
        """
        Initialize chat service.

        Args:
            retriever: Owner-scoped retriever
            chat_model: LangChain chat model used to write the answer
        """
        self._retriever = retriever
        self._chat_model = chat_model

    async def answer(
        self,
        owner_id: str,
        question: str,
        document_ids: Sequence[str] | None = None,
    ) -> ChatAnswer:
        """
        Answer a question from the owner's documents.

        Args:
            owner_id: Verified owner identity
            question: User question
            document_ids: Optional documents to restrict retrieval to

        Returns:
            ChatAnswer: Model answer with sources, or the no-content message

        Raises:
            ValidationError: Empty question
            NoDocumentsToSearchError: None of document_ids belong to the owner
        """
        retrieval = await self._retriever.retrieve(owner_id, question, document_ids)

        if isinstance(retrieval, NoRelevantContent):
            return ChatAnswer(
                answer=retrieval.message,
                no_content_reason=retrieval.reason,
                used_fallback=retrieval.used_fallback,
            )

        messages = [
            SystemMessage(content=SYSTEM_PROMPT.format(context=build_context(retrieval.chunks))),
            HumanMessage(content=question),
        ]
        response = await self._chat_model.ainvoke(messages)

        logger.info(
            f"{__name__}:answer - Answer generated",
            extra={
                "owner_id": owner_id,
                "source_count": len(retrieval.chunks),
                "question_preview": safe_log_value(question, max_length=50),
            },
        )
        return ChatAnswer(
            answer=str(response.content),
            sources=retrieval.chunks,
            used_fallback=retrieval.used_fallback,
        )
