"""
Embedding generation task.

Embeds chunk texts in batches through any LangChain Embeddings provider,
retrying each batch with exponential backoff. Output order always matches
input order.

Dependencies: langchain_core, tenacity
System role: Embedding stage of document ingestion pipeline (and query embedding)
"""

import logging
from typing import Callable, Sequence, TypeVar

from langchain_core.embeddings import Embeddings
from tenacity import (
    RetryError,
    Retrying,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pdf_rag.core.exceptions import EmbeddingError

from ..models import Chunk

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EmbeddingTask:
    """Generate embeddings for chunks and queries."""

    def __init__(
        self,
        embeddings: Embeddings,
        batch_size: int = 100,
        max_attempts: int = 3,
        backoff_initial: float = 1.0,
        backoff_max: float = 20.0,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: LangChain embeddings provider
            batch_size: Texts per provider call
            max_attempts: Attempts per call before raising EmbeddingError
            backoff_initial: Initial backoff in seconds
            backoff_max: Maximum backoff in seconds

        Raises:
            ValueError: When batch_size or max_attempts is not positive
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")

        self._embeddings = embeddings
        self._batch_size = batch_size
        self._max_attempts = max_attempts
        self._backoff_initial = backoff_initial
        self._backoff_max = backoff_max

    def _with_retry(self, operation: str, fn: Callable[..., T], *args) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(
                initial=self._backoff_initial,
                max=self._backoff_max,
                jitter=self._backoff_initial,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/{self._max_attempts}"
            ),
        )
        try:
            return retrying(fn, *args)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise EmbeddingError(
                f"Failed to generate embeddings: {cause}",
                {"operation": operation, "attempts": self._max_attempts},
            ) from cause

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts in batches.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, in input order

        Raises:
            EmbeddingError: Provider failed after all attempts or returned a wrong count
        """
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = list(texts[start : start + self._batch_size])
            result = self._with_retry("embed_documents", self._embeddings.embed_documents, batch)
            if len(result) != len(batch):
                raise EmbeddingError(
                    "Embedding provider returned a different number of vectors",
                    {"expected": len(batch), "received": len(result)},
                )
            vectors.extend(list(vector) for vector in result)

        logger.info(
            f"{__name__}:embed_texts - Generated embeddings",
            extra={"count": len(vectors)},
        )
        return vectors

    def embed_chunks(self, chunks: Sequence[Chunk]) -> list[list[float]]:
        """Embed chunk texts, preserving chunk order."""
        return self.embed_texts([chunk.text for chunk in chunks])

    def embed_query(self, text: str) -> list[float]:
        """
        Embed a search query.

        Args:
            text: Question text

        Returns:
            list[float]: Query vector in the same space as chunk vectors

        Raises:
            EmbeddingError: Provider failed after all attempts
        """
        return list(self._with_retry("embed_query", self._embeddings.embed_query, text))
