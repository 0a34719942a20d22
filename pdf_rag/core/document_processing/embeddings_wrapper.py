"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so that document and query vectors always
have the dimension the vector index was created with.

Dependencies: langchain_google_genai, python-dotenv
System role: Embedding provider for ingestion and retrieval
"""

import logging
from typing import Any, List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings with a fixed output dimensionality.

    Every embed call is sent with output_dimensionality unless the caller
    passes one explicitly.
    """

    _output_dimensionality: int = 1024

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1024,
        **kwargs: Any,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Dimension of every returned vector
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        """Embed documents at the configured dimension."""
        kwargs["output_dimensionality"] = (
            kwargs.get("output_dimensionality") or self._output_dimensionality
        )
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs: Any) -> List[float]:
        """Embed a query at the configured dimension."""
        kwargs["output_dimensionality"] = (
            kwargs.get("output_dimensionality") or self._output_dimensionality
        )
        return super().embed_query(text, **kwargs)
