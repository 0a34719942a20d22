"""
Vector store configuration settings.

Manages S3 Vectors / FAISS selection, embedding model settings and the
retrieval depth used by the scoped retriever.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (FAISS for dev, S3 Vectors for prod)."""

    model_config = SettingsConfigDict(
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="s3",
        description="Vector store type: 'faiss' for local dev, 's3' for production",
    )
    aws_region: str = Field(default="ap-southeast-2", description="AWS region for S3 Vectors")
    vectors_bucket: str = Field(default="pdf-rag-dev-vectors", description="S3 Vectors bucket name")
    index_name: str = Field(default="pdf-docs", description="S3 Vectors index name")
    faiss_directory: str | None = Field(
        default=".faiss_index",
        description="Directory for FAISS persistence (None keeps the index in memory)",
    )

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID (gemini-embedding-001 supports 1024-dim)",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension (must match the S3 Vectors index)",
    )

    top_k: int = Field(default=5, description="Number of top results to retrieve")
