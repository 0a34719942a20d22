"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for chunking, embedding and
failure bookkeeping.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Maximum chunk size in characters (before overlap is prepended)",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Characters of the previous chunk prepended to each chunk",
    )
    overlap_probe_length: int = Field(
        default=50,
        gt=0,
        description="Characters compared when checking whether overlap is already present",
    )

    # Embedding settings
    embedding_batch_size: int = Field(
        default=100,
        gt=0,
        description="Texts per embedding request",
    )
    embedding_max_attempts: int = Field(
        default=3,
        gt=0,
        description="Attempts per embedding request before giving up",
    )
    embedding_backoff_initial: float = Field(
        default=1.0,
        ge=0,
        description="Initial backoff in seconds between embedding attempts",
    )
    embedding_backoff_max: float = Field(
        default=20.0,
        ge=0,
        description="Maximum backoff in seconds between embedding attempts",
    )

    # Status bookkeeping
    error_message_limit: int = Field(
        default=2000,
        gt=0,
        description="Maximum stored length of failure messages",
    )

    @model_validator(mode="after")
    def _overlap_smaller_than_chunk(self) -> "DocumentPipelineSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
