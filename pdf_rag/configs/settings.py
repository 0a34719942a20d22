"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pdf_rag.configs.base import BaseSettings
from pdf_rag.configs.celery_config import CelerySettings
from pdf_rag.configs.database import DatabaseSettings
from pdf_rag.configs.llm import LLMSettings
from pdf_rag.configs.s3_documents import S3DocumentsSettings
from pdf_rag.configs.upload import UploadSettings
from pdf_rag.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    s3_documents: S3DocumentsSettings = S3DocumentsSettings()
    celery: CelerySettings = CelerySettings()
    upload: UploadSettings = UploadSettings()
    llm: LLMSettings = LLMSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once per process.

    Returns:
        Settings: Application settings instance

    Usage:
        from pdf_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
