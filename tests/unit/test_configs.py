"""
Tests for configuration classes, the vector index factory and the service container.

System role: Verification of configuration wiring
"""

import pytest

from pdf_rag.boundary.vdb.faiss_vectors_store import FAISSVectorIndex
from pdf_rag.boundary.vdb.vector_store_factory import get_vector_index
from pdf_rag.configs import Settings
from pdf_rag.configs.celery_config import CelerySettings
from pdf_rag.configs.database import DatabaseSettings
from pdf_rag.configs.vector_store import VectorStoreSettings
from pdf_rag.core.document_processing.configs import DocumentPipelineSettings
from pdf_rag.dependencies import ServiceContainer


class TestSettings:
    """Test settings defaults and validation."""

    def test_pipeline_defaults(self) -> None:
        """Should default to 1000-character chunks with 200 overlap."""
        settings = DocumentPipelineSettings()
        assert settings.chunk_size == 1000
        assert settings.chunk_overlap == 200

    def test_overlap_must_be_smaller_than_chunk(self) -> None:
        """Should reject an overlap that is not smaller than the chunk size."""
        with pytest.raises(ValueError):
            DocumentPipelineSettings(chunk_size=100, chunk_overlap=100)

    def test_pipeline_env_override(self, monkeypatch) -> None:
        """Should read DOC_PIPELINE_ prefixed environment variables."""
        monkeypatch.setenv("DOC_PIPELINE_CHUNK_SIZE", "500")
        monkeypatch.setenv("DOC_PIPELINE_CHUNK_OVERLAP", "50")

        settings = DocumentPipelineSettings()

        assert settings.chunk_size == 500
        assert settings.chunk_overlap == 50

    def test_celery_urls(self) -> None:
        """Should build Redis broker and backend URLs."""
        settings = CelerySettings(broker_host="redis", broker_port=6380, result_backend_db=2)

        assert settings.broker_url == "redis://redis:6380/0"
        assert settings.result_backend_url.endswith("/2")
        assert settings.worker_concurrency == 3

    def test_database_url_override(self) -> None:
        """Should prefer an explicit URL over host parts."""
        settings = DatabaseSettings(url="sqlite+aiosqlite:///:memory:")
        assert settings.async_database_url == "sqlite+aiosqlite:///:memory:"

    def test_database_url_from_parts(self) -> None:
        """Should build an asyncpg URL from host parts."""
        settings = DatabaseSettings(host="db", port=5433, user="u", password="p", db="x")
        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5433/x"

    def test_retrieval_depth_default(self) -> None:
        """Should retrieve five chunks by default."""
        assert VectorStoreSettings().top_k == 5


class TestVectorIndexFactory:
    """Test vector index selection."""

    def test_faiss_selected(self) -> None:
        """Should build a FAISS index for store_type 'faiss'."""
        index = get_vector_index(VectorStoreSettings(store_type="faiss", faiss_directory=None))
        assert isinstance(index, FAISSVectorIndex)

    def test_invalid_type_rejected(self) -> None:
        """Should raise ValueError for unknown store types."""
        with pytest.raises(ValueError):
            get_vector_index(VectorStoreSettings(store_type="pinecone"))


class TestServiceContainer:
    """Test lazy wiring."""

    @pytest.mark.asyncio
    async def test_builds_and_caches_services(self, embeddings) -> None:
        """Should build each collaborator once and reuse it."""
        settings = Settings(
            database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
            vector_store=VectorStoreSettings(store_type="faiss", faiss_directory=None),
        )
        container = ServiceContainer(settings=settings, chat_model=object())
        container._embeddings = embeddings

        assert container.repository is container.repository
        assert container.retriever is container.retriever
        assert container.ingestion_pipeline is container.ingestion_pipeline
        assert isinstance(container.vector_index, FAISSVectorIndex)

        await container.dispose()
        assert container._repository is None
