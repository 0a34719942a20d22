"""
Service container.

Lazily builds and caches the application's collaborators from settings so
the API process and each worker process wire the same graph once.

Dependencies: pdf_rag.configs, pdf_rag.boundary, pdf_rag.core, pdf_rag.application
System role: DI container for service injection
"""

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel

from pdf_rag.configs import Settings, get_settings
from pdf_rag.core.document_processing.configs import (
    DocumentPipelineSettings,
    get_pipeline_settings,
)


class ServiceContainer:
    """Container for cached service instances."""

    def __init__(
        self,
        settings: Settings | None = None,
        pipeline_settings: DocumentPipelineSettings | None = None,
        use_null_pool: bool = False,
        chat_model: BaseChatModel | None = None,
    ) -> None:
        """
        Initialize container.

        Args:
            settings: Application settings (environment defaults if None)
            pipeline_settings: Ingestion settings (environment defaults if None)
            use_null_pool: Disable connection pooling (worker processes)
            chat_model: Chat model override (Gemini from LLM settings if None)
        """
        self._settings = settings or get_settings()
        self._pipeline_settings = pipeline_settings or get_pipeline_settings()
        self._use_null_pool = use_null_pool
        self._chat_model = chat_model

        self.clear()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def engine(self):
        """Get cached async database engine."""
        if self._engine is None:
            from pdf_rag.boundary.db.connection import get_async_engine

            self._engine = get_async_engine(
                self._settings.database, use_null_pool=self._use_null_pool
            )
        return self._engine

    @property
    def session_factory(self):
        if self._session_factory is None:
            from pdf_rag.boundary.db.connection import get_async_session_factory

            self._session_factory = get_async_session_factory(self.engine)
        return self._session_factory

    @property
    def repository(self):
        """Get cached document metadata store."""
        if self._repository is None:
            from pdf_rag.boundary.db.document_repository import DocumentRepository

            self._repository = DocumentRepository(
                self.session_factory,
                error_message_limit=self._pipeline_settings.error_message_limit,
            )
        return self._repository

    @property
    def blob_store(self):
        """Get cached S3 document store."""
        if self._blob_store is None:
            from pdf_rag.boundary.aws.s3_client import S3BlobStore

            s3_settings = self._settings.s3_documents
            self._blob_store = S3BlobStore(
                bucket=s3_settings.bucket,
                region=s3_settings.region,
                key_prefix=s3_settings.key_prefix,
            )
        return self._blob_store

    @property
    def vector_index(self):
        """Get cached vector index."""
        if self._vector_index is None:
            from pdf_rag.boundary.vdb.vector_store_factory import get_vector_index

            self._vector_index = get_vector_index(self._settings.vector_store)
        return self._vector_index

    @property
    def embeddings(self) -> Embeddings:
        """Get cached embedding provider."""
        if self._embeddings is None:
            from pdf_rag.core.document_processing.embeddings_wrapper import (
                FixedDimensionEmbeddings,
            )

            vector_settings = self._settings.vector_store
            self._embeddings = FixedDimensionEmbeddings(
                model=vector_settings.embedding_model,
                output_dimensionality=vector_settings.embedding_dimension,
            )
        return self._embeddings

    @property
    def embedding_task(self):
        if self._embedding_task is None:
            from pdf_rag.core.document_processing.tasks import EmbeddingTask

            self._embedding_task = EmbeddingTask(
                self.embeddings,
                batch_size=self._pipeline_settings.embedding_batch_size,
                max_attempts=self._pipeline_settings.embedding_max_attempts,
                backoff_initial=self._pipeline_settings.embedding_backoff_initial,
                backoff_max=self._pipeline_settings.embedding_backoff_max,
            )
        return self._embedding_task

    @property
    def ingestion_pipeline(self):
        """Get cached ingestion pipeline."""
        if self._ingestion_pipeline is None:
            from pdf_rag.core.document_processing.entrypoint import IngestionPipeline

            self._ingestion_pipeline = IngestionPipeline(
                repository=self.repository,
                blob_store=self.blob_store,
                vector_index=self.vector_index,
                embeddings=self.embeddings,
                settings=self._pipeline_settings,
            )
        return self._ingestion_pipeline

    @property
    def retriever(self):
        """Get cached scoped retriever."""
        if self._retriever is None:
            from pdf_rag.core.retriever import ScopedRetriever

            self._retriever = ScopedRetriever(
                repository=self.repository,
                vector_index=self.vector_index,
                embedding_task=self.embedding_task,
                top_k=self._settings.vector_store.top_k,
            )
        return self._retriever

    @property
    def job_queue(self):
        """Get cached job queue producer."""
        if self._job_queue is None:
            from pdf_rag.workers import celery_app
            from pdf_rag.workers.job_queue import JobQueue

            self._job_queue = JobQueue(celery_app, self._settings.celery.queue_name)
        return self._job_queue

    @property
    def document_service(self):
        """Get cached document service."""
        if self._document_service is None:
            from pdf_rag.application.services.document_service import DocumentService

            self._document_service = DocumentService(
                repository=self.repository,
                blob_store=self.blob_store,
                vector_index=self.vector_index,
                job_queue=self.job_queue,
                upload_settings=self._settings.upload,
            )
        return self._document_service

    @property
    def chat_service(self):
        """Get cached chat service."""
        if self._chat_service is None:
            from pdf_rag.application.services.chat_service import ChatService

            self._chat_service = ChatService(self.retriever, self.chat_model)
        return self._chat_service

    @property
    def chat_model(self) -> BaseChatModel:
        if self._chat_model is None:
            from langchain_google_genai import ChatGoogleGenerativeAI

            llm_settings = self._settings.llm
            self._chat_model = ChatGoogleGenerativeAI(
                model=llm_settings.model,
                temperature=llm_settings.temperature,
            )
        return self._chat_model

    def clear(self) -> None:
        """Clear all cached instances."""
        self._engine = None
        self._session_factory = None
        self._repository = None
        self._blob_store = None
        self._vector_index = None
        self._embeddings = None
        self._embedding_task = None
        self._ingestion_pipeline = None
        self._retriever = None
        self._job_queue = None
        self._document_service = None
        self._chat_service = None

    async def dispose(self) -> None:
        """Dispose the database engine and clear cached instances."""
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()
