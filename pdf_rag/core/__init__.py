"""
Core business logic module.

Contains the exception hierarchy, the document ingestion pipeline and the
scoped retrieval engine.
"""

from pdf_rag.core.exceptions import (
    PdfRagException,
    TransientError,
    ValidationError,
    DocumentProcessingError,
    ParsingError,
    EmptyDocumentError,
    BlobNotFoundError,
    BlobStoreError,
    EmbeddingError,
    VectorStoreError,
    MetadataStoreError,
    OwnershipError,
    DocumentNotFoundError,
    NoDocumentsToSearchError,
    UploadLimitExceededError,
    PoisonMessageError,
    JobQueueError,
)

__all__ = [
    "PdfRagException",
    "TransientError",
    "ValidationError",
    "DocumentProcessingError",
    "ParsingError",
    "EmptyDocumentError",
    "BlobNotFoundError",
    "BlobStoreError",
    "EmbeddingError",
    "VectorStoreError",
    "MetadataStoreError",
    "OwnershipError",
    "DocumentNotFoundError",
    "NoDocumentsToSearchError",
    "UploadLimitExceededError",
    "PoisonMessageError",
    "JobQueueError",
]
