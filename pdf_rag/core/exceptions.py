"""
Exception hierarchy for the PDF RAG application.

Provides layered exception structure for domain-specific errors.
Every exception carries a `retryable` flag so the ingestion pipeline and the
queue worker can tell transient infrastructure faults from terminal content
problems without inspecting concrete types.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class PdfRagException(Exception):
    """Base exception for all PDF RAG application errors."""

    retryable: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(PdfRagException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


# ---------------------------------------------------------------------------
# Transient infrastructure failures (safe to retry)
# ---------------------------------------------------------------------------


class TransientError(PdfRagException):
    """Base exception for failures that may succeed on a later attempt."""

    retryable = True


class BlobStoreError(TransientError):
    """Raised when the blob store cannot be reached or rejects a request."""


class EmbeddingError(TransientError):
    """Raised when embedding generation fails (including rate limiting)."""


class VectorStoreError(TransientError):
    """Raised when vector index reads or writes fail."""


class MetadataStoreError(TransientError):
    """Raised when the document metadata store fails."""


class JobQueueError(TransientError):
    """Raised when a job cannot be handed to the queue broker."""


# ---------------------------------------------------------------------------
# Terminal content failures (retrying cannot help)
# ---------------------------------------------------------------------------


class DocumentProcessingError(PdfRagException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when a PDF cannot be parsed."""


class EmptyDocumentError(ParsingError):
    """Raised when a PDF parses but yields no extractable text."""


class BlobNotFoundError(DocumentProcessingError):
    """Raised when the referenced blob does not exist."""


# ---------------------------------------------------------------------------
# Ownership and client errors
# ---------------------------------------------------------------------------


class OwnershipError(PdfRagException):
    """Raised when an owner tries to act on a resource it does not own."""

    def __init__(
        self,
        owner_id: str,
        resource: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize ownership error.

        Args:
            owner_id: Owner that attempted the operation
            resource: Identifier of the resource that was refused
            details: Additional context
        """
        details = details or {}
        details["owner_id"] = owner_id
        details["resource"] = resource
        super().__init__("Resource not found or access denied", details)


class DocumentNotFoundError(PdfRagException):
    """Raised when a document cannot be found for the requesting owner."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
            details: Additional context
        """
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found or access denied: {document_id}", details)


class NoDocumentsToSearchError(PdfRagException):
    """Raised when none of the requested documents belong to the caller."""

    def __init__(self, requested: list[str], details: dict[str, Any] | None = None) -> None:
        """
        Initialize no-documents-to-search error.

        Args:
            requested: Document IDs the caller asked to search
            details: Additional context
        """
        details = details or {}
        details["requested_count"] = len(requested)
        super().__init__("None of the requested documents are available to search", details)


class UploadLimitExceededError(PdfRagException):
    """Raised when an owner has reached the per-owner document limit."""

    def __init__(self, owner_id: str, limit: int) -> None:
        """
        Initialize upload limit error.

        Args:
            owner_id: Owner that hit the limit
            limit: Maximum documents allowed per owner
        """
        super().__init__(
            f"Upload limit reached: at most {limit} documents per user",
            {"owner_id": owner_id, "limit": limit},
        )


class PoisonMessageError(PdfRagException):
    """Raised when a queue message cannot be decoded into a valid job."""
