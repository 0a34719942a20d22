"""ORM models."""

from pdf_rag.boundary.db.models.document_model import DocumentModel, DocumentStatus

__all__ = ["DocumentModel", "DocumentStatus"]
