"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management
  - DocumentModel, DocumentStatus: Document entity and lifecycle enum
  - document_crud: CRUD singleton

Dependencies: sqlalchemy, pdf_rag.configs
System role: Database adapter providing persistent storage for document metadata
"""

from pdf_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from pdf_rag.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from pdf_rag.boundary.db.models.document_model import DocumentModel, DocumentStatus
from pdf_rag.boundary.db.CRUD import BaseCRUD, DocumentCRUD, document_crud

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentModel",
    "DocumentStatus",
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
]
