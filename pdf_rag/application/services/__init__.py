"""
Application services.

Dependencies: pdf_rag.core, pdf_rag.boundary
System role: Use-case orchestration
"""

from pdf_rag.application.services.chat_service import ChatService
from pdf_rag.application.services.document_service import DocumentService

__all__ = ["ChatService", "DocumentService"]
