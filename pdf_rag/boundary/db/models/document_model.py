"""
Document ORM model.

Represents uploaded PDFs with their owner, processing status and the
counts recorded when ingestion completes.

Dependencies: sqlalchemy, pdf_rag.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import BigInteger, Boolean, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pdf_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Document uploaded, awaiting ingestion job
    PROCESSING: Worker is parsing, chunking, and embedding
    COMPLETED: Indexed in vector store, ready for retrieval
    FAILED: Processing error; error_message field contains details
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is allowed."""
        return self in (DocumentStatus.COMPLETED, DocumentStatus.FAILED)

    def can_transition_to(self, target: "DocumentStatus") -> bool:
        """
        Check a status change against the lifecycle.

        PROCESSING -> PROCESSING is allowed so a redelivered job can restart
        work that was interrupted before reaching a terminal state.
        """
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.PROCESSING, DocumentStatus.FAILED}),
    DocumentStatus.PROCESSING: frozenset(
        {DocumentStatus.PROCESSING, DocumentStatus.COMPLETED, DocumentStatus.FAILED}
    ),
    DocumentStatus.COMPLETED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: Upload (PENDING) -> worker (PROCESSING) -> vector indexing
    (COMPLETED) or failure (FAILED). owner_id is the only tenant boundary and
    never changes after creation.

    Attributes:
        id: String UUID primary key (auto-generated)
        owner_id: Verified identity of the uploading user
        filename: Original filename (255 char limit)
        blob_handle: Opaque blob store key of the raw PDF
        file_size: Size of the uploaded PDF in bytes
        status: Current processing state
        page_count: Page count, set on completion
        chunk_count: Number of indexed chunks, set on completion
        error_message: Null unless FAILED (2048 char limit)
        is_active: Whether the document is in the owner's default selection
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_owner_created", "owner_id", "created_at"),
    )

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    blob_handle: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Blob store key for the raw PDF",
    )

    file_size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    chunk_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        doc="Part of the owner's default document selection",
    )
