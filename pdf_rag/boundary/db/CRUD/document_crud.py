"""
Document CRUD operations.

Extends BaseCRUD with owner-scoped queries. Every read that takes an owner
filters on owner_id in SQL so another tenant's row is indistinguishable from
a missing one.

Dependencies: sqlalchemy, pdf_rag.boundary.db.models.document_model
System role: Document persistence operations
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pdf_rag.boundary.db.CRUD.base_crud import BaseCRUD
from pdf_rag.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_owned(
        self,
        session: AsyncSession,
        id: str,
        owner_id: str,
    ) -> DocumentModel | None:
        """
        Retrieve a document only if it belongs to owner_id.

        Args:
            session: Async database session
            id: Document ID
            owner_id: Requesting owner

        Returns:
            DocumentModel if found and owned, None otherwise
        """
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_owner_id(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve an owner's documents, newest first.

        Args:
            session: Async database session
            owner_id: Owner whose documents to list
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels ordered by created_at descending
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_owner_id(self, session: AsyncSession, owner_id: str) -> int:
        """
        Count documents belonging to an owner.

        Args:
            session: Async database session
            owner_id: Owner to count for

        Returns:
            int: Number of documents
        """
        stmt = select(func.count()).select_from(DocumentModel).where(
            DocumentModel.owner_id == owner_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def get_owned_ids(
        self,
        session: AsyncSession,
        owner_id: str,
        ids: Sequence[str],
    ) -> set[str]:
        """
        Return the subset of ids owned by owner_id.

        Args:
            session: Async database session
            owner_id: Requesting owner
            ids: Candidate document IDs

        Returns:
            set[str]: IDs that exist and belong to the owner
        """
        if not ids:
            return set()
        stmt = select(DocumentModel.id).where(
            DocumentModel.owner_id == owner_id,
            DocumentModel.id.in_(list(ids)),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def count_by_status(
        self,
        session: AsyncSession,
        owner_id: str,
        ids: Sequence[str] | None = None,
    ) -> dict[DocumentStatus, int]:
        """
        Count an owner's documents per status, optionally within a subset.

        Args:
            session: Async database session
            owner_id: Owner to count for
            ids: Optional document IDs restricting the count

        Returns:
            dict[DocumentStatus, int]: Counts for statuses that occur
        """
        stmt = (
            select(DocumentModel.status, func.count())
            .where(DocumentModel.owner_id == owner_id)
            .group_by(DocumentModel.status)
        )
        if ids:
            stmt = stmt.where(DocumentModel.id.in_(list(ids)))
        result = await session.execute(stmt)
        return {DocumentStatus(status): int(count) for status, count in result.all()}


document_crud = DocumentCRUD()
