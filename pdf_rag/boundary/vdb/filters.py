"""
Typed filter builder for scoped vector queries.

A ScopedFilter always carries an owner clause; it can only be created through
owner_filter(), so a query without tenant isolation cannot be expressed.
An optional document clause narrows the search to specific documents.

    scoped = and_(owner_filter(owner_id), document_filter(ids))
    scoped.to_s3_vectors()
    # {"$and": [{"ownerId": {"$eq": ...}}, {"sourceDocumentId": {"$in": [...]}}]}

Dependencies: pydantic
System role: Query scoping for the vector index
"""

from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

OWNER_FIELD = "ownerId"
DOCUMENT_FIELD = "sourceDocumentId"


class OwnerClause(BaseModel):
    """Equality clause on the record owner."""

    model_config = ConfigDict(frozen=True)

    owner_id: str

    @field_validator("owner_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("owner_id must not be empty")
        return value

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        return metadata.get(OWNER_FIELD) == self.owner_id

    def to_s3_vectors(self) -> dict[str, Any]:
        return {OWNER_FIELD: {"$eq": self.owner_id}}


class DocumentClause(BaseModel):
    """Set-membership clause on the source document."""

    model_config = ConfigDict(frozen=True)

    document_ids: tuple[str, ...]

    @field_validator("document_ids")
    @classmethod
    def _not_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("document clause needs at least one document id")
        return value

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        return metadata.get(DOCUMENT_FIELD) in self.document_ids

    def to_s3_vectors(self) -> dict[str, Any]:
        return {DOCUMENT_FIELD: {"$in": list(self.document_ids)}}


class ScopedFilter(BaseModel):
    """Owner clause plus an optional document clause, combined with AND."""

    model_config = ConfigDict(frozen=True)

    owner: OwnerClause
    documents: DocumentClause | None = None

    @property
    def owner_id(self) -> str:
        return self.owner.owner_id

    @property
    def document_ids(self) -> tuple[str, ...]:
        return self.documents.document_ids if self.documents else ()

    @property
    def has_document_clause(self) -> bool:
        return self.documents is not None

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        """Evaluate the filter against a record's stored metadata."""
        if not self.owner.matches(metadata):
            return False
        return self.documents is None or self.documents.matches(metadata)

    def without_documents(self) -> "ScopedFilter":
        """Drop the document clause, keeping the owner clause."""
        return ScopedFilter(owner=self.owner)

    def to_s3_vectors(self) -> dict[str, Any]:
        """Render as an S3 Vectors metadata filter expression."""
        if self.documents is None:
            return self.owner.to_s3_vectors()
        return {"$and": [self.owner.to_s3_vectors(), self.documents.to_s3_vectors()]}


def owner_filter(owner_id: str) -> ScopedFilter:
    """Filter matching every record of one owner."""
    return ScopedFilter(owner=OwnerClause(owner_id=owner_id))


def document_filter(document_ids: Iterable[str]) -> DocumentClause:
    """Clause matching records from any of the given documents (order kept, duplicates dropped)."""
    return DocumentClause(document_ids=tuple(dict.fromkeys(document_ids)))


def and_(scoped: ScopedFilter, *clauses: DocumentClause) -> ScopedFilter:
    """
    Narrow a scoped filter with additional document clauses.

    Multiple document clauses intersect.

    Args:
        scoped: Filter carrying the owner clause
        *clauses: Document clauses to AND in

    Returns:
        ScopedFilter: Combined filter

    Raises:
        ValueError: The intersection of the document clauses is empty
    """
    ids = scoped.document_ids or None
    for clause in clauses:
        if ids is None:
            ids = clause.document_ids
        else:
            allowed = set(clause.document_ids)
            ids = tuple(doc_id for doc_id in ids if doc_id in allowed)
    if ids is None:
        return scoped
    return ScopedFilter(owner=scoped.owner, documents=DocumentClause(document_ids=ids))
