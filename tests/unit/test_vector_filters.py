"""
Tests for scoped vector filters and the stored payload shape.

System role: Verification of tenant-isolation query building
"""

import pytest

from pdf_rag.boundary.vdb.filters import and_, document_filter, owner_filter
from pdf_rag.boundary.vdb.vector_schemas import VectorPayload


class TestScopedFilter:
    """Test filter construction and evaluation."""

    def test_owner_filter_renders_eq_clause(self) -> None:
        """Should render a single owner equality clause."""
        scoped = owner_filter("owner-1")

        assert scoped.to_s3_vectors() == {"ownerId": {"$eq": "owner-1"}}
        assert not scoped.has_document_clause
        assert scoped.document_ids == ()

    @pytest.mark.parametrize("owner_id", ["", "   "])
    def test_blank_owner_rejected(self, owner_id: str) -> None:
        """Should refuse to build a filter without an owner."""
        with pytest.raises(ValueError):
            owner_filter(owner_id)

    def test_document_clause_combined_with_and(self) -> None:
        """Should AND the owner clause with an $in document clause."""
        scoped = and_(owner_filter("owner-1"), document_filter(["d1", "d2"]))

        assert scoped.to_s3_vectors() == {
            "$and": [
                {"ownerId": {"$eq": "owner-1"}},
                {"sourceDocumentId": {"$in": ["d1", "d2"]}},
            ]
        }

    def test_document_filter_dedupes_in_order(self) -> None:
        """Should drop duplicate IDs while keeping first-seen order."""
        assert document_filter(["d2", "d1", "d2"]).document_ids == ("d2", "d1")

    def test_empty_document_filter_rejected(self) -> None:
        """Should refuse a document clause without IDs."""
        with pytest.raises(ValueError):
            document_filter([])

    def test_multiple_document_clauses_intersect(self) -> None:
        """Should keep only IDs present in every document clause."""
        scoped = and_(
            owner_filter("owner-1"),
            document_filter(["d1", "d2", "d3"]),
            document_filter(["d3", "d1"]),
        )
        assert scoped.document_ids == ("d1", "d3")

    def test_disjoint_document_clauses_rejected(self) -> None:
        """Should raise when the intersection is empty."""
        with pytest.raises(ValueError):
            and_(owner_filter("owner-1"), document_filter(["d1"]), document_filter(["d2"]))

    def test_matches_requires_owner_and_document(self) -> None:
        """Should match only records of the owner within the listed documents."""
        scoped = and_(owner_filter("owner-1"), document_filter(["d1"]))

        assert scoped.matches({"ownerId": "owner-1", "sourceDocumentId": "d1"})
        assert not scoped.matches({"ownerId": "owner-1", "sourceDocumentId": "d2"})
        assert not scoped.matches({"ownerId": "owner-2", "sourceDocumentId": "d1"})
        assert not scoped.matches({"ownerId": "owner-1"})

    def test_without_documents_keeps_owner(self) -> None:
        """Should drop only the document clause."""
        scoped = and_(owner_filter("owner-1"), document_filter(["d1"])).without_documents()

        assert scoped.owner_id == "owner-1"
        assert not scoped.has_document_clause
        assert scoped.matches({"ownerId": "owner-1"})
        assert not scoped.matches({"ownerId": "owner-2"})


class TestVectorPayload:
    """Test the stored metadata shape."""

    def test_metadata_uses_storage_names(self) -> None:
        """Should serialize with camelCase storage keys."""
        payload = VectorPayload(
            text="hello",
            owner_id="owner-1",
            source_document_id="d1",
            sequence_index=2,
            total_chunks=5,
        )

        assert payload.to_metadata() == {
            "text": "hello",
            "ownerId": "owner-1",
            "sourceDocumentId": "d1",
            "sequenceIndex": 2,
            "totalChunks": 5,
        }
        assert "text" not in payload.to_metadata(include_text=False)

    def test_legacy_metadata_without_document(self) -> None:
        """Should read records stored without a source document ID."""
        payload = VectorPayload.model_validate({"text": "old", "ownerId": "owner-1"})

        assert payload.source_document_id is None
        assert "sourceDocumentId" not in payload.to_metadata()
