"""
Vector write task.

Turns bound chunks and their embeddings into vector records with
deterministic keys and writes them to the vector index in one batch. Keys
derive from document ID, sequence index and a content hash, so re-running a
job overwrites its previous records instead of duplicating them.

Dependencies: pdf_rag.boundary.vdb, hashlib
System role: Final stage of document ingestion pipeline
"""

import hashlib
import logging
from typing import Sequence

from pdf_rag.boundary.vdb.filters import and_, document_filter, owner_filter
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.boundary.vdb.vector_schemas import VectorPayload, VectorRecord

from ..models import Chunk

logger = logging.getLogger(__name__)


class VectorStoreTask:
    """Write chunk embeddings to the vector index."""

    def __init__(self, vector_index: VectorIndex) -> None:
        """
        Initialize vector store task.

        Args:
            vector_index: Target vector index
        """
        self._vector_index = vector_index

    @staticmethod
    def _generate_record_key(document_id: str, sequence_index: int, text: str) -> str:
        """
        Generate deterministic record key.

        Returns:
            str: "<document_id>:<sequence_index>:<sha256 prefix>"
        """
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]
        return f"{document_id}:{sequence_index}:{digest}"

    def build_records(
        self,
        chunks: Sequence[Chunk],
        embeddings: Sequence[Sequence[float]],
    ) -> list[VectorRecord]:
        """
        Pair chunks with embeddings.

        Raises:
            ValueError: Count mismatch or a chunk without owner/document
        """
        if len(chunks) != len(embeddings):
            raise ValueError(
                f"Got {len(embeddings)} embeddings for {len(chunks)} chunks"
            )

        records = []
        for chunk, embedding in zip(chunks, embeddings):
            if not chunk.is_bound:
                raise ValueError(
                    f"Chunk {chunk.sequence_index} is missing owner_id or source_document_id"
                )
            records.append(
                VectorRecord(
                    key=self._generate_record_key(
                        chunk.source_document_id, chunk.sequence_index, chunk.text
                    ),
                    embedding=list(embedding),
                    payload=VectorPayload(
                        text=chunk.text,
                        owner_id=chunk.owner_id,
                        source_document_id=chunk.source_document_id,
                        sequence_index=chunk.sequence_index,
                        total_chunks=chunk.total_chunks,
                    ),
                )
            )
        return records

    def upload(
        self,
        chunks: Sequence[Chunk],
        embeddings: Sequence[Sequence[float]],
        replace_existing: bool = False,
    ) -> list[str]:
        """
        Write records for one document.

        Args:
            chunks: Bound chunks of a single document
            embeddings: One vector per chunk
            replace_existing: Delete the document's previous records first

        Returns:
            list[str]: Keys written

        Raises:
            ValueError: Invalid input
            VectorStoreError: Index write failed
        """
        if not chunks:
            raise ValueError("No chunks to upload")

        records = self.build_records(chunks, embeddings)
        owner_id = chunks[0].owner_id
        document_id = chunks[0].source_document_id

        if replace_existing:
            removed = self._vector_index.delete_where(
                and_(owner_filter(owner_id), document_filter([document_id]))
            )
            logger.info(
                f"{__name__}:upload - Removed previous records",
                extra={"document_id": document_id, "removed": removed},
            )

        keys = self._vector_index.add_records(records)
        logger.info(
            f"{__name__}:upload - Uploaded vector records",
            extra={"document_id": document_id, "record_count": len(keys)},
        )
        return keys
