"""
Local FAISS vector index for development.

Wraps LangChain's FAISS store with vectors computed by the pipeline, so no
embedding model is called here. Vectors are L2-normalised, which makes the
returned squared L2 distance convertible to cosine similarity
(similarity = 1 - distance / 2). Suitable for a single process; the
persisted index is reloaded only at construction.

Dependencies: langchain_community.vectorstores, faiss-cpu
System role: Development vector index (local testing only)
"""

import logging
import threading
from pathlib import Path
from typing import Sequence

from langchain_community.vectorstores import FAISS
from langchain_core.embeddings import Embeddings

from pdf_rag.boundary.vdb.filters import ScopedFilter
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.boundary.vdb.vector_schemas import (
    VectorPayload,
    VectorRecord,
    VectorSearchResult,
)
from pdf_rag.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


class PrecomputedEmbeddings(Embeddings):
    """Placeholder embeddings for a store that only receives raw vectors."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        raise NotImplementedError("FAISSVectorIndex only accepts precomputed vectors")

    def embed_query(self, text: str) -> list[float]:
        raise NotImplementedError("FAISSVectorIndex only accepts precomputed vectors")


class FAISSVectorIndex(VectorIndex):
    """VectorIndex backed by an in-process FAISS index."""

    def __init__(self, persist_directory: str | None = None) -> None:
        """
        Initialize FAISS index, loading a persisted one if present.

        Args:
            persist_directory: Directory for index persistence (None keeps it in memory)
        """
        self._persist_dir = Path(persist_directory) if persist_directory else None
        self._embeddings = PrecomputedEmbeddings()
        self._store: FAISS | None = None
        self._lock = threading.Lock()

        if self._persist_dir and (self._persist_dir / "index.faiss").exists():
            self._store = FAISS.load_local(
                str(self._persist_dir),
                self._embeddings,
                allow_dangerous_deserialization=True,
                normalize_L2=True,
            )
            logger.info(
                f"{__name__}:__init__ - Loaded FAISS index",
                extra={"path": str(self._persist_dir), "size": self._store.index.ntotal},
            )

    def __len__(self) -> int:
        return 0 if self._store is None else self._store.index.ntotal

    def add_records(self, records: Sequence[VectorRecord]) -> list[str]:
        if not records:
            return []

        keys = [record.key for record in records]
        text_embeddings = [(record.payload.text, list(record.embedding)) for record in records]
        metadatas = [
            {**record.payload.to_metadata(include_text=False), "key": record.key}
            for record in records
        ]

        with self._lock:
            try:
                if self._store is None:
                    self._store = FAISS.from_embeddings(
                        text_embeddings,
                        self._embeddings,
                        metadatas=metadatas,
                        ids=keys,
                        normalize_L2=True,
                    )
                else:
                    existing = set(self._store.index_to_docstore_id.values())
                    overwritten = [key for key in keys if key in existing]
                    if overwritten:
                        self._store.delete(overwritten)
                    self._store.add_embeddings(text_embeddings, metadatas=metadatas, ids=keys)
            except Exception as e:
                raise VectorStoreError(f"Failed to add vectors to FAISS: {e}") from e
            self._persist()

        logger.info(
            f"{__name__}:add_records - Added {len(keys)} vectors",
            extra={"size": len(self)},
        )
        return keys

    def search(
        self,
        embedding: Sequence[float],
        k: int,
        scoped_filter: ScopedFilter,
    ) -> list[VectorSearchResult]:
        with self._lock:
            if self._store is None or self._store.index.ntotal == 0:
                return []
            try:
                hits = self._store.similarity_search_with_score_by_vector(
                    list(embedding),
                    k=k,
                    filter=scoped_filter.matches,
                    fetch_k=self._store.index.ntotal,
                )
            except Exception as e:
                raise VectorStoreError(f"FAISS search failed: {e}") from e

        results = []
        for doc, distance in hits:
            payload = VectorPayload.model_validate({**doc.metadata, "text": doc.page_content})
            results.append(
                VectorSearchResult(
                    key=doc.metadata.get("key") or doc.id or "",
                    payload=payload,
                    score=1.0 - float(distance) / 2.0,
                )
            )
        return results

    def delete_where(self, scoped_filter: ScopedFilter) -> int:
        self._require_document_clause(scoped_filter)

        with self._lock:
            if self._store is None:
                return 0
            keys = [
                key
                for key in self._store.index_to_docstore_id.values()
                if scoped_filter.matches(self._store.docstore.search(key).metadata)
            ]
            if keys:
                try:
                    self._store.delete(keys)
                except Exception as e:
                    raise VectorStoreError(f"Failed to delete vectors from FAISS: {e}") from e
                self._persist()

        logger.info(
            f"{__name__}:delete_where - Deleted {len(keys)} vectors",
            extra={"owner_id": scoped_filter.owner_id},
        )
        return len(keys)

    def _persist(self) -> None:
        if self._persist_dir and self._store is not None:
            self._persist_dir.mkdir(parents=True, exist_ok=True)
            self._store.save_local(str(self._persist_dir))
