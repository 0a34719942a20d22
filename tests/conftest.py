"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite metadata store, in-memory blob store, in-process
FAISS index, deterministic hashing embeddings and a minimal PDF builder
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import math
import re
import uuid

import pytest
from langchain_core.embeddings import Embeddings

from pdf_rag.core.exceptions import BlobNotFoundError, OwnershipError

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis "
    "nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat. "
    "Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore eu "
    "fugiat nulla pariatur. Excepteur sint occaecat cupidatat non proident, sunt in "
    "culpa qui officia deserunt mollit anim id est laborum. "
)


def lorem_text(length: int) -> str:
    """Lorem ipsum trimmed to exactly `length` characters."""
    text = LOREM * (length // len(LOREM) + 1)
    return text[:length].rstrip() + "."


# ============================================================================
# PDF builder
# ============================================================================


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[str]) -> bytes:
    """
    Build a minimal text PDF with one page per entry.

    Lines within a page are separated by newlines and written with Helvetica.
    """
    page_count = len(pages)
    page_ids = [4 + 2 * i for i in range(page_count)]

    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        (
            f"<< /Type /Pages /Kids [{' '.join(f'{pid} 0 R' for pid in page_ids)}] "
            f"/Count {page_count} >>"
        ).encode("latin-1"),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for page_id, text in zip(page_ids, pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode("latin-1")
        )
        operations = ["BT", "/F1 10 Tf", "12 TL", "72 720 Td"]
        for line in text.split("\n"):
            operations.append(f"({_escape_pdf_text(line)}) Tj T*")
        operations.append("ET")
        stream = "\n".join(operations).encode("latin-1")
        objects.append(
            b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


# ============================================================================
# Fakes
# ============================================================================


class HashingEmbeddings(Embeddings):
    """Deterministic bag-of-words embeddings (md5 token buckets, L2-normalised)."""

    def __init__(self, dimension: int = 512) -> None:
        self.dimension = dimension
        self.document_calls = 0
        self.query_calls = 0

    def _embed(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for token in re.findall(r"\w+", text.lower()):
            bucket = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % self.dimension
            vector[bucket] += 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0:
            vector[0] = 1.0
            return vector
        return [v / norm for v in vector]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls += 1
        return [self._embed(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls += 1
        return self._embed(text)


class InMemoryBlobStore:
    """Blob store keeping objects in a dict, keyed like S3BlobStore."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    def owner_prefix(self, owner_id: str) -> str:
        return f"documents/{owner_id}/"

    def upload(self, data: bytes, owner_id: str, filename: str) -> str:
        key = f"{self.owner_prefix(owner_id)}{uuid.uuid4()}-{filename}"
        self.objects[key] = data
        return key

    def download(self, handle: str) -> bytes:
        if handle not in self.objects:
            raise BlobNotFoundError(f"File not found: {handle}")
        return self.objects[handle]

    def delete(self, handle: str, owner_id: str) -> None:
        if not handle.startswith(self.owner_prefix(owner_id)):
            raise OwnershipError(owner_id, handle)
        self.objects.pop(handle, None)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def pdf_factory():
    """Return the minimal PDF builder."""
    return build_pdf


@pytest.fixture
async def db_engine():
    """
    Create in-memory SQLite async engine with the schema applied.

    Yields:
        AsyncEngine: Engine shared by every session of the test
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from pdf_rag.boundary.db.connection import create_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    from pdf_rag.boundary.db.connection import get_async_session_factory

    return get_async_session_factory(db_engine)


@pytest.fixture
def repository(session_factory):
    from pdf_rag.boundary.db.document_repository import DocumentRepository

    return DocumentRepository(session_factory)


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def embeddings() -> HashingEmbeddings:
    return HashingEmbeddings()


@pytest.fixture
def faiss_index():
    """In-memory FAISS index (no persistence)."""
    from pdf_rag.boundary.vdb.faiss_vectors_store import FAISSVectorIndex

    return FAISSVectorIndex()


@pytest.fixture
def pipeline_settings():
    """Pipeline settings with retries that never sleep."""
    from pdf_rag.core.document_processing.configs import DocumentPipelineSettings

    return DocumentPipelineSettings(
        chunk_size=1000,
        chunk_overlap=200,
        embedding_batch_size=100,
        embedding_max_attempts=1,
        embedding_backoff_initial=0.0,
        embedding_backoff_max=0.0,
    )


@pytest.fixture
def embedding_task(embeddings):
    from pdf_rag.core.document_processing.tasks import EmbeddingTask

    return EmbeddingTask(embeddings, max_attempts=1, backoff_initial=0.0, backoff_max=0.0)


@pytest.fixture
def pipeline(repository, blob_store, faiss_index, embeddings, pipeline_settings):
    from pdf_rag.core.document_processing.entrypoint import IngestionPipeline

    return IngestionPipeline(
        repository=repository,
        blob_store=blob_store,
        vector_index=faiss_index,
        embeddings=embeddings,
        settings=pipeline_settings,
    )


@pytest.fixture
def retriever(repository, faiss_index, embedding_task):
    from pdf_rag.core.retriever import ScopedRetriever

    return ScopedRetriever(
        repository=repository,
        vector_index=faiss_index,
        embedding_task=embedding_task,
        top_k=5,
    )


@pytest.fixture
def index_texts(faiss_index, embeddings):
    """
    Write texts straight into the FAISS index.

    Returns:
        Callable(owner_id, document_id, texts) -> list of keys; document_id
        None writes legacy records without a source document.
    """
    from pdf_rag.boundary.vdb.vector_schemas import VectorPayload, VectorRecord

    def _index(owner_id: str, document_id: str | None, texts: list[str]) -> list[str]:
        vectors = embeddings.embed_documents(texts)
        records = [
            VectorRecord(
                key=f"{document_id or 'legacy'}:{i}:{uuid.uuid4().hex[:8]}",
                embedding=vector,
                payload=VectorPayload(
                    text=text,
                    owner_id=owner_id,
                    source_document_id=document_id,
                    sequence_index=i,
                    total_chunks=len(texts),
                ),
            )
            for i, (text, vector) in enumerate(zip(texts, vectors))
        ]
        return faiss_index.add_records(records)

    return _index


@pytest.fixture
def completed_document(repository):
    """
    Create a document record and drive it to COMPLETED.

    Returns:
        Async callable(owner_id, filename) -> DocumentRecord
    """
    from pdf_rag.boundary.db.models.document_model import DocumentStatus

    async def _create(owner_id: str, filename: str = "doc.pdf"):
        record = await repository.create(owner_id, filename, f"documents/{owner_id}/{filename}")
        await repository.update_status(record.id, owner_id, DocumentStatus.PROCESSING)
        return await repository.update_status(
            record.id, owner_id, DocumentStatus.COMPLETED, page_count=1, chunk_count=1
        )

    return _create


@pytest.fixture
def lorem():
    """Return the lorem ipsum generator."""
    return lorem_text
