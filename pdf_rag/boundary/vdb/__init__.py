"""
Vector database boundary layer.

- VectorIndex: interface used by the pipeline and the retriever
- S3VectorsIndex: production S3 Vectors index (boto3)
- FAISSVectorIndex: local FAISS index (LangChain)
- owner_filter / document_filter / and_: typed scoped filter builder

Dependencies: boto3, langchain_community, faiss-cpu
System role: Vector storage and similarity search
"""

from pdf_rag.boundary.vdb.filters import (
    DocumentClause,
    OwnerClause,
    ScopedFilter,
    and_,
    document_filter,
    owner_filter,
)
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.boundary.vdb.vector_schemas import (
    VectorPayload,
    VectorRecord,
    VectorSearchResult,
)

__all__ = [
    "DocumentClause",
    "OwnerClause",
    "ScopedFilter",
    "and_",
    "document_filter",
    "owner_filter",
    "VectorIndex",
    "VectorPayload",
    "VectorRecord",
    "VectorSearchResult",
]
