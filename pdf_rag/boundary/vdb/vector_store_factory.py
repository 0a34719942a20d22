"""
Vector index factory for selecting between FAISS (dev) and S3 Vectors (prod).

Depends on VECTOR_STORE_STORE_TYPE.

Dependencies: pdf_rag.boundary.vdb, pdf_rag.configs
System role: Vector index instantiation and selection
"""

import logging

from pdf_rag.boundary.vdb.faiss_vectors_store import FAISSVectorIndex
from pdf_rag.boundary.vdb.s3_vectors_store import S3VectorsIndex
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_index(settings: VectorStoreSettings) -> VectorIndex:
    """
    Build the vector index selected by configuration.

    Args:
        settings: Vector store settings

    Returns:
        VectorIndex: FAISSVectorIndex or S3VectorsIndex

    Raises:
        ValueError: If store_type is invalid
    """
    store_type = settings.store_type.lower()

    if store_type == "faiss":
        logger.info(f"{__name__}:get_vector_index - Creating FAISS index (local dev mode)")
        return FAISSVectorIndex(persist_directory=settings.faiss_directory)

    if store_type == "s3":
        logger.info(f"{__name__}:get_vector_index - Creating S3 Vectors index (production mode)")
        return S3VectorsIndex(
            vectors_bucket=settings.vectors_bucket,
            index_name=settings.index_name,
            region=settings.aws_region,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'faiss' (dev) or 's3' (production)."
    )
