"""
Task modules for document processing pipeline.

Exports: BlobDownloadTask, PdfParsingTask, ChunkingTask, EmbeddingTask, VectorStoreTask
"""

from .blob_download_task import BlobDownloadTask
from .chunking_task import ChunkingTask, exact_overlap_detector, prefix_probe_detector
from .embedding_task import EmbeddingTask
from .parsing_task import PdfParsingTask
from .vector_store_task import VectorStoreTask

__all__ = [
    "BlobDownloadTask",
    "ChunkingTask",
    "EmbeddingTask",
    "PdfParsingTask",
    "VectorStoreTask",
    "exact_overlap_detector",
    "prefix_probe_detector",
]
