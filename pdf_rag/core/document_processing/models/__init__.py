"""
Models for document processing pipeline.

Exports: Chunk, ExtractedDocument, PipelineResult, IngestionJob, parse_job_payload
"""

from .chunk import Chunk
from .extracted_document import ExtractedDocument
from .job_payload import INGEST_DOCUMENT, IngestionJob, parse_job_payload
from .pipeline_result import PipelineResult

__all__ = [
    "Chunk",
    "ExtractedDocument",
    "INGEST_DOCUMENT",
    "IngestionJob",
    "PipelineResult",
    "parse_job_payload",
]
