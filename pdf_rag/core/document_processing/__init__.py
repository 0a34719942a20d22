"""
Document processing pipeline.

Turns an uploaded PDF into owner-scoped vector records.

Exports: IngestionPipeline, DocumentPipelineSettings, get_pipeline_settings
"""

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .entrypoint import IngestionPipeline

__all__ = ["IngestionPipeline", "DocumentPipelineSettings", "get_pipeline_settings"]
