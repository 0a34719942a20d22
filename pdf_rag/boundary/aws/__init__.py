"""AWS boundary adapters."""

from pdf_rag.boundary.aws.s3_client import S3BlobStore

__all__ = ["S3BlobStore"]
