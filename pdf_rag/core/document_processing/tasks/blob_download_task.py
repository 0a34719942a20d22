"""
Blob download task.

Fetches the uploaded PDF's bytes from the blob store. Bytes stay in memory;
nothing is written to local disk.

Dependencies: pdf_rag.boundary.aws
System role: Download stage of document ingestion pipeline
"""

import logging
from typing import Protocol

from pdf_rag.core.exceptions import BlobNotFoundError

logger = logging.getLogger(__name__)


class BlobReader(Protocol):
    """Anything that can return a blob's bytes by handle."""

    def download(self, handle: str) -> bytes: ...


class BlobDownloadTask:
    """Download documents from the blob store."""

    def __init__(self, blob_store: BlobReader) -> None:
        """
        Initialize download task.

        Args:
            blob_store: Blob store adapter
        """
        self._blob_store = blob_store

    def download(self, handle: str) -> bytes:
        """
        Download a blob.

        Args:
            handle: Blob handle from the job

        Returns:
            bytes: Blob contents

        Raises:
            BlobNotFoundError: Handle missing or object absent
            BlobStoreError: Blob store unavailable
        """
        if not handle:
            raise BlobNotFoundError("Blob handle is required")

        data = self._blob_store.download(handle)
        logger.info(
            f"{__name__}:download - Downloaded blob",
            extra={"key": handle, "size_bytes": len(data)},
        )
        return data
