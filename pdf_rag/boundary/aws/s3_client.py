"""
S3 client for raw PDF storage.

Stores uploaded PDFs under a per-owner key prefix and hands back the object
key as the opaque blob handle. Deletion verifies that the handle lives under
the caller's prefix before touching the bucket.

Dependencies: boto3
System role: Blob Store adapter
"""

import logging
import re
import uuid
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from pdf_rag.core.exceptions import (
    BlobNotFoundError,
    BlobStoreError,
    OwnershipError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class S3BlobStore:
    """Upload, download and delete PDFs in the documents bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "ap-southeast-2",
        key_prefix: str = "documents",
        s3_client=None,
    ) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            key_prefix: Top-level key prefix for owner folders
            s3_client: Optional preconfigured boto3 S3 client
        """
        self._bucket = bucket
        self._region = region
        self._key_prefix = key_prefix.strip("/")
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    def owner_prefix(self, owner_id: str) -> str:
        """Key prefix under which all of an owner's blobs live."""
        return f"{self._key_prefix}/{quote(owner_id, safe='')}/"

    def upload(self, data: bytes, owner_id: str, filename: str) -> str:
        """
        Store a PDF and return its handle.

        Args:
            data: Raw PDF bytes
            owner_id: Owner of the blob
            filename: Original filename (sanitized into the key)

        Returns:
            str: Opaque blob handle (S3 object key)

        Raises:
            BlobStoreError: Upload failed
        """
        safe_name = _UNSAFE_FILENAME_CHARS.sub("_", filename).strip("._") or "document.pdf"
        key = f"{self.owner_prefix(owner_id)}{uuid.uuid4()}-{safe_name}"

        try:
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType="application/pdf",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"{__name__}:upload - {type(e).__name__}: {e}")
            raise BlobStoreError(
                f"Failed to upload to S3: {e}",
                {"bucket": self._bucket, "key": key},
            ) from e

        logger.info(
            f"{__name__}:upload - Stored blob",
            extra={"key": key, "size_bytes": len(data)},
        )
        return key

    def download(self, handle: str) -> bytes:
        """
        Fetch a blob's bytes.

        Args:
            handle: Blob handle returned by upload()

        Returns:
            bytes: Object contents

        Raises:
            BlobNotFoundError: The object does not exist
            BlobStoreError: Any other S3 failure
        """
        if not handle:
            raise BlobNotFoundError("Blob handle is required")

        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=handle)
            return response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in _NOT_FOUND_CODES:
                raise BlobNotFoundError(
                    f"File not found in S3: {handle}", details={"key": handle}
                ) from e
            raise BlobStoreError(
                f"Failed to download from S3: {e}", {"key": handle}
            ) from e
        except BotoCoreError as e:
            raise BlobStoreError(
                f"Unexpected error downloading from S3: {e}", {"key": handle}
            ) from e

    def delete(self, handle: str, owner_id: str) -> None:
        """
        Delete a blob that belongs to owner_id.

        Args:
            handle: Blob handle
            owner_id: Owner asking for the deletion

        Raises:
            OwnershipError: Handle is outside the owner's prefix
            BlobStoreError: S3 delete failed
        """
        if not handle.startswith(self.owner_prefix(owner_id)):
            logger.warning(
                f"{__name__}:delete - Rejected delete outside owner prefix",
                extra={"owner_id": owner_id, "key": handle},
            )
            raise OwnershipError(owner_id, handle)

        try:
            self._s3_client.delete_object(Bucket=self._bucket, Key=handle)
        except (ClientError, BotoCoreError) as e:
            raise BlobStoreError(f"Failed to delete from S3: {e}", {"key": handle}) from e

        logger.info(f"{__name__}:delete - Deleted blob", extra={"key": handle})
