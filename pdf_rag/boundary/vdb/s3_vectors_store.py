"""
S3 Vectors index for production storage and retrieval.

Talks to Amazon S3 Vectors through the boto3 `s3vectors` client. Records are
written in batches of at most 500, queries are pushed down with the scoped
metadata filter, and throttling responses are retried with exponential
backoff.

Metadata keys (matching the index definition):
- Filterable: ownerId, sourceDocumentId, sequenceIndex, totalChunks
- Non-filterable: text

Dependencies: boto3, tenacity
System role: Production vector index (S3 Vectors)
"""

import logging
from typing import Any, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pdf_rag.boundary.vdb.filters import ScopedFilter
from pdf_rag.boundary.vdb.vector_index import VectorIndex
from pdf_rag.boundary.vdb.vector_schemas import (
    VectorPayload,
    VectorRecord,
    VectorSearchResult,
)
from pdf_rag.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 500
LIST_PAGE_SIZE = 1000

_THROTTLING_CODES = {
    "ThrottlingException",
    "TooManyRequestsException",
    "ServiceUnavailableException",
    "InternalServerException",
}


def _is_throttling(exc: BaseException) -> bool:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code") in _THROTTLING_CODES
    return False


class S3VectorsIndex(VectorIndex):
    """VectorIndex backed by an S3 Vectors bucket and index."""

    def __init__(
        self,
        vectors_bucket: str,
        index_name: str = "pdf-docs",
        region: str = "ap-southeast-2",
        client=None,
        max_attempts: int = 5,
    ) -> None:
        """
        Initialize S3 Vectors index.

        Args:
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            region: AWS region for S3 Vectors
            client: Optional preconfigured boto3 s3vectors client
            max_attempts: Attempts per API call when throttled
        """
        if not vectors_bucket:
            raise ValueError("vectors_bucket cannot be empty")
        if not index_name:
            raise ValueError("index_name cannot be empty")

        self._vectors_bucket = vectors_bucket
        self._index_name = index_name
        self._client = client or boto3.client("s3vectors", region_name=region)
        self._retrying = Retrying(
            retry=retry_if_exception(_is_throttling),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_call - Retry {retry_state.attempt_number}/{max_attempts} after throttling"
            ),
            reraise=True,
        )

    def _call(self, operation: str, **kwargs: Any) -> dict:
        """Invoke an s3vectors operation with retry and error mapping."""
        method = getattr(self._client, operation)
        try:
            return self._retrying(
                method,
                vectorBucketName=self._vectors_bucket,
                indexName=self._index_name,
                **kwargs,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
            raise VectorStoreError(
                f"S3 Vectors {operation} failed: {e}",
                {"bucket": self._vectors_bucket, "index": self._index_name},
            ) from e

    def add_records(self, records: Sequence[VectorRecord]) -> list[str]:
        """Write records with put_vectors; existing keys are overwritten."""
        if not records:
            return []

        for start in range(0, len(records), MAX_BATCH_SIZE):
            batch = records[start : start + MAX_BATCH_SIZE]
            self._call(
                "put_vectors",
                vectors=[
                    {
                        "key": record.key,
                        "data": {"float32": [float(v) for v in record.embedding]},
                        "metadata": record.payload.to_metadata(),
                    }
                    for record in batch
                ],
            )

        logger.info(
            f"{__name__}:add_records - Uploaded vectors to S3 Vectors",
            extra={
                "record_count": len(records),
                "bucket": self._vectors_bucket,
                "index": self._index_name,
            },
        )
        return [record.key for record in records]

    def search(
        self,
        embedding: Sequence[float],
        k: int,
        scoped_filter: ScopedFilter,
    ) -> list[VectorSearchResult]:
        """Query the index with the filter pushed down to S3 Vectors."""
        response = self._call(
            "query_vectors",
            queryVector={"float32": [float(v) for v in embedding]},
            topK=k,
            filter=scoped_filter.to_s3_vectors(),
            returnMetadata=True,
            returnDistance=True,
        )

        results: list[VectorSearchResult] = []
        for item in response.get("vectors", []):
            metadata = item.get("metadata") or {}
            if not scoped_filter.matches(metadata):
                logger.warning(
                    f"{__name__}:search - Dropped out-of-scope record returned by index",
                    extra={"key": item.get("key"), "owner_id": scoped_filter.owner_id},
                )
                continue
            try:
                payload = VectorPayload.model_validate(metadata)
            except PydanticValidationError:
                logger.warning(
                    f"{__name__}:search - Skipping record with malformed payload",
                    extra={"key": item.get("key")},
                )
                continue
            distance = float(item.get("distance", 0.0))
            results.append(
                VectorSearchResult(key=item["key"], payload=payload, score=1.0 - distance)
            )

        logger.info(
            f"{__name__}:search - Found {len(results)} results",
            extra={"owner_id": scoped_filter.owner_id, "k": k},
        )
        return results

    def delete_where(self, scoped_filter: ScopedFilter) -> int:
        """
        Delete matching records.

        S3 Vectors has no delete-by-filter, so keys are collected by paging
        through list_vectors and evaluating the filter locally.
        """
        self._require_document_clause(scoped_filter)

        keys: list[str] = []
        next_token: str | None = None
        while True:
            kwargs: dict[str, Any] = {
                "maxResults": LIST_PAGE_SIZE,
                "returnMetadata": True,
                "returnData": False,
            }
            if next_token:
                kwargs["nextToken"] = next_token
            page = self._call("list_vectors", **kwargs)
            keys.extend(
                item["key"]
                for item in page.get("vectors", [])
                if scoped_filter.matches(item.get("metadata") or {})
            )
            next_token = page.get("nextToken")
            if not next_token:
                break

        for start in range(0, len(keys), MAX_BATCH_SIZE):
            self._call("delete_vectors", keys=keys[start : start + MAX_BATCH_SIZE])

        logger.info(
            f"{__name__}:delete_where - Deleted {len(keys)} vectors",
            extra={
                "owner_id": scoped_filter.owner_id,
                "document_ids": list(scoped_filter.document_ids),
            },
        )
        return len(keys)
